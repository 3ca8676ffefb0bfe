"""
runtime field lookup for sorting by field name.

a field is any public readable member of an element type: dataclass fields,
annotated class attributes (namedtuples and typeddicts included), properties,
slots, instance attributes, or mapping keys. lookups are case-insensitive and
a field only becomes a sort key when its value type supports ordering.
"""
from __future__ import annotations

import dataclasses
import datetime
import decimal
import fractions
import functools
import logging
import numbers
import types
import typing
from collections.abc import Mapping as MappingABC

import numpy as np
import pandas as pd

from .types import *

logger = logging.getLogger(__name__)

# --- orderability ---

ORDERABLE_TYPES: Tuple[type, ...] = (
    int, float, str, bytes, decimal.Decimal, fractions.Fraction,
    datetime.date, datetime.time, datetime.timedelta,
    np.number, np.bool_, np.datetime64, np.timedelta64, np.str_,
    pd.Timestamp, pd.Timedelta,
)

# these define rich comparison slots but have no usable `<`
UNORDERABLE_TYPES: Tuple[type, ...] = (
    dict, complex, type(None), np.complexfloating, MappingABC,
    # `<` on sets is a subset test, not an order
    set, frozenset,
)


def is_orderable_type(value_type: Optional[type]) -> bool:
    """true when instances of value_type can be used as a sort key"""
    if value_type is None or not isinstance(value_type, type): return False
    if issubclass(value_type, UNORDERABLE_TYPES): return False
    if issubclass(value_type, ORDERABLE_TYPES): return True
    # user types count when something below object defines `<`
    return any('__lt__' in vars(klass) for klass in value_type.__mro__[:-1])


def _ordering_family(value: Any) -> Optional[type]:
    """the type a value is compared as, real numbers collapse to one family"""
    if isinstance(value, (bool, np.bool_)): return numbers.Real
    if isinstance(value, numbers.Real): return numbers.Real
    if isinstance(value, str): return str
    return type(value)


def observed_type(values: Iterable[Any]) -> Tuple[Optional[type], bool]:
    """
    infer a value type from sample data. returns (type, saw_none).
    mixed families give a none type, which is never orderable.
    """
    families = set()
    representative = None
    saw_none = False
    for value in values:
        if value is None:
            saw_none = True
            continue
        family = _ordering_family(value)
        if family not in families:
            families.add(family)
            representative = float if family is numbers.Real else family
    if len(families) != 1: return None, saw_none
    return representative, saw_none


# --- annotations ---

def unwrap_annotation(annotation: Any) -> Tuple[Optional[type], bool]:
    """reduce a type annotation to (runtime type, nullable)"""
    if annotation is None or annotation is type(None): return type(None), True
    if isinstance(annotation, str) or annotation is typing.Any: return None, False
    if isinstance(annotation, typing.TypeVar): return None, False
    if hasattr(annotation, '__supertype__'):  # typing.NewType
        return unwrap_annotation(annotation.__supertype__)

    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return unwrap_annotation(typing.get_args(annotation)[0])
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        nullable = len(members) < len(typing.get_args(annotation))
        if len(members) != 1: return None, nullable
        inner, inner_nullable = unwrap_annotation(members[0])
        return inner, nullable or inner_nullable
    if origin is typing.Literal:
        literal_type, _ = observed_type(typing.get_args(annotation))
        return literal_type, None in typing.get_args(annotation)
    if origin is not None:
        # list[int] -> list, tuple[str, ...] -> tuple
        return (origin, False) if isinstance(origin, type) else (None, False)
    return (annotation, False) if isinstance(annotation, type) else (None, False)


def _type_hints(target: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError, AttributeError):
        # unresolvable forward references, fall back to the raw annotations
        return dict(getattr(target, '__annotations__', {}) or {})


def _is_class_var(annotation: Any) -> bool:
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


# --- getters ---

def _attribute_getter(name: str) -> Getter:
    def getter(item):
        return getattr(item, name, None)
    return getter


def _item_getter(key: str) -> Getter:
    def getter(item):
        return item.get(key) if isinstance(item, MappingABC) else None
    return getter


def _is_public(name: Any) -> bool:
    return isinstance(name, str) and not name.startswith('_')


# --- field discovery ---

def _declared_members(element_type: type) -> Iterator[Tuple[str, Any, Getter]]:
    """yield (name, annotation, getter) for members declared on the type"""
    is_mapping = issubclass(element_type, MappingABC)
    make_getter = _item_getter if is_mapping else _attribute_getter
    hints = _type_hints(element_type)

    if dataclasses.is_dataclass(element_type):
        for field in dataclasses.fields(element_type):
            yield field.name, hints.get(field.name, field.type), make_getter(field.name)

    for name, annotation in hints.items():
        if not _is_class_var(annotation):
            yield name, annotation, make_getter(name)

    # collections.namedtuple carries no annotations
    for name in getattr(element_type, '_fields', ()) or ():
        yield name, None, make_getter(name)

    if is_mapping: return

    for klass in element_type.__mro__[:-1]:
        for name, member in vars(klass).items():
            if isinstance(member, property) and member.fget is not None:
                yield name, _type_hints(member.fget).get('return'), make_getter(name)
            elif isinstance(member, functools.cached_property):
                yield name, _type_hints(member.func).get('return'), make_getter(name)
        slots = vars(klass).get('__slots__', ())
        for name in ([slots] if isinstance(slots, str) else slots):
            yield name, None, make_getter(name)


def _observed_members(sample: Sequence[Any]) -> Iterator[Tuple[str, Getter]]:
    """yield (name, getter) for keys and instance attributes present in the data"""
    for item in sample:
        if isinstance(item, MappingABC):
            for key in item.keys():
                yield key, _item_getter(key)
        elif hasattr(item, '__dict__'):
            for name in vars(item):
                yield name, _attribute_getter(name)


def describe_fields(element_type: Optional[type], sample: Sequence[Any] = (),
                    observe: bool = True) -> Dict[str, FieldDescriptor]:
    """
    build the descriptor table for a type, keyed by canonical field name.
    declared members come first in declaration order, then members only
    seen in the sample. with `observe`, types of undeclared or untyped
    members are read from the sample, which calls every getter on every
    element; without it they stay none and no getter runs.
    """
    table: Dict[str, FieldDescriptor] = {}

    def add(name, getter, annotation=None, declared=False):
        if not _is_public(name) or name in table: return
        value_type, nullable = unwrap_annotation(annotation) if declared else (None, False)
        descriptor = FieldDescriptor(name, value_type, getter, nullable=nullable)
        table[name] = _with_observed_type(descriptor, sample) if observe else descriptor

    if isinstance(element_type, type):
        for name, annotation, getter in _declared_members(element_type):
            add(name, getter, annotation, declared=annotation is not None)
    for name, getter in _observed_members(sample):
        add(name, getter)
    return table


def _with_observed_type(descriptor: FieldDescriptor, sample: Sequence[Any]) -> FieldDescriptor:
    """fill in an unknown value type from the data; only this field's getter runs"""
    if descriptor.value_type is not None or not sample: return descriptor
    value_type, saw_none = observed_type(descriptor.getter(item) for item in sample)
    return FieldDescriptor(descriptor.name, value_type, descriptor.getter,
                           nullable=descriptor.nullable or saw_none)


def _lookup_table(descriptors: Union[Mapping[str, FieldDescriptor], Iterable[FieldDescriptor]]) -> Dict[str, FieldDescriptor]:
    """case-insensitive index; the first field of a given spelling wins"""
    values = descriptors.values() if isinstance(descriptors, MappingABC) else descriptors
    lookup: Dict[str, FieldDescriptor] = {}
    for descriptor in values:
        lookup.setdefault(descriptor.name.casefold(), descriptor)
    return lookup


def resolve_fields(element_type: Optional[type], field_names: Iterable[str],
                   sample: Sequence[Any] = (),
                   descriptors: Optional[Union[Mapping[str, FieldDescriptor], Iterable[FieldDescriptor]]] = None
                   ) -> List[FieldDescriptor]:
    """
    resolve field names to orderable descriptors. names are deduplicated
    case-insensitively (first one wins); names that do not resolve or whose
    type cannot be ordered are dropped without raising.
    """
    introspected = descriptors is None
    table = describe_fields(element_type, sample, observe=False) if introspected else descriptors
    lookup = _lookup_table(table)
    seen = set()
    resolved = []
    for name in field_names:
        if not isinstance(name, str):
            logger.debug("ignoring non-string sort field %r", name)
            continue
        folded = name.casefold()
        if folded in seen: continue
        seen.add(folded)
        descriptor = lookup.get(folded)
        if descriptor is None:
            logger.debug("dropping sort field %r: no such field on %s", name, _type_name(element_type))
            continue
        if introspected:
            descriptor = _with_observed_type(descriptor, sample)
        if not descriptor.is_orderable:
            logger.debug("dropping sort field %r: %s is not orderable",
                         name, _type_name(descriptor.value_type))
            continue
        resolved.append(descriptor)
    return resolved


def resolve_navigation_fields(element_type: Optional[type], navigation: str, field_names: Iterable[str],
                              sample: Sequence[Any] = (),
                              descriptors: Optional[Union[Mapping[str, FieldDescriptor], Iterable[FieldDescriptor]]] = None
                              ) -> List[FieldDescriptor]:
    """
    resolve field names against the type of a nested field of the element.
    descriptors, when given, describe the nested type. the returned getters
    read the nested field first; a none nested value gives a none key.
    """
    outer_lookup = _lookup_table(describe_fields(element_type, sample, observe=False))
    nav = outer_lookup.get(navigation.casefold()) if isinstance(navigation, str) else None
    if nav is None:
        logger.debug("navigation field %r not found on %s", navigation, _type_name(element_type))
        return []

    nested_sample = [value for value in (nav.getter(item) for item in sample) if value is not None]
    nested_type = nav.value_type
    if nested_type is None and nested_sample:
        nested_type = type(nested_sample[0])

    nested = resolve_fields(nested_type, field_names, nested_sample, descriptors)
    return [_compose(nav, sub) for sub in nested]


def _compose(nav: FieldDescriptor, sub: FieldDescriptor) -> FieldDescriptor:
    nav_getter, sub_getter = nav.getter, sub.getter

    def getter(item):
        target = nav_getter(item)
        return None if target is None else sub_getter(target)

    return FieldDescriptor(f"{nav.name}.{sub.name}", sub.value_type, getter,
                           nullable=True, orderable=sub.is_orderable)


def _type_name(value_type: Any) -> str:
    return getattr(value_type, '__name__', repr(value_type))


class FieldSortKeys:
    """sort keys for a list of field names, resolved once the data is known"""

    def __init__(self, field_names: Iterable[str], descending: bool = False,
                 navigation: Optional[str] = None, element_type: Optional[type] = None,
                 descriptors: Optional[Union[Mapping[str, FieldDescriptor], Iterable[FieldDescriptor]]] = None):
        # a bare string is one field name, not a sequence of letters
        self.field_names = [field_names] if isinstance(field_names, str) else list(field_names)
        self.descending = descending
        self.navigation = navigation
        self.element_type = element_type
        self.descriptors = descriptors

    def descriptors_for(self, data: Sequence[Any]) -> List[FieldDescriptor]:
        element_type = self.element_type
        if element_type is None and data:
            element_type = type(data[0])
        if self.navigation is not None:
            return resolve_navigation_fields(element_type, self.navigation, self.field_names,
                                             data, self.descriptors)
        return resolve_fields(element_type, self.field_names, data, self.descriptors)

    def resolve(self, data: Sequence[Any]) -> List[SortKey]:
        return [(descriptor.sort_key(), self.descending) for descriptor in self.descriptors_for(data)]
