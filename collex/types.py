from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, Any, Optional, Union,
    Dict, List, Tuple, Set, Type, Mapping, Sequence
)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')

Predicate = Callable[[T], bool]
Selector = Callable[[T], U]
KeySelector = Callable[[T], K]
Getter = Callable[[Any], Any]
SortKey = Tuple[Callable[[Any], Any], bool]


class FieldDescriptor:
    """a named, runtime-resolved accessor into a structured element type"""

    def __init__(self, name: str, value_type: Optional[type], getter: Getter,
                 nullable: bool = False, orderable: Optional[bool] = None):
        self.name = name
        self.value_type = value_type
        self.getter = getter
        self.nullable = nullable
        # none means "decide from value_type"
        self._orderable = orderable

    @property
    def is_orderable(self) -> bool:
        if self._orderable is not None: return self._orderable
        from .fields import is_orderable_type
        return is_orderable_type(self.value_type)

    def sort_key(self) -> Callable[[Any], Any]:
        """key function that places none before every other value"""
        getter = self.getter
        def key(item):
            value = getter(item)
            return (False, None) if value is None else (True, value)
        return key

    def __call__(self, item: Any) -> Any:
        return self.getter(item)

    def __repr__(self) -> str:
        type_name = getattr(self.value_type, '__name__', repr(self.value_type))
        return f"FieldDescriptor(name={self.name!r}, value_type={type_name}, nullable={self.nullable})"
