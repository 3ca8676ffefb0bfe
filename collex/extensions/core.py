from __future__ import annotations
import typing
from itertools import chain
from ..types import *

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable, OrderedEnumerable


def _constant_key(item: Any) -> int:
    return 0


class _CoreOperations(Generic[T]):
    def where(self: 'Enumerable[T]', predicate: Predicate[T]) -> 'Enumerable[T]':
        """filter elements based on a predicate"""
        from ..enumerable import Enumerable
        def filter_data():
            data = self._get_data()
            optimized = self._try_numpy_filter(data, predicate)
            if optimized is not None: return optimized
            return [x for x in data if predicate(x)]
        # always return a base enumerable
        return Enumerable(filter_data)

    def select(self: 'Enumerable[T]', selector: Selector[T, U]) -> 'Enumerable[U]':
        """project each element to a new form"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: [selector(x) for x in self._get_data()])

    def try_select(self: 'Enumerable[T]', selector: Selector[T, U],
                   default: Optional[U] = None) -> 'Enumerable[Optional[U]]':
        """
        project each element, substituting `default` wherever the selector raises.
        the result always has the length of the source and the failure is discarded.
        the whole source is mapped on first enumeration, so it must be finite.
        """
        from ..enumerable import Enumerable
        def try_map_data():
            result = []
            for item in self._get_data():
                try:
                    value = selector(item)
                except Exception:
                    value = default
                result.append(value)
            return result
        return Enumerable(try_map_data)

    def select_many(self: 'Enumerable[T]', selector: Selector[T, Iterable[U]]) -> 'Enumerable[U]':
        """project and flatten sequences"""
        from ..enumerable import Enumerable
        def flat_map_data():
            return list(chain.from_iterable(selector(x) for x in self._get_data()))
        return Enumerable(flat_map_data)

    def order_by(self: 'Enumerable[T]', key_selector: Callable[[T], K]) -> 'OrderedEnumerable[T]':
        """sort elements by a key"""
        from ..enumerable import OrderedEnumerable
        return OrderedEnumerable(self._get_data, [(key_selector, False)])

    def order_by_descending(self: 'Enumerable[T]', key_selector: Callable[[T], K]) -> 'OrderedEnumerable[T]':
        """sort elements by a key in descending order"""
        from ..enumerable import OrderedEnumerable
        return OrderedEnumerable(self._get_data, [(key_selector, True)])

    def order_by_fields(self: 'Enumerable[T]', field_names: Iterable[str], descending: bool = False,
                        navigation: Optional[str] = None, element_type: Optional[type] = None,
                        descriptors: Optional[Union[Mapping[str, FieldDescriptor], Iterable[FieldDescriptor]]] = None
                        ) -> 'OrderedEnumerable[T]':
        """
        sort by field names resolved at enumeration time.

        names are matched case-insensitively against the public fields of the
        element type (or of the `navigation` field's type) and deduplicated, first
        spelling wins. unknown names and fields whose values cannot be ordered are
        skipped. every key uses the same direction. when nothing resolves, the
        source order is kept.

        `element_type` defaults to the type of the first element. `descriptors`
        replaces introspection with an explicit field table.
        """
        from ..enumerable import OrderedEnumerable
        from ..fields import FieldSortKeys
        field_keys = FieldSortKeys(field_names, descending, navigation, element_type, descriptors)
        # the constant anchor keeps the source order for full ties
        return OrderedEnumerable(self._get_data, [(_constant_key, descending), field_keys])

    def as_ordered(self: 'Enumerable[T]') -> 'OrderedEnumerable[T]':
        """
        treats the current sequence as already ordered, allowing 'then_by' to be called.
        this does not perform a sort. use it only when the source is pre-sorted.
        """
        from ..enumerable import OrderedEnumerable
        # the key is constant, so python's stable sort preserves the original order
        return OrderedEnumerable(self._get_data, [(_constant_key, False)])

    def take(self: 'Enumerable[T]', count: int) -> 'Enumerable[T]':
        """take the first 'count' elements"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: self._get_data()[:count])

    def skip(self: 'Enumerable[T]', count: int) -> 'Enumerable[T]':
        """skip the first 'count' elements"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: self._get_data()[count:])

    def default_if_empty(self: 'Enumerable[T]', default_value: T) -> 'Enumerable[T]':
        """returns the elements of a sequence, or a default value in a singleton collection if the sequence is empty"""
        from ..enumerable import Enumerable
        def default_data():
            data = self._get_data()
            return data if data else [default_value]
        return Enumerable(default_data)
