from __future__ import annotations
import typing
from collections import defaultdict
from ..types import *

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable


def _build_lookup(items: Iterable[U], key_selector: KeySelector[U, K]) -> Dict[K, List[U]]:
    """groups items by key, keeping each group in source order"""
    lookup = defaultdict(list)
    for item in items:
        lookup[key_selector(item)].append(item)
    return lookup


class JoinAccessor(Generic[T]):
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
             inner_key_selector: KeySelector[U, K],
             result_selector: Callable[[T, U], V]) -> 'Enumerable[V]':
        """inner join two sequences based on matching keys"""
        from ..enumerable import Enumerable
        def join_data():
            inner_lookup = _build_lookup(inner, inner_key_selector)
            result = []
            for outer_item in self._enumerable._get_data():
                for inner_item in inner_lookup.get(outer_key_selector(outer_item), ()):
                    result.append(result_selector(outer_item, inner_item))
            return result
        return Enumerable(join_data)

    def group_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                   inner_key_selector: KeySelector[U, K],
                   result_selector: Callable[[T, 'Enumerable[U]'], V]) -> 'Enumerable[V]':
        """group join - pairs each outer element with the enumerable of its matching inner elements"""
        from ..enumerable import Enumerable
        from ..factories import from_iterable
        def group_join_data():
            inner_lookup = _build_lookup(inner, inner_key_selector)
            return [result_selector(o, from_iterable(inner_lookup.get(outer_key_selector(o), [])))
                    for o in self._enumerable._get_data()]
        return Enumerable(group_join_data)

    def left_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[T, Optional[U]], V],
                  default_inner: Optional[U] = None) -> 'Enumerable[V]':
        """
        left outer join - one row per matching pair, in outer then inner order.
        an outer element without matches yields a single row paired with `default_inner`.
        deferred, but the first enumeration builds every row at once, so unbounded
        sequences never produce a result.
        """
        return self.group_join(
            inner, outer_key_selector, inner_key_selector,
            lambda outer_item, matches: (outer_item, matches.default_if_empty(default_inner))
        ).select_many(lambda joined: [result_selector(joined[0], inner_item) for inner_item in joined[1]])

    def right_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                   inner_key_selector: KeySelector[U, K],
                   result_selector: Callable[[Optional[T], U], V],
                   default_outer: Optional[T] = None) -> 'Enumerable[V]':
        """
        right outer join - a left join with the roles of the two sequences swapped.
        like left_join, rows are built in full on first enumeration.
        """
        from ..factories import from_iterable
        return from_iterable(inner).join.left_join(
            self._enumerable, inner_key_selector, outer_key_selector,
            lambda inner_item, outer_item: result_selector(outer_item, inner_item),
            default_inner=default_outer)

    def full_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[Optional[T], Optional[U]], V],
                  default_outer: Optional[T] = None,
                  default_inner: Optional[U] = None) -> 'Enumerable[V]':
        """
        full outer join - the left join rows, then one row per inner element whose key
        never occurs among the outer keys, in inner order. both inputs are fully
        materialized, so this is not suitable for unbounded sequences.
        """
        from ..enumerable import Enumerable
        from ..factories import from_iterable
        def full_join_data():
            outer_list = list(self._enumerable._get_data())
            inner_list = list(inner)
            outer_keys = {outer_key_selector(outer_item) for outer_item in outer_list}
            matched = from_iterable(outer_list).join.left_join(
                inner_list, outer_key_selector, inner_key_selector, result_selector, default_inner).to.list()
            unmatched = [result_selector(default_outer, inner_item) for inner_item in inner_list
                         if inner_key_selector(inner_item) not in outer_keys]
            return matched + unmatched
        return Enumerable(full_join_data)

    # the name the rest of the linq family uses
    full_outer_join = full_join
