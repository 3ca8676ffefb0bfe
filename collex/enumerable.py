from __future__ import annotations

import numpy as np
from abc import ABC, abstractmethod
from .types import *

# --- core functionality ---
from .extensions.core import _CoreOperations

# --- accessors ---
from .extensions.join import JoinAccessor
from .extensions.terminal import TerminalAccessor

# --- abstract base class ---

class IEnumerable(ABC, Generic[T]):
    @abstractmethod
    def _get_data(self) -> List[T]:
        """get the underlying data as a list"""
        pass

# --- base enumerable implementation ---

class _BaseEnumerable(IEnumerable[T]):
    def __init__(self, data_func: Callable[[], List[T]]):
        """init with a function that returns data when called"""
        self._data_func = data_func
        self._cached_result: Optional[List[T]] = None
        self._is_cached = False

    def _get_data(self) -> List[T]:
        """get the current data, caching the result"""
        if not self._is_cached:
            self._cached_result = self._data_func()
            self._is_cached = True
        return self._cached_result

    def _try_numpy_filter(self, data: List[T], predicate: Predicate[T]) -> Optional[List[T]]:
        """
        try to filter purely numeric data with a vectorized boolean mask.
        the predicate runs once per element and its errors propagate.
        """
        # a single element type keeps numpy from promoting ints to floats
        if not data or len({type(x) for x in data}) != 1 or type(data[0]) not in (int, float):
            return None
        try:
            arr = np.array(data)
        except (TypeError, ValueError, OverflowError): # catch specific errors
            return None
        # object dtype hands the predicate plain python numbers
        mask = np.vectorize(predicate, otypes=[bool])(arr.astype(object))
        return arr[mask].tolist()

    def __iter__(self) -> Iterator[T]:
        return iter(self._get_data())

    def __len__(self) -> int:
        return self.to.count()

# --- main enumerable class ---

class Enumerable(
    _BaseEnumerable[T],
    _CoreOperations[T]
):
    """a linq-style enumerable with outer joins, fault-tolerant mapping and field-name sorting."""
    def __init__(self, data_func: Callable[[], List[T]]):
        super().__init__(data_func)
        # --- initialize accessors ---
        self.join = JoinAccessor(self)
        self.to = TerminalAccessor(self)

# --- ordered enumerable class ---

class OrderedEnumerable(Enumerable[T]):
    """represents a sorted sequence, allowing for subsequent orderings."""

    def __init__(self, data_func: Callable[[], List[T]], sort_keys: List[Any]):
        super().__init__(data_func)
        self._original_data_func = data_func
        # entries are (key_selector, is_descending) pairs or deferred key groups
        self._sort_keys = sort_keys
        # reset cache flags after parent init
        self._cached_result: Optional[List[T]] = None
        self._is_cached = False

    def _expand_sort_keys(self, data: List[T]) -> List[SortKey]:
        """flattens deferred key groups against the data about to be sorted"""
        expanded = []
        for entry in self._sort_keys:
            if hasattr(entry, 'resolve'):
                expanded.extend(entry.resolve(data))
            else:
                expanded.append(entry)
        return expanded

    def _get_data(self) -> List[T]:
        """overrides base to apply all sorts at once using stable sort."""
        if not self._is_cached:
            data = list(self._original_data_func())
            # python's sort is stable, so we sort from the last key to the first
            for key_selector, is_descending in reversed(self._expand_sort_keys(data)):
                data = sorted(data, key=key_selector, reverse=is_descending)
            self._cached_result = data
            self._is_cached = True
        return self._cached_result

    def then_by(self, key_selector: KeySelector[T, K]) -> 'OrderedEnumerable[T]':
        """secondary sort ascending"""
        new_keys = self._sort_keys + [(key_selector, False)]
        return OrderedEnumerable(self._original_data_func, new_keys)

    def then_by_descending(self, key_selector: KeySelector[T, K]) -> 'OrderedEnumerable[T]':
        """secondary sort descending"""
        new_keys = self._sort_keys + [(key_selector, True)]
        return OrderedEnumerable(self._original_data_func, new_keys)
