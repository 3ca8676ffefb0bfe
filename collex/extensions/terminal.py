from __future__ import annotations
import typing
import numpy as np
import pandas as pd
from ..types import *

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

_MISSING = object()


class TerminalAccessor(Generic[T]):
    """operations that run the query and return a concrete value"""

    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def list(self) -> List[T]:
        return self._enumerable._get_data()

    def set(self) -> Set[T]:
        return set(self._enumerable._get_data())

    def dict(self, key_selector: KeySelector[T, K],
             value_selector: Optional[Selector[T, V]] = None) -> Dict[K, V]:
        """build a dict; later elements overwrite earlier ones with the same key"""
        val_sel = value_selector if value_selector else lambda item: item
        return {key_selector(item): val_sel(item) for item in self._enumerable._get_data()}

    def array(self) -> np.ndarray:
        return np.array(self._enumerable._get_data())

    def pandas(self) -> pd.Series:
        return pd.Series(self._enumerable._get_data())

    def df(self) -> pd.DataFrame:
        """join results and records as a dataframe, one row per element"""
        return pd.DataFrame(self._enumerable._get_data())

    def count(self, predicate: Optional[Predicate[T]] = None) -> int:
        if predicate is None: return len(self._enumerable._get_data())
        return sum(1 for x in self._enumerable._get_data() if predicate(x))

    def any(self, predicate: Optional[Predicate[T]] = None) -> bool:
        """check if any element satisfies condition, stopping at the first match"""
        data = self._enumerable._get_data()
        if predicate is None: return len(data) > 0
        return any(predicate(x) for x in data)

    def exists(self, predicate: Predicate[T]) -> bool:
        """another name for any(predicate); false for an empty sequence"""
        return self.any(predicate)

    def all(self, predicate: Predicate[T]) -> bool:
        return all(predicate(x) for x in self._enumerable._get_data())

    def _find_first(self, predicate: Optional[Predicate[T]]) -> Any:
        for item in self._enumerable._get_data():
            if predicate is None or predicate(item): return item
        return _MISSING

    def first(self, predicate: Optional[Predicate[T]] = None) -> T:
        item = self._find_first(predicate)
        if item is _MISSING:
            raise ValueError("sequence contains no elements" if predicate is None
                             else "no element satisfies the condition")
        return item

    def first_or_default(self, predicate: Optional[Predicate[T]] = None,
                         default: Optional[T] = None) -> Optional[T]:
        item = self._find_first(predicate)
        return default if item is _MISSING else item
