import typing
import pandas as pd
from .types import *

if typing.TYPE_CHECKING:
    from .enumerable import Enumerable

def from_iterable(data: Iterable[T]) -> 'Enumerable[T]':
    """create enumerable from iterable"""
    from .enumerable import Enumerable
    return Enumerable(lambda: list(data))

def from_range(start: int, count: int) -> 'Enumerable[int]':
    """create enumerable from range"""
    from .enumerable import Enumerable
    return Enumerable(lambda: list(range(start, start + count)))

def repeat(item: T, count: int) -> 'Enumerable[T]':
    """create enumerable with repeated item"""
    from .enumerable import Enumerable
    return Enumerable(lambda: [item] * count)

def empty() -> 'Enumerable[Any]':
    """create empty enumerable"""
    from .enumerable import Enumerable
    return Enumerable(lambda: [])

def from_dataframe(frame: pd.DataFrame) -> 'Enumerable[Dict[str, Any]]':
    """one dict record per dataframe row, keyed by column name"""
    from .enumerable import Enumerable
    return Enumerable(lambda: frame.to_dict(orient='records'))

# --- aliases ---
collex = from_iterable
P = from_iterable
p = from_iterable
