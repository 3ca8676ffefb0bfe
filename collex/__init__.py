"""
collex - outer joins, fault-tolerant projection and sorting by field name
for python iterables, in the style of linq.
"""
import logging

# expose the main classes
from .enumerable import Enumerable, OrderedEnumerable

# expose the factory functions
from .factories import (
    from_iterable,
    from_range,
    repeat,
    empty,
    from_dataframe,
    collex,
    P,
)

# expose the field lookup used by order_by_fields
from .types import FieldDescriptor
from .fields import describe_fields, resolve_fields, resolve_navigation_fields, is_orderable_type

# library logging stays silent unless the application configures it
logging.getLogger(__name__).addHandler(logging.NullHandler())

# define what `import *` does
__all__ = [
    "Enumerable",
    "OrderedEnumerable",
    "from_iterable",
    "from_range",
    "repeat",
    "empty",
    "from_dataframe",
    "collex",
    "P",
    "FieldDescriptor",
    "describe_fields",
    "resolve_fields",
    "resolve_navigation_fields",
    "is_orderable_type",
]
