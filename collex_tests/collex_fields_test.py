import datetime
import decimal
import suite
import numpy as np
import pandas as pd
from collections import namedtuple
from dataclasses import dataclass
from functools import total_ordering
from typing import Any, List, NamedTuple, Optional, Union
from collex import P, FieldDescriptor, describe_fields, resolve_fields, is_orderable_type

test = suite.test
assert_that = suite.assert_that


class Point(NamedTuple):
    x: int
    y: int
    label: str


Pair = namedtuple('Pair', ['left', 'right'])


@total_ordering
class Version:
    def __init__(self, major, minor):
        self.major, self.minor = major, minor

    def __eq__(self, other):
        return (self.major, self.minor) == (other.major, other.minor)

    def __lt__(self, other):
        return (self.major, self.minor) < (other.major, other.minor)


class Opaque:
    pass


@dataclass
class Release:
    name: str
    version: Version
    blob: Opaque
    size: Union[int, str]
    notes: List[str]
    _secret: int = 0


class Slotted:
    __slots__ = ('code', 'rank')

    def __init__(self, code, rank):
        self.code, self.rank = code, rank


class Plain:
    def __init__(self, title, score):
        self.title = title
        self.score = score


# --- orderability ---

@test("builtin scalar types are orderable")
def test_orderable_builtins():
    for tp in (int, float, str, bytes, bool, decimal.Decimal, datetime.date, datetime.datetime,
               datetime.timedelta, tuple, list):
        assert_that(is_orderable_type(tp), f"{tp.__name__} should be orderable")


@test("numpy and pandas scalar types are orderable")
def test_orderable_numpy_pandas():
    for tp in (np.int64, np.float32, np.datetime64, pd.Timestamp):
        assert_that(is_orderable_type(tp), f"{tp.__name__} should be orderable")
    assert_that(not is_orderable_type(np.complex128), "complex numbers have no order")


@test("types without a usable < are not orderable")
def test_not_orderable():
    for tp in (dict, complex, type(None), Opaque, object, set, frozenset):
        assert_that(not is_orderable_type(tp), f"{tp.__name__} should not be orderable")
    assert_that(not is_orderable_type(None), "an unknown type is not orderable")


@test("user types with __lt__ are orderable")
def test_orderable_user_type():
    assert_that(is_orderable_type(Version), "total_ordering classes should count")


# --- describe_fields ---

@test("describe_fields lists public dataclass fields with their types")
def test_describe_dataclass():
    table = describe_fields(Release)
    assert_that(list(table) == ['name', 'version', 'blob', 'size', 'notes'], "private fields are left out")
    assert_that(table['version'].value_type is Version, "the declared type should be kept")
    assert_that(table['notes'].value_type is list, "generic aliases reduce to their origin")
    assert_that(table['size'].value_type is None, "a real union has no single type")


@test("describe_fields reads namedtuples with and without annotations")
def test_describe_namedtuples():
    assert_that(list(describe_fields(Point)) == ['x', 'y', 'label'], "typed namedtuple fields")
    pairs = [Pair(1, 'a'), Pair(2, 'b')]
    table = describe_fields(Pair, pairs)
    assert_that(list(table) == ['left', 'right'], "plain namedtuple fields")
    assert_that(table['left'].value_type is float and table['right'].value_type is str,
                "untyped fields take their type from the data")


@test("describe_fields finds slots and instance attributes")
def test_describe_slots_and_attributes():
    slotted = describe_fields(Slotted, [Slotted('b', 2), Slotted('a', 1)])
    assert_that(set(slotted) == {'code', 'rank'}, "slots are fields")
    plain = describe_fields(Plain, [Plain('x', 3)])
    assert_that(list(plain) == ['title', 'score'], "instance attributes are fields")


@test("optional annotations are nullable")
def test_describe_optional():
    @dataclass
    class Row:
        when: Optional[datetime.date]
        anything: Any

    table = describe_fields(Row, [Row(None, 3), Row(datetime.date(2020, 1, 1), 4)])
    assert_that(table['when'].value_type is datetime.date and table['when'].nullable, "optional unwraps")
    assert_that(table['anything'].value_type is float, "any falls back to the observed type")


# --- resolve_fields ---

@test("resolve_fields dedups, ignores case and drops bad names")
def test_resolve_fields():
    resolved = resolve_fields(Release, ['NAME', 'blob', 'ghost', 'Version', 'name', 'size', 'notes', 42])
    assert_that([d.name for d in resolved] == ['name', 'version', 'notes'],
                "only orderable, known, first-seen names survive")


@test("resolve_fields accepts an explicit descriptor table")
def test_resolve_with_descriptors():
    table = [
        FieldDescriptor('Length', int, len),
        FieldDescriptor('Shape', None, type),
    ]
    resolved = resolve_fields(str, ['length', 'shape'], descriptors=table)
    assert_that([d.name for d in resolved] == ['Length'], "the untyped descriptor is dropped")


@test("order_by_fields uses an explicit descriptor table")
def test_order_by_with_descriptors():
    words = P(['ccc', 'a', 'bb'])
    result = words.order_by_fields(['LENGTH'], descriptors=[FieldDescriptor('length', int, len)]).to.list()
    assert_that(result == ['a', 'bb', 'ccc'], "caller-supplied getters should drive the sort")


@test("order_by_fields honours an explicit element type")
def test_order_by_element_type():
    rows = [Slotted('b', 2), Slotted('a', 1), Slotted('c', 0)]
    result = P(rows).order_by_fields(['rank'], element_type=Slotted).select(lambda s: s.code).to.list()
    assert_that(result == ['c', 'a', 'b'], "slots on the given type should resolve")


@test("user-defined orderable values sort")
def test_order_by_user_type():
    rows = [
        Release('b', Version(2, 0), Opaque(), 1, []),
        Release('a', Version(1, 5), Opaque(), 2, []),
    ]
    result = P(rows).order_by_fields(['version', 'blob']).select(lambda r: r.name).to.list()
    assert_that(result == ['a', 'b'], "version orders, blob is skipped")


@test("numpy values sort through dict records")
def test_order_by_numpy_values():
    frame = pd.DataFrame({'name': ['x', 'y', 'z'], 'score': [2.5, 0.5, 1.5]})
    records = [dict(zip(frame.columns, row)) for row in frame.itertuples(index=False)]
    result = P(records).order_by_fields(['score']).select(lambda r: r['name']).to.list()
    assert_that(result == ['y', 'z', 'x'], "numpy floats are numbers")


@test("set valued fields are skipped when sorting")
def test_order_by_set_field_dropped():
    rows = [{'tags': {1, 2}, 'n': 2}, {'tags': {1}, 'n': 1}, {'tags': {3}, 'n': 0}]
    assert_that(P(rows).order_by_fields(['tags']).to.list() == rows, "subset tests are not an order")
    result = P(rows).order_by_fields(['tags', 'n']).select(lambda r: r['n']).to.list()
    assert_that(result == [0, 1, 2], "n still sorts after tags is dropped")
    frozen = [{'tags': frozenset('b')}, {'tags': frozenset('ab')}]
    assert_that(P(frozen).order_by_fields(['tags']).to.list() == frozen, "frozensets are skipped too")


if __name__ == "__main__":
    suite.main("collex field lookup")
