"""
Stable, direction-aware ordering shared by alert lists and search results.

Equal keys always keep their original relative order, in both directions.
Strings compare case-insensitively through the active locale; missing values
sort last.
"""

import locale
from collections.abc import Mapping
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Iterable, Union

Field = Union[str, Callable[[Any], Any]]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _accessor(field: Field) -> Callable[[Any], Any]:
    if callable(field):
        return field

    def get(record):
        if isinstance(record, Mapping):
            return record.get(field)
        return getattr(record, field, None)

    return get


def make_sort_key(field: Field) -> Callable[[Any], Any]:
    """Returns a function mapping a record to its comparable value, or None."""
    get = _accessor(field)

    def key(record):
        value = get(record)
        if isinstance(value, str):
            return locale.strxfrm(value.casefold())
        return value

    return key


def make_comparator(
    field: Field, direction: Union[SortDirection, str] = SortDirection.ASC
) -> Callable[[Any, Any], int]:
    """Builds a cmp-style comparator for use with functools.cmp_to_key."""
    key = make_sort_key(field)
    sign = -1 if SortDirection(direction) is SortDirection.DESC else 1

    def compare(a, b) -> int:
        left, right = key(a), key(b)
        if left is None or right is None:
            return (left is None) - (right is None)
        if left < right:
            return -sign
        if left > right:
            return sign
        return 0

    return compare


def sort_records(
    records: Iterable[Any],
    field: Field,
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> list[Any]:
    # sorted() is stable, which the tie-breaking relies on
    return sorted(records, key=cmp_to_key(make_comparator(field, direction)))
