"""Stable record ordering by a single SortKey."""

from operator import attrgetter
from typing import Callable, Iterable

from access_log_analyzer.models import Record, SortKey

# ip and method compare as plain strings; date compares parsed instants.
_KEY_FUNCS: dict[SortKey, Callable[[Record], object]] = {
    SortKey.IP: attrgetter("ip"),
    SortKey.DATE: attrgetter("timestamp"),
    SortKey.METHOD: attrgetter("method"),
    SortKey.STATUS: attrgetter("status"),
    SortKey.SIZE: attrgetter("size"),
}


def sort_key_func(key: SortKey) -> Callable[[Record], object] | None:
    """Return the key function for a SortKey, or None for input order."""
    return _KEY_FUNCS.get(key)


def sort_records(records: Iterable[Record], key: SortKey | str | None = SortKey.NONE) -> list[Record]:
    """Return a new list ordered ascending by key.

    Ties keep their input order. NONE, None and unrecognized names keep
    the input order unchanged.
    """
    if not isinstance(key, SortKey):
        key = SortKey.parse(key)

    func = sort_key_func(key)
    if func is None:
        return list(records)
    return sorted(records, key=func)
