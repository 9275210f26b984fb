"""Filter predicates for records — ip, date range, method, status, pattern, size."""

import re
from datetime import datetime, time, timezone
from typing import Callable

from access_log_analyzer.errors import ConfigError
from access_log_analyzer.models import DateRange, FilterSpec, Record
from access_log_analyzer.parser import TIMESTAMP_FORMAT

# Boundary formats accepted in a date range, most specific first.
# The bool marks date-only formats, whose end boundary covers the whole day.
BOUNDARY_FORMATS = (
    (TIMESTAMP_FORMAT, False),
    ("%d/%b/%Y:%H:%M:%S", False),
    ("%d/%b/%Y", True),
    ("%Y-%m-%d", True),
)


def filter_by_ip(record: Record, ip: str) -> bool:
    """True if the record's ip equals the given value exactly."""
    return record.ip == ip


def filter_by_date_range(record: Record, date_range: DateRange) -> bool:
    """True if the record's instant falls inside the range (inclusive)."""
    return record.timestamp in date_range


def filter_by_method(record: Record, method: str) -> bool:
    """True if the method matches exactly (case-sensitive)."""
    return record.method == method


def filter_by_status(record: Record, status: int) -> bool:
    return record.status == status


def filter_by_pattern(record: Record, pattern: re.Pattern) -> bool:
    """True if the pattern matches anywhere in the raw line."""
    return pattern.search(record.raw) is not None


def filter_by_min_size(record: Record, min_size: int) -> bool:
    return record.size >= min_size


def _parse_boundary(text: str, is_end: bool) -> datetime:
    text = text.strip().strip("[]")
    for fmt, date_only in BOUNDARY_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if date_only and is_end:
            parsed = datetime.combine(parsed.date(), time.max)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ConfigError(f"Invalid date in range: {text!r}") from None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def parse_date_range(range_str: str) -> DateRange:
    """Parse 'start,end' into an inclusive DateRange.

    Naive boundaries are read as UTC. A date-only end boundary extends
    to the last instant of that day.
    """
    parts = range_str.split(",")
    if len(parts) != 2 or not all(p.strip() for p in parts):
        raise ConfigError(f"Date range must be 'start,end', got {range_str!r}")

    start = _parse_boundary(parts[0], is_end=False)
    end = _parse_boundary(parts[1], is_end=True)
    if start > end:
        raise ConfigError(f"Date range start is after end: {range_str!r}")
    return DateRange(start=start, end=end)


def build_filter_spec(
    ip: str | None = None,
    date_range: str | None = None,
    method: str | None = None,
    status: int | str | None = None,
    pattern: str | None = None,
    min_size: int | str | None = None,
) -> FilterSpec:
    """Validate raw option values into a FilterSpec.

    Empty strings count as "not set". Raises ConfigError on bad values,
    before any record is read.
    """
    for name, value in (("ip", ip), ("date_range", date_range), ("method", method), ("pattern", pattern)):
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"Filter {name} must be a string, got {value!r}")

    if isinstance(status, bool) or isinstance(min_size, bool):
        raise ConfigError("Status and size filters must be integers, not booleans")

    status_value = None
    if status not in (None, ""):
        try:
            status_value = int(status)
        except (TypeError, ValueError):
            raise ConfigError(f"Status filter must be an integer, got {status!r}") from None

    size_value = None
    if min_size not in (None, ""):
        try:
            size_value = int(min_size)
        except (TypeError, ValueError):
            raise ConfigError(f"Size threshold must be an integer, got {min_size!r}") from None
        if size_value < 0:
            raise ConfigError(f"Size threshold must not be negative, got {size_value}")

    if pattern:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Invalid pattern {pattern!r}: {e}") from None

    return FilterSpec(
        ip=ip or None,
        date_range=parse_date_range(date_range) if date_range else None,
        method=method or None,
        status=status_value,
        pattern=pattern or None,
        min_size=size_value,
    )


def build_filter_chain(spec: FilterSpec) -> Callable[[Record], bool]:
    """Combine all active criteria of a FilterSpec into a single callable.

    Returns a function that ANDs the active predicates, stopping at the
    first one that fails.
    """
    predicates = []

    if spec.ip is not None:
        predicates.append(lambda record, i=spec.ip: filter_by_ip(record, i))

    if spec.method is not None:
        predicates.append(lambda record, m=spec.method: filter_by_method(record, m))

    if spec.status is not None:
        predicates.append(lambda record, s=spec.status: filter_by_status(record, s))

    if spec.min_size is not None:
        predicates.append(lambda record, n=spec.min_size: filter_by_min_size(record, n))

    if spec.date_range is not None:
        predicates.append(lambda record, r=spec.date_range: filter_by_date_range(record, r))

    if spec.pattern is not None:
        compiled = re.compile(spec.pattern)
        predicates.append(lambda record, p=compiled: filter_by_pattern(record, p))

    if not predicates:
        return lambda record: True

    def combined(record: Record) -> bool:
        return all(p(record) for p in predicates)

    return combined
