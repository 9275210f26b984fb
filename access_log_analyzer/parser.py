"""Combined log format line parser — positional tokens into a frozen Record."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generator, Iterable

from access_log_analyzer.errors import ParseError, ParseErrorKind
from access_log_analyzer.models import Record

logger = logging.getLogger(__name__)

# 10/Oct/2020:13:55:36 +0000
TIMESTAMP_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

MIN_FIELDS = 11

# Token positions after splitting on whitespace:
#   0 ip  1 ident  2 user  3-4 [date zone]  5 "method  6 url  7 proto"
#   8 status  9 size  10 "referer"  11.. "agent"
IP, DATE, ZONE, METHOD, URL, PROTOCOL, STATUS, SIZE, REFERER, AGENT = (
    0, 3, 4, 5, 6, 7, 8, 9, 10, 11,
)


def _to_int(token: str) -> int:
    """Numeric field value, 0 for '-' or anything unparsable."""
    try:
        return int(token)
    except ValueError:
        return 0


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def parse_timestamp(date_text: str) -> datetime:
    """Parse '[10/Oct/2020:13:55:36 +0000]' (brackets optional). Raises ValueError."""
    return datetime.strptime(date_text.strip("[]"), TIMESTAMP_FORMAT)


def parse_line(line: str, line_number: int = 0) -> Record:
    """Parse a single combined-format line into a Record.

    Raises ParseError for lines with too few fields or an unreadable
    timestamp.
    """
    stripped = line.rstrip("\r\n")
    tokens = stripped.split()
    if len(tokens) < MIN_FIELDS:
        raise ParseError(ParseErrorKind.TOO_FEW_FIELDS, stripped, line_number)

    date = f"{tokens[DATE]} {tokens[ZONE]}"
    try:
        timestamp = parse_timestamp(date)
    except ValueError:
        raise ParseError(ParseErrorKind.BAD_TIMESTAMP, stripped, line_number) from None

    return Record(
        ip=tokens[IP],
        timestamp=timestamp,
        date=date,
        method=tokens[METHOD].lstrip('"'),
        url=tokens[URL],
        protocol=tokens[PROTOCOL].rstrip('"'),
        status=_to_int(tokens[STATUS]),
        size=_to_int(tokens[SIZE]),
        referer=_unquote(tokens[REFERER]),
        agent=_unquote(" ".join(tokens[AGENT:])),
        raw=stripped,
        line_number=line_number,
    )


@dataclass
class ParseReport:
    """Line counters for one source."""

    lines_read: int = 0
    parsed: int = 0
    skipped: int = 0
    skipped_by_kind: dict[str, int] = field(default_factory=dict)

    def record_skip(self, error: ParseError):
        self.skipped += 1
        key = error.kind.value
        self.skipped_by_kind[key] = self.skipped_by_kind.get(key, 0) + 1


def parse_lines(
    lines: Iterable[str],
    report: ParseReport | None = None,
    source: str = "",
) -> Generator[Record, None, None]:
    """Yield a Record per well-formed line, skipping (and counting) the rest."""
    if report is None:
        report = ParseReport()

    for line_number, line in enumerate(lines, start=1):
        report.lines_read += 1
        try:
            record = parse_line(line, line_number)
        except ParseError as e:
            report.record_skip(e)
            logger.warning("Skipping %s line %d (%s)", source or "<input>", line_number, e.kind.value)
            continue
        report.parsed += 1
        yield record
