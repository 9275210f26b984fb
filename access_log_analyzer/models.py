"""Data model — frozen dataclasses for records, filter criteria and summaries."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    ip: str
    timestamp: datetime
    date: str  # bracketed timestamp text exactly as logged
    method: str
    url: str
    protocol: str
    status: int
    size: int
    referer: str
    agent: str
    raw: str
    line_number: int = 0

    def to_dict(self) -> dict:
        return {
            "ip": self.ip,
            "date": self.date,
            "timestamp": self.timestamp.isoformat(),
            "method": self.method,
            "url": self.url,
            "protocol": self.protocol,
            "status": self.status,
            "size": self.size,
            "referer": self.referer,
            "agent": self.agent,
        }


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def __contains__(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class FilterSpec:
    """Active filter criteria. A None field is not applied."""

    ip: str | None = None
    date_range: DateRange | None = None
    method: str | None = None
    status: int | None = None
    pattern: str | None = None
    min_size: int | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.ip,
                self.date_range,
                self.method,
                self.status,
                self.pattern,
                self.min_size,
            )
        )


class SortKey(Enum):
    NONE = "none"
    IP = "ip"
    DATE = "date"
    METHOD = "method"
    STATUS = "status"
    SIZE = "size"

    @classmethod
    def parse(cls, value: str | None) -> "SortKey":
        """Map a user-supplied name to a SortKey.

        Empty values and unknown names fall back to NONE (input order).
        Unknown names are logged, never raised.
        """
        if not value:
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.warning("Unknown sort key %r, keeping input order", value)
            return cls.NONE


@dataclass
class AggregateSummary:
    total_requests: int = 0
    requests_per_ip: dict[str, int] = field(default_factory=dict)
    requests_per_method: dict[str, int] = field(default_factory=dict)
    requests_per_status: dict[int, int] = field(default_factory=dict)
    requests_per_date: dict[str, int] = field(default_factory=dict)
    total_bytes: int = 0
    distinct_ips: int = 0
    average_bytes_per_ip: float = 0.0
    bytes_per_ip: dict[str, int] = field(default_factory=dict)
