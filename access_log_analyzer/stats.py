"""Aggregation — request counts per ip/method/status/date and byte totals."""

from collections import Counter
from typing import Iterable

from access_log_analyzer.models import AggregateSummary, Record


def compute_summary(records: Iterable[Record]) -> AggregateSummary:
    """Consume a record stream once and produce an AggregateSummary.

    Count mappings are ordered most frequent first; equal counts keep
    the order in which their keys were first seen. Date buckets are keyed
    by the timestamp text exactly as logged.
    """
    ip_counter = Counter()
    method_counter = Counter()
    status_counter = Counter()
    date_counter = Counter()
    bytes_per_ip: dict[str, int] = {}
    total = 0
    total_bytes = 0

    for record in records:
        total += 1
        ip_counter[record.ip] += 1
        method_counter[record.method] += 1
        status_counter[record.status] += 1
        date_counter[record.date] += 1
        bytes_per_ip[record.ip] = bytes_per_ip.get(record.ip, 0) + record.size
        total_bytes += record.size

    distinct_ips = len(bytes_per_ip)
    average = total_bytes / distinct_ips if distinct_ips > 0 else 0.0

    return AggregateSummary(
        total_requests=total,
        requests_per_ip=dict(ip_counter.most_common()),
        requests_per_method=dict(method_counter.most_common()),
        requests_per_status=dict(status_counter.most_common()),
        requests_per_date=dict(date_counter.most_common()),
        total_bytes=total_bytes,
        distinct_ips=distinct_ips,
        average_bytes_per_ip=average,
        bytes_per_ip=bytes_per_ip,
    )
