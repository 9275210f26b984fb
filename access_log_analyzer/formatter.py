"""Output formatters — plain, CSV and JSON renderings of a source result."""

import csv
import io
import json
from typing import Callable

from access_log_analyzer.models import AggregateSummary, Record
from access_log_analyzer.pipeline import SourceResult

CSV_HEADER = ["ip", "date", "method", "url", "status", "size", "referer", "agent"]

COUNT_SECTIONS = (
    ("Requests per IP address", "requests_per_ip"),
    ("Requests per date", "requests_per_date"),
    ("Requests per HTTP method", "requests_per_method"),
    ("Requests per response code", "requests_per_status"),
)


def format_record_plain(record: Record) -> str:
    return "\n".join([
        f"IP: {record.ip}",
        f"    Date: {record.date}",
        f"    HTTP method: {record.method}",
        f"    URL: {record.url}",
        f"    Status: {record.status}",
        f"    Size: {record.size}",
        f"    Referer: {record.referer}",
        f"    Agent: {record.agent}",
    ])


def format_summary_plain(summary: AggregateSummary) -> str:
    """Human-readable statistics, most frequent first in each section."""
    lines = [f"Total requests: {summary.total_requests}", ""]

    for title, attr in COUNT_SECTIONS:
        lines.append(f"{title}:")
        for key, count in getattr(summary, attr).items():
            lines.append(f"  {count:7d} {key}")
        lines.append("")

    lines.append("Data transferred:")
    lines.append(f"  Total bytes: {summary.total_bytes}")
    lines.append(f"  Distinct IPs: {summary.distinct_ips}")
    lines.append(f"  Average bytes per IP: {summary.average_bytes_per_ip:.2f}")
    lines.append("  Bytes per IP:")
    for ip, size in summary.bytes_per_ip.items():
        lines.append(f"  {size:10d} {ip}")

    return "\n".join(lines)


def render_plain(result: SourceResult, verbose: bool = True) -> str:
    lines = ["", f"Log file: {result.source}"]
    if result.error is not None:
        lines.append(f"Error: {result.error}")
        return "\n".join(lines)

    report = result.report
    lines.append(
        f"Lines read: {report.lines_read}, parsed: {report.parsed}, "
        f"skipped: {report.skipped}, matched: {len(result.records)}"
    )
    if verbose:
        lines.extend(format_record_plain(r) for r in result.records)
    lines.append("")
    lines.append(format_summary_plain(result.summary))
    return "\n".join(lines)


def _csv_rows(rows: list[list]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue().rstrip("\n")


def render_csv(result: SourceResult, verbose: bool = True) -> str:
    """Records as rows under CSV_HEADER, then statistics as section,key,value rows."""
    if result.error is not None:
        return _csv_rows([["source", "error"], [result.source, str(result.error)]])

    rows = []
    if verbose:
        rows.append(CSV_HEADER)
        for r in result.records:
            rows.append([r.ip, r.date, r.method, r.url, r.status, r.size, r.referer, r.agent])
        rows.append([])

    summary = result.summary
    rows.append(["section", "key", "value"])
    rows.append(["total", "requests", summary.total_requests])
    for _, attr in COUNT_SECTIONS:
        for key, count in getattr(summary, attr).items():
            rows.append([attr, key, count])
    rows.append(["transfer", "total_bytes", summary.total_bytes])
    rows.append(["transfer", "distinct_ips", summary.distinct_ips])
    rows.append(["transfer", "average_bytes_per_ip", f"{summary.average_bytes_per_ip:.2f}"])
    for ip, size in summary.bytes_per_ip.items():
        rows.append(["bytes_per_ip", ip, size])
    return _csv_rows(rows)


def summary_to_dict(summary: AggregateSummary) -> dict:
    return {
        "total_requests": summary.total_requests,
        "requests_per_ip": summary.requests_per_ip,
        "requests_per_method": summary.requests_per_method,
        "requests_per_status": {str(k): v for k, v in summary.requests_per_status.items()},
        "requests_per_date": summary.requests_per_date,
        "total_bytes": summary.total_bytes,
        "distinct_ips": summary.distinct_ips,
        "average_bytes_per_ip": summary.average_bytes_per_ip,
        "bytes_per_ip": summary.bytes_per_ip,
    }


def render_json(result: SourceResult, verbose: bool = True) -> str:
    """One JSON document per source."""
    doc = {"source": result.source}
    if result.error is not None:
        doc["error"] = str(result.error)
        return json.dumps(doc, indent=2)

    doc["lines_read"] = result.report.lines_read
    doc["skipped"] = result.report.skipped
    doc["skipped_by_kind"] = result.report.skipped_by_kind
    if verbose:
        doc["records"] = [r.to_dict() for r in result.records]
    doc["summary"] = summary_to_dict(result.summary)
    return json.dumps(doc, indent=2)


def get_renderer(output_format: str = "plain") -> Callable[[SourceResult, bool], str]:
    """Return the renderer function for the given format string."""
    renderers = {
        "plain": render_plain,
        "csv": render_csv,
        "json": render_json,
    }
    return renderers[output_format]
