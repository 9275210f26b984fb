"""Per-source pipeline: read -> parse -> filter -> sort -> aggregate."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from access_log_analyzer.config import AnalyzerOptions
from access_log_analyzer.errors import SourceError
from access_log_analyzer.filters import build_filter_chain
from access_log_analyzer.models import AggregateSummary, Record
from access_log_analyzer.parser import ParseReport, parse_lines
from access_log_analyzer.reader import check_source, read_lines
from access_log_analyzer.sorter import sort_records
from access_log_analyzer.stats import compute_summary

logger = logging.getLogger(__name__)


@dataclass
class SourceResult:
    source: str
    records: list[Record] = field(default_factory=list)
    summary: AggregateSummary | None = None
    report: ParseReport = field(default_factory=ParseReport)
    error: SourceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def analyze_source(source: str, options: AnalyzerOptions) -> SourceResult:
    """Run the full pipeline for one source.

    Source failures are captured on the result instead of raised, and a
    failed source never carries a summary.
    """
    result = SourceResult(source=source)
    try:
        check_source(source)
        filter_fn = build_filter_chain(options.filters)
        records = parse_lines(read_lines(source), result.report, source=source)
        survivors = [r for r in records if filter_fn(r)]
    except SourceError as e:
        result.error = e
    except OSError as e:
        result.error = SourceError(source, f"could not be read: {e}")

    if result.error is not None:
        logger.error("Source failed: %s", result.error)
        return result

    result.records = sort_records(survivors, options.sort_key)
    result.summary = compute_summary(result.records)
    logger.info(
        "%s: %d lines, %d parsed, %d skipped, %d matched",
        source,
        result.report.lines_read,
        result.report.parsed,
        result.report.skipped,
        len(result.records),
    )
    return result


def analyze_sources(options: AnalyzerOptions) -> list[SourceResult]:
    """Run every source in options.sources and return results in input order.

    With on_error="halt" sources run one at a time and processing stops
    after the first failed source. Otherwise every source runs, in a
    thread pool when workers > 1.
    """
    sources = list(options.sources)

    if options.on_error == "halt" or options.workers <= 1 or len(sources) <= 1:
        results = []
        for source in sources:
            result = analyze_source(source, options)
            results.append(result)
            if not result.ok and options.on_error == "halt":
                skipped = len(sources) - len(results)
                if skipped:
                    logger.error("Halting after failed source, %d source(s) not processed", skipped)
                break
        return results

    with ThreadPoolExecutor(max_workers=min(options.workers, len(sources))) as executor:
        return list(executor.map(lambda s: analyze_source(s, options), sources))
