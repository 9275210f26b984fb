"""Command-line glue — argument parsing, logging setup, rendering, exit codes."""

import logging
import sys
from argparse import ArgumentParser

from access_log_analyzer.config import ERROR_POLICIES, LOG_LEVELS, OUTPUT_FORMATS, load_config, load_yaml_config
from access_log_analyzer.errors import ConfigError
from access_log_analyzer.formatter import get_renderer
from access_log_analyzer.models import SortKey
from access_log_analyzer.pipeline import analyze_sources

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [ANALYZER] %(levelname)s %(message)s"

EXIT_OK = 0
EXIT_SOURCE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="access-log-analyzer",
        description="Filter, sort and summarize combined-format web access logs.",
    )
    parser.add_argument(
        "-i", "--input",
        action="append",
        help="Comma-separated input file(s) or glob(s); may be repeated",
    )
    parser.add_argument(
        "-o", "--output",
        choices=OUTPUT_FORMATS,
        help="Output format (default: plain)",
    )
    parser.add_argument(
        "-s", "--sort-by",
        help=f"Sort records by one of: {', '.join(k.value for k in SortKey)}",
    )
    parser.add_argument("-f", "--ip", help="Keep records from this IP address")
    parser.add_argument(
        "-d", "--date-range",
        help="Keep records in start,end (inclusive), e.g. '01/Jan/2021,31/Dec/2021'",
    )
    parser.add_argument("-m", "--method", help="Keep records with this HTTP method (e.g. GET)")
    parser.add_argument("-c", "--status", help="Keep records with this response code (e.g. 404)")
    parser.add_argument("-p", "--pattern", help="Keep lines matching this regular expression")
    parser.add_argument("-z", "--min-size", help="Keep records of at least this many bytes")
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Print statistics without the per-record listing",
    )
    parser.add_argument(
        "--on-error",
        choices=ERROR_POLICIES,
        help="Keep going after a bad input file, or halt (default: continue)",
    )
    parser.add_argument("--workers", type=int, help="Process input files in parallel")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="Diagnostics level")
    return parser


def run(argv=None) -> int:
    """Parse args, run the pipeline and print results. Returns the exit code."""
    args = build_parser().parse_args(argv)

    try:
        yaml_data = load_yaml_config(args.config)
        options = load_config(args, yaml_data)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logging.getLogger().setLevel(options.log_level)

    if not options.sources:
        print("Error: no input files given (use -i)", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    render = get_renderer(options.output_format)
    results = analyze_sources(options)
    for result in results:
        print(render(result, options.verbose))

    failed = [r for r in results if not r.ok]
    if failed:
        logger.error("%d of %d source(s) failed", len(failed), len(options.sources))
        return EXIT_SOURCE_FAILED
    return EXIT_OK


def main():
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)
    try:
        code = run()
    except KeyboardInterrupt:
        code = EXIT_OK
    except BrokenPipeError:
        code = EXIT_OK
    sys.exit(code)
