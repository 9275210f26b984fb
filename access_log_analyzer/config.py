"""Configuration loading from CLI args, env vars, and optional YAML file."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from access_log_analyzer.errors import ConfigError
from access_log_analyzer.filters import build_filter_spec
from access_log_analyzer.models import FilterSpec, SortKey
from access_log_analyzer.reader import expand_paths

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("plain", "csv", "json")
ERROR_POLICIES = ("continue", "halt")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

FILTER_FIELDS = ("ip", "date_range", "method", "status", "pattern", "min_size")


@dataclass(frozen=True)
class AnalyzerOptions:
    sources: tuple[str, ...] = ()
    filters: FilterSpec = field(default_factory=FilterSpec)
    sort_key: SortKey = SortKey.NONE
    output_format: str = "plain"
    verbose: bool = True
    on_error: str = "continue"
    workers: int = 1
    log_level: str = "WARNING"


def load_yaml_config(path: str | None) -> dict:
    """Load option defaults from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from None

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _first(*values):
    """First value that is not None, or None."""
    for value in values:
        if value is not None:
            return value
    return None


def _parse_workers(value) -> int:
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Workers must be an integer, got {value!r}") from None
    if workers < 1:
        raise ConfigError(f"Workers must be at least 1, got {workers}")
    return workers


def _choice(name: str, value: str, choices: tuple[str, ...]) -> str:
    if value not in choices:
        raise ConfigError(f"Invalid {name} {value!r}, expected one of: {', '.join(choices)}")
    return value


def load_config(cli_args, yaml_data: dict | None = None, environ=None) -> AnalyzerOptions:
    """Build AnalyzerOptions from CLI args, env vars, and parsed YAML data.

    Precedence: CLI flag, then environment variable, then YAML, then the
    dataclass default. Raises ConfigError for any invalid value.
    """
    yaml_data = yaml_data or {}
    env = os.environ if environ is None else environ
    yaml_filters = yaml_data.get("filters") or {}
    if not isinstance(yaml_filters, dict):
        raise ConfigError("'filters' in config file must be a mapping")

    cli_sources = getattr(cli_args, "input", None) or []
    yaml_sources = yaml_data.get("input") or []
    if isinstance(yaml_sources, str):
        yaml_sources = [yaml_sources]

    filter_values = {
        name: _first(getattr(cli_args, name, None), yaml_filters.get(name))
        for name in FILTER_FIELDS
    }
    filters = build_filter_spec(**filter_values)

    sort_by = _first(
        getattr(cli_args, "sort_by", None),
        env.get("ANALYZER_SORT_BY"),
        yaml_data.get("sort_by"),
    )

    output_format = _first(
        getattr(cli_args, "output", None),
        env.get("ANALYZER_OUTPUT_FORMAT"),
        yaml_data.get("output_format"),
        AnalyzerOptions.output_format,
    )

    on_error = _first(
        getattr(cli_args, "on_error", None),
        env.get("ANALYZER_ON_ERROR"),
        yaml_data.get("on_error"),
        AnalyzerOptions.on_error,
    )

    workers = _first(
        getattr(cli_args, "workers", None),
        env.get("ANALYZER_WORKERS"),
        yaml_data.get("workers"),
        AnalyzerOptions.workers,
    )

    log_level = _first(
        getattr(cli_args, "log_level", None),
        env.get("ANALYZER_LOG_LEVEL"),
        yaml_data.get("log_level"),
        AnalyzerOptions.log_level,
    )

    verbose = True
    if getattr(cli_args, "summary_only", False):
        verbose = False
    elif yaml_data.get("verbose") is not None:
        verbose = yaml_data["verbose"]
        if not isinstance(verbose, bool):
            raise ConfigError(f"'verbose' in config file must be true or false, got {verbose!r}")

    return AnalyzerOptions(
        sources=tuple(expand_paths(cli_sources or yaml_sources)),
        filters=filters,
        sort_key=SortKey.parse(sort_by),
        output_format=_choice("output format", str(output_format).lower(), OUTPUT_FORMATS),
        verbose=verbose,
        on_error=_choice("error policy", str(on_error).lower(), ERROR_POLICIES),
        workers=_parse_workers(workers),
        log_level=_choice("log level", str(log_level).upper(), LOG_LEVELS),
    )
