"""Exception hierarchy for the analyzer."""

from enum import Enum


class AnalyzerError(Exception):
    """Base class for every error raised by access_log_analyzer."""


class ConfigError(AnalyzerError):
    """Raised when options or a config file cannot be used."""


class SourceError(ConfigError):
    """Raised when an input source is missing, empty or unreadable."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ParseErrorKind(Enum):
    TOO_FEW_FIELDS = "too_few_fields"
    BAD_TIMESTAMP = "bad_timestamp"


class ParseError(AnalyzerError):
    """Raised for a single malformed log line. Recoverable."""

    def __init__(self, kind: ParseErrorKind, line: str, line_number: int = 0):
        super().__init__(f"line {line_number}: {kind.value}")
        self.kind = kind
        self.line = line
        self.line_number = line_number
