"""Exceptions raised by the signup report pipeline.

Dataset-level errors (``LoadError``, ``ParseErrorThresholdExceeded``) abort
the run. Per-record errors are raised by the pure normalization functions
and absorbed by the pipeline, which counts and drops the record.
"""


class SignupReportError(Exception):
    """Base class for all report errors."""


class LoadError(SignupReportError):
    """The source dataset is missing or has missing/malformed columns."""


class ParseError(SignupReportError):
    """A date/hour text field does not match ``M/D/YYYY H:MM``."""

    def __init__(self, text: str, reason: str = "does not match M/D/YYYY H:MM"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse {text!r}: {reason}")


class ParseErrorThresholdExceeded(SignupReportError):
    """Too many malformed timestamps for the run to be trusted."""

    def __init__(self, invalid: int, total: int, max_ratio: float):
        self.invalid = invalid
        self.total = total
        self.max_ratio = max_ratio
        super().__init__(
            f"{invalid} of {total} records have malformed timestamps "
            f"(limit {max_ratio:.1%})"
        )


class TimezoneUnresolved(SignupReportError):
    """No timezone could be resolved for a record's coordinates."""


class AmbiguousLocalTime(SignupReportError):
    """A reference wall-clock time maps to zero or multiple instants."""


class InvalidScore(SignupReportError):
    """A record has a blank or non-numeric category score."""
