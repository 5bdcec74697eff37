"""Core signup report components."""

from .errors import (
    SignupReportError,
    LoadError,
    ParseError,
    ParseErrorThresholdExceeded,
    TimezoneUnresolved,
    AmbiguousLocalTime,
    InvalidScore,
)
from .timezone_utils import (
    parse_date_hour,
    localize_reference,
    to_local,
    local_hour_of_day,
    get_zone,
    REFERENCE_TZ,
    UTC_TZ
)
from .classifier import classify_scores, classify_record
from .aggregator import aggregate, merge_tables
from .pipeline import SignupPipeline
from .service import SignupReportService

__all__ = [
    "SignupReportError",
    "LoadError",
    "ParseError",
    "ParseErrorThresholdExceeded",
    "TimezoneUnresolved",
    "AmbiguousLocalTime",
    "InvalidScore",
    "parse_date_hour",
    "localize_reference",
    "to_local",
    "local_hour_of_day",
    "get_zone",
    "REFERENCE_TZ",
    "UTC_TZ",
    "classify_scores",
    "classify_record",
    "aggregate",
    "merge_tables",
    "SignupPipeline",
    "SignupReportService",
]
