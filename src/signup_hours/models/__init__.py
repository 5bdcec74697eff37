"""Data models and types for the signup report."""

from .signup import (
    Category,
    CATEGORIES,
    SignupRecord,
    ResolvedRecord,
    NormalizedRecord,
    ClassifiedRecord,
)
from .report import AggregateTable, DropCounts, ReportResult, HOURS_IN_DAY
from .config import (
    ReportConfig,
    SourceConfig,
    NormalizerConfig,
    ResolverConfig,
    ProcessingConfig,
    OutputConfig,
)

__all__ = [
    "Category",
    "CATEGORIES",
    "SignupRecord",
    "ResolvedRecord",
    "NormalizedRecord",
    "ClassifiedRecord",
    "AggregateTable",
    "DropCounts",
    "ReportResult",
    "HOURS_IN_DAY",
    "ReportConfig",
    "SourceConfig",
    "NormalizerConfig",
    "ResolverConfig",
    "ProcessingConfig",
    "OutputConfig",
]
