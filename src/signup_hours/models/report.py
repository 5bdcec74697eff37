"""Aggregate table and report result models."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import numpy as np
from pydantic import BaseModel, Field

from .signup import Category, CATEGORIES

HOURS_IN_DAY = 24


class AggregateTable:
    """Signup counts per (local hour, category).

    Backed by a zero-initialised 24 x 3 integer matrix. Rows are hours of
    the day, columns follow ``CATEGORIES``. Once frozen the table is
    read-only and is handed to the renderer.
    """

    def __init__(self, counts: Optional[np.ndarray] = None):
        if counts is None:
            counts = np.zeros((HOURS_IN_DAY, len(CATEGORIES)), dtype=np.int64)
        elif counts.shape != (HOURS_IN_DAY, len(CATEGORIES)):
            raise ValueError(f"Expected a {HOURS_IN_DAY}x{len(CATEGORIES)} table, got {counts.shape}")
        self._counts = counts

    @staticmethod
    def _column(category: Category) -> int:
        return CATEGORIES.index(category)

    @property
    def frozen(self) -> bool:
        return not self._counts.flags.writeable

    def increment(self, hour: int, category: Category) -> None:
        """Add one signup to a cell."""
        if self.frozen:
            raise RuntimeError("Aggregate table is frozen")
        if not 0 <= hour < HOURS_IN_DAY:
            raise ValueError(f"Hour out of range: {hour}")
        self._counts[hour, self._column(category)] += 1

    def freeze(self) -> "AggregateTable":
        self._counts.setflags(write=False)
        return self

    def merge(self, other: "AggregateTable") -> "AggregateTable":
        """Element-wise sum of two tables, as a new unfrozen table."""
        return AggregateTable(self._counts + other._counts)

    def count(self, hour: int, category: Category) -> int:
        return int(self._counts[hour, self._column(category)])

    def category_counts(self, category: Category) -> List[int]:
        """Counts for one category across hours 0..23."""
        return [int(v) for v in self._counts[:, self._column(category)]]

    def total(self) -> int:
        return int(self._counts.sum())

    def max_count(self) -> int:
        return int(self._counts.max())

    def peak_hour(self, category: Category) -> int:
        """First hour (ascending) at which the category's count is maximal."""
        # argmax returns the first occurrence of the maximum
        return int(np.argmax(self._counts[:, self._column(category)]))

    def peak_hours(self) -> Dict[Category, int]:
        return {category: self.peak_hour(category) for category in CATEGORIES}

    def as_array(self) -> np.ndarray:
        """Read-only view of the underlying matrix."""
        view = self._counts.view()
        view.setflags(write=False)
        return view

    def rows(self) -> List[Tuple[int, int, int, int]]:
        """(hour, data, visualization, society) rows."""
        return [
            (hour, *(int(v) for v in self._counts[hour]))
            for hour in range(HOURS_IN_DAY)
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AggregateTable):
            return NotImplemented
        return bool(np.array_equal(self._counts, other._counts))

    def __repr__(self) -> str:
        return f"AggregateTable(total={self.total()}, frozen={self.frozen})"


@dataclass
class DropCounts:
    """Number of records each stage of the pipeline let through or dropped."""
    input_records: int = 0
    unresolved_timezone: int = 0
    invalid_parse: int = 0
    ambiguous_local_time: int = 0
    invalid_score: int = 0
    tied_category: int = 0

    @property
    def resolved(self) -> int:
        return self.input_records - self.unresolved_timezone

    @property
    def normalized(self) -> int:
        return self.resolved - self.invalid_parse - self.ambiguous_local_time

    @property
    def classified(self) -> int:
        return self.normalized - self.invalid_score - self.tied_category

    @property
    def total_dropped(self) -> int:
        return self.input_records - self.classified

    def merge(self, other: "DropCounts") -> "DropCounts":
        return DropCounts(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
        })

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for logging and display."""
        return {
            "input_records": self.input_records,
            "resolved": self.resolved,
            "normalized": self.normalized,
            "classified": self.classified,
            "unresolved_timezone": self.unresolved_timezone,
            "invalid_parse": self.invalid_parse,
            "ambiguous_local_time": self.ambiguous_local_time,
            "invalid_score": self.invalid_score,
            "tied_category": self.tied_category,
        }


class ReportResult(BaseModel):
    """Result of a signup report run."""
    table: AggregateTable
    drops: DropCounts
    peaks: Dict[Category, int] = Field(default_factory=dict)
    output_path: Optional[Path] = None
    success: bool = True
    error_message: Optional[str] = None
    processing_time_seconds: float = 0.0

    class Config:
        """Pydantic config."""
        arbitrary_types_allowed = True
