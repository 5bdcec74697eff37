"""Signup record models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Category(str, Enum):
    """Self-assigned score categories."""
    DATA = "data"
    VISUALIZATION = "visualization"
    SOCIETY = "society"


# Column order used by tables and charts
CATEGORIES = (Category.DATA, Category.VISUALIZATION, Category.SOCIETY)


class SignupRecord(BaseModel):
    """A single signup row as loaded from the dataset."""
    date_hour_text: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    score_data: Optional[float] = None
    score_visualization: Optional[float] = None
    score_society: Optional[float] = None

    class Config:
        """Pydantic config."""
        frozen = True  # Make immutable

    def score_for(self, category: Category) -> Optional[float]:
        """Get the score for a category, None when the cell was blank or non-numeric."""
        score_map = {
            Category.DATA: self.score_data,
            Category.VISUALIZATION: self.score_visualization,
            Category.SOCIETY: self.score_society,
        }
        return score_map[category]


class ResolvedRecord(BaseModel):
    """Signup record with its resolved IANA timezone."""
    record: SignupRecord
    timezone_id: str

    class Config:
        """Pydantic config."""
        frozen = True


class NormalizedRecord(BaseModel):
    """Resolved record with the local hour-of-day of the signup."""
    resolved: ResolvedRecord
    local_hour: int = Field(ge=0, le=23, description="Local hour-of-day")

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def record(self) -> SignupRecord:
        return self.resolved.record


class ClassifiedRecord(BaseModel):
    """Normalized record whose scores have a unique maximum."""
    normalized: NormalizedRecord
    category: Category

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def local_hour(self) -> int:
        return self.normalized.local_hour
