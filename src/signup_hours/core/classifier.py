"""Category classification by strict maximum score."""

from typing import Optional

from ..models.signup import Category, CATEGORIES, SignupRecord
from .errors import InvalidScore


def classify_scores(
    score_data: float,
    score_visualization: float,
    score_society: float
) -> Optional[Category]:
    """Return the category with the strictly highest score.

    Ties at the maximum (two- or three-way) return None. Only the relative
    ordering matters, so zero and negative scores are handled like any
    other value.
    """
    scores = dict(zip(CATEGORIES, (score_data, score_visualization, score_society)))
    highest = max(scores.values())
    winners = [category for category, score in scores.items() if score == highest]
    if len(winners) == 1:
        return winners[0]
    return None


def classify_record(record: SignupRecord) -> Optional[Category]:
    """Classify a signup record by its three scores.

    Raises:
        InvalidScore: If any of the scores is missing
    """
    scores = [record.score_for(category) for category in CATEGORIES]
    missing = [c.value for c, score in zip(CATEGORIES, scores) if score is None]
    if missing:
        raise InvalidScore(f"Missing score for {', '.join(missing)}")
    return classify_scores(*scores)
