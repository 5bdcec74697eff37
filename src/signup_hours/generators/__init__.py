"""Chart generation modules."""

from .base import BaseChartGenerator
from .bar_chart import HourlyBarChartGenerator
from .colors import CATEGORY_COLORS, BACKGROUND, TEXT

__all__ = [
    "BaseChartGenerator",
    "HourlyBarChartGenerator",
    "CATEGORY_COLORS",
    "BACKGROUND",
    "TEXT",
]
