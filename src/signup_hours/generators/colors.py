"""Colors for the signup chart."""

from typing import Dict, Tuple

from ..models.signup import Category

BACKGROUND = "#1d1919"
TEXT = "#c5c5c5"

CATEGORY_COLORS: Dict[Category, str] = {
    Category.DATA: "#00b9a7",
    Category.VISUALIZATION: "#dfb429",
    Category.SOCIETY: "#bb6bab",
}


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color string to RGB tuple."""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def category_rgb(category: Category) -> Tuple[int, int, int]:
    return hex_to_rgb(CATEGORY_COLORS[category])
