"""Grouped bar chart of signups per local hour."""

import math
from typing import List, Tuple
from PIL import Image, ImageDraw, ImageFont
import structlog

from ..models.report import AggregateTable, HOURS_IN_DAY
from ..models.signup import Category, CATEGORIES
from .base import BaseChartGenerator
from .colors import BACKGROUND, TEXT, category_rgb, hex_to_rgb

logger = structlog.get_logger()

# Plot margins in unscaled pixels (left, top, right, bottom)
MARGINS = (70, 90, 20, 60)
GROUP_FILL = 0.8  # share of an hour slot covered by its three bars
# Height of each category's peak marker above its bar, unscaled pixels
PEAK_MARKER_OFFSETS = {
    Category.DATA: 45,
    Category.VISUALIZATION: 25,
    Category.SOCIETY: 65,
}
NICE_STEPS = (1, 2, 5, 10, 20, 25, 50, 100, 200, 250, 500, 1000)


def nice_tick_step(max_value: int, target_ticks: int = 8) -> int:
    """Pick a round y-axis step giving at most ``target_ticks`` ticks."""
    for step in NICE_STEPS:
        if max_value / step <= target_ticks:
            return step
    magnitude = 10 ** int(math.log10(max_value))
    return magnitude * math.ceil(max_value / magnitude / target_ticks)


def hour_label(hour: int) -> str:
    """Axis label for an hour, e.g. 7 -> '07:00'."""
    return f"{hour:02d}:00"


class HourlyBarChartGenerator(BaseChartGenerator):
    """Bar chart with one group per hour and one bar per category.

    The peak hour of every category is marked with a line and a label
    reading "Peak signup time for the <category> group".
    """

    def render(self, table: AggregateTable) -> Image.Image:
        scale = self.output_config.scale_factor
        width = self.output_config.width * scale
        height = self.output_config.height * scale

        image = Image.new('RGB', (width, height), color=hex_to_rgb(BACKGROUND))
        draw = ImageDraw.Draw(image)
        font = self._font(11 * scale)
        small_font = self._font(9 * scale)
        text_color = hex_to_rgb(TEXT)

        left, top, right, bottom = (m * scale for m in MARGINS)
        plot_left, plot_top = left, top
        plot_right, plot_bottom = width - right, height - bottom
        plot_height = plot_bottom - plot_top

        max_count = max(table.max_count(), 1)
        step = nice_tick_step(max_count)
        y_max = math.ceil(max_count / step) * step

        def y_for(value: float) -> float:
            return plot_bottom - value / y_max * plot_height

        # Y axis ticks and labels
        for tick in range(0, y_max + 1, step):
            y = y_for(tick)
            draw.line([(plot_left - 4 * scale, y), (plot_left, y)], fill=text_color, width=max(scale // 2, 1))
            draw.text((plot_left - 6 * scale, y), str(tick), fill=text_color, font=small_font, anchor="rm")

        # Bars
        slot = (plot_right - plot_left) / HOURS_IN_DAY
        bar_width = slot * GROUP_FILL / len(CATEGORIES)
        bar_tops = {}
        for hour in range(HOURS_IN_DAY):
            group_left = plot_left + hour * slot + slot * (1 - GROUP_FILL) / 2
            for index, category in enumerate(CATEGORIES):
                x0 = group_left + index * bar_width
                x1 = x0 + bar_width
                count = table.count(hour, category)
                y0 = y_for(count)
                bar_tops[(hour, category)] = ((x0 + x1) / 2, y0)
                if count > 0:
                    draw.rectangle([x0, y0, max(x1 - scale, x0), plot_bottom], fill=category_rgb(category))

            draw.text(
                (plot_left + (hour + 0.5) * slot, plot_bottom + 6 * scale),
                hour_label(hour), fill=text_color, font=small_font, anchor="mt"
            )

        # Peak markers
        for category, peak in table.peak_hours().items():
            if table.count(peak, category) == 0:
                continue
            x, y = bar_tops[(peak, category)]
            y_label = y - PEAK_MARKER_OFFSETS[category] * scale
            draw.line([(x, y), (x, y_label)], fill=text_color, width=max(scale // 2, 1))
            self._draw_runs(
                draw, (x, y_label - 2 * scale),
                [
                    ("Peak signup time for the ", text_color),
                    (category.value, category_rgb(category)),
                    (" group", text_color),
                ],
                font,
                max_x=plot_right
            )

        # Titles
        draw.text(
            ((plot_left + plot_right) / 2, height - 12 * scale),
            "Hour of the day at signup (local time)",
            fill=text_color, font=font, anchor="mb"
        )
        draw.text((8 * scale, 12 * scale), "Number of signups", fill=text_color, font=font, anchor="lt")

        self._draw_legend(draw, (plot_left + 10 * scale, plot_top + plot_height / 2), font, scale)

        logger.debug(
            "Bar chart rendered",
            size=image.size,
            total=table.total(),
            peaks={c.value: h for c, h in table.peak_hours().items()}
        )
        return image

    def _draw_runs(
        self,
        draw: ImageDraw.ImageDraw,
        origin: Tuple[float, float],
        runs: List[Tuple[str, Tuple[int, int, int]]],
        font,
        max_x: float
    ) -> None:
        """Draw differently coloured text pieces on one baseline.

        Text that would run past ``max_x`` ends at the origin instead.
        """
        x, y = origin
        total = sum(draw.textlength(text, font=font) for text, _ in runs)
        if x + total > max_x:
            x -= total
        for text, color in runs:
            draw.text((x, y), text, fill=color, font=font, anchor="ls")
            x += draw.textlength(text, font=font)

    def _draw_legend(self, draw: ImageDraw.ImageDraw, origin: Tuple[float, float], font, scale: int) -> None:
        x, y = origin
        box = 8 * scale
        line_height = 16 * scale
        y -= line_height * len(CATEGORIES) / 2
        for category in CATEGORIES:
            draw.rectangle([x, y, x + box, y + box], fill=category_rgb(category))
            draw.text((x + box + 6 * scale, y + box / 2), category.value, fill=hex_to_rgb(TEXT), font=font, anchor="lm")
            y += line_height

    @staticmethod
    def _font(size: int):
        return ImageFont.load_default(size=size)
