"""Base chart generator."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import structlog
from PIL import Image

from ..models.config import OutputConfig
from ..models.report import AggregateTable

logger = structlog.get_logger()


class BaseChartGenerator(ABC):
    """Base class for chart generators."""

    def __init__(self, output_config: OutputConfig):
        """Initialize the generator."""
        self.output_config = output_config

    @abstractmethod
    def render(self, table: AggregateTable) -> Image.Image:
        """Draw the chart for an aggregate table."""
        pass

    def generate(self, table: AggregateTable, output_path: Optional[Path] = None) -> Path:
        """Render the table and write the chart to disk."""
        path = output_path or self.output_config.output_path
        image = self.render(table)
        self._save_image(image, path)
        return path

    def _save_image(self, image: Image.Image, path: Path) -> None:
        """Save image to disk with proper compression."""
        path.parent.mkdir(parents=True, exist_ok=True)

        image_format = self._format_for(path)
        save_kwargs = {'format': image_format}

        if image_format == 'PNG':
            save_kwargs['optimize'] = True
            save_kwargs['compress_level'] = self.output_config.compression_level
        elif image_format == 'PDF':
            save_kwargs['resolution'] = 72.0 * self.output_config.scale_factor

        image.save(path, **save_kwargs)
        logger.debug("Image saved", path=str(path), size=image.size, format=image_format)

    def _format_for(self, path: Path) -> str:
        """Pick the image format from the file suffix, else the configured one."""
        suffix = path.suffix.lower().lstrip('.')
        known = {'png': 'PNG', 'pdf': 'PDF', 'jpg': 'JPEG', 'jpeg': 'JPEG'}
        return known.get(suffix, self.output_config.image_format.upper())
