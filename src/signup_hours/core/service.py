"""Signup report service."""

import asyncio
import time
from pathlib import Path
from typing import List, Optional
import structlog

from ..data import CoordinateTimezoneResolver, SignupLoader
from ..generators import HourlyBarChartGenerator
from ..models.config import ReportConfig
from ..models.report import ReportResult
from ..models.signup import SignupRecord
from .pipeline import SignupPipeline

logger = structlog.get_logger()


class SignupReportService:
    """Loads the signup dataset, aggregates it per local hour and renders the chart."""

    def __init__(
        self,
        config: ReportConfig,
        resolver=None,
        loader: Optional[SignupLoader] = None,
        generator: Optional[HourlyBarChartGenerator] = None
    ):
        """Initialize the service."""
        self.config = config
        self.loader = loader or SignupLoader(config.source)
        self.resolver = resolver or CoordinateTimezoneResolver(config.resolver)
        self.pipeline = SignupPipeline(
            self.resolver,
            normalizer_config=config.normalizer,
            processing_config=config.processing
        )
        self.generator = generator or HourlyBarChartGenerator(config.output)

        logger.info(
            "Signup report service initialized",
            source=config.source.location,
            reference_timezone=config.normalizer.reference_timezone,
            output_path=str(config.output.output_path),
            max_workers=config.processing.max_workers
        )

    async def summarize(self, records: Optional[List[SignupRecord]] = None) -> ReportResult:
        """Build the aggregate table without rendering.

        Raises:
            LoadError: The dataset could not be loaded
            ParseErrorThresholdExceeded: Too many malformed timestamps
        """
        start_time = time.time()
        if records is None:
            records = await self.loader.load()

        loop = asyncio.get_running_loop()
        table, drops = await loop.run_in_executor(None, self.pipeline.run, records)

        return ReportResult(
            table=table,
            drops=drops,
            peaks=table.peak_hours(),
            processing_time_seconds=time.time() - start_time
        )

    async def generate_report(
        self,
        records: Optional[List[SignupRecord]] = None,
        output_path: Optional[Path] = None
    ) -> ReportResult:
        """Build the aggregate table and render it to a chart file.

        Dataset-level failures propagate; a failure to write the chart is
        reported on the returned result.
        """
        start_time = time.time()
        result = await self.summarize(records)
        path = output_path or self.config.output.output_path

        loop = asyncio.get_running_loop()
        try:
            saved = await loop.run_in_executor(None, self.generator.generate, result.table, path)
        except (OSError, ValueError) as e:
            logger.error("Failed to render chart", output_path=str(path), error=str(e))
            return result.model_copy(update={
                "success": False,
                "error_message": str(e),
                "processing_time_seconds": time.time() - start_time,
            })

        processing_time = time.time() - start_time
        logger.info(
            "Signup chart generated successfully",
            output_path=str(saved),
            total=result.table.total(),
            peaks={c.value: h for c, h in result.peaks.items()},
            processing_time=f"{processing_time:.2f}s"
        )
        return result.model_copy(update={
            "output_path": saved,
            "processing_time_seconds": processing_time,
        })
