"""Signup dataset loading."""

import io
from pathlib import Path
from typing import List, Optional
import httpx
import pandas as pd
import structlog

from ..core.errors import LoadError
from ..models.config import SourceConfig
from ..models.signup import SignupRecord

logger = structlog.get_logger()


class SignupLoader:
    """Reads the signup CSV from a URL or a local path."""

    def __init__(self, config: SourceConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the loader."""
        self.config = config
        self._transport = transport

    async def load(self) -> List[SignupRecord]:
        """Load all signup records.

        Raises:
            LoadError: If the dataset cannot be retrieved or parsed, or lacks
                one of the required columns
        """
        if self.config.is_remote:
            text = await self._fetch(self.config.location)
            frame = self._read_csv(io.StringIO(text))
        else:
            path = Path(self.config.location)
            if not path.exists():
                raise LoadError(f"Dataset not found: {path}")
            frame = self._read_csv(path)

        records = self.records_from_frame(frame)
        logger.info(
            "Signup dataset loaded",
            source=self.config.location,
            records=len(records)
        )
        return records

    async def _fetch(self, url: str) -> str:
        logger.debug("Downloading signup dataset", url=url)
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport
            ) as client:
                response = await client.get(url, follow_redirects=True)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise LoadError(f"Failed to download {url}: {e}") from e
        return response.text

    def _read_csv(self, source) -> pd.DataFrame:
        try:
            return pd.read_csv(source)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise LoadError(f"Malformed dataset {self.config.location}: {e}") from e

    def records_from_frame(self, frame: pd.DataFrame) -> List[SignupRecord]:
        """Convert a raw data frame into signup records.

        Coordinates and scores that are missing or non-numeric become None.
        Such records are later dropped as unresolved or as having an
        invalid score.
        """
        cfg = self.config
        missing = [c for c in cfg.required_columns if c not in frame.columns]
        if missing:
            raise LoadError(
                f"Dataset is missing required columns: {missing}. Found: {list(frame.columns)}"
            )

        scores = {}
        for column in (cfg.data_column, cfg.visualization_column, cfg.society_column):
            values = pd.to_numeric(frame[column], errors="coerce")
            bad = int(values.isna().sum())
            if bad:
                logger.warning("Missing or non-numeric scores", column=column, rows=bad)
            scores[column] = values

        latitudes = pd.to_numeric(frame[cfg.latitude_column], errors="coerce")
        longitudes = pd.to_numeric(frame[cfg.longitude_column], errors="coerce")
        dates = frame[cfg.date_column].fillna("").astype(str)

        return [
            SignupRecord(
                date_hour_text=date_text,
                latitude=_optional_float(lat),
                longitude=_optional_float(lon),
                score_data=_optional_float(score_data),
                score_visualization=_optional_float(score_visualization),
                score_society=_optional_float(score_society),
            )
            for date_text, lat, lon, score_data, score_visualization, score_society in zip(
                dates,
                latitudes,
                longitudes,
                scores[cfg.data_column],
                scores[cfg.visualization_column],
                scores[cfg.society_column],
            )
        ]


def _optional_float(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)
