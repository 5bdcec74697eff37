"""Configuration models for the signup report."""

import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field

DEFAULT_SOURCE = (
    "https://raw.githubusercontent.com/emeeks/datavizsociety/master/"
    "challenge_data/dvs_challenge_1_membership_time_space.csv"
)


def _load_env_file():
    """Load environment variables from .env file in common locations."""
    env_paths = [
        Path.cwd() / ".env",  # Current directory
        Path(__file__).parent.parent.parent.parent / "config" / ".env",  # repo config/.env
    ]

    for env_path in env_paths:
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
            break


class SourceConfig(BaseModel):
    """Dataset location and column mapping."""
    location: str = Field(default=DEFAULT_SOURCE, description="URL or local path of the CSV")
    timeout_seconds: float = Field(default=30.0, description="Download timeout in seconds")
    date_column: str = "date_with_hour"
    latitude_column: str = "lat"
    longitude_column: str = "long"
    data_column: str = "data"
    visualization_column: str = "visualization"
    society_column: str = "society"

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://"))

    @property
    def required_columns(self) -> list:
        return [
            self.date_column,
            self.latitude_column,
            self.longitude_column,
            self.data_column,
            self.visualization_column,
            self.society_column,
        ]

    @classmethod
    def from_env(cls) -> "SourceConfig":
        """Create from environment variables."""
        _load_env_file()
        location = os.getenv("SIGNUP_SOURCE")
        return cls(location=location) if location else cls()


class NormalizerConfig(BaseModel):
    """Time normalization configuration."""
    reference_timezone: str = Field(
        default="America/New_York",
        description="Timezone the raw timestamps are recorded in"
    )
    max_parse_error_ratio: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Share of malformed timestamps above which the run fails"
    )


class ResolverConfig(BaseModel):
    """Timezone resolver configuration."""
    cache_size: int = Field(default=4096, description="Memoised coordinate lookups")


class ProcessingConfig(BaseModel):
    """Processing configuration."""
    max_workers: int = Field(default=1, ge=1, description="Worker threads for per-record stages")
    chunk_size: int = Field(default=500, ge=1, description="Records per worker task")


class OutputConfig(BaseModel):
    """Output configuration."""
    base_dir: Path = Field(default_factory=lambda: Path("output"))
    filename: str = "signupByHour.png"
    width: int = Field(default=1200, description="Chart width in pixels before scaling")
    height: int = Field(default=500, description="Chart height in pixels before scaling")
    scale_factor: int = Field(default=2, description="Image scaling factor")
    image_format: str = "PNG"
    compression_level: int = Field(default=6, description="PNG compression level (0-9)")

    @property
    def output_path(self) -> Path:
        return self.base_dir / self.filename


class ReportConfig(BaseModel):
    """Complete report configuration."""
    source: SourceConfig = Field(default_factory=SourceConfig.from_env)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def create_default(cls) -> "ReportConfig":
        """Create default configuration, honouring .env overrides."""
        _load_env_file()
        return cls(log_level=os.getenv("SIGNUP_LOG_LEVEL", "INFO"))
