"""Shared fixtures for the signup report tests."""

from typing import Dict, Optional, Tuple

import pytest

from signup_hours.models.config import (
    NormalizerConfig,
    OutputConfig,
    ProcessingConfig,
    ReportConfig,
    SourceConfig,
)
from signup_hours.models.signup import SignupRecord


# Coordinates used throughout the tests and the zone each one resolves to
NEW_YORK = (40.71, -74.01)
LOS_ANGELES = (34.05, -118.24)
GAMBIER = (-23.12, -134.97)  # UTC-9 all year, five hours behind EDT
KOLKATA = (22.57, 88.36)  # UTC+5:30
BERLIN = (52.52, 13.40)
TOKYO = (35.68, 139.69)
OCEAN = (0.0, -30.0)

ZONES: Dict[Tuple[float, float], str] = {
    NEW_YORK: "America/New_York",
    LOS_ANGELES: "America/Los_Angeles",
    GAMBIER: "Pacific/Gambier",
    KOLKATA: "Asia/Kolkata",
    BERLIN: "Europe/Berlin",
    TOKYO: "Asia/Tokyo",
}


class DictResolver:
    """Resolver backed by a fixed coordinate -> zone mapping."""

    def __init__(self, zones: Optional[Dict[Tuple[float, float], str]] = None):
        self.zones = dict(ZONES if zones is None else zones)
        self.calls = 0

    def resolve(self, latitude, longitude):
        self.calls += 1
        if latitude is None or longitude is None:
            return None
        return self.zones.get((round(latitude, 2), round(longitude, 2)))


class FailingResolver:
    """Resolver that fails for every lookup."""

    def resolve(self, latitude, longitude):
        raise TimeoutError("lookup timed out")


def make_record(
    date_hour_text: str = "3/15/2019 14:00",
    coords: Optional[Tuple[float, float]] = NEW_YORK,
    scores: Tuple[Optional[float], Optional[float], Optional[float]] = (5, 2, 1),
) -> SignupRecord:
    latitude, longitude = coords if coords else (None, None)
    return SignupRecord(
        date_hour_text=date_hour_text,
        latitude=latitude,
        longitude=longitude,
        score_data=scores[0],
        score_visualization=scores[1],
        score_society=scores[2],
    )


@pytest.fixture
def resolver():
    return DictResolver()


@pytest.fixture
def normalizer_config():
    return NormalizerConfig(max_parse_error_ratio=1.0)


@pytest.fixture
def synthetic_records():
    """Ten records covering every way a record can be dropped or counted."""
    return [
        # counted
        make_record("3/15/2019 14:00", GAMBIER, (2, 5, 1)),      # 09 visualization
        make_record("3/15/2019 14:00", NEW_YORK, (9, 1, 1)),     # 14 data
        make_record("3/15/2019 14:30", NEW_YORK, (1, 1, 4)),     # 14 society
        make_record("1/24/2019 22:00", KOLKATA, (1, 8, 3)),      # 08 visualization
        make_record("1/24/2019 23:00", TOKYO, (0, -1, -2)),      # 13 data
        # tied
        make_record("3/15/2019 14:00", LOS_ANGELES, (3, 3, 1)),
        make_record("3/15/2019 14:00", BERLIN, (4, 4, 4)),
        # unresolved
        make_record("3/15/2019 14:00", OCEAN, (5, 1, 1)),
        make_record("3/15/2019 14:00", None, (5, 1, 1)),
        # malformed timestamp
        make_record("2019-03-15 14:00", NEW_YORK, (5, 1, 1)),
    ]


SAMPLE_CSV = """date_with_hour,lat,long,data,visualization,society
3/15/2019 14:00,-23.12,-134.97,2,5,1
3/15/2019 14:00,40.71,-74.01,9,1,1
1/24/2019 22:00,22.57,88.36,1,8,3
3/15/2019 14:00,34.05,-118.24,3,3,1
3/15/2019 14:00,,,5,1,1
"""


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "signups.csv"
    path.write_text(SAMPLE_CSV)
    return path


@pytest.fixture
def report_config(tmp_path, sample_csv):
    return ReportConfig(
        source=SourceConfig(location=str(sample_csv)),
        normalizer=NormalizerConfig(max_parse_error_ratio=0.5),
        processing=ProcessingConfig(max_workers=1),
        output=OutputConfig(base_dir=tmp_path / "out", scale_factor=1),
    )
