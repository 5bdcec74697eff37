"""Data access layer for the signup report."""

from .loader import SignupLoader
from .resolver import CoordinateTimezoneResolver, TimezoneResolver, valid_coordinates

__all__ = ["SignupLoader", "CoordinateTimezoneResolver", "TimezoneResolver", "valid_coordinates"]
