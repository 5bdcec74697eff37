"""
Signup Hours

Counts Data Visualization Society signups per local hour of the day, split by
each member's highest self-assigned score, and renders the result as a chart.
"""

from .core import SignupReportService, SignupPipeline
from .models import ReportConfig, Category, AggregateTable

__version__ = "0.1.0"
__all__ = ["SignupReportService", "SignupPipeline", "ReportConfig", "Category", "AggregateTable"]
