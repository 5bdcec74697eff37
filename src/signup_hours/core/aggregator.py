"""Hourly aggregation of classified signups."""

from functools import reduce
from typing import Iterable

from ..models.report import AggregateTable
from ..models.signup import ClassifiedRecord


def aggregate(records: Iterable[ClassifiedRecord]) -> AggregateTable:
    """Count classified records per (local hour, category).

    The result does not depend on the order of ``records``.
    """
    table = AggregateTable()
    for record in records:
        table.increment(record.local_hour, record.category)
    return table


def merge_tables(tables: Iterable[AggregateTable]) -> AggregateTable:
    """Merge partial tables by element-wise sum."""
    return reduce(lambda left, right: left.merge(right), tables, AggregateTable())
