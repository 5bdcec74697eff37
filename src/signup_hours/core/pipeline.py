"""Per-record pipeline: resolve, normalize, classify, aggregate."""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Sequence, Tuple
import structlog

from ..models.config import NormalizerConfig, ProcessingConfig
from ..models.report import AggregateTable, DropCounts
from ..models.signup import (
    ClassifiedRecord,
    NormalizedRecord,
    ResolvedRecord,
    SignupRecord,
)
from .aggregator import merge_tables
from .classifier import classify_record
from .errors import (
    AmbiguousLocalTime,
    InvalidScore,
    ParseError,
    ParseErrorThresholdExceeded,
    TimezoneUnresolved,
)
from .timezone_utils import get_zone, local_hour_of_day

logger = structlog.get_logger()


class SignupPipeline:
    """Turns signup records into an hourly aggregate table.

    Every stage is a pure function of one record, so records may be split
    into chunks and processed on a thread pool. Each chunk yields a partial
    table and drop counters, which are merged by summation.
    """

    def __init__(
        self,
        resolver,
        normalizer_config: Optional[NormalizerConfig] = None,
        processing_config: Optional[ProcessingConfig] = None
    ):
        """Initialize the pipeline."""
        self.resolver = resolver
        self.normalizer_config = normalizer_config or NormalizerConfig()
        self.processing_config = processing_config or ProcessingConfig()
        self.reference_tz = get_zone(self.normalizer_config.reference_timezone)

    def resolve(self, record: SignupRecord) -> ResolvedRecord:
        """Attach the timezone of the record's coordinates.

        Raises:
            TimezoneUnresolved: No zone for the coordinates, an unknown zone
                identifier, or a failing resolver
        """
        try:
            timezone_id = self.resolver.resolve(record.latitude, record.longitude)
        except Exception as e:
            raise TimezoneUnresolved(f"Resolver failed: {e}") from e

        if timezone_id is None:
            raise TimezoneUnresolved(
                f"No timezone for ({record.latitude}, {record.longitude})"
            )
        get_zone(timezone_id)
        return ResolvedRecord(record=record, timezone_id=timezone_id)

    def normalize(self, resolved: ResolvedRecord) -> NormalizedRecord:
        """Compute the local hour-of-day of a resolved record.

        Raises:
            ParseError: Malformed timestamp text
            AmbiguousLocalTime: No unique wall-clock representation
        """
        hour = local_hour_of_day(
            resolved.record.date_hour_text,
            resolved.timezone_id,
            self.reference_tz
        )
        return NormalizedRecord(resolved=resolved, local_hour=hour)

    @staticmethod
    def classify(normalized: NormalizedRecord) -> Optional[ClassifiedRecord]:
        """Classify a normalized record, or None on a tie for the top score.

        Raises:
            InvalidScore: A score cell was blank or non-numeric
        """
        category = classify_record(normalized.record)
        if category is None:
            return None
        return ClassifiedRecord(normalized=normalized, category=category)

    def process_chunk(self, records: Sequence[SignupRecord]) -> Tuple[AggregateTable, DropCounts]:
        """Run all stages over a chunk and count what each stage drops."""
        table = AggregateTable()
        drops = DropCounts(input_records=len(records))

        for record in records:
            try:
                resolved = self.resolve(record)
            except TimezoneUnresolved as e:
                drops.unresolved_timezone += 1
                logger.debug("Dropped record", stage="resolve", reason=str(e))
                continue

            try:
                normalized = self.normalize(resolved)
            except ParseError as e:
                drops.invalid_parse += 1
                logger.debug("Dropped record", stage="parse", reason=str(e))
                continue
            except AmbiguousLocalTime as e:
                drops.ambiguous_local_time += 1
                logger.debug("Dropped record", stage="normalize", reason=str(e))
                continue

            try:
                classified = self.classify(normalized)
            except InvalidScore as e:
                drops.invalid_score += 1
                logger.debug("Dropped record", stage="classify", reason=str(e))
                continue

            if classified is None:
                drops.tied_category += 1
                continue

            table.increment(classified.local_hour, classified.category)

        return table, drops

    def _chunks(self, records: Sequence[SignupRecord]) -> Iterator[Sequence[SignupRecord]]:
        size = self.processing_config.chunk_size
        for start in range(0, len(records), size):
            yield records[start:start + size]

    def run(self, records: Sequence[SignupRecord]) -> Tuple[AggregateTable, DropCounts]:
        """Process all records into a frozen table plus drop counts.

        Raises:
            ParseErrorThresholdExceeded: If the share of malformed timestamps
                exceeds ``max_parse_error_ratio``
        """
        records = list(records)
        chunks = list(self._chunks(records))
        workers = min(self.processing_config.max_workers, max(len(chunks), 1))

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                partials: List[Tuple[AggregateTable, DropCounts]] = list(
                    executor.map(self.process_chunk, chunks)
                )
        else:
            partials = [self.process_chunk(chunk) for chunk in chunks]

        table = merge_tables(t for t, _ in partials)
        drops = DropCounts()
        for _, partial in partials:
            drops = drops.merge(partial)

        logger.info(
            "Signup records processed",
            workers=workers,
            chunks=len(chunks),
            **drops.to_dict()
        )

        self._check_parse_errors(drops)
        return table.freeze(), drops

    def _check_parse_errors(self, drops: DropCounts) -> None:
        max_ratio = self.normalizer_config.max_parse_error_ratio
        if drops.input_records and drops.invalid_parse / drops.input_records > max_ratio:
            logger.error(
                "Too many malformed timestamps",
                invalid_parse=drops.invalid_parse,
                input_records=drops.input_records,
                max_ratio=max_ratio
            )
            raise ParseErrorThresholdExceeded(drops.invalid_parse, drops.input_records, max_ratio)
