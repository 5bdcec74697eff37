import pytest

from signup_hours.core.errors import (
    AmbiguousLocalTime,
    ParseError,
    ParseErrorThresholdExceeded,
    TimezoneUnresolved,
)
from signup_hours.core.pipeline import SignupPipeline
from signup_hours.models.config import NormalizerConfig, ProcessingConfig
from signup_hours.models.signup import Category

from conftest import (
    BERLIN,
    DictResolver,
    FailingResolver,
    GAMBIER,
    KOLKATA,
    NEW_YORK,
    OCEAN,
    make_record,
)


@pytest.fixture
def pipeline(resolver, normalizer_config):
    return SignupPipeline(resolver, normalizer_config=normalizer_config)


# --- Stages ---

def test_resolve_attaches_zone(pipeline):
    resolved = pipeline.resolve(make_record(coords=GAMBIER))
    assert resolved.timezone_id == "Pacific/Gambier"


def test_resolve_without_zone(pipeline):
    with pytest.raises(TimezoneUnresolved):
        pipeline.resolve(make_record(coords=OCEAN))


def test_resolve_unknown_zone_identifier(normalizer_config):
    pipeline = SignupPipeline(DictResolver({NEW_YORK: "Nowhere/Special"}), normalizer_config)
    with pytest.raises(TimezoneUnresolved):
        pipeline.resolve(make_record(coords=NEW_YORK))


def test_resolver_failure_is_unresolved(normalizer_config):
    pipeline = SignupPipeline(FailingResolver(), normalizer_config)
    with pytest.raises(TimezoneUnresolved):
        pipeline.resolve(make_record())


def test_normalize_scenario(pipeline):
    normalized = pipeline.normalize(pipeline.resolve(make_record("3/15/2019 14:00", GAMBIER)))
    assert normalized.local_hour == 9


def test_normalize_errors(pipeline):
    with pytest.raises(ParseError):
        pipeline.normalize(pipeline.resolve(make_record("15.03.2019 14:00")))
    with pytest.raises(AmbiguousLocalTime):
        pipeline.normalize(pipeline.resolve(make_record("11/3/2019 1:30", NEW_YORK)))


def test_classify_tie_returns_none(pipeline):
    normalized = pipeline.normalize(pipeline.resolve(make_record(scores=(3, 3, 1))))
    assert pipeline.classify(normalized) is None


# --- Whole run ---

def test_run_counts_every_stage(pipeline, synthetic_records):
    table, drops = pipeline.run(synthetic_records)

    assert drops.input_records == 10
    assert drops.unresolved_timezone == 2
    assert drops.invalid_parse == 1
    assert drops.ambiguous_local_time == 0
    assert drops.tied_category == 2
    assert drops.classified == 5

    assert table.count(9, Category.VISUALIZATION) == 1
    assert table.count(14, Category.DATA) == 1
    assert table.count(14, Category.SOCIETY) == 1
    assert table.count(8, Category.VISUALIZATION) == 1
    assert table.count(13, Category.DATA) == 1
    assert table.frozen


def test_dropout_is_monotonic(pipeline, synthetic_records):
    table, drops = pipeline.run(synthetic_records)
    assert table.total() <= drops.classified <= drops.normalized <= drops.resolved <= drops.input_records


def test_table_total_matches_classified_records(pipeline, synthetic_records):
    table, drops = pipeline.run(synthetic_records)
    assert table.total() == drops.classified
    assert (table.as_array() >= 0).all()


def test_unresolved_records_only_count_as_unresolved(pipeline):
    # Malformed timestamp and tied scores are never looked at
    record = make_record("not a date", OCEAN, (1, 1, 1))
    table, drops = pipeline.run([record])
    assert drops.unresolved_timezone == 1
    assert drops.invalid_parse == drops.ambiguous_local_time == drops.invalid_score == drops.tied_category == 0
    assert table.total() == 0


def test_three_way_tie_increments_nothing(pipeline):
    table, drops = pipeline.run([make_record(scores=(2, 2, 2)) for _ in range(5)])
    assert table.total() == 0
    assert drops.tied_category == 5


def test_ambiguous_local_time_is_dropped(pipeline):
    records = [
        make_record("3/10/2019 2:30", NEW_YORK),   # reference gap
        make_record("11/3/2019 1:30", NEW_YORK),   # reference overlap
        make_record("3/15/2019 14:00", KOLKATA),
    ]
    table, drops = pipeline.run(records)
    assert drops.ambiguous_local_time == 2
    assert table.total() == 1


def test_repeated_target_hour_is_counted(pipeline):
    # 20:30 EDT is 02:30 CEST, the first of two 02:30s in Berlin that night
    table, drops = pipeline.run([make_record("10/26/2019 20:30", BERLIN, (9, 1, 1))])
    assert drops.ambiguous_local_time == 0
    assert table.count(2, Category.DATA) == 1


def test_invalid_score_drops_only_that_record(pipeline):
    records = [
        make_record(scores=(9, 1, 1)),
        make_record(scores=(None, 1, 1)),
        make_record(scores=(1, 1, None)),
    ]
    table, drops = pipeline.run(records)

    assert drops.invalid_score == 2
    assert drops.tied_category == 0
    assert drops.classified == table.total() == 1
    assert table.count(14, Category.DATA) == 1


def test_parse_error_threshold(resolver):
    records = [make_record("bad")] + [make_record() for _ in range(3)]

    lenient = SignupPipeline(resolver, NormalizerConfig(max_parse_error_ratio=0.25))
    _, drops = lenient.run(records)
    assert drops.invalid_parse == 1

    strict = SignupPipeline(resolver, NormalizerConfig(max_parse_error_ratio=0.2))
    with pytest.raises(ParseErrorThresholdExceeded) as exc_info:
        strict.run(records)
    assert exc_info.value.invalid == 1
    assert exc_info.value.total == 4


def test_empty_input(pipeline):
    table, drops = pipeline.run([])
    assert table.total() == 0
    assert drops.input_records == 0


def test_worker_pool_matches_sequential_run(resolver, normalizer_config, synthetic_records):
    records = synthetic_records * 40
    sequential = SignupPipeline(resolver, normalizer_config)
    parallel = SignupPipeline(
        resolver,
        normalizer_config,
        ProcessingConfig(max_workers=4, chunk_size=7),
    )

    seq_table, seq_drops = sequential.run(records)
    par_table, par_drops = parallel.run(records)

    assert seq_table == par_table
    assert seq_drops == par_drops
    assert par_table.total() == 5 * 40
