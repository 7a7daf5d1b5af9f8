"""Tests for the snowflake ID generator."""

from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest

from idforge.core.config import DEFAULT_EPOCH_MS
from idforge.core.error_codes import IdGenerationErrorCode, ValidationErrorCode
from idforge.core.exceptions import (
    ClockRegressionError,
    IdGenerationException,
    InvalidConfigurationError,
)
from idforge.utils.snowflake_generator import (
    TIMESTAMP_MASK,
    IdGenerator,
    current_millis,
    decode_snowflake_id,
)


class FakeClock:
    """Millisecond clock frozen at ``now`` until a test moves it."""

    def __init__(self, now: int) -> None:
        self.now = now
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now


class ScriptedClock:
    """Returns the scripted readings in order, then repeats the last one."""

    def __init__(self, readings: List[int]) -> None:
        self.readings = list(readings)
        self.reads = 0

    def __call__(self) -> int:
        index = min(self.reads, len(self.readings) - 1)
        self.reads += 1
        return self.readings[index]


def test_frozen_clock_yields_consecutive_sequences():
    clock = FakeClock(DEFAULT_EPOCH_MS + 1000)
    generator = IdGenerator(worker_id=1, data_center_id=1, clock=clock)

    ids = [generator.next_id() for _ in range(3)]

    assert [generator.decode_timestamp(i) for i in ids] == [DEFAULT_EPOCH_MS + 1000] * 3
    assert [generator.decode_sequence(i) for i in ids] == [0, 1, 2]
    assert ids[0] == (1000 << 22) | (1 << 17) | (1 << 12)


def test_decode_round_trip_against_wall_clock():
    generator = IdGenerator(worker_id=7, data_center_id=19)

    before = current_millis()
    snowflake_id = generator.next_id()
    after = current_millis()

    assert generator.decode_worker_id(snowflake_id) == 7
    assert generator.decode_data_center_id(snowflake_id) == 19
    assert before - 1 <= generator.decode_timestamp(snowflake_id) <= after + 1


def test_decode_returns_all_components():
    clock = FakeClock(DEFAULT_EPOCH_MS + 42)
    generator = IdGenerator(worker_id=31, data_center_id=30, clock=clock)
    generator.next_id()
    snowflake_id = generator.next_id()

    components = generator.decode(snowflake_id)

    assert components.timestamp_ms == DEFAULT_EPOCH_MS + 42
    assert components.worker_id == 31
    assert components.data_center_id == 30
    assert components.sequence == 1
    assert decode_snowflake_id(snowflake_id) == components


def test_custom_epoch_is_applied_to_encoding_and_decoding():
    epoch = 1_700_000_000_000
    generator = IdGenerator(epoch_ms=epoch, clock=FakeClock(epoch + 5))

    snowflake_id = generator.next_id()

    assert snowflake_id >> 22 == 5
    assert generator.decode_timestamp(snowflake_id) == epoch + 5


def test_sequential_ids_are_unique_and_increasing():
    generator = IdGenerator(worker_id=3, data_center_id=4)

    ids = [generator.next_id() for _ in range(20000)]

    assert len(set(ids)) == len(ids)
    assert all(a < b for a, b in zip(ids, ids[1:]))
    assert all(0 < i < 2**63 for i in ids)


def test_next_id_str_is_decimal():
    generator = IdGenerator(clock=FakeClock(DEFAULT_EPOCH_MS + 1))
    assert generator.next_id_str() == str(1 << 22)


@pytest.mark.parametrize("field", ["worker_id", "data_center_id"])
@pytest.mark.parametrize("value", [-1, 32])
def test_out_of_range_ids_are_rejected(field, value):
    with pytest.raises(InvalidConfigurationError) as excinfo:
        IdGenerator(**{field: value})

    assert excinfo.value.error_code == ValidationErrorCode.VALUE_OUT_OF_RANGE
    assert excinfo.value.details["field"] == field
    assert excinfo.value.http_status == 400


def test_boundary_ids_are_accepted():
    generator = IdGenerator(worker_id=31, data_center_id=31, random_sequence_limit=4095)
    assert generator.worker_id == 31
    assert generator.data_center_id == 31


@pytest.mark.parametrize("limit", [-1, 4096])
def test_random_sequence_limit_range(limit):
    with pytest.raises(InvalidConfigurationError):
        IdGenerator(random_sequence_limit=limit)


def test_negative_tolerance_is_rejected():
    with pytest.raises(InvalidConfigurationError) as excinfo:
        IdGenerator(time_offset_tolerance_ms=-1)
    assert excinfo.value.field == "time_offset_tolerance_ms"


def test_non_integer_ids_are_rejected():
    with pytest.raises(InvalidConfigurationError):
        IdGenerator(worker_id=True)
    with pytest.raises(InvalidConfigurationError):
        IdGenerator(data_center_id="1")


def test_exhausted_bucket_waits_for_next_millisecond():
    base = DEFAULT_EPOCH_MS + 10_000
    # 4096 issuing reads, the 4097th call's entry read, two stale polls, then a tick
    clock = ScriptedClock([base] * 4097 + [base, base, base + 1])
    generator = IdGenerator(clock=clock)

    ids = [generator.next_id() for _ in range(4096)]
    assert generator.decode_sequence(ids[-1]) == 4095
    assert clock.reads == 4096

    rolled = generator.next_id()

    assert clock.reads == 4100
    assert generator.decode_timestamp(rolled) == base + 1
    assert generator.decode_sequence(rolled) == 0
    assert rolled > ids[-1]


def test_clock_regression_while_waiting_raises():
    base = DEFAULT_EPOCH_MS + 10_000
    clock = ScriptedClock([base] * 4097 + [base - 5])
    generator = IdGenerator(clock=clock)
    for _ in range(4096):
        generator.next_id()

    with pytest.raises(ClockRegressionError) as excinfo:
        generator.next_id()

    assert excinfo.value.backward_ms == 5


def test_small_backward_jump_reuses_last_timestamp():
    clock = FakeClock(DEFAULT_EPOCH_MS + 50_000)
    generator = IdGenerator(clock=clock, time_offset_tolerance_ms=2000)
    first = generator.next_id()

    clock.now -= 1000
    second = generator.next_id()

    assert generator.decode_timestamp(second) == DEFAULT_EPOCH_MS + 50_000
    assert generator.decode_sequence(second) == 1
    assert second > first


def test_backward_jump_at_tolerance_is_absorbed():
    clock = FakeClock(DEFAULT_EPOCH_MS + 50_000)
    generator = IdGenerator(clock=clock, time_offset_tolerance_ms=2000)
    generator.next_id()

    clock.now -= 2000
    assert generator.decode_timestamp(generator.next_id()) == DEFAULT_EPOCH_MS + 50_000


def test_large_backward_jump_raises_and_generator_recovers():
    start = DEFAULT_EPOCH_MS + 50_000
    clock = FakeClock(start)
    generator = IdGenerator(clock=clock, time_offset_tolerance_ms=2000)
    first = generator.next_id()

    clock.now = start - 3000
    with pytest.raises(ClockRegressionError) as excinfo:
        generator.next_id()

    assert excinfo.value.backward_ms == 3000
    assert excinfo.value.details["backward_ms"] == 3000
    assert excinfo.value.error_code == IdGenerationErrorCode.CLOCK_MOVED_BACKWARDS
    assert excinfo.value.http_status == 503
    assert generator.last_timestamp_ms == start

    clock.now = start + 1
    recovered = generator.next_id()
    assert recovered > first
    assert generator.decode_sequence(recovered) == 0


def test_random_sequence_start_for_new_millisecond():
    bounds = []

    def fake_random_int(bound: int) -> int:
        bounds.append(bound)
        return bound - 1

    clock = FakeClock(DEFAULT_EPOCH_MS + 1)
    generator = IdGenerator(
        clock=clock, random_sequence_limit=100, random_int=fake_random_int
    )

    first = generator.next_id()
    second = generator.next_id()
    clock.now += 1
    third = generator.next_id()

    assert generator.decode_sequence(first) == 99
    assert generator.decode_sequence(second) == 100
    assert generator.decode_sequence(third) == 99
    assert bounds == [100, 100]


def test_random_sequence_limit_of_one_never_draws():
    def fail_random_int(bound: int) -> int:  # pragma: no cover - guard
        raise AssertionError("random source must not be used")

    generator = IdGenerator(
        clock=FakeClock(DEFAULT_EPOCH_MS + 1),
        random_sequence_limit=1,
        random_int=fail_random_int,
    )
    assert generator.decode_sequence(generator.next_id()) == 0


def test_concurrent_callers_never_share_ids():
    generator = IdGenerator(worker_id=5, data_center_id=6)

    def issue(_: int) -> List[int]:
        return [generator.next_id() for _ in range(1000)]

    with ThreadPoolExecutor(max_workers=100) as pool:
        batches = list(pool.map(issue, range(100)))

    ids = [i for batch in batches for i in batch]
    assert len(ids) == 100_000
    assert len(set(ids)) == 100_000

    decoded = {(generator.decode_timestamp(i), generator.decode_sequence(i)) for i in ids}
    assert len(decoded) == 100_000

    for batch in batches:
        assert all(a < b for a, b in zip(batch, batch[1:]))


def test_clock_before_epoch_fails_without_committing_state():
    clock = FakeClock(DEFAULT_EPOCH_MS + 100)
    generator = IdGenerator(epoch_ms=DEFAULT_EPOCH_MS + 10_000, clock=clock)

    with pytest.raises(IdGenerationException) as excinfo:
        generator.next_id()

    assert excinfo.value.error_code == IdGenerationErrorCode.GENERATION_FAILED
    assert excinfo.value.http_status == 500
    assert excinfo.value.details == {
        "timestamp_ms": DEFAULT_EPOCH_MS + 100,
        "epoch_ms": DEFAULT_EPOCH_MS + 10_000,
    }
    assert generator.last_timestamp_ms == -1

    clock.now = DEFAULT_EPOCH_MS + 10_000
    assert generator.next_id() == 0


def test_timestamp_beyond_41_bits_fails():
    clock = FakeClock(DEFAULT_EPOCH_MS + TIMESTAMP_MASK)
    generator = IdGenerator(worker_id=31, data_center_id=31, clock=clock)

    last_valid = generator.next_id()
    assert 0 < last_valid < 2**63
    assert generator.decode_timestamp(last_valid) == DEFAULT_EPOCH_MS + TIMESTAMP_MASK

    clock.now += 1
    with pytest.raises(IdGenerationException):
        generator.next_id()


def test_exhausting_bucket_pinned_by_tolerated_jump_raises():
    base = DEFAULT_EPOCH_MS + 50_000
    clock = FakeClock(base)
    generator = IdGenerator(clock=clock, time_offset_tolerance_ms=2000)
    generator.next_id()

    # within tolerance: the remaining 4095 sequences stay pinned to ``base``
    clock.now = base - 1000
    pinned = [generator.next_id() for _ in range(4095)]
    assert {generator.decode_timestamp(i) for i in pinned} == {base}
    assert generator.decode_sequence(pinned[-1]) == 4095

    with pytest.raises(ClockRegressionError) as excinfo:
        generator.next_id()
    assert excinfo.value.backward_ms == 1000
    assert generator.last_timestamp_ms == base

    clock.now = base + 1
    recovered = generator.next_id()
    assert generator.decode_timestamp(recovered) == base + 1
    assert generator.decode_sequence(recovered) == 0
