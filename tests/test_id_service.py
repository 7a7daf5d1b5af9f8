from datetime import datetime, timezone

import pytest

from idforge.core.config import DEFAULT_EPOCH_MS, settings
from idforge.core.exceptions import (
    ClockRegressionError,
    InvalidConfigurationError,
    ValidationException,
)
from idforge.services.id_service import IdService
from idforge.utils.snowflake_generator import SnowflakeRegistry


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def _build_service(now=DEFAULT_EPOCH_MS + 1000):
    clock = FakeClock(now)
    return IdService(SnowflakeRegistry(clock=clock)), clock


def test_next_ids_come_from_one_generator():
    service, _ = _build_service()

    ids = service.next_ids(3, worker_id=2, data_center_id=3)

    assert [item.id & 0xFFF for item in ids] == [0, 1, 2]
    assert {(item.worker_id, item.data_center_id) for item in ids} == {(2, 3)}
    assert ids[0].id == (1000 << 22) | (3 << 17) | (2 << 12)


def test_next_id_uses_configured_defaults(monkeypatch):
    monkeypatch.setattr(settings, "snowflake__worker_id", 4)
    monkeypatch.setattr(settings, "snowflake__data_center_id", 5)
    service, _ = _build_service()

    issued = service.next_id()

    assert issued.worker_id == 4
    assert issued.data_center_id == 5
    assert (4, 5) in service.registry


@pytest.mark.parametrize("count", [0, -1, 6])
def test_next_ids_rejects_counts_outside_batch_limit(monkeypatch, count):
    monkeypatch.setattr(settings, "ids__max_batch_size", 5)
    service, _ = _build_service()

    with pytest.raises(ValidationException) as excinfo:
        service.next_ids(count)

    assert excinfo.value.details == {"count": count, "max": 5}


def test_next_ids_rejects_invalid_worker():
    service, _ = _build_service()

    with pytest.raises(InvalidConfigurationError):
        service.next_ids(1, worker_id=32, data_center_id=0)


def test_clock_regression_is_propagated():
    service, clock = _build_service()
    service.next_id(0, 0)

    clock.now -= 5000

    with pytest.raises(ClockRegressionError) as excinfo:
        service.next_id(0, 0)
    assert excinfo.value.backward_ms == 5000


def test_decode_id_reports_fields_and_utc_time():
    service, _ = _build_service(DEFAULT_EPOCH_MS + 1500)
    issued = service.next_id(6, 7)

    decoded = service.decode_id(issued.id)

    assert decoded.id == issued.id
    assert decoded.timestamp_ms == DEFAULT_EPOCH_MS + 1500
    assert decoded.generated_at == datetime.fromtimestamp(
        (DEFAULT_EPOCH_MS + 1500) / 1000, tz=timezone.utc
    )
    assert decoded.worker_id == 6
    assert decoded.data_center_id == 7
    assert decoded.sequence == 0


@pytest.mark.parametrize("value", [-1, 1 << 63])
def test_decode_id_rejects_values_outside_63_bits(value):
    service, _ = _build_service()

    with pytest.raises(ValidationException):
        service.decode_id(value)


def test_uid_round_trip_through_service():
    service, _ = _build_service()
    issued = service.next_id(1, 1)

    uid = service.encode_uid(issued.id)

    assert service.decode_uid(uid) == issued.id
    assert service.decode_uid(service.encode_uid(issued.id, 2), 2) == issued.id


def test_generate_nanoids_respects_limits(monkeypatch):
    monkeypatch.setattr(settings, "ids__max_nanoid_size", 30)
    service, _ = _build_service()

    nanoids = service.generate_nanoids(count=4, size=12)

    assert len(nanoids) == 4
    assert all(len(value) == 12 for value in nanoids)
    with pytest.raises(ValidationException):
        service.generate_nanoids(count=1, size=31)
    with pytest.raises(ValidationException):
        service.generate_nanoids(count=0)
