import inspect

import pytest
from fastapi.testclient import TestClient

from idforge.api.factory import create_api
from idforge.api.v1.endpoints import ids as ids_endpoints
from idforge.api.v1.endpoints import uids as uids_endpoints
from idforge.api.v1.endpoints.ids import get_id_service
from idforge.core.config import DEFAULT_EPOCH_MS
from idforge.services.id_service import IdService
from idforge.utils.snowflake_generator import SnowflakeRegistry


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(DEFAULT_EPOCH_MS + 1000)


@pytest.fixture
def client(clock):
    app = create_api()
    service = IdService(SnowflakeRegistry(clock=clock))
    app.dependency_overrides[get_id_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client


def test_next_id_returns_int_and_string(client):
    response = client.get("/v1/ids/next", params={"worker_id": 1, "data_center_id": 1})

    assert response.status_code == 200
    body = response.json()
    expected = (1000 << 22) | (1 << 17) | (1 << 12)
    assert body == {
        "id": expected,
        "id_str": str(expected),
        "worker_id": 1,
        "data_center_id": 1,
    }


def test_request_id_is_generated_or_echoed(client):
    generated = client.get("/v1/ids/next")
    echoed = client.get("/v1/ids/next", headers={"X-Request-ID": "req-123"})

    assert generated.headers["X-Request-ID"]
    assert echoed.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in echoed.headers


def test_out_of_range_worker_is_a_bad_request(client):
    response = client.get("/v1/ids/next", params={"worker_id": 32})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["type"] == "InvalidConfigurationError"
    assert error["code"] == "VALIDATION_VALUE_OUT_OF_RANGE"
    assert error["details"]["field"] == "worker_id"


def test_clock_regression_maps_to_503_with_retry_after(client, clock):
    assert client.get("/v1/ids/next").status_code == 200

    clock.now -= 3500
    response = client.get("/v1/ids/next")

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "4"
    body = response.json()
    assert body["error"]["code"] == "ID_GENERATION_CLOCK_MOVED_BACKWARDS"
    assert body["error"]["details"]["backward_ms"] == 3500
    assert body["path"] == "/v1/ids/next"


def test_batch_issues_consecutive_ids(client):
    response = client.post(
        "/v1/ids/batch", json={"count": 3, "worker_id": 2, "data_center_id": 3}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [item["id"] & 0xFFF for item in body["ids"]] == [0, 1, 2]
    assert all(item["id_str"] == str(item["id"]) for item in body["ids"])


def test_batch_rejects_zero_count(client):
    response = client.post("/v1/ids/batch", json={"count": 0})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_INVALID_INPUT"


def test_batch_rejects_count_above_limit(client):
    response = client.post("/v1/ids/batch", json={"count": 1001})

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"count": 1001, "max": 1000}


def test_components_endpoint_decodes_id(client):
    issued = client.get(
        "/v1/ids/next", params={"worker_id": 5, "data_center_id": 6}
    ).json()

    response = client.get(f"/v1/ids/{issued['id']}/components")

    assert response.status_code == 200
    body = response.json()
    assert body["timestamp_ms"] == DEFAULT_EPOCH_MS + 1000
    assert body["worker_id"] == 5
    assert body["data_center_id"] == 6
    assert body["sequence"] == 0
    assert body["id_str"] == issued["id_str"]


def test_components_endpoint_rejects_negative_id(client):
    assert client.get("/v1/ids/-1/components").status_code == 400


def test_uid_endpoints(client):
    encoded = client.get("/v1/ids/12345/uid")
    decoded = client.get("/v1/uids/co3f", params={"mode": 2})

    assert encoded.status_code == 200
    assert encoded.json() == {
        "uid": "3d7",
        "value": 12345,
        "value_str": "12345",
        "mode": 3,
    }
    assert decoded.json()["value"] == 123456


def test_uid_decode_errors(client):
    malformed = client.get("/v1/uids/zzz")
    bad_mode = client.get("/v1/uids/000", params={"mode": 4})

    assert malformed.status_code == 400
    assert malformed.json()["error"]["code"] == "DATA_PROCESS_PARSING_FAILED"
    assert bad_mode.status_code == 400
    assert bad_mode.json()["error"]["code"] == "VALIDATION_INVALID_INPUT"


def test_nanoids_endpoint(client):
    response = client.get("/v1/nanoids", params={"count": 3, "size": 10})

    assert response.status_code == 200
    body = response.json()
    assert body["size"] == 10
    assert len(body["nanoids"]) == 3
    assert all(len(value) == 10 for value in body["nanoids"])

    assert client.get("/v1/nanoids", params={"size": 0}).status_code == 422
    assert client.get("/v1/nanoids", params={"size": 256}).status_code == 400


def test_health_reports_snowflake_component(client):
    client.get("/v1/ids/next")

    response = client.get("/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    snowflake = body["components"]["snowflake"]
    assert snowflake["status"] == "healthy"
    assert snowflake["epoch_ms"] == DEFAULT_EPOCH_MS
    assert snowflake["last_timestamp_ms"] == DEFAULT_EPOCH_MS + 1000
    assert snowflake["registered_generators"] == 1


def test_issuing_endpoints_run_in_threadpool():
    assert not inspect.iscoroutinefunction(ids_endpoints.next_id)
    assert not inspect.iscoroutinefunction(ids_endpoints.next_ids)
    assert not inspect.iscoroutinefunction(uids_endpoints.generate_nanoids)


def test_clock_before_epoch_is_a_server_error():
    app = create_api()
    registry = SnowflakeRegistry(
        epoch_ms=DEFAULT_EPOCH_MS + 10_000, clock=FakeClock(DEFAULT_EPOCH_MS)
    )
    service = IdService(registry)
    app.dependency_overrides[get_id_service] = lambda: service

    with TestClient(app) as test_client:
        response = test_client.get("/v1/ids/next")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "ID_GENERATION_FAILED"
