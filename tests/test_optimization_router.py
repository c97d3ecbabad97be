import pytest
from fastapi.testclient import TestClient

from conftest import FakeGoogle
from app.dependencies import get_route_optimization_service
from app.services.route_optimization import RouteOptimizationService
from main import app


@pytest.fixture
def use_service():
    def _use(service):
        app.dependency_overrides[get_route_optimization_service] = lambda: service
        return TestClient(app)
    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def deliveries():
    return [
        {"id": "A-001", "address": "Calle Santiago 1", "lat": 41.6525, "lng": -4.7280, "customer": "Ana"},
        {"id": "A-002", "address": "Calle Mayor 10", "lat": 41.6601, "lng": -4.7190},
        {"address": "Paseo Zorrilla 100", "lat": 41.6400, "lng": -4.7350},
    ]


def test_health():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_optimize(use_service, make_settings, fake_google, deliveries):
    client = use_service(RouteOptimizationService(make_settings(), http_client=fake_google.client()))

    response = client.post("/api/optimize", json={
        "deliveries": deliveries,
        "warehouse_location": {"lat": 41.6523, "lng": -4.7245},
        "start_time": "2025-01-15T08:00:00.123Z",
    })

    assert response.status_code == 200
    data = response.json()
    assert [stop["sequence_index"] for stop in data["stops"]] == [1, 2, 3]
    assert [stop["id"] for stop in data["stops"]] == [None, "A-002", "A-001"]
    assert data["stops"][2]["customer"] == "Ana"
    assert data["stops"][0]["estimated_arrival"] == "2025-01-15T08:10:00Z"
    assert data["total_distance_meters"] == 6000
    assert len(data["legs"]) == 4


def test_optimize_simple_uses_default_depot(use_service, make_settings, deliveries):
    settings = make_settings(WAREHOUSE_LAT=41.6525, WAREHOUSE_LNG=-4.7280)
    client = use_service(RouteOptimizationService(settings))

    response = client.post("/api/optimize-simple", json={"deliveries": deliveries})

    assert response.status_code == 200
    data = response.json()
    assert data["stops"][0]["id"] == "A-001"
    assert data["stops"][0]["distance_from_previous"] == 0
    assert data["polyline"]
    assert data["legs"] is None


@pytest.mark.parametrize("path", ["/api/optimize", "/api/optimize-simple"])
def test_empty_deliveries(use_service, make_settings, path):
    fake = FakeGoogle()
    client = use_service(RouteOptimizationService(make_settings(), http_client=fake.client()))

    response = client.post(path, json={"deliveries": []})

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert fake.requests == []


def test_missing_coordinates(use_service, make_settings, deliveries):
    client = use_service(RouteOptimizationService(make_settings()))
    deliveries.append({"id": "A-009", "address": "Sin coordenadas"})

    response = client.post("/api/optimize-simple", json={"deliveries": deliveries})

    assert response.status_code == 400
    assert response.json()["details"] == {"count": 1, "positions": [4]}


def test_upstream_status_is_passed_through(use_service, make_settings, deliveries):
    fake = FakeGoogle(optimize_status=403)
    client = use_service(RouteOptimizationService(make_settings(), http_client=fake.client()))

    response = client.post("/api/optimize", json={"deliveries": deliveries})

    assert response.status_code == 403
    data = response.json()
    assert data["error"] == "upstream_optimization_error"
    assert data["status_code"] == 403


def test_token_failure_is_bad_gateway(use_service, make_settings, deliveries):
    fake = FakeGoogle(token_status=400)
    client = use_service(RouteOptimizationService(make_settings(), http_client=fake.client()))

    response = client.post("/api/optimize", json={"deliveries": deliveries})

    assert response.status_code == 502
    assert response.json()["error"] == "token_exchange_error"


def test_no_route_found(use_service, make_settings, deliveries):
    fake = FakeGoogle(optimize_response={"routes": []})
    client = use_service(RouteOptimizationService(make_settings(), http_client=fake.client()))

    response = client.post("/api/optimize", json={"deliveries": deliveries})

    assert response.status_code == 500
    assert response.json()["error"] == "no_route_found"


def test_missing_configuration(use_service, make_settings, deliveries):
    client = use_service(RouteOptimizationService(make_settings(GOOGLE_SERVICE_ACCOUNT_KEY=None)))

    response = client.post("/api/optimize", json={"deliveries": deliveries})

    assert response.status_code == 500
    assert response.json()["error"] == "configuration_error"


def test_numeric_manifest_id_is_accepted(use_service, make_settings, deliveries):
    client = use_service(RouteOptimizationService(make_settings()))
    deliveries[0]["id"] = 12345

    response = client.post("/api/optimize-simple", json={"deliveries": deliveries})

    assert response.status_code == 200
    assert response.json()["stops"][0]["id"] == "12345"
