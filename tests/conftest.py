import json
import pytest
import httpx
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from app.core.config import Settings
from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop

TOKEN_URI = "https://oauth2.googleapis.com/token"
OPTIMIZE_URL = "https://routeoptimization.googleapis.com/v1/projects/123456:optimizeTours"
SERVICE_ACCOUNT_EMAIL = "routes@manifest-project.iam.gserviceaccount.com"


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key):
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def service_account_key(private_key_pem):
    """Key file content as Google issues it."""
    return json.dumps({
        "type": "service_account",
        "project_id": "manifest-project",
        "client_email": SERVICE_ACCOUNT_EMAIL,
        "private_key": private_key_pem,
    })


@pytest.fixture
def make_settings(service_account_key):
    def _make(**overrides):
        values = {
            "GOOGLE_SERVICE_ACCOUNT_KEY": service_account_key,
            "GOOGLE_CLOUD_PROJECT_ID": "123456",
            "GOOGLE_MAPS_API_KEY": None,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def depot():
    return Location(lat=41.6523, lng=-4.7245)


@pytest.fixture
def stops():
    return [
        DeliveryStop(id="A-001", label="Farmacia Sol", address="Calle Santiago 1", lat=41.6525, lng=-4.7280,
                     customer="Ana"),
        DeliveryStop(id="A-002", label="Panaderia Norte", address="Calle Mayor 10", lat=41.6601, lng=-4.7190),
        DeliveryStop(id=None, label="Sin codigo", address="Paseo Zorrilla 100", lat=41.6400, lng=-4.7350),
    ]


@pytest.fixture
def optimize_response():
    """Route visiting the stops in reverse order, with depot visits and metrics."""
    return {
        "routes": [{
            "visits": [
                {"shipmentIndex": 2, "startTime": "2025-01-15T08:10:00Z"},
                {"shipmentIndex": 1, "startTime": "2025-01-15T08:25:00Z"},
                {"shipmentIndex": 0, "startTime": "2025-01-15T08:40:00Z"},
            ],
            "transitions": [
                {
                    "startLocation": {"latLng": {"latitude": 41.6523, "longitude": -4.7245}},
                    "endLocation": {"latLng": {"latitude": 41.6400, "longitude": -4.7350}},
                    "travelDistanceMeters": 1800,
                    "travelDuration": "420s",
                },
                {
                    "startLocation": {"latLng": {"latitude": 41.6400, "longitude": -4.7350}},
                    "endLocation": {"latLng": {"latitude": 41.6601, "longitude": -4.7190}},
                    "travelDistanceMeters": 2600,
                    "travelDuration": "600s",
                },
                {
                    "startLocation": {"latLng": {"latitude": 41.6601, "longitude": -4.7190}},
                    "endLocation": {"latLng": {"latitude": 41.6525, "longitude": -4.7280}},
                    "travelDistanceMeters": 1200,
                    "travelDuration": "300s",
                },
                {
                    "startLocation": {"latLng": {"latitude": 41.6525, "longitude": -4.7280}},
                    "endLocation": {"latLng": {"latitude": 41.6523, "longitude": -4.7245}},
                    "travelDistanceMeters": 400,
                    "travelDuration": "120s",
                },
            ],
            "routePolyline": {"encodedPolyline": "_p~iF~ps|U_ulLnnqC"},
        }],
        "metrics": [{"totalDistance": 6000, "totalDuration": "2340s"}],
    }


class FakeGoogle:
    """
    Records requests and answers the token and optimizeTours endpoints.

    Pass ``transport`` to an httpx.Client to use it.
    """

    def __init__(self, optimize_response=None, token_status=200, optimize_status=200):
        self.optimize_response = optimize_response or {}
        self.token_status = token_status
        self.optimize_status = optimize_status
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == TOKEN_URI:
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": f"token-{len(self.requests)}",
                                             "token_type": "Bearer", "expires_in": 3599})
        if str(request.url) == OPTIMIZE_URL:
            if self.optimize_status != 200:
                return httpx.Response(self.optimize_status,
                                      json={"error": {"code": self.optimize_status, "message": "denied"}})
            return httpx.Response(200, json=self.optimize_response)
        return httpx.Response(404)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def client(self):
        return httpx.Client(transport=self.transport)

    def urls(self):
        return [str(request.url) for request in self.requests]


@pytest.fixture
def fake_google(optimize_response):
    return FakeGoogle(optimize_response=optimize_response)
