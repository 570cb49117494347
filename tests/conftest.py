import httpx
import pytest

from proptech.clients.backend import BackendClient
from proptech.notifications import Notifier

class FakeBackend:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, status=200, json=None, handler=None):
        if handler is None:
            def handler(request, status=status, body=json):
                if body is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=body)
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "not found"})
        return handler(request)

    def client(self, token=None) -> BackendClient:
        return BackendClient(
            base_url="http://backend.test", token=token, transport=httpx.MockTransport(self.handle)
        )

    def requests(self, method, path_prefix=""):
        return [r for r in self.calls if r.method == method and r.url.path.startswith(path_prefix)]

@pytest.fixture
def backend():
    return FakeBackend()

@pytest.fixture
def notifier():
    return Notifier()

@pytest.fixture
def property_dto():
    """Property body shaped like the backend DTO: unset fields are null, currency is nested."""

    def make(property_id=10, **overrides):
        body = {
            "id": property_id,
            "title": "Casa en Villa Morra",
            "slug": "casa-en-villa-morra",
            "description": "Hermosa casa con jardín amplio",
            "address": None,
            "state": None,
            "zip": None,
            "countryId": None,
            "countryName": None,
            "neighborhoodName": None,
            "locationDescription": None,
            "latitude": None,
            "longitude": None,
            "bedrooms": 3,
            "bathrooms": None,
            "parkingSpaces": 2,
            "area": 180.0,
            "lotSize": None,
            "yearBuilt": None,
            "availableFrom": None,
            "additionalDetails": None,
            "videoUrl": None,
            "virtualTourUrl": None,
            "featuredImage": None,
            "featured": None,
            "premium": None,
            "propertyStatus": "Activo",
            "propertyStatusCode": "ACTIVE",
            "propertyStatusId": 1,
            "propertyTypeName": "Casa",
            "operacion": "SALE",
            "status": "ACTIVE",
            "amenities": None,
            "services": None,
            "privateFiles": None,
            "galleryImages": None,
            "floorPlans": None,
            "price": 250000,
            "currency": {"id": 1, "code": "USD", "name": "Dólar"},
            "currencyId": 1,
            "currencyCode": "USD",
        }
        body.update(overrides)
        return body

    return make
