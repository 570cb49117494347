import json

import pytest

from proptech.schemas.catalog import CityZoneRequest, CountryRequest
from proptech.stores.catalog import city_zone_store, country_store

@pytest.mark.asyncio
async def test_reload_failure_sets_load_error(backend):
    backend.on("GET", "/api/countries", status=500)
    store = country_store(backend.client())
    assert await store.reload() == []
    assert store.error == "Error al cargar los países"
    assert store.loading is False

@pytest.mark.asyncio
async def test_create_appends_once(backend):
    backend.on("GET", "/api/countries", json=[{"id": 1, "name": "Paraguay", "code": "PY"}])
    backend.on("POST", "/api/countries", json={"id": 2, "name": "Bolivia", "code": "BO"})
    store = country_store(backend.client())
    await store.reload()

    assert await store.create(CountryRequest(name="Bolivia")) is True
    assert [c.id for c in store.items] == [1, 2]
    assert store.error is None

@pytest.mark.asyncio
async def test_country_code_defaults_from_name(backend):
    backend.on("POST", "/api/countries", json={"id": 2, "name": "Bolivia", "code": "BO"})
    store = country_store(backend.client())
    await store.create(CountryRequest(name="Bolivia"))
    assert json.loads(backend.calls[0].content)["code"] == "BO"

@pytest.mark.asyncio
async def test_remove_drops_item(backend):
    backend.on("GET", "/api/city-zones", json=[
        {"id": 1, "name": "Centro", "cityId": 5},
        {"id": 2, "name": "Villa Morra", "cityId": 5},
    ])
    backend.on("DELETE", "/api/city-zones/1", status=204)
    store = city_zone_store(backend.client())
    await store.reload()

    assert await store.remove(1) is True
    assert [z.id for z in store.items] == [2]
    assert store.get(1) is None

@pytest.mark.asyncio
async def test_failed_remove_keeps_list(backend):
    backend.on("GET", "/api/city-zones", json=[{"id": 1, "name": "Centro", "cityId": 5}])
    backend.on("DELETE", "/api/city-zones/1", status=409, json={"error": "en uso"})
    store = city_zone_store(backend.client())
    await store.reload()

    assert await store.remove(1) is False
    assert [z.id for z in store.items] == [1]
    assert store.error.startswith("Error al eliminar zona urbana: 409")

@pytest.mark.asyncio
async def test_failed_update_keeps_item(backend):
    backend.on("GET", "/api/city-zones", json=[{"id": 1, "name": "Centro", "cityId": 5}])
    backend.on("PUT", "/api/city-zones/1", status=400)
    store = city_zone_store(backend.client())
    await store.reload()

    assert await store.update(1, CityZoneRequest(name="Nuevo", city_id=5)) is False
    assert store.items[0].name == "Centro"
    assert store.error is not None

@pytest.mark.asyncio
async def test_search_matches_name_and_city(backend):
    backend.on("GET", "/api/city-zones", json=[
        {"id": 1, "name": "Centro", "cityId": 5, "cityName": "Asunción"},
        {"id": 2, "name": "Norte", "cityId": 6, "cityName": "Luque"},
    ])
    store = city_zone_store(backend.client())
    await store.reload()
    assert [z.id for z in store.search("luq")] == [2]
    assert [z.id for z in store.search("CENTRO")] == [1]
    assert len(store.search("")) == 2
