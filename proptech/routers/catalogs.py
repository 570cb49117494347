from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.dependencies.auth import get_backend_client, get_current_user
from proptech.errors import ApiError, to_http_exception
from proptech.schemas.catalog import (
    CityRequest,
    CityZoneRequest,
    CountryRequest,
    DepartmentRequest,
    NeighborhoodRequest,
)
from proptech.schemas.people import CurrentUser
from proptech.stores.catalog import STORE_FACTORIES, CatalogStore

logger = get_logger()
router = APIRouter(prefix="/api/v1/catalogs", tags=["catalogs"])

REQUEST_MODELS = {
    "countries": CountryRequest,
    "departments": DepartmentRequest,
    "cities": CityRequest,
    "city-zones": CityZoneRequest,
    "neighborhoods": NeighborhoodRequest,
}

def _store(resource: str, client: BackendClient) -> CatalogStore:
    factory = STORE_FACTORIES.get(resource)
    if factory is None:
        raise HTTPException(status_code=404, detail=f"Unknown catalog: {resource}")
    return factory(client)

def _request(resource: str, body: Dict[str, Any]):
    try:
        return REQUEST_MODELS[resource].model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e

@router.get("/{resource}")
async def list_catalog(resource: str, search: Optional[str] = None, client: BackendClient = Depends(get_backend_client)) -> List[Dict]:
    store = _store(resource, client)
    await store.reload()
    if store.error:
        raise HTTPException(status_code=502, detail=store.error)
    items = store.search(search) if search else store.items
    return [item.to_wire() for item in items]

@router.get("/{resource}/{item_id}")
async def get_catalog_item(resource: str, item_id: int, client: BackendClient = Depends(get_backend_client)) -> Dict:
    store = _store(resource, client)
    try:
        item = await store.service.get_by_id(item_id)
    except ApiError as e:
        raise to_http_exception(e) from e
    if item is None:
        raise HTTPException(status_code=404, detail="Not found")
    return item.to_wire()

@router.post("/{resource}", status_code=201)
async def create_catalog_item(
    resource: str,
    body: Dict[str, Any],
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
) -> Dict:
    store = _store(resource, client)
    data = _request(resource, body)
    try:
        created = await store.service.create(data)
    except ApiError as e:
        raise to_http_exception(e) from e
    logger.info("Catalog item created", resource=resource, id=created.id, user_id=user.id)
    return created.to_wire()

@router.put("/{resource}/{item_id}")
async def update_catalog_item(
    resource: str,
    item_id: int,
    body: Dict[str, Any],
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
) -> Dict:
    store = _store(resource, client)
    data = _request(resource, body)
    try:
        updated = await store.service.update(item_id, data)
    except ApiError as e:
        raise to_http_exception(e) from e
    logger.info("Catalog item updated", resource=resource, id=item_id, user_id=user.id)
    return updated.to_wire()

@router.delete("/{resource}/{item_id}", status_code=204)
async def delete_catalog_item(
    resource: str,
    item_id: int,
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
) -> Response:
    store = _store(resource, client)
    try:
        await store.service.delete(item_id)
    except ApiError as e:
        raise to_http_exception(e) from e
    logger.info("Catalog item deleted", resource=resource, id=item_id, user_id=user.id)
    return Response(status_code=204)
