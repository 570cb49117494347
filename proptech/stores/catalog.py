from typing import Any, Generic, List, Optional, TypeVar

from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.errors import ApiError
from proptech.services.base import ResourceService
from proptech.services.cities import CityService
from proptech.services.city_zones import CityZoneService
from proptech.services.countries import CountryService
from proptech.services.departments import DepartmentService
from proptech.services.neighborhoods import NeighborhoodService

logger = get_logger()

T = TypeVar("T")

class CatalogStore(Generic[T]):
    """List state for one catalog screen.

    Mutations call the backend first and patch `items` only on success, so a
    failed call leaves the list as it was and sets `error`. Nothing is
    reconciled with the backend until the next `reload()`.
    """

    def __init__(self, service: ResourceService, load_error: str):
        self.service = service
        self.load_error = load_error
        self.items: List[T] = []
        self.loading = False
        self.error: Optional[str] = None

    async def reload(self) -> List[T]:
        self.loading = True
        self.error = None
        try:
            self.items = await self.service.get_all()
        except ApiError as e:
            logger.error("Catalog load failed", path=self.service.path, error=e.message)
            self.error = self.load_error
        finally:
            self.loading = False
        return self.items

    async def create(self, data: Any) -> bool:
        try:
            created = await self.service.create(data)
        except ApiError as e:
            self.error = e.message
            return False
        self.items = [item for item in self.items if item.id != created.id] + [created]
        self.error = None
        logger.info("Catalog item created", path=self.service.path, id=created.id)
        return True

    async def update(self, item_id: int, data: Any) -> bool:
        try:
            updated = await self.service.update(item_id, data)
        except ApiError as e:
            self.error = e.message
            return False
        self.items = [updated if item.id == item_id else item for item in self.items]
        self.error = None
        logger.info("Catalog item updated", path=self.service.path, id=item_id)
        return True

    async def remove(self, item_id: int) -> bool:
        try:
            await self.service.delete(item_id)
        except ApiError as e:
            self.error = e.message
            return False
        self.items = [item for item in self.items if item.id != item_id]
        self.error = None
        logger.info("Catalog item removed", path=self.service.path, id=item_id)
        return True

    def get(self, item_id: int) -> Optional[T]:
        return next((item for item in self.items if item.id == item_id), None)

    def search(self, term: str) -> List[T]:
        term = (term or "").strip().lower()
        if not term:
            return list(self.items)
        fields = ("name", "description", "city_name", "department_name", "country_name", "code")
        return [
            item for item in self.items
            if any(term in str(getattr(item, f, "") or "").lower() for f in fields)
        ]

def country_store(client: BackendClient | None = None) -> CatalogStore:
    return CatalogStore(CountryService(client), "Error al cargar los países")

def department_store(client: BackendClient | None = None) -> CatalogStore:
    return CatalogStore(DepartmentService(client), "Error al cargar los departamentos")

def city_store(client: BackendClient | None = None) -> CatalogStore:
    return CatalogStore(CityService(client), "Error al cargar las ciudades")

def city_zone_store(client: BackendClient | None = None) -> CatalogStore:
    return CatalogStore(CityZoneService(client), "Error al cargar las zonas urbanas")

def neighborhood_store(client: BackendClient | None = None) -> CatalogStore:
    return CatalogStore(NeighborhoodService(client), "Error al cargar los barrios")

STORE_FACTORIES = {
    "countries": country_store,
    "departments": department_store,
    "cities": city_store,
    "city-zones": city_zone_store,
    "neighborhoods": neighborhood_store,
}
