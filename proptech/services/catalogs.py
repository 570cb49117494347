from typing import List

from proptech.schemas.catalog import CatalogItem, Currency
from proptech.services.base import ResourceService

class _ActiveMixin:
    async def get_active(self) -> List:
        return [item for item in await self.get_all() if item.active]

class AmenityService(_ActiveMixin, ResourceService[CatalogItem]):
    path = "/api/amenities"
    model = CatalogItem
    singular = "amenidad"
    plural = "amenidades"

class ServiceCatalogService(_ActiveMixin, ResourceService[CatalogItem]):
    path = "/api/services"
    model = CatalogItem
    singular = "servicio"
    plural = "servicios"

class PropertyTypeService(_ActiveMixin, ResourceService[CatalogItem]):
    path = "/api/property-types"
    model = CatalogItem
    singular = "tipo de propiedad"
    plural = "tipos de propiedad"

class CurrencyService(_ActiveMixin, ResourceService[Currency]):
    path = "/api/currencies"
    model = Currency
    singular = "moneda"
    plural = "monedas"
