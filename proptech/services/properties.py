from typing import List, Optional

from proptech.schemas.catalog import PropertyStatus
from proptech.schemas.property import Property, PropertySummary
from proptech.services.base import ResourceService, as_list

class PropertyService(ResourceService[Property]):
    path = "/api/properties"
    model = Property
    singular = "la propiedad"
    plural = "las propiedades"

    async def list_summaries(self, **filters) -> List[PropertySummary]:
        data = await self.client.get(self.path, "obtener las propiedades", params=filters or None)
        return [self._parse(item, PropertySummary) for item in as_list(data)]

    async def publish(self, property_id: int) -> Optional[Property]:
        data = await self.client.post(f"{self.path}/{property_id}/publish", "publicar la propiedad")
        return self._parse(data) if isinstance(data, dict) else None

    async def update_images(self, property_id: int, image_urls: List[str], featured_image_url: str | None) -> None:
        await self.client.put(
            f"{self.path}/{property_id}/images",
            "actualizar imágenes",
            json={"imageUrls": image_urls, "featuredImageUrl": featured_image_url},
        )

    async def set_featured_image(self, property_id: int, image_url: str) -> None:
        await self.client.put(
            f"{self.path}/{property_id}/featured-image",
            "actualizar imagen destacada",
            json={"imageUrl": image_url},
        )

    async def get_operations(self) -> List[str]:
        data = await self.client.get(f"{self.path}/operations", "obtener operaciones")
        return [item.get("code") if isinstance(item, dict) else item for item in as_list(data)]

class PropertyStatusService(ResourceService[PropertyStatus]):
    path = "/api/property-status"
    model = PropertyStatus
    singular = "estado"
    plural = "estados"

    async def find_draft(self) -> Optional[PropertyStatus]:
        for status in await self.get_all():
            if status.is_draft:
                return status
        return None
