from typing import Optional

from proptech.schemas.media import RentalConfig, RentalProperty
from proptech.services.base import ResourceService

class RentalPropertyService(ResourceService[RentalProperty]):
    path = "/api/rental-properties"
    model = RentalProperty
    singular = "configuración de alquiler"
    plural = "configuraciones de alquiler"

    async def get_by_property_id(self, property_id: int) -> Optional[RentalProperty]:
        data = await self.client.get(
            f"{self.path}/property/{property_id}", "obtener configuración de alquiler", allow_404=True
        )
        if not data:
            return None
        return self._parse(data)

    async def upsert(self, property_id: int, config: RentalConfig) -> RentalProperty:
        body = {**config.to_wire(exclude={"enabled"}, exclude_none=True), "propertyId": property_id}
        existing = await self.get_by_property_id(property_id)
        if existing:
            return await self.update(existing.id, body)
        return await self.create(body)
