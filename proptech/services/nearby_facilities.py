from typing import List

from structlog import get_logger

from proptech.errors import AlreadyAssociated, ApiError
from proptech.schemas.media import NearbyFacility, PropertyNearbyFacility
from proptech.services.base import ResourceService, as_list

logger = get_logger()

class NearbyFacilityService(ResourceService[NearbyFacility]):
    path = "/api/nearby-facilities"
    model = NearbyFacility
    singular = "facilidad"
    plural = "facilidades"

    def _property_path(self, property_id: int) -> str:
        return f"/api/properties/{property_id}/nearby-facilities"

    async def get_active(self) -> List[NearbyFacility]:
        return [f for f in await self.get_all() if f.active]

    async def get_for_property(self, property_id: int) -> List[PropertyNearbyFacility]:
        data = await self.client.get(self._property_path(property_id), "obtener facilidades de la propiedad")
        return [self._parse(item, PropertyNearbyFacility) for item in as_list(data)]

    async def add_to_property(self, property_id: int, link: PropertyNearbyFacility) -> PropertyNearbyFacility:
        try:
            data = await self.client.post(
                self._property_path(property_id), "asociar facilidad", json=link.to_request()
            )
        except ApiError as e:
            if e.status_code == 409:
                raise AlreadyAssociated(
                    "La facilidad ya está asociada a la propiedad", 409, e.operation
                ) from e
            raise
        if not isinstance(data, dict):
            return link
        created = self._parse(data, PropertyNearbyFacility)
        if created.nearby_facility is None:
            created.nearby_facility = link.nearby_facility
        return created

    async def remove_from_property(self, property_id: int, nearby_facility_id: int) -> None:
        await self.client.delete(
            f"{self._property_path(property_id)}/{nearby_facility_id}", "eliminar facilidad"
        )

    async def update_for_property(self, property_id: int, link: PropertyNearbyFacility) -> None:
        body = link.to_request()
        body.pop("nearbyFacilityId", None)
        await self.client.put(
            f"{self._property_path(property_id)}/{link.nearby_facility_id}",
            "actualizar facilidad",
            json=body,
        )
