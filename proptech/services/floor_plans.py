from typing import List

from proptech.schemas.media import FloorPlan, UploadFile
from proptech.services.base import ResourceService, as_list

class FloorPlanService(ResourceService[FloorPlan]):
    """Floor plans live under their property; replacing is delete-all + create-all."""

    path = "/api/floor-plans"
    model = FloorPlan
    singular = "plano"
    plural = "planos"

    def _property_path(self, property_id: int) -> str:
        return f"/api/properties/{property_id}/floor-plans"

    async def get_by_property(self, property_id: int) -> List[FloorPlan]:
        data = await self.client.get(self._property_path(property_id), "obtener planos")
        return [self._parse(item) for item in as_list(data)]

    async def delete_all(self, property_id: int) -> None:
        await self.client.delete(self._property_path(property_id), "eliminar planos")

    async def create_many(self, property_id: int, plans: List[FloorPlan]) -> List[FloorPlan]:
        body = [
            {**plan.to_wire(exclude={"id"}), "id": None, "propertyId": property_id}
            for plan in plans
        ]
        data = await self.client.post(self._property_path(property_id), "guardar planos", json=body)
        return [self._parse(item) for item in as_list(data)]

    async def upload_image(self, property_id: int, file: UploadFile) -> str:
        data = await self.client.post(
            f"{self._property_path(property_id)}/upload-image",
            "subir imagen del plano",
            files={"file": file.as_part()},
        )
        if isinstance(data, dict):
            return data.get("url") or data.get("imageUrl")
        return data
