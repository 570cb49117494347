from typing import List

from proptech.schemas.media import GalleryImage, UploadFile
from proptech.services.base import ResourceService, as_list

class GalleryImageService(ResourceService[GalleryImage]):
    path = "/api/gallery-images"
    model = GalleryImage
    singular = "imagen"
    plural = "imágenes"

    async def get_by_property(self, property_id: int) -> List[GalleryImage]:
        data = await self.client.get(f"{self.path}/property/{property_id}", "obtener imágenes de la propiedad")
        images = [self._parse(item) for item in as_list(data)]
        return sorted(images, key=lambda img: img.order_index if img.order_index is not None else img.id)

    async def upload(self, property_id: int, files: List[UploadFile]) -> List[GalleryImage]:
        parts = [("files", f.as_part()) for f in files]
        data = await self.client.post(f"{self.path}/property/{property_id}", "subir imágenes", files=parts)
        if isinstance(data, dict) and "url" in data:
            return [self._parse(data)]
        return [self._parse(item) for item in as_list(data)]

    async def reorder(self, property_id: int, ordered_ids: List[int]) -> None:
        await self.client.put(
            f"{self.path}/property/{property_id}/order",
            "reordenar imágenes",
            json={"imageIds": ordered_ids},
        )
