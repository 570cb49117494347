from typing import List

from proptech.schemas.media import PrivateFile, UploadFile
from proptech.services.base import ResourceService, as_list

class PrivateFileService(ResourceService[PrivateFile]):
    path = "/api/private-files"
    model = PrivateFile
    singular = "archivo privado"
    plural = "archivos privados"

    async def get_by_property(self, property_id: int) -> List[PrivateFile]:
        data = await self.client.get(f"{self.path}/property/{property_id}", "obtener archivos privados")
        return [self._parse(item) for item in as_list(data)]

    async def upload(self, property_id: int, file: UploadFile) -> PrivateFile:
        data = await self.client.post(
            f"{self.path}/property/{property_id}",
            "subir archivo privado",
            files={"file": file.as_part()},
        )
        if isinstance(data, dict):
            data.setdefault("name", file.filename)
            data.setdefault("contentType", file.content_type)
        return self._parse(data)
