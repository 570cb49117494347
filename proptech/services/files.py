from proptech.clients.backend import BackendClient
from proptech.schemas.media import UploadFile, UploadedFile

class FileService:
    def __init__(self, client: BackendClient | None = None):
        self.client = client or BackendClient()

    async def upload(self, file: UploadFile, subdirectory: str) -> UploadedFile:
        data = await self.client.post(
            f"/api/files/upload/{subdirectory}",
            "subir archivo",
            files={"file": file.as_part()},
        )
        if isinstance(data, str):
            return UploadedFile(url=data, name=file.filename)
        url = data.get("url") or data.get("fileUrl") or data.get("path")
        return UploadedFile(url=url, name=data.get("name") or file.filename)
