from typing import Iterable, List

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.media import PrivateFile, UploadFile, UploadedFile
from proptech.services.private_files import PrivateFileService

logger = get_logger()

class PrivateFilesStep:
    def __init__(self, form: PropertyForm):
        self.form = form
        self.service = PrivateFileService(form.properties.client)
        self.files: List[PrivateFile] = []

    @property
    def direct(self) -> bool:
        return self.form.property_id is not None

    async def load(self) -> None:
        if not self.direct:
            return
        try:
            self.files = await self.service.get_by_property(self.form.property_id)
        except ApiError as e:
            logger.error("Private files load failed", property_id=self.form.property_id, error=e.message)
            return
        self._push()

    def _push(self) -> None:
        self.form.form_data.private_files = [UploadedFile(url=f.url, name=f.name) for f in self.files]

    async def upload(self, files: Iterable[UploadFile]) -> None:
        try:
            if not self.direct:
                await self.form.add_private_files(files)
                return
            for file in files:
                self.files.append(await self.service.upload(self.form.property_id, file))
                self._push()
        except ApiError as e:
            self.form.notifier.error("Error", e.message)

    async def remove(self, index: int) -> None:
        if not self.direct:
            self.form.remove_private_file(index)
            return
        if not 0 <= index < len(self.files):
            return
        file = self.files[index]
        if file.id is not None:
            try:
                await self.service.delete(file.id)
            except ApiError as e:
                self.form.notifier.error("Error", e.message)
                return
        self.files.pop(index)
        self._push()
