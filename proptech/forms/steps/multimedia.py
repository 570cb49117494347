from typing import Iterable, List

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.media import GalleryImage, UploadFile
from proptech.services.gallery_images import GalleryImageService

logger = get_logger()

class MultimediaStep:
    """Gallery editing. Once the property exists every change goes straight to
    the gallery endpoints; before that, files wait in the form's pending uploads."""

    def __init__(self, form: PropertyForm):
        self.form = form
        self.gallery = GalleryImageService(form.properties.client)
        self.images: List[GalleryImage] = []

    @property
    def direct(self) -> bool:
        return self.form.property_id is not None

    async def load(self) -> None:
        if not self.direct:
            return
        try:
            self.images = await self.gallery.get_by_property(self.form.property_id)
        except ApiError as e:
            logger.error("Gallery load failed", property_id=self.form.property_id, error=e.message)
            return
        self._push_urls()

    def _push_urls(self) -> None:
        self.form.form_data.images = [img.url for img in self.images]

    async def upload(self, files: Iterable[UploadFile]) -> None:
        files = list(files)
        if not files:
            return
        if not self.direct:
            self.form.add_gallery_images(files)
            return
        try:
            uploaded = await self.gallery.upload(self.form.property_id, files)
        except ApiError as e:
            self.form.notifier.error("Error", e.message)
            return
        self.images.extend(uploaded)
        self._push_urls()
        self.form.notifier.success("Imágenes subidas", f"{len(uploaded)} imagen(es) agregada(s).")

    async def remove(self, index: int) -> None:
        if not self.direct:
            self.form.remove_image(index)
            return
        if not 0 <= index < len(self.images):
            return
        image = self.images[index]
        try:
            await self.gallery.delete(image.id)
        except ApiError as e:
            self.form.notifier.error("Error", e.message)
            return
        self.images.pop(index)
        self._push_urls()
        if self.form.form_data.featured_image == image.url:
            self.form.form_data.featured_image = self.images[0].url if self.images else ""

    async def reorder(self, from_index: int, to_index: int) -> None:
        if not self.direct:
            self.form.reorder_images(from_index, to_index)
            return
        if not (0 <= from_index < len(self.images) and 0 <= to_index < len(self.images)):
            return
        images = list(self.images)
        images.insert(to_index, images.pop(from_index))
        try:
            await self.gallery.reorder(self.form.property_id, [img.id for img in images])
        except ApiError as e:
            self.form.notifier.error("Error", e.message)
            return
        self.images = images
        self._push_urls()

    async def set_featured(self, index: int) -> None:
        images = self.form.form_data.images
        if not 0 <= index < len(images):
            return
        url = images[index]
        if self.direct:
            try:
                await self.form.properties.set_featured_image(self.form.property_id, url)
            except ApiError as e:
                self.form.notifier.error("Error", e.message)
                return
        self.form.select_featured_image(url)
