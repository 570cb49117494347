from typing import List

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.catalog import CatalogItem
from proptech.services.catalogs import AmenityService, ServiceCatalogService

logger = get_logger()

class _ToggleStep:
    field = ""

    def __init__(self, form: PropertyForm, service):
        self.form = form
        self.service = service
        self.options: List[CatalogItem] = []
        self.error = None

    async def load(self) -> List[CatalogItem]:
        try:
            self.options = await self.service.get_active()
            self.error = None
        except ApiError as e:
            logger.error("Catalog options failed", path=self.service.path, error=e.message)
            self.error = e.message
        return self.options

    @property
    def selected(self) -> List[int]:
        return getattr(self.form.form_data, self.field)

    def is_selected(self, item_id: int) -> bool:
        return item_id in self.selected

    def by_category(self) -> dict:
        groups: dict = {}
        for item in self.options:
            groups.setdefault(item.category or "Otros", []).append(item)
        return groups

class AmenitiesStep(_ToggleStep):
    field = "amenities"

    def __init__(self, form: PropertyForm):
        super().__init__(form, AmenityService(form.properties.client))

    def toggle(self, amenity_id: int) -> None:
        self.form.toggle_amenity(amenity_id)

class ServicesStep(_ToggleStep):
    field = "services"

    def __init__(self, form: PropertyForm):
        super().__init__(form, ServiceCatalogService(form.properties.client))

    def toggle(self, service_id: int) -> None:
        self.form.toggle_service(service_id)
