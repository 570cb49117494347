from typing import List, Optional

from structlog import get_logger

from proptech.errors import AlreadyAssociated, ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.media import NearbyFacility, PropertyNearbyFacility
from proptech.services.nearby_facilities import NearbyFacilityService

logger = get_logger()

class NearbyFacilitiesStep:
    def __init__(self, form: PropertyForm):
        self.form = form
        self.service: NearbyFacilityService = form.nearby_service
        self.available: List[NearbyFacility] = []
        self.links: List[PropertyNearbyFacility] = list(form.form_data.nearby_facilities)

    @property
    def direct(self) -> bool:
        return self.form.property_id is not None

    def _push(self) -> None:
        self.form.handle_nearby_facilities_change(self.links)

    async def load(self) -> None:
        try:
            self.available = await self.service.get_active()
            if self.direct:
                self.links = await self.service.get_for_property(self.form.property_id)
                self._push()
        except ApiError as e:
            logger.error("Nearby facilities load failed", property_id=self.form.property_id, error=e.message)
            self.form.notifier.error("Error", e.message)

    def _index(self, nearby_facility_id: int) -> Optional[int]:
        return next(
            (i for i, link in enumerate(self.links) if link.nearby_facility_id == nearby_facility_id), None
        )

    async def add(self, link: PropertyNearbyFacility) -> bool:
        if self._index(link.nearby_facility_id) is not None:
            self.form.notifier.warning("Facilidad duplicada", "La facilidad ya está asociada a la propiedad.")
            return False
        if link.nearby_facility is None:
            link.nearby_facility = next((f for f in self.available if f.id == link.nearby_facility_id), None)
        if self.direct:
            try:
                link = await self.service.add_to_property(self.form.property_id, link)
            except AlreadyAssociated as e:
                self.form.notifier.warning("Facilidad duplicada", e.message)
                return False
            except ApiError as e:
                self.form.notifier.error("Error", e.message)
                return False
        self.links.append(link)
        self._push()
        return True

    async def update(self, nearby_facility_id: int, **changes) -> bool:
        index = self._index(nearby_facility_id)
        if index is None:
            return False
        updated = self.links[index].model_copy(update=changes)
        if self.direct:
            try:
                await self.service.update_for_property(self.form.property_id, updated)
            except ApiError as e:
                self.form.notifier.error("Error", e.message)
                return False
        self.links[index] = updated
        self._push()
        return True

    async def remove(self, nearby_facility_id: int) -> bool:
        index = self._index(nearby_facility_id)
        if index is None:
            return False
        if self.direct:
            try:
                await self.service.remove_from_property(self.form.property_id, nearby_facility_id)
            except ApiError as e:
                self.form.notifier.error("Error", e.message)
                return False
        self.links.pop(index)
        self._push()
        return True
