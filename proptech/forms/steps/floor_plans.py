from typing import Any, Optional

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.media import FloorPlan, UploadFile

logger = get_logger()

class FloorPlansStep:
    """Edits `form_data.floor_plans` in place. Plans are persisted by the form's
    save; only the plan images can go to the backend right away."""

    def __init__(self, form: PropertyForm):
        self.form = form
        self.service = form.floor_plan_service

    @property
    def plans(self):
        return self.form.form_data.floor_plans

    async def load(self) -> None:
        if self.form.property_id is None:
            return
        try:
            plans = await self.service.get_by_property(self.form.property_id)
        except ApiError as e:
            logger.error("Floor plans load failed", property_id=self.form.property_id, error=e.message)
            return
        self.form.handle_floor_plans_change(plans)

    def add(self, plan: Optional[Any] = None) -> FloorPlan:
        new_plan = FloorPlan.model_validate(plan or {})
        self.form.handle_floor_plans_change([*self.plans, new_plan])
        return new_plan

    def update(self, index: int, **changes) -> None:
        plans = list(self.plans)
        if not 0 <= index < len(plans):
            return
        plans[index] = plans[index].model_copy(update=changes)
        self.form.handle_floor_plans_change(plans)

    def remove(self, index: int) -> None:
        self.form.handle_floor_plans_change([p for i, p in enumerate(self.plans) if i != index])

    async def set_image(self, index: int, file: UploadFile) -> Optional[str]:
        if not 0 <= index < len(self.plans):
            return None
        if self.form.property_id is None:
            return self.form.queue_floor_plan_image(index, file)
        try:
            url = await self.service.upload_image(self.form.property_id, file)
        except ApiError as e:
            self.form.notifier.error("Error", e.message)
            return None
        self.update(index, image=url)
        return url
