from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.config import settings
from proptech.errors import ApiError, PropertyFormError
from proptech.forms.property_form import PropertyForm
from proptech.notifications import Notifier
from proptech.schemas.media import RentalConfig
from proptech.schemas.property import PropertyFormData

logger = get_logger()

FIELD_LABELS = {
    "title": "Título",
    "price": "Precio",
    "currency": "Moneda",
    "type": "Tipo de propiedad",
    "property_status_id": "Estado de la propiedad",
    "description": "Descripción",
    "area": "Área",
    "bedrooms": "Dormitorios",
    "bathrooms": "Baños",
    "lot_size": "Superficie del terreno",
    "address": "Dirección",
    "city": "Ciudad",
    "state": "Departamento",
}

# Fields compared against the loaded snapshot for unsaved-change detection
TRACKED_FIELDS = (
    "title", "description", "price", "currency", "type", "operacion", "property_status_id",
    "bedrooms", "bathrooms", "area", "lot_size", "address", "city_id", "city", "images",
    "featured_image", "amenities", "services", "featured", "premium", "propietario_id",
    "floor_plans", "nearby_facilities", "rental_config",
)

class WizardStep(BaseModel):
    number: int
    title: str
    required: List[str] = Field(default_factory=list)

BASE_STEPS = [
    WizardStep(number=1, title="Descripción y Precio",
               required=["title", "price", "currency", "type", "property_status_id", "description"]),
    WizardStep(number=2, title="Características", required=["area", "bedrooms", "bathrooms"]),
    WizardStep(number=3, title="Ubicación", required=["address", "city", "state"]),
    WizardStep(number=4, title="Multimedia"),
    WizardStep(number=5, title="Amenidades"),
    WizardStep(number=6, title="Servicios"),
    WizardStep(number=7, title="Archivos Privados"),
    WizardStep(number=8, title="Visibilidad"),
    WizardStep(number=9, title="Planos de Planta"),
    WizardStep(number=10, title="Facilidades Cercanas"),
    WizardStep(number=11, title="Propietario"),
]
RENTAL_STEP = WizardStep(number=12, title="Alquiler Temporal")

def absolute_url(url: str) -> str:
    if not url or url.startswith(("http://", "https://", "data:")):
        return url
    return f"{settings.public_base}/{url.lstrip('/')}"

class PropertyWizard:
    """Linear navigation over a `PropertyForm`; `current_step` is 1-based."""

    def __init__(
        self,
        form: Optional[PropertyForm] = None,
        client: Optional[BackendClient] = None,
        notifier: Optional[Notifier] = None,
        editing: bool = False,
    ):
        self.form = form or PropertyForm(client=client, notifier=notifier)
        self.editing = editing
        self.current_step = 1
        self.loading = False
        self.error: Optional[str] = None
        self._snapshot = self._tracked()

    @property
    def notifier(self) -> Notifier:
        return self.form.notifier

    @property
    def steps(self) -> List[WizardStep]:
        return [*BASE_STEPS, RENTAL_STEP] if self.editing else list(BASE_STEPS)

    def required_fields(self, number: int) -> List[str]:
        if number == 2 and self.form.is_land:
            return ["lot_size"]
        return list(self.steps[number - 1].required)

    def validate_step(self, number: int) -> bool:
        fields = self.required_fields(number)
        if not fields:
            return True
        return self.form.validate(fields)

    # --- navigation --------------------------------------------------------

    def next(self) -> bool:
        if not self.validate_step(self.current_step):
            return False
        if self.current_step < len(self.steps):
            self.current_step += 1
        return True

    def back(self) -> None:
        self.current_step = max(1, self.current_step - 1)

    def go_to(self, number: int) -> bool:
        if not 1 <= number <= len(self.steps):
            return False
        if number <= self.current_step:
            self.current_step = number
            return True
        for step in range(self.current_step, number):
            if not self.validate_step(step):
                self.current_step = step
                return False
        self.current_step = number
        return True

    # --- actions -----------------------------------------------------------

    def _all_required(self) -> List[str]:
        fields: List[str] = []
        for step in self.steps:
            fields.extend(self.required_fields(step.number))
        return fields

    async def submit(self) -> Optional[int]:
        if not self.form.validate(self._all_required()):
            errors = self.form.errors
            for step in self.steps:
                if any(f in errors for f in self.required_fields(step.number)):
                    self.current_step = step.number
                    break
            labels = [FIELD_LABELS.get(f, f) for f in errors]
            self.notifier.warning(
                "Campos obligatorios faltantes",
                "Complete los siguientes campos antes de guardar:",
                items=labels,
            )
            logger.info("Wizard submit blocked", step=self.current_step, fields=list(errors))
            return None
        property_id = await self.form.perform_save(as_draft=False)
        if property_id is not None:
            self._snapshot = self._tracked()
        return property_id

    async def save_draft(self) -> Optional[int]:
        property_id = await self.form.save_draft()
        if property_id is not None:
            self._snapshot = self._tracked()
        return property_id

    async def publish(self) -> bool:
        try:
            await self.form.publish_property()
        except PropertyFormError as e:
            self.notifier.error("Error", str(e))
            return False
        except ApiError as e:
            logger.error("Publish failed", property_id=self.form.property_id, error=e.message)
            self.notifier.error("Error", e.message)
            return False
        self.notifier.success("Propiedad publicada", "La propiedad ya está visible para el público.")
        self._snapshot = self._tracked()
        return True

    # --- state ---------------------------------------------------------------

    def _tracked(self) -> Dict:
        return self.form.form_data.model_dump(include=set(TRACKED_FIELDS))

    @property
    def has_unsaved_changes(self) -> bool:
        return self._tracked() != self._snapshot

    @property
    def is_draft(self) -> bool:
        data = self.form.form_data
        values = {data.property_status_code, data.property_status, data.property_status_label, data.status}
        return any((v or "").lower() in ("draft", "borrador") for v in values)

    async def load_for_edit(self, property_id: int) -> bool:
        """Fill the form from an existing property.

        Floor plans and nearby facilities are loaded too: saving replaces them
        wholesale, so the form must start from what the backend has.
        """
        self.loading = True
        self.error = None
        form = self.form
        try:
            prop = await form.properties.get_by_id(property_id)
            if prop is None:
                self.error = "Propiedad no encontrada"
                logger.warning("Property not found for edit", property_id=property_id)
                return False
            data = prop.to_form_data()

            try:
                rental = await form.rentals.get_by_property_id(property_id)
            except ApiError as e:
                logger.warning("Rental config load failed", property_id=property_id, error=e.message)
                rental = None
            if rental is not None:
                data.rental_config = RentalConfig.model_validate(
                    {**rental.model_dump(exclude={"id", "property_id"}), "enabled": True}
                )

            data.images = [absolute_url(url) for url in data.images]
            data.featured_image = absolute_url(data.featured_image)
            if not data.featured_image and data.images:
                data.featured_image = data.images[0]
            # Saving replaces both lists wholesale, so a failed fetch fails the load
            data.floor_plans = await form.floor_plan_service.get_by_property(property_id)
            data.nearby_facilities = await form.nearby_service.get_for_property(property_id)
            for plan in data.floor_plans:
                plan.image = absolute_url(plan.image) if plan.image else plan.image
        except ApiError as e:
            self.error = e.message
            logger.error("Property load failed", property_id=property_id, error=e.message)
            return False
        finally:
            self.loading = False

        form.property_id = property_id
        form.initial = data.model_copy(deep=True)
        form.form_data = data
        form.pending.clear()
        form.errors = {}
        self.editing = True
        self.current_step = 1
        self._snapshot = self._tracked()
        logger.info("Property loaded for edit", property_id=property_id)
        return True

    def start_new(self, defaults: Optional[PropertyFormData] = None) -> None:
        self.form.property_id = None
        self.form.initial = defaults
        self.form.reset()
        self.editing = False
        self.current_step = 1
        self._snapshot = self._tracked()
