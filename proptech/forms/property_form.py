from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from bs4 import BeautifulSoup
from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.errors import AlreadyAssociated, ApiError, PropertyFormError
from proptech.notifications import Notifier
from proptech.schemas.media import (
    FloorPlan,
    PendingUploads,
    PropertyNearbyFacility,
    UploadFile,
    UploadedFile,
)
from proptech.schemas.property import PropertyFormData
from proptech.services.agents import AgentService
from proptech.services.files import FileService
from proptech.services.floor_plans import FloorPlanService
from proptech.services.nearby_facilities import NearbyFacilityService
from proptech.services.properties import PropertyService, PropertyStatusService
from proptech.services.rentals import RentalPropertyService

logger = get_logger()

PENDING_PREFIX = "pending:"

NUMERIC_FIELDS = {
    "price", "bedrooms", "bathrooms", "area", "property_status_id", "property_type_id",
    "agent_id", "agency_id", "propietario_id", "lot_size", "rooms", "kitchens", "floors",
    "year_built", "parking", "latitude", "longitude", "currency_id", "city_id",
    "department_id", "country_id", "city_zone_id",
}
ARRAY_FIELDS = {"additional_property_types"}
# Sub-resources saved by their own endpoints after the property itself
SIDE_RESOURCE_FIELDS = {"floor_plans", "nearby_facilities", "rental_config", "private_files"}
LAND_KEYWORDS = ("terreno", "lote", "loteo")

_FIELDS = PropertyFormData.model_fields
_FIELD_BY_ALIAS = {to_camel(name): name for name in _FIELDS}
_ADAPTERS: Dict[str, TypeAdapter] = {}

def is_pending(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(PENDING_PREFIX)

def new_preview_key() -> str:
    return f"{PENDING_PREFIX}{uuid4().hex}"

def plain_text(html: str) -> str:
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text()

def to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number

def field_name(name: str) -> str:
    if name in _FIELDS:
        return name
    if name in _FIELD_BY_ALIAS:
        return _FIELD_BY_ALIAS[name]
    raise PropertyFormError(f"Campo desconocido: {name}")

def _adapter(name: str) -> TypeAdapter:
    if name not in _ADAPTERS:
        _ADAPTERS[name] = TypeAdapter(_FIELDS[name].annotation)
    return _ADAPTERS[name]

class PropertyForm:
    """State and save orchestration for the property wizard.

    Holds one `PropertyFormData`, the validation errors of the last
    `validate` call, and the local files waiting for a property id. Saving is
    sequential and not transactional: once the property record is written,
    images, floor plans, nearby facilities and rental config are synced one
    after another, and a failure in any of them only produces a warning.
    """

    def __init__(
        self,
        initial: Optional[PropertyFormData] = None,
        property_id: Optional[int] = None,
        client: Optional[BackendClient] = None,
        notifier: Optional[Notifier] = None,
    ):
        client = client or BackendClient()
        self.properties = PropertyService(client)
        self.statuses = PropertyStatusService(client)
        self.files = FileService(client)
        self.floor_plan_service = FloorPlanService(client)
        self.nearby_service = NearbyFacilityService(client)
        self.rentals = RentalPropertyService(client)
        self.agents = AgentService(client)
        self.notifier = notifier or Notifier()

        self.initial = initial
        self.property_id = property_id
        self.form_data = initial.model_copy(deep=True) if initial else PropertyFormData()
        self.errors: Dict[str, str] = {}
        self.pending = PendingUploads()
        self.saving = False

    @property
    def draft_property_id(self) -> Optional[int]:
        return self.property_id

    @property
    def is_land(self) -> bool:
        type_name = (self.form_data.type or "").lower()
        return any(word in type_name for word in LAND_KEYWORDS)

    # --- field editing -------------------------------------------------

    def handle_change(self, name: str, value: Any) -> None:
        name = field_name(name)
        if name in NUMERIC_FIELDS:
            value = to_number(value)
        elif name in ARRAY_FIELDS:
            value = list(value) if isinstance(value, (list, tuple)) else []
        try:
            value = _adapter(name).validate_python(value)
        except ValidationError as e:
            if name not in NUMERIC_FIELDS:
                raise PropertyFormError(f"Valor inválido para {name}") from e
            value = None
        setattr(self.form_data, name, value)

    def handle_currency_change(self, currency: str, currency_id: Optional[int] = None) -> None:
        self.form_data.currency = currency
        if currency_id is not None:
            self.form_data.currency_id = currency_id

    def toggle_amenity(self, amenity_id: int) -> None:
        self.form_data.amenities = _toggle(self.form_data.amenities, amenity_id)

    def toggle_service(self, service_id: int) -> None:
        self.form_data.services = _toggle(self.form_data.services, service_id)

    def toggle_boolean_field(self, field: str) -> None:
        if field not in ("featured", "premium"):
            raise PropertyFormError(f"Campo no conmutable: {field}")
        setattr(self.form_data, field, not getattr(self.form_data, field))

    # --- images ----------------------------------------------------------

    def add_featured_image(self, file: UploadFile) -> str:
        self.remove_featured_image()
        key = new_preview_key()
        self.pending.featured_image = file
        self.form_data.featured_image = key
        return key

    def remove_featured_image(self) -> None:
        self.form_data.featured_image = ""
        self.pending.featured_image = None

    def add_gallery_images(self, files: Iterable[UploadFile]) -> List[str]:
        keys = []
        for file in files:
            key = new_preview_key()
            self.pending.gallery[key] = file
            keys.append(key)
        self.form_data.images = [*self.form_data.images, *keys]
        self._revalidate("images")
        return keys

    def select_featured_image(self, url: str) -> None:
        """Feature an image already in the gallery; a pending one is resolved at save time."""
        self.pending.featured_image = None
        self.form_data.featured_image = url

    def remove_image(self, index: int) -> None:
        if not 0 <= index < len(self.form_data.images):
            return
        images = list(self.form_data.images)
        removed = images.pop(index)
        self.pending.gallery.pop(removed, None)
        if removed == self.form_data.featured_image:
            self.remove_featured_image()
        self.form_data.images = images
        self._revalidate("images")

    def reorder_images(self, from_index: int, to_index: int) -> None:
        images = list(self.form_data.images)
        if not (0 <= from_index < len(images) and 0 <= to_index < len(images)):
            return
        images.insert(to_index, images.pop(from_index))
        self.form_data.images = images

    # --- private files ---------------------------------------------------

    async def add_private_files(self, files: Iterable[UploadFile]) -> List[UploadedFile]:
        uploaded = [await self.files.upload(file, "private") for file in files]
        self.form_data.private_files = [*self.form_data.private_files, *uploaded]
        return uploaded

    def remove_private_file(self, index: int) -> None:
        self.form_data.private_files = [
            f for i, f in enumerate(self.form_data.private_files) if i != index
        ]

    # --- floor plans / facilities ----------------------------------------

    def handle_floor_plans_change(self, plans: Iterable[Any]) -> None:
        plans = [FloorPlan.model_validate(p) if not isinstance(p, FloorPlan) else p for p in plans]
        keep = {p.image for p in plans if is_pending(p.image)}
        self.pending.floor_plan_images = {
            k: v for k, v in self.pending.floor_plan_images.items() if k in keep
        }
        self.form_data.floor_plans = plans

    def queue_floor_plan_image(self, index: int, file: UploadFile) -> str:
        plan = self.form_data.floor_plans[index]
        if is_pending(plan.image):
            self.pending.floor_plan_images.pop(plan.image, None)
        key = new_preview_key()
        self.pending.floor_plan_images[key] = file
        plan.image = key
        return key

    def handle_nearby_facilities_change(self, facilities: Iterable[Any]) -> None:
        self.form_data.nearby_facilities = [
            f if isinstance(f, PropertyNearbyFacility) else PropertyNearbyFacility.model_validate(f)
            for f in facilities
        ]

    async def assign_agent_from_user(self, email: Optional[str]) -> None:
        if not email or self.form_data.agent_id:
            return
        try:
            agent = await self.agents.get_by_email(email)
        except ApiError as e:
            logger.error("Agent lookup failed", email=email, error=e.message)
            return
        if agent:
            self.form_data.agent_id = agent.id
            self.form_data.agency_id = agent.agency_id
            logger.info("Agent assigned from user", agent_id=agent.id, name=agent.full_name)

    # --- validation --------------------------------------------------------

    def validate(self, fields: Optional[Iterable[str]] = None) -> bool:
        self.errors = self._collect_errors(fields)
        return not self.errors

    def _revalidate(self, field: str) -> None:
        if field not in self.errors:
            return
        self.errors.pop(field)
        self.errors.update(self._collect_errors([field]))

    def _collect_errors(self, fields: Optional[Iterable[str]]) -> Dict[str, str]:
        wanted = None if fields is None else {field_name(f) for f in fields}
        errors: Dict[str, str] = {}
        d = self.form_data

        def check(field: str, message: str, condition: bool) -> None:
            if (wanted is None or field in wanted) and condition and field not in errors:
                errors[field] = message

        def requested(field: str) -> bool:
            return wanted is not None and field in wanted

        title = d.title or ""
        check("title", "El título es obligatorio", not title.strip())
        check("title", "El título debe tener entre 3 y 100 caracteres", bool(title) and not 3 <= len(title) <= 100)

        description = plain_text(d.description)
        check("description", "La descripción es obligatoria", not description.strip())
        check(
            "description",
            "La descripción debe tener entre 10 y 5000 caracteres",
            bool(description) and not 10 <= len(description) <= 5000,
        )

        check("price", "El precio es obligatorio y debe ser mayor a 0", not d.price or d.price <= 0)
        check("currency", "La moneda es obligatoria", not d.currency)
        check("type", "El tipo de propiedad es obligatorio", not d.type)
        check("operacion", "La operación es obligatoria", not d.operacion)
        check("status", "El estado de la propiedad es obligatorio", not d.status)
        check("property_status_id", "El estado de la propiedad es obligatorio", not d.property_status_id)
        check("agent_id", "El agente es obligatorio", not d.agent_id)

        check("address", "La dirección es obligatoria", not (d.address or "").strip())
        check("city", "La ciudad es obligatoria", not (d.city_id or (d.city or "").strip()))
        check("state", "El departamento es obligatorio", not (d.department_id or (d.state or "").strip()))

        check("bedrooms", "El número de dormitorios no puede ser negativo", (d.bedrooms or 0) < 0)
        check("bathrooms", "El número de baños no puede ser negativo", (d.bathrooms or 0) < 0)
        check("area", "El área no puede ser negativa", (d.area or 0) < 0)
        check("parking", "El número de espacios de estacionamiento no puede ser negativo", (d.parking or 0) < 0)
        if requested("lot_size"):
            check("lot_size", "La superficie del terreno debe ser mayor a 0", not d.lot_size or d.lot_size <= 0)

        max_year = date.today().year + 1
        if d.year_built and not 1800 <= d.year_built <= max_year:
            check("year_built", f"El año de construcción debe ser válido (entre 1800 y {max_year})", True)

        if requested("images"):
            check("images", "Se recomienda subir al menos una imagen de la propiedad", not d.images)

        return errors

    # --- payload -----------------------------------------------------------

    def build_property_payload(self, status_id: Optional[int] = None) -> dict:
        """Serialize the form for create/update.

        Blank strings and missing numbers are dropped instead of sent empty;
        local previews never leave the process.
        """
        d = self.form_data
        raw = d.to_wire(exclude=SIDE_RESOURCE_FIELDS)
        payload = {}
        for name in _FIELDS:
            if name in SIDE_RESOURCE_FIELDS:
                continue
            key = to_camel(name)
            value = raw.get(key)
            if name in NUMERIC_FIELDS:
                value = to_number(value)
            elif isinstance(value, str):
                value = value.strip() or None
            if value is None:
                continue
            payload[key] = value

        payload["images"] = [url for url in d.images if not is_pending(url)]
        if is_pending(d.featured_image):
            payload.pop("featuredImage", None)
        payload["privateFiles"] = [f.to_wire(exclude_none=True) for f in d.private_files]
        if status_id is not None:
            payload["propertyStatusId"] = status_id
        if payload.get("currencyId"):
            payload.pop("currency", None)
        return payload

    # --- save orchestration ------------------------------------------------

    async def _resolve_status_id(self, as_draft: bool) -> Optional[int]:
        if not as_draft:
            return self.form_data.property_status_id
        try:
            draft = await self.statuses.find_draft()
        except ApiError as e:
            logger.warning("Draft status lookup failed", error=e.message)
            draft = None
        if draft is None:
            logger.warning("No draft status found, keeping form status")
            return self.form_data.property_status_id
        self.form_data.property_status_id = draft.id
        return draft.id

    async def perform_save(self, as_draft: bool = False) -> Optional[int]:
        self.saving = True
        try:
            status_id = await self._resolve_status_id(as_draft)
            payload = self.build_property_payload(status_id)
            creating = self.property_id is None
            try:
                if creating:
                    saved = await self.properties.create(payload)
                else:
                    saved = await self.properties.update(self.property_id, payload)
            except ApiError as e:
                logger.error("Property save failed", property_id=self.property_id, error=e.message)
                self.notifier.error("Error", e.message or "Error desconocido al guardar la propiedad")
                return None

            self.property_id = saved.id
            logger.info("Property saved", property_id=saved.id, created=creating, draft=as_draft)

            await self._sync_images(saved.id)
            await self._sync_floor_plans(saved.id)
            await self._sync_nearby_facilities(saved.id)
            await self._sync_rental_config(saved.id)

            if as_draft:
                self.notifier.success("Borrador guardado", "El borrador de la propiedad se guardó correctamente.")
            elif creating:
                self.notifier.success("¡Excelente!", "La propiedad ha sido creada exitosamente.")
            else:
                self.notifier.success("¡Excelente!", "La propiedad ha sido actualizada correctamente.")
            return saved.id
        finally:
            self.saving = False

    async def _sync_images(self, property_id: int) -> None:
        if not self.pending.has_images:
            return
        d = self.form_data
        try:
            featured_url = None
            if self.pending.featured_image is not None:
                featured_url = (await self.files.upload(self.pending.featured_image, "properties")).url
            uploaded = {}
            for key, file in self.pending.gallery.items():
                uploaded[key] = (await self.files.upload(file, "properties")).url
            images = [uploaded.get(url, url) for url in d.images if not is_pending(url) or url in uploaded]
            if featured_url is None and d.featured_image in uploaded:
                featured_url = uploaded[d.featured_image]
            elif featured_url is None and not is_pending(d.featured_image):
                featured_url = d.featured_image or None
            if featured_url is None and images:
                featured_url = images[0]
            await self.properties.update_images(property_id, images, featured_url)
        except ApiError as e:
            logger.error("Image sync failed", property_id=property_id, error=e.message)
            self.notifier.warning("Imágenes", "La propiedad se guardó, pero las imágenes no se pudieron guardar.")
            return
        d.images = images
        d.featured_image = featured_url or ""
        self.pending.clear_images()

    async def _sync_floor_plans(self, property_id: int) -> None:
        """Full replacement: delete every plan, then create the current list."""
        plans = self.form_data.floor_plans
        try:
            for plan in plans:
                if not is_pending(plan.image):
                    continue
                key = plan.image
                file = self.pending.floor_plan_images.get(key)
                if file is None:
                    logger.warning("Floor plan preview without file", property_id=property_id, key=key)
                    plan.image = None
                    continue
                plan.image = (await self.files.upload(file, "floor-plans")).url
                # Only forget the file once it is stored
                del self.pending.floor_plan_images[key]
            await self.floor_plan_service.delete_all(property_id)
            if plans:
                await self.floor_plan_service.create_many(property_id, plans)
        except ApiError as e:
            logger.error("Floor plan sync failed", property_id=property_id, error=e.message)
            self.notifier.warning("Planos de planta", "La propiedad se guardó, pero los planos no se pudieron sincronizar.")

    async def _sync_nearby_facilities(self, property_id: int) -> None:
        """Full replacement: delete every association, then recreate each local one."""
        try:
            existing = await self.nearby_service.get_for_property(property_id)
            for link in existing:
                await self.nearby_service.remove_from_property(property_id, link.nearby_facility_id)
            for link in self.form_data.nearby_facilities:
                try:
                    await self.nearby_service.add_to_property(property_id, link)
                except AlreadyAssociated:
                    logger.info("Facility already associated", property_id=property_id,
                                nearby_facility_id=link.nearby_facility_id)
        except ApiError as e:
            logger.error("Nearby facility sync failed", property_id=property_id, error=e.message)
            self.notifier.warning("Facilidades cercanas", "La propiedad se guardó, pero las facilidades cercanas no se pudieron sincronizar.")

    async def _sync_rental_config(self, property_id: int) -> None:
        config = self.form_data.rental_config
        if not config or not config.enabled:
            return
        try:
            await self.rentals.upsert(property_id, config)
        except ApiError as e:
            logger.error("Rental config sync failed", property_id=property_id, error=e.message)
            self.notifier.warning("Alquiler temporal", "La propiedad se guardó, pero la configuración de alquiler no se pudo guardar.")

    async def save_draft(self) -> Optional[int]:
        return await self.perform_save(as_draft=True)

    async def submit(self, required_fields: Optional[Iterable[str]] = None) -> Optional[int]:
        if not self.validate(required_fields):
            self.notifier.warning("Errores de validación", items=list(self.errors.values()))
            return None
        return await self.perform_save(as_draft=False)

    async def publish_property(self) -> None:
        if self.property_id is None:
            raise PropertyFormError("Guarda la propiedad como borrador antes de publicarla")
        await self.properties.publish(self.property_id)
        self.form_data.status = "active"
        self.form_data.property_status = "Publicado"
        self.form_data.property_status_code = "ACTIVE"
        self.form_data.property_status_label = "Publicado"
        logger.info("Property published", property_id=self.property_id)

    def reset(self) -> None:
        initial = self.initial or PropertyFormData()
        self.form_data = PropertyFormData(
            property_status_id=initial.property_status_id,
            property_type_id=initial.property_type_id,
            agent_id=initial.agent_id,
            agency_id=initial.agency_id,
        )
        self.pending.clear()
        self.errors = {}

def _toggle(values: List[int], value: int) -> List[int]:
    if value in values:
        return [v for v in values if v != value]
    return [*values, value]
