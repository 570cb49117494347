from typing import List

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.catalog import CatalogItem, Currency, PropertyStatus
from proptech.services.catalogs import CurrencyService, PropertyTypeService
from proptech.services.properties import PropertyStatusService

logger = get_logger()

DEFAULT_OPERATIONS = ["SALE", "RENT", "BOTH"]

class TypeAndOperationStep:
    def __init__(self, form: PropertyForm):
        self.form = form
        client = form.properties.client
        self.types = PropertyTypeService(client)
        self.statuses = PropertyStatusService(client)
        self.currencies = CurrencyService(client)
        self.operations: List[str] = []
        self.property_types: List[CatalogItem] = []
        self.property_statuses: List[PropertyStatus] = []
        self.currency_options: List[Currency] = []

    async def load(self) -> None:
        try:
            self.operations = await self.form.properties.get_operations() or DEFAULT_OPERATIONS
        except ApiError as e:
            logger.warning("Operations load failed, using defaults", error=e.message)
            self.operations = DEFAULT_OPERATIONS
        try:
            self.property_types = await self.types.get_active()
            self.property_statuses = await self.statuses.get_all()
            self.currency_options = await self.currencies.get_active()
        except ApiError as e:
            logger.error("Type step catalogs failed", error=e.message)
            self.form.notifier.error("Error", e.message)

    def select_currency(self, code: str) -> None:
        currency = next((c for c in self.currency_options if c.code == code), None)
        self.form.handle_currency_change(code, currency.id if currency else None)

    def select_type(self, type_id: int) -> None:
        item = next((t for t in self.property_types if t.id == type_id), None)
        self.form.handle_change("property_type_id", type_id)
        if item:
            self.form.handle_change("type", item.name)

    def select_status(self, status_id: int) -> None:
        status = next((s for s in self.property_statuses if s.id == status_id), None)
        self.form.handle_change("property_status_id", status_id)
        if status:
            self.form.form_data.property_status = status.name
            self.form.form_data.property_status_code = status.code
