from typing import List

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.people import Contact
from proptech.services.contacts import ContactService

logger = get_logger()

class OwnerInfoStep:
    """Ordered owners of the property; the first one is the primary contact."""

    def __init__(self, form: PropertyForm):
        self.form = form
        self.contacts = ContactService(form.properties.client)
        self.options: List[Contact] = []
        self.owners: List[Contact] = []

    async def load(self) -> None:
        try:
            self.options = await self.contacts.get_all()
        except ApiError as e:
            logger.error("Contacts load failed", error=e.message)
            self.form.notifier.error("Error", e.message)
            return
        owner_id = self.form.form_data.propietario_id
        if owner_id and not self.owners:
            primary = next((c for c in self.options if c.id == owner_id), None)
            if primary:
                self.owners = [primary]

    @property
    def primary(self):
        return self.owners[0] if self.owners else None

    def _sync(self) -> None:
        self.form.form_data.propietario_id = self.primary.id if self.primary else None

    def add(self, contact_id: int) -> bool:
        if any(o.id == contact_id for o in self.owners):
            return False
        contact = next((c for c in self.options if c.id == contact_id), None)
        if contact is None:
            return False
        self.owners.append(contact)
        self._sync()
        return True

    def remove(self, contact_id: int) -> None:
        self.owners = [o for o in self.owners if o.id != contact_id]
        self._sync()

    def make_primary(self, contact_id: int) -> None:
        owner = next((o for o in self.owners if o.id == contact_id), None)
        if owner is None:
            return
        self.owners = [owner] + [o for o in self.owners if o.id != contact_id]
        self._sync()
