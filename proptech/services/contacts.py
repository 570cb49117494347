from proptech.schemas.people import Contact
from proptech.services.base import ResourceService

class ContactService(ResourceService[Contact]):
    path = "/api/contacts"
    model = Contact
    singular = "contacto"
    plural = "contactos"
