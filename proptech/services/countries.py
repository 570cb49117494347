from proptech.schemas.catalog import Country
from proptech.services.base import ResourceService

class CountryService(ResourceService[Country]):
    path = "/api/countries"
    model = Country
    singular = "país"
    plural = "países"
