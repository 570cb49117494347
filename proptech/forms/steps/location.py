from typing import List, Optional

from structlog import get_logger

from proptech.errors import ApiError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.catalog import City, CityRequest, Country, Department, Neighborhood, NeighborhoodRequest
from proptech.services.cities import CityService
from proptech.services.countries import CountryService
from proptech.services.departments import DepartmentService
from proptech.services.neighborhoods import NeighborhoodService

logger = get_logger()

class LocationStep:
    """Country > department > city > neighborhood cascade, plus inline creation
    of cities and neighborhoods that are missing from the catalog."""

    def __init__(self, form: PropertyForm):
        self.form = form
        client = form.properties.client
        self.country_service = CountryService(client)
        self.department_service = DepartmentService(client)
        self.city_service = CityService(client)
        self.neighborhood_service = NeighborhoodService(client)
        self.countries: List[Country] = []
        self.departments: List[Department] = []
        self.cities: List[City] = []
        self.neighborhoods: List[Neighborhood] = []
        self.register_error: Optional[str] = None

    async def load(self) -> None:
        try:
            self.countries = await self.country_service.get_all()
            self.departments = await self.department_service.get_all()
            self.cities = await self.city_service.get_all()
            self.neighborhoods = await self.neighborhood_service.get_all()
        except ApiError as e:
            logger.error("Location catalogs failed", error=e.message)
            self.form.notifier.error("Error", e.message)

    def departments_for(self, country_id: Optional[int]) -> List[Department]:
        if not country_id:
            return list(self.departments)
        return [d for d in self.departments if d.country_id == country_id]

    def cities_for(self, department_id: Optional[int]) -> List[City]:
        if not department_id:
            return list(self.cities)
        return [c for c in self.cities if c.department_id == department_id]

    def neighborhoods_for(self, city_id: Optional[int]) -> List[Neighborhood]:
        if not city_id:
            return []
        return [n for n in self.neighborhoods if n.city_id == city_id]

    def select_country(self, country_id: Optional[int]) -> None:
        data = self.form.form_data
        country = next((c for c in self.countries if c.id == country_id), None)
        data.country_id = country_id
        data.country = country.name if country else ""
        if data.department_id and data.department_id not in {d.id for d in self.departments_for(country_id)}:
            self.select_department(None)

    def select_department(self, department_id: Optional[int]) -> None:
        data = self.form.form_data
        department = next((d for d in self.departments if d.id == department_id), None)
        data.department_id = department_id
        data.state = department.name if department else ""
        if data.city_id and data.city_id not in {c.id for c in self.cities_for(department_id)}:
            self.select_city(None)

    def select_city(self, city_id: Optional[int]) -> None:
        data = self.form.form_data
        city = next((c for c in self.cities if c.id == city_id), None)
        data.city_id = city_id
        data.city = city.name if city else ""
        data.neighborhood = ""
        if city is None:
            return
        if city.department_id:
            department = next((d for d in self.departments if d.id == city.department_id), None)
            data.department_id = city.department_id
            data.state = department.name if department else (city.department_name or city.state or "")
            if department and department.country_id:
                data.country_id = department.country_id
        country = next((c for c in self.countries if c.id == data.country_id), None)
        if country:
            data.country = country.name
        elif city.country_name:
            data.country = city.country_name

    def select_neighborhood(self, neighborhood_id: Optional[int]) -> None:
        neighborhood = next((n for n in self.neighborhoods if n.id == neighborhood_id), None)
        self.form.form_data.neighborhood = neighborhood.name if neighborhood else ""

    async def register_city(self, name: str, department_id: Optional[int]) -> Optional[City]:
        name = (name or "").strip()
        if not name or not department_id:
            self.register_error = "Nombre y departamento son obligatorios"
            return None
        try:
            city = await self.city_service.create(CityRequest(name=name, department_id=department_id))
        except ApiError as e:
            self.register_error = e.message
            return None
        self.register_error = None
        self.cities.append(city)
        self.select_city(city.id)
        logger.info("City registered", city_id=city.id, name=city.name)
        return city

    async def register_neighborhood(self, name: str, city_id: Optional[int]) -> Optional[Neighborhood]:
        name = (name or "").strip()
        if not name or not city_id:
            self.register_error = "Nombre y ciudad son obligatorios"
            return None
        try:
            neighborhood = await self.neighborhood_service.create(NeighborhoodRequest(name=name, city_id=city_id))
        except ApiError as e:
            self.register_error = e.message
            return None
        self.register_error = None
        self.neighborhoods.append(neighborhood)
        self.select_neighborhood(neighborhood.id)
        logger.info("Neighborhood registered", neighborhood_id=neighborhood.id, name=neighborhood.name)
        return neighborhood
