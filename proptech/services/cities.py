from typing import List

from proptech.schemas.catalog import City
from proptech.services.base import ResourceService

class CityService(ResourceService[City]):
    path = "/api/cities"
    model = City
    singular = "ciudad"
    plural = "ciudades"

    async def get_by_department(self, department_id: int) -> List[City]:
        cities = await self.get_all()
        return [c for c in cities if c.department_id == department_id]
