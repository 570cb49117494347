from typing import List

from proptech.schemas.catalog import Department
from proptech.services.base import ResourceService

class DepartmentService(ResourceService[Department]):
    path = "/api/departments"
    model = Department
    singular = "departamento"
    plural = "departamentos"

    async def get_by_country(self, country_id: int) -> List[Department]:
        departments = await self.get_all()
        return [d for d in departments if d.country_id == country_id]
