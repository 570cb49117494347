from typing import List

from proptech.schemas.catalog import Neighborhood
from proptech.services.base import ResourceService

class NeighborhoodService(ResourceService[Neighborhood]):
    path = "/api/neighborhoods"
    model = Neighborhood
    singular = "barrio"
    plural = "barrios"

    async def get_by_city(self, city_id: int) -> List[Neighborhood]:
        neighborhoods = await self.get_all()
        return [n for n in neighborhoods if n.city_id == city_id]
