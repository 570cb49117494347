from typing import List

from proptech.schemas.catalog import CityZone
from proptech.services.base import ResourceService

class CityZoneService(ResourceService[CityZone]):
    path = "/api/city-zones"
    model = CityZone
    singular = "zona urbana"
    plural = "zonas urbanas"

    async def get_by_city(self, city_id: int) -> List[CityZone]:
        zones = await self.get_all()
        return [z for z in zones if z.city_id == city_id]
