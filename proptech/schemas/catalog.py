from typing import Optional

from pydantic import Field, field_validator

from proptech.schemas.base import CamelModel

class Country(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    phone_code: Optional[str] = None

class CountryRequest(CamelModel):
    name: str = Field(..., min_length=1)
    code: Optional[str] = None
    phone_code: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper()[:2] if v else v

    def to_wire(self, **kwargs) -> dict:
        data = super().to_wire(**kwargs)
        if not data.get("code"):
            data["code"] = self.name.strip()[:2].upper()
        return data

class Department(CamelModel):
    id: int
    name: str
    country_id: Optional[int] = None
    description: Optional[str] = None
    active: bool = True

class DepartmentRequest(CamelModel):
    name: str = Field(..., min_length=1)
    country_id: int
    description: Optional[str] = None
    active: bool = True

class City(CamelModel):
    id: int
    name: str
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    country_name: Optional[str] = None
    country_id: Optional[int] = None
    state: Optional[str] = None

class CityRequest(CamelModel):
    name: str = Field(..., min_length=1)
    department_id: int
    state: Optional[str] = None

class CityZone(CamelModel):
    id: int
    name: str
    city_id: Optional[int] = None
    city_name: Optional[str] = None
    description: Optional[str] = None
    active: bool = True

class CityZoneRequest(CamelModel):
    name: str = Field(..., min_length=1)
    city_id: int
    description: Optional[str] = None
    active: bool = True

class Neighborhood(CamelModel):
    id: int
    name: str
    city_id: Optional[int] = None
    city_name: Optional[str] = None
    description: Optional[str] = None

class NeighborhoodRequest(CamelModel):
    name: str = Field(..., min_length=1)
    city_id: int
    description: Optional[str] = None

class CatalogItem(CamelModel):
    """Amenities, services, property types: anything with id/name/active."""
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    active: bool = True

class Currency(CamelModel):
    id: int
    code: str
    name: Optional[str] = None
    symbol: Optional[str] = None
    active: bool = True

class PropertyStatus(CamelModel):
    id: int
    name: str
    code: Optional[str] = None

    @property
    def is_draft(self) -> bool:
        values = {(self.code or "").lower(), self.name.lower()}
        return bool(values & {"draft", "borrador"})
