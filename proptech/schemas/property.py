from typing import List, Optional

from pydantic import Field, field_validator
from pydantic.alias_generators import to_camel

from proptech.schemas.base import CamelModel
from proptech.schemas.media import FloorPlan, PropertyNearbyFacility, RentalConfig, UploadedFile

# Backend DTO name -> form field, used when the form name is absent
DTO_FIELDS = {
    "parkingSpaces": "parking",
    "galleryImages": "images",
    "neighborhoodName": "neighborhood",
    "countryName": "country",
    "propertyTypeName": "type",
}

class PropertyFormData(CamelModel):
    """Every field the wizard can touch, declared up front.

    Steps fill it incrementally; `PropertyForm.validate` checks the subset a
    step requires and `build_property_payload` serializes it in one go.
    """

    # Descripción y precio
    title: str = ""
    description: str = ""
    price: Optional[float] = 0
    currency: Optional[str] = "USD"
    currency_id: Optional[int] = None
    operacion: Optional[str] = "SALE"
    type: Optional[str] = "apartment"
    property_type_id: Optional[int] = None
    additional_property_types: List[str] = Field(default_factory=list)
    status: Optional[str] = "active"
    property_status_id: Optional[int] = None
    property_status: Optional[str] = None
    property_status_code: Optional[str] = None
    property_status_label: Optional[str] = None

    # Características
    bedrooms: Optional[int] = 0
    bathrooms: Optional[int] = 0
    area: Optional[float] = 0
    lot_size: Optional[float] = 0
    rooms: Optional[int] = 0
    kitchens: Optional[int] = 0
    floors: Optional[int] = 0
    parking: Optional[int] = None
    year_built: Optional[int] = None
    available_from: str = ""
    additional_details: str = ""

    # Ubicación
    address: str = ""
    city: str = ""
    city_id: Optional[int] = None
    state: str = ""
    department_id: Optional[int] = None
    country: str = ""
    country_id: Optional[int] = None
    neighborhood: str = ""
    city_zone_id: Optional[int] = None
    zip: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_description: str = ""

    # Multimedia
    images: List[str] = Field(default_factory=list)
    featured_image: str = ""
    video_url: str = ""
    virtual_tour_url: str = ""

    amenities: List[int] = Field(default_factory=list)
    services: List[int] = Field(default_factory=list)
    private_files: List[UploadedFile] = Field(default_factory=list)

    # Visibilidad
    featured: bool = False
    premium: bool = False

    agent_id: Optional[int] = None
    agency_id: Optional[int] = None
    propietario_id: Optional[int] = None

    floor_plans: List[FloorPlan] = Field(default_factory=list)
    nearby_facilities: List[PropertyNearbyFacility] = Field(default_factory=list)
    rental_config: Optional[RentalConfig] = None

    @classmethod
    def _from_backend(cls, data: dict) -> dict:
        """Property DTOs nest the currency and use their own names for a few fields."""
        currency = data.get("currency")
        if isinstance(currency, dict):
            data["currency"] = currency.get("code") or data.get("currencyCode") or "USD"
            if data.get("currencyId") is None and data.get("currency_id") is None:
                data["currencyId"] = currency.get("id")
        for dto_key, field in DTO_FIELDS.items():
            if data.get(dto_key) is None:
                continue
            if data.get(field) is None and data.get(to_camel(field)) is None:
                data[field] = data[dto_key]
        return data

    @field_validator("amenities", "services", mode="before")
    @classmethod
    def _ids_only(cls, v):
        if not v:
            return []
        ids = []
        for item in v:
            value = item.get("id") if isinstance(item, dict) else item
            try:
                ids.append(int(value))
            except (TypeError, ValueError):
                continue
        return ids

    @field_validator("images", mode="before")
    @classmethod
    def _image_urls(cls, v):
        if not v:
            return []
        return [item.get("url") if isinstance(item, dict) else item for item in v if item]

    @field_validator("featured_image", "video_url", "virtual_tour_url", "description", "title", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else v

class Property(PropertyFormData):
    id: int

    def to_form_data(self) -> PropertyFormData:
        return PropertyFormData.model_validate(self.model_dump(exclude={"id"}))

class PropertySummary(CamelModel):
    """Slim listing shape used by the inventory report."""
    id: int
    title: str = ""
    address: Optional[str] = ""
    type: Optional[str] = ""
    status: Optional[str] = ""
    price: Optional[float] = 0
    currency: Optional[str] = None
    bedrooms: Optional[int] = 0
    bathrooms: Optional[int] = 0
    area: Optional[float] = 0
    year_built: Optional[int] = None
    amenities: List[str] = Field(default_factory=list)

    @field_validator("currency", mode="before")
    @classmethod
    def _currency_code(cls, v):
        return v.get("code") if isinstance(v, dict) else v

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenity_names(cls, v):
        if not v:
            return []
        return [str(item.get("name", item.get("id"))) if isinstance(item, dict) else str(item) for item in v]
