from typing import Optional

from pydantic import BaseModel, Field

from proptech.schemas.base import CamelModel

class UploadFile(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def as_part(self) -> tuple:
        return (self.filename, self.content, self.content_type)

class UploadedFile(CamelModel):
    url: str
    name: Optional[str] = None

class GalleryImage(CamelModel):
    id: int
    url: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    order_index: Optional[int] = None
    is_primary: bool = False

class FloorPlan(CamelModel):
    id: Optional[int] = None
    title: str = ""
    bedrooms: int = 0
    bathrooms: int = 0
    price: float = 0
    price_suffix: str = ""
    size: float = 0
    image: Optional[str] = None
    description: str = ""
    property_id: Optional[int] = None

class PrivateFile(CamelModel):
    id: Optional[int] = None
    url: str
    name: str = ""
    file_size: Optional[int] = None
    content_type: Optional[str] = None

class NearbyFacility(CamelModel):
    id: int
    name: str
    type: Optional[str] = None
    address: Optional[str] = None
    active: bool = True

class PropertyNearbyFacility(CamelModel):
    id: Optional[int] = None
    nearby_facility_id: int
    nearby_facility: Optional[NearbyFacility] = None
    distance_km: Optional[float] = None
    walking_time_minutes: Optional[int] = None
    driving_time_minutes: Optional[int] = None
    is_featured: bool = False
    notes: Optional[str] = None

    def to_request(self) -> dict:
        return self.to_wire(exclude={"id", "nearby_facility"}, exclude_none=True)

class RentalConfig(CamelModel):
    enabled: bool = False
    price_per_night: Optional[float] = None
    price_per_week: Optional[float] = None
    price_per_month: Optional[float] = None
    cleaning_fee: Optional[float] = None
    currency: Optional[str] = None
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None
    max_guests: Optional[int] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    instant_booking: bool = False
    rental_type: Optional[str] = None
    pets_allowed: bool = False
    pet_fee: Optional[float] = None
    smoking_allowed: bool = False
    events_allowed: bool = False
    wifi_available: bool = False
    cancellation_policy: Optional[str] = None
    house_rules: Optional[str] = None

class RentalProperty(RentalConfig):
    id: int
    property_id: Optional[int] = None

class PendingUploads(BaseModel):
    """Local files picked before they can be attached to a saved property.

    Gallery and floor-plan files are keyed by the preview key that stands in
    for their URL until the save flushes them.
    """

    featured_image: Optional[UploadFile] = None
    gallery: dict[str, UploadFile] = Field(default_factory=dict)
    floor_plan_images: dict[str, UploadFile] = Field(default_factory=dict)

    @property
    def has_images(self) -> bool:
        return self.featured_image is not None or bool(self.gallery)

    def clear_images(self) -> None:
        self.featured_image = None
        self.gallery = {}

    def clear(self) -> None:
        self.clear_images()
        self.floor_plan_images = {}
