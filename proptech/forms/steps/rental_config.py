from typing import Any

from proptech.errors import PropertyFormError
from proptech.forms.property_form import PropertyForm
from proptech.schemas.media import RentalConfig

def default_rental_config(currency: str | None) -> RentalConfig:
    return RentalConfig(
        enabled=True,
        price_per_night=150000,
        cleaning_fee=50000,
        currency=currency or "PYG",
        min_nights=1,
        max_nights=30,
        max_guests=2,
        check_in_time="14:00",
        check_out_time="11:00",
        rental_type="APARTMENT",
        cancellation_policy="MODERATE",
        wifi_available=True,
    )

class RentalConfigStep:
    def __init__(self, form: PropertyForm):
        self.form = form

    @property
    def config(self) -> RentalConfig | None:
        return self.form.form_data.rental_config

    @property
    def enabled(self) -> bool:
        return bool(self.config and self.config.enabled)

    def toggle(self, enabled: bool) -> None:
        if not enabled:
            self.form.form_data.rental_config = None
        elif not self.enabled:
            self.form.form_data.rental_config = default_rental_config(self.form.form_data.currency)

    def set_field(self, name: str, value: Any) -> None:
        if name not in RentalConfig.model_fields:
            raise PropertyFormError(f"Campo desconocido: {name}")
        if not self.enabled:
            return
        self.form.form_data.rental_config = self.config.model_copy(update={name: value})
