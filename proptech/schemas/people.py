from typing import Optional

from pydantic import model_validator

from proptech.schemas.base import CamelModel

class Agent(CamelModel):
    id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    agency_id: Optional[int] = None
    agency_name: Optional[str] = None
    position: Optional[str] = None
    active: bool = True

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data):
        """Backend agents come with Spanish or legacy field names; map them."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data.setdefault("firstName", data.get("nombre") or data.get("first_name") or "")
        data.setdefault("lastName", data.get("apellido") or data.get("last_name") or "")
        if not data.get("phone"):
            data["phone"] = data.get("telefono")
        if "isActive" in data and "active" not in data:
            data["active"] = data["isActive"]
        if data.get("email") is None:
            data["email"] = ""
        return data

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

class Contact(CamelModel):
    id: int
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

class CurrentUser(CamelModel):
    id: Optional[int] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
