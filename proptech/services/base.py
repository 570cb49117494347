from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.errors import ApiError

logger = get_logger()

T = TypeVar("T", bound=BaseModel)

def as_list(payload: Any) -> list:
    """Backend list endpoints answer with a bare list or a paged wrapper."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("data", "content", "items", "results"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return []

def to_body(data: Any) -> Any:
    if isinstance(data, BaseModel):
        if hasattr(data, "to_wire"):
            return data.to_wire()
        return data.model_dump(by_alias=True, mode="json")
    return data

class ResourceService(Generic[T]):
    """CRUD over one backend collection.

    `get_by_id` answers None on 404; every other failure raises `ApiError`.
    """

    path: str = ""
    model: Type[T]
    singular: str = "registro"
    plural: str = "registros"

    def __init__(self, client: BackendClient | None = None):
        self.client = client or BackendClient()

    def _parse(self, payload: Any, model: Type[BaseModel] | None = None) -> T:
        try:
            return (model or self.model).model_validate(payload)
        except ValidationError as e:
            logger.error("Unexpected backend payload", path=self.path, errors=e.errors(include_url=False))
            raise ApiError(f"Error al leer {self.singular}: respuesta inesperada del servidor", None, "leer") from e

    async def get_all(self) -> List[T]:
        data = await self.client.get(self.path, f"obtener {self.plural}")
        return [self._parse(item) for item in as_list(data)]

    async def get_by_id(self, item_id: int) -> Optional[T]:
        data = await self.client.get(f"{self.path}/{item_id}", f"obtener {self.singular}", allow_404=True)
        if data is None:
            logger.info("Resource not found", path=self.path, id=item_id)
            return None
        return self._parse(data)

    async def create(self, data: Any) -> T:
        created = await self.client.post(self.path, f"crear {self.singular}", json=to_body(data))
        return self._parse(created)

    async def update(self, item_id: int, data: Any) -> T:
        body = to_body(data)
        updated = await self.client.put(f"{self.path}/{item_id}", f"actualizar {self.singular}", json=body)
        if not isinstance(updated, dict):
            # Some endpoints answer 204; echo what was sent
            updated = {**body, "id": item_id}
        return self._parse(updated)

    async def delete(self, item_id: int) -> None:
        await self.client.delete(f"{self.path}/{item_id}", f"eliminar {self.singular}")
