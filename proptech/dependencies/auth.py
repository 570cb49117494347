from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.errors import ApiError
from proptech.schemas.people import CurrentUser

# The backend issues the tokens; this service only forwards them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)
logger = get_logger()

def get_backend_client(token: str | None = Depends(oauth2_scheme)) -> BackendClient:
    return BackendClient(token=token)

async def get_current_user(client: BackendClient = Depends(get_backend_client)) -> CurrentUser:
    if not client.token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        data = await client.get("/api/auth/me", "obtener el usuario actual")
    except ApiError as e:
        logger.warning("Token check failed", status_code=e.status_code, error=e.message)
        raise HTTPException(status_code=401, detail="Invalid token") from e
    if not isinstance(data, dict):
        raise HTTPException(status_code=401, detail="Invalid token")
    # Accept either {user: {...}} or flat {...}
    user = data.get("user", data)
    return CurrentUser.model_validate(user)
