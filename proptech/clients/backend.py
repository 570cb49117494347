from typing import Any

from httpx import AsyncClient, AsyncBaseTransport, HTTPError, Response
from structlog import get_logger

from proptech.config import settings
from proptech.errors import ApiError

logger = get_logger()

class BackendClient:
    """Thin wrapper over httpx for the proptech backend.

    One `AsyncClient` scope per call; no retries, no caching. Non-2xx statuses
    and transport failures surface as `ApiError` with a Spanish message.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base).rstrip("/")
        self.token = token
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    def with_token(self, token: str | None) -> "BackendClient":
        return BackendClient(self.base_url, token, self.timeout, self._transport)

    def endpoint(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token and self.token not in ("undefined", "null"):
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        json: Any = None,
        params: dict | None = None,
        files: Any = None,
        allow_404: bool = False,
    ) -> Any:
        url = self.endpoint(path)
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            async with AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.request(
                    method, url, json=json, params=params, files=files, headers=self._headers()
                )
        except HTTPError as e:
            logger.error("Backend request failed", method=method, url=url, operation=operation, error=str(e))
            raise ApiError(f"Error al {operation}: {e}", None, operation) from e

        logger.info("Backend response", method=method, url=url, status_code=resp.status_code)
        if resp.status_code == 404 and allow_404:
            return None
        if not 200 <= resp.status_code < 300:
            raise _error_from_response(resp, operation)
        return _body(resp)

    async def get(self, path: str, operation: str, **kwargs) -> Any:
        return await self.request("GET", path, operation, **kwargs)

    async def post(self, path: str, operation: str, **kwargs) -> Any:
        return await self.request("POST", path, operation, **kwargs)

    async def put(self, path: str, operation: str, **kwargs) -> Any:
        return await self.request("PUT", path, operation, **kwargs)

    async def delete(self, path: str, operation: str, **kwargs) -> Any:
        return await self.request("DELETE", path, operation, **kwargs)

def _body(resp: Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text

def _error_from_response(resp: Response, operation: str) -> ApiError:
    detail = None
    try:
        err = resp.json()
        if isinstance(err, dict):
            detail = err.get("error") or err.get("message") or err.get("detail")
    except ValueError:
        detail = None
    message = f"Error al {operation}: {resp.status_code} {resp.reason_phrase}"
    if detail:
        message = f"{message} ({detail})"
    logger.warning("Backend error", operation=operation, status_code=resp.status_code, error=detail)
    return ApiError(message, resp.status_code, operation)
