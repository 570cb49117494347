from fastapi import HTTPException

class ProptechError(Exception):
    pass

class ApiError(ProptechError):
    """Upstream call failed, either on the wire or with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.operation = operation

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

class AlreadyAssociated(ApiError):
    pass

class PropertyFormError(ProptechError):
    pass

def to_http_exception(e: ApiError) -> HTTPException:
    """Upstream 4xx pass through; anything else is a bad gateway."""
    status = e.status_code if e.status_code and 400 <= e.status_code < 500 else 502
    return HTTPException(status_code=status, detail=e.message)
