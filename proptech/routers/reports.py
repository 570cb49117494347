from typing import Literal

from fastapi import APIRouter, Depends, Response
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.dependencies.auth import get_backend_client, get_current_user
from proptech.errors import ApiError, to_http_exception
from proptech.schemas.people import CurrentUser
from proptech.services.reporting import export_inventory

logger = get_logger()
router = APIRouter(prefix="/api/v1/reports", tags=["reports"])

@router.get("/inventory")
async def inventory_report(
    format: Literal["csv", "pdf"] = "csv",
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
):
    try:
        report = await export_inventory(format, client)
    except ApiError as e:
        raise to_http_exception(e) from e
    logger.info("Inventory report served", format=format, user_id=user.id)
    return Response(
        content=report.content,
        media_type=report.media_type,
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )
