from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.dependencies.auth import get_backend_client, get_current_user
from proptech.forms.property_form import PropertyForm
from proptech.forms.wizard import PropertyWizard
from proptech.schemas.people import CurrentUser
from proptech.schemas.property import PropertyFormData
from proptech.notifications import Toast

logger = get_logger()
router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

class ValidationResult(BaseModel):
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)

class SaveResult(BaseModel):
    id: Optional[int] = None
    toasts: List[Toast] = Field(default_factory=list)

def _wizard(data: PropertyFormData, client: BackendClient, property_id: Optional[int] = None) -> PropertyWizard:
    form = PropertyForm(initial=data, property_id=property_id, client=client)
    return PropertyWizard(form=form, editing=property_id is not None)

def _result(wizard: PropertyWizard, property_id: Optional[int]) -> SaveResult:
    toasts = wizard.notifier.toasts
    if property_id is None:
        if wizard.form.errors:
            raise HTTPException(status_code=422, detail=wizard.form.errors)
        last = wizard.notifier.last
        raise HTTPException(status_code=502, detail=last.description if last else "Error al guardar la propiedad")
    return SaveResult(id=property_id, toasts=toasts)

@router.post("/validate", response_model=ValidationResult)
async def validate_property(data: PropertyFormData, step: Optional[int] = Query(None, ge=1, le=12)):
    wizard = _wizard(data, BackendClient(), property_id=None)
    wizard.editing = True
    fields = wizard.required_fields(step) if step else None
    valid = wizard.form.validate(fields)
    return ValidationResult(valid=valid, errors=wizard.form.errors)

@router.post("", response_model=SaveResult, status_code=201)
async def create_property(
    data: PropertyFormData,
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
):
    wizard = _wizard(data, client)
    await wizard.form.assign_agent_from_user(user.email)
    property_id = await wizard.submit()
    logger.info("Property create requested", user_id=user.id, property_id=property_id)
    return _result(wizard, property_id)

@router.post("/drafts", response_model=SaveResult, status_code=201)
async def save_draft(
    data: PropertyFormData,
    property_id: Optional[int] = None,
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
):
    wizard = _wizard(data, client, property_id)
    await wizard.form.assign_agent_from_user(user.email)
    saved_id = await wizard.save_draft()
    logger.info("Draft save requested", user_id=user.id, property_id=saved_id)
    return _result(wizard, saved_id)

@router.put("/{property_id}", response_model=SaveResult)
async def update_property(
    property_id: int,
    data: PropertyFormData,
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
):
    wizard = _wizard(data, client, property_id)
    saved_id = await wizard.submit()
    logger.info("Property update requested", user_id=user.id, property_id=property_id)
    return _result(wizard, saved_id)

@router.post("/{property_id}/publish", response_model=SaveResult)
async def publish_property(
    property_id: int,
    user: CurrentUser = Depends(get_current_user),
    client: BackendClient = Depends(get_backend_client),
):
    wizard = _wizard(PropertyFormData(), client, property_id)
    if not await wizard.publish():
        last = wizard.notifier.last
        raise HTTPException(status_code=502, detail=last.description if last else "Error al publicar la propiedad")
    logger.info("Property published", user_id=user.id, property_id=property_id)
    return SaveResult(id=property_id, toasts=wizard.notifier.toasts)
