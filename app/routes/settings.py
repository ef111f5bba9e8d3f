from fastapi import APIRouter, HTTPException

from app.core.dependencies import DbSession
from app.schemas.settings import SettingsEnvelope, SettingsResponse, SettingsUpdate
from app.services.settings import get_settings, update_settings, validate_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsEnvelope)
def read_settings(db: DbSession):
    return SettingsEnvelope(settings=SettingsResponse.model_validate(get_settings(db)))


@router.put("", response_model=SettingsEnvelope)
def write_settings(body: SettingsUpdate, db: DbSession):
    errors = validate_settings(body)
    if errors:
        raise HTTPException(status_code=400, detail=f"Validation failed: {', '.join(errors)}")

    row = update_settings(db, body)
    return SettingsEnvelope(settings=SettingsResponse.model_validate(row), message="Settings updated successfully")
