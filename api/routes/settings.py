"""Setting routes for the REST API."""
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.connection import get_db
from database.repositories.setting_repo import SettingRepository
from api.schemas.requests import SettingUpdateRequest
from api.schemas.responses import SettingResponse


router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(
    key: str,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Get a setting by key. Unknown keys read as an empty value."""
    setting = await SettingRepository(db).get_setting(key)
    if not setting:
        return SettingResponse(key=key, value="")
    return SettingResponse(key=key, value=setting["value"], updated_at=setting.get("updated_at"))


@router.put("/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    request: SettingUpdateRequest,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Create or update a setting."""
    setting = await SettingRepository(db).set_value(key, request.value)
    return SettingResponse(key=key, value=setting["value"], updated_at=setting["updated_at"])
