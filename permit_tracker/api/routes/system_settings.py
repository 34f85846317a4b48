"""
Routes: runtime system settings. Administrators only.
"""

from fastapi import APIRouter, Depends

from permit_tracker.api.auth import CurrentUser, require_admin
from permit_tracker.api.container import get_system_settings
from permit_tracker.api.schemas.requests import SettingUpdateRequest
from permit_tracker.api.schemas.responses import SettingResponse
from permit_tracker.core.use_cases.manage_settings import SettingsManager

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/settings", response_model=list[SettingResponse])
def list_settings(settings: SettingsManager = Depends(get_system_settings)):
    return [SettingResponse.model_validate(s) for s in settings.list_settings()]


@router.get("/settings/category/{category}", response_model=list[SettingResponse])
def list_settings_by_category(category: str, settings: SettingsManager = Depends(get_system_settings)):
    return [SettingResponse.model_validate(s) for s in settings.list_settings(category)]


@router.put("/settings/{setting_id}", response_model=SettingResponse)
def update_setting(
    setting_id: int,
    body: SettingUpdateRequest,
    settings: SettingsManager = Depends(get_system_settings),
    admin: CurrentUser = Depends(require_admin),
):
    updated = settings.update_setting(
        setting_id,
        body.model_dump(exclude_unset=True),
        updated_by=admin.id,
    )
    return SettingResponse.model_validate(updated)
