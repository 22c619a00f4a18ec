from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from carledger.models.system_settings_model import SystemSetting
from carledger.models.user_model import User
from carledger.schemas.settings_schema import SettingCreate, SettingOut, SettingPatch
from carledger.utils.car_access import get_admin_user, get_current_user
from carledger.utils.database import get_db
from carledger.utils.settings import validate_setting_value

router = APIRouter(prefix="/settings", tags=["Settings"])


def checked_value(key: str, value: str) -> str:
    try:
        return validate_setting_value(key, value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid value for {key}")


@router.get("", response_model=List[SettingOut])
def list_settings(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    return db.query(SystemSetting).order_by(SystemSetting.key.asc()).all()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_setting(
        payload: SettingCreate,
        user: User = Depends(get_admin_user),
        db: Session = Depends(get_db),
):
    key = payload.key.strip()

    # 1) Prevent duplicate key
    existing = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    if existing:
        raise HTTPException(status_code=409, detail="Setting key already exists")

    # 2) Create new setting
    obj = SystemSetting(
        key=key,
        value=checked_value(key, str(payload.value).strip()),
        description=(payload.description or "").strip(),
        updated_by=user.user_id,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    return {
        "message": "created",
        "key": obj.key,
        "value": obj.value,
        "description": obj.description,
    }


@router.patch("")
def update_setting(
        payload: SettingPatch,
        user: User = Depends(get_admin_user),
        db: Session = Depends(get_db),
):
    obj = db.query(SystemSetting).filter(SystemSetting.key == payload.key).first()
    if not obj:
        raise HTTPException(404, "Setting not found")

    obj.value = checked_value(obj.key, payload.value)
    obj.updated_by = user.user_id
    db.commit()
    return {"message": "updated", "key": obj.key, "value": obj.value}
