"""Key/value system settings kept by the admin service."""

from sqlalchemy.orm import Session

from smartcity.models.base import utc_now
from smartcity.models.system_setting import SystemSetting
from smartcity.schemas.admin import SystemSettingRequest


def upsert_setting(db: Session, body: SystemSettingRequest, actor_id: int) -> SystemSetting:
    """Create the setting or overwrite its value and description."""
    setting = db.query(SystemSetting).filter(SystemSetting.key == body.key).first()
    if setting is None:
        setting = SystemSetting(key=body.key)
        db.add(setting)
    setting.value = body.value
    setting.description = body.description
    setting.updated_by = actor_id
    setting.updated_at = utc_now()
    db.commit()
    db.refresh(setting)
    return setting


def list_settings(db: Session) -> list[SystemSetting]:
    return db.query(SystemSetting).order_by(SystemSetting.key).all()
