"""SQLAlchemy ORM models."""

from smartcity.models.audit_log import AdminLog
from smartcity.models.base import Base
from smartcity.models.system_setting import SystemSetting
from smartcity.models.user import User

__all__ = ["AdminLog", "Base", "SystemSetting", "User"]
