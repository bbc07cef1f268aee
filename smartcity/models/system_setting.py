"""ORM model for the admin service's key/value system settings."""

from sqlalchemy import Column, DateTime, Integer, String

from smartcity.models.base import Base, utc_now


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), nullable=False, unique=True, index=True)
    value = Column(String(500), nullable=False)
    description = Column(String(200), nullable=False, default="")
    updated_by = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
