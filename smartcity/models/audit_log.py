"""ORM model for the admin service's append-only audit trail."""

from sqlalchemy import Column, DateTime, Integer, String

from smartcity.models.base import Base, utc_now

ACTION_MAX_LEN = 200
DETAILS_MAX_LEN = 1000
IP_ADDRESS_MAX_LEN = 45


class AdminLog(Base):
    """
    One privileged action: who (user_id), what (action, details), where from
    (ip_address) and when (timestamp, UTC).

    user_id references a user owned by the identity service; there is no
    foreign key because the two services keep separate databases.
    """

    __tablename__ = "admin_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    action = Column(String(ACTION_MAX_LEN), nullable=False)
    details = Column(String(DETAILS_MAX_LEN), nullable=False, default="")
    ip_address = Column(String(IP_ADDRESS_MAX_LEN), nullable=False, default="Unknown")
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
