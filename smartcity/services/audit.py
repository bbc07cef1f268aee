"""Audit trail of privileged admin-service actions.

Writes are best-effort: they run after the response through FastAPI
BackgroundTasks, in their own session, and any failure is logged here and
goes no further.
"""

import logging

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session, sessionmaker

from smartcity.models.audit_log import (
    ACTION_MAX_LEN,
    DETAILS_MAX_LEN,
    IP_ADDRESS_MAX_LEN,
    AdminLog,
)
from smartcity.models.base import utc_now

logger = logging.getLogger(__name__)

UNKNOWN_ADDRESS = "Unknown"


class AuditLogger:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def record(
        self,
        actor_id: int,
        action: str,
        detail: str,
        source_address: str | None = None,
    ) -> None:
        """Append one entry. Never raises."""
        try:
            entry = AdminLog(
                user_id=actor_id,
                action=action[:ACTION_MAX_LEN],
                details=detail[:DETAILS_MAX_LEN],
                ip_address=(source_address or UNKNOWN_ADDRESS)[:IP_ADDRESS_MAX_LEN],
                timestamp=utc_now(),
            )
            with self._session_factory() as db:
                db.add(entry)
                db.commit()
        except Exception:
            logger.exception(
                "Failed to log admin activity",
                extra={"actor_id": actor_id, "action": action},
            )
            return
        logger.info("Admin activity logged", extra={"actor_id": actor_id, "action": action})

    def schedule(
        self,
        background_tasks: BackgroundTasks,
        actor_id: int,
        action: str,
        detail: str,
        source_address: str | None = None,
    ) -> None:
        """Queue record() to run once the response has been produced."""
        background_tasks.add_task(self.record, actor_id, action, detail, source_address)


def recent_admin_logs(db: Session, limit: int) -> list[AdminLog]:
    """Most recent entries, newest first."""
    return (
        db.query(AdminLog)
        .order_by(AdminLog.timestamp.desc(), AdminLog.id.desc())
        .limit(limit)
        .all()
    )
