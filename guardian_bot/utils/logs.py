from __future__ import annotations
import logging
from guardian_bot.services.audit_service import AuditService

log = logging.getLogger(__name__)

def log_event(audit: AuditService | None, actor_id: int | None, event: str, student_id: str = "",
              lesson: str = "", payload: dict | None = None):
    if audit is None:
        return None
    try:
        return audit.log(actor_tg_id=actor_id, action=event, student_id=student_id,
                         lesson=lesson, meta=payload or {})
    except OSError:
        # the audit trail never decides the outcome of a notification
        log.warning("Audit write failed for %s", event, exc_info=True)
        return None
