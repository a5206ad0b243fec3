from sitebuilder.extensions import db
from sitebuilder.models.audit_log import AuditLog
from typing import Optional


def log_action(
    *,
    store,
    action: str,
    entity_type: str,
    entity_id: str,
    actor_id: Optional[str] = None,
    payload: dict | None = None
):
    """
    Queue an immutable audit row in the current session.

    Only stores backed by the database carry audit rows; the row commits or
    rolls back together with the change it describes.
    """
    if not getattr(store, "supports_audit", False):
        return  # Skip logging when the store has no database session
    log = AuditLog()

    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id
    log.payload = payload or {}

    db.session.add(log)
