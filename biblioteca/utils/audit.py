from typing import Optional, Dict, Any
from flask import has_request_context, request

from ..extensions import db
from ..models.audit_log import AuditLog


def _request_meta():
    """
    Returns (ip, user_agent) or (None, None) outside a request (CLI, tests).
    """
    if not has_request_context():
        return None, None
    ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    ua = request.headers.get("User-Agent")
    return ip, ua[:255] if ua else None


def audit_log(
    action: str,
    entity_type: Optional[str] = None,
    entity_id=None,
    details: Optional[Dict[str, Any]] = None,
    actor=None,
    session=None,
) -> None:
    """
    Stage an audit row in ``session`` (defaults to db.session).
    It is persisted by whoever commits that transaction.
    """
    ip, ua = _request_meta()

    log = AuditLog(
        actor_user_id=actor.id if actor else None,
        actor_role=actor.role if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        ip_address=ip,
        user_agent=ua,
        details=details or None,
    )
    (session if session is not None else db.session).add(log)
