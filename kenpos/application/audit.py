"""Audit trail helper."""

from typing import Any

from kenpos.application.repository import Repositories
from kenpos.core.entities.audit import AuditAction, AuditLog
from kenpos.core.services.identifiers import new_id


async def record_audit(
    repos: Repositories,
    user_id: str,
    action: AuditAction,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """Append an audit entry through the given (possibly transactional) repositories."""
    entry = AuditLog(id=new_id("audit_"), user_id=user_id, action=action, details=details or {})
    return await repos.audit_logs.save(entry)
