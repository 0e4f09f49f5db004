"""Audit log endpoints."""

from fastapi import APIRouter, Query

from carbonflow.core.deps import Audit
from carbonflow.models import AuditLog, AuditLogRead

router = APIRouter(prefix="/audit")


@router.get("", response_model=list[AuditLogRead])
def list_audit_logs(
    audit: Audit,
    action: str | None = None,
    resource_type: str | None = None,
    resource_id: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
) -> list[AuditLog]:
    """List audit logs with filters, newest first."""
    return audit.list_entries(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        skip=skip,
        limit=limit,
    )


@router.get("/projects/{project_id}", response_model=list[AuditLogRead])
def get_project_audit(
    project_id: str,
    audit: Audit,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[AuditLog]:
    """Get the audit trail for one project."""
    return audit.list_entries(resource_type="project", resource_id=project_id, skip=skip, limit=limit)
