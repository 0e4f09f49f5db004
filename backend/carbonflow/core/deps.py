"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from carbonflow.services.audit import AuditService
from carbonflow.services.project_store import ProjectStore


def get_store(request: Request) -> ProjectStore:
    """Return the store built during application start-up."""
    return request.app.state.store


def get_audit_service(request: Request) -> AuditService:
    """Return the audit service built during application start-up."""
    return request.app.state.audit


Store = Annotated[ProjectStore, Depends(get_store)]
Audit = Annotated[AuditService, Depends(get_audit_service)]
