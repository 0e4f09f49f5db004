"""Audit logging service."""

import json
from typing import Any

from sqlalchemy import Engine
from sqlalchemy.orm import Session
from sqlmodel import select

from carbonflow.models import AuditLog


class AuditService:
    """Service for logging audit events."""

    def __init__(self, engine: Engine, actor: str = "system"):
        self.engine = engine
        self.actor = actor

    def log(
        self,
        action: str,
        resource_type: str,
        resource_id: str,
        old_value: Any = None,
        new_value: Any = None,
    ) -> AuditLog:
        """Log an audit event.

        Args:
            action: Action type (e.g., PROJECT_CREATED, STATUS_CHANGED)
            resource_type: Type of resource (e.g., "project", "compliance_step")
            resource_id: ID of the affected resource
            old_value: Previous value (will be JSON serialized)
            new_value: New value (will be JSON serialized)

        Returns:
            Created AuditLog entry
        """
        entry = AuditLog(
            actor=self.actor,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_value=json.dumps(old_value) if old_value is not None else None,
            new_value=json.dumps(new_value) if new_value is not None else None,
        )
        with Session(self.engine, expire_on_commit=False) as session:
            session.add(entry)
            session.commit()
            session.refresh(entry)
        return entry

    def log_project_created(self, project_id: str, name: str, project_type: str) -> AuditLog:
        """Log project creation."""
        return self.log(
            action="PROJECT_CREATED",
            resource_type="project",
            resource_id=project_id,
            new_value={"name": name, "type": project_type},
        )

    def log_status_changed(self, project_id: str, old_status: str, new_status: str) -> AuditLog:
        """Log project status change."""
        return self.log(
            action="STATUS_CHANGED",
            resource_type="project",
            resource_id=project_id,
            old_value={"status": old_status},
            new_value={"status": new_status},
        )

    def log_setup_gate_completed(self, project_id: str, gate: str) -> AuditLog:
        """Log a setup gate signal."""
        return self.log(
            action="SETUP_GATE_COMPLETED",
            resource_type="project",
            resource_id=project_id,
            new_value={"gate": gate},
        )

    def log_step_completed(self, project_id: str, step_id: str) -> AuditLog:
        """Log completion of a compliance step."""
        return self.log(
            action="COMPLIANCE_STEP_COMPLETED",
            resource_type="project",
            resource_id=project_id,
            new_value={"step": step_id},
        )

    def list_entries(
        self,
        action: str | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[AuditLog]:
        """List audit entries, newest first."""
        query = select(AuditLog)

        if action is not None:
            query = query.where(AuditLog.action == action)
        if resource_type is not None:
            query = query.where(AuditLog.resource_type == resource_type)
        if resource_id is not None:
            query = query.where(AuditLog.resource_id == resource_id)

        query = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).offset(skip).limit(limit)

        with Session(self.engine) as session:
            result = session.execute(query)
            return list(result.scalars().all())
