"""Audit log model for the project lifecycle trail."""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditLog(SQLModel, table=True):
    """Append-only audit log of store mutations."""

    __tablename__ = "audit_logs"

    id: int | None = Field(default=None, primary_key=True)
    timestamp: datetime = Field(default_factory=_utc_now, index=True)
    actor: str = Field(default="system", index=True)
    action: str = Field(index=True)  # e.g., PROJECT_CREATED, SETUP_GATE_COMPLETED
    resource_type: str  # e.g., "project", "compliance_step"
    resource_id: str = Field(index=True)
    old_value: str | None = Field(default=None)  # JSON string
    new_value: str | None = Field(default=None)  # JSON string


class AuditLogRead(SQLModel):
    """Schema for reading audit log entries."""

    id: int
    timestamp: datetime
    actor: str
    action: str
    resource_type: str
    resource_id: str
    old_value: str | None
    new_value: str | None
