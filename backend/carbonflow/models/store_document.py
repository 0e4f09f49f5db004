"""Persisted snapshot of the project store."""

from datetime import datetime, timezone

from pydantic import model_validator
from sqlmodel import Field, SQLModel

from carbonflow.models.base import DocumentModel
from carbonflow.models.project import Project


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoreDocument(SQLModel, table=True):
    """One row per store; the payload is the whole collection as JSON."""

    __tablename__ = "store_documents"

    key: str = Field(primary_key=True)
    revision: int = Field(default=0)
    payload: str  # JSON, see StorePayload
    updated_at: datetime = Field(default_factory=_utc_now)


class StorePayload(DocumentModel):
    """Shape of ``StoreDocument.payload``."""

    projects: list[Project] = []
    current_project_id: str | None = None

    @model_validator(mode="after")
    def _unique_ids(self) -> "StorePayload":
        ids = [p.id for p in self.projects]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate project ids in store document")
        return self
