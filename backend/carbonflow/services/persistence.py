"""Snapshot persistence for the project store."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy import Engine, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlmodel import select
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from carbonflow.core.exceptions import ConflictError, PersistenceCorruptionError
from carbonflow.models import Project, StoreDocument, StorePayload

logger = logging.getLogger(__name__)


@dataclass
class StoreSnapshot:
    """Deserialized store document."""

    projects: list[Project] = field(default_factory=list)
    current_project_id: str | None = None
    revision: int = 0


class DocumentRepository:
    """Reads and writes the store document with optimistic versioning.

    Every successful write increments ``revision``. A write is accepted only
    when the stored revision still equals the one the caller last saw.
    Transient SQLite lock errors are retried; a revision mismatch never is.
    """

    def __init__(self, engine: Engine, key: str):
        self.engine = engine
        self.key = key

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )
    def load(self) -> StoreSnapshot:
        """Load the stored snapshot.

        Returns:
            The snapshot, or an empty one at revision 0 if nothing is stored

        Raises:
            PersistenceCorruptionError: If the payload fails validation
        """
        with Session(self.engine) as session:
            result = session.execute(select(StoreDocument).where(StoreDocument.key == self.key))
            document = result.scalar_one_or_none()

        if document is None:
            return StoreSnapshot()

        try:
            payload = StorePayload.model_validate_json(document.payload)
        except ValidationError as e:
            raise PersistenceCorruptionError(
                f"Store document '{self.key}' failed validation: {e}",
                revision=document.revision,
            ) from e

        return StoreSnapshot(
            projects=payload.projects,
            current_project_id=payload.current_project_id,
            revision=document.revision,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )
    def save(
        self,
        projects: list[Project],
        current_project_id: str | None,
        expected_revision: int,
    ) -> int:
        """Overwrite the stored snapshot.

        Args:
            projects: Full project collection
            current_project_id: Current project pointer
            expected_revision: Revision the caller last loaded or saved

        Returns:
            The new revision

        Raises:
            ConflictError: If the stored revision differs from expected_revision
        """
        payload = StorePayload(projects=projects, current_project_id=current_project_id)
        body = payload.model_dump_json(by_alias=True)
        new_revision = expected_revision + 1
        now = datetime.now(timezone.utc)

        with Session(self.engine) as session:
            # Only a missing row is inserted; a row stored at revision 0 is updated
            if expected_revision == 0 and self._stored_revision(session) is None:
                session.add(
                    StoreDocument(key=self.key, revision=new_revision, payload=body, updated_at=now)
                )
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    raise ConflictError(expected_revision, self._stored_revision(session))
                return new_revision

            result = session.execute(
                update(StoreDocument)
                .where(
                    StoreDocument.key == self.key,
                    StoreDocument.revision == expected_revision,
                )
                .values(revision=new_revision, payload=body, updated_at=now)
            )
            if result.rowcount != 1:
                session.rollback()
                raise ConflictError(expected_revision, self._stored_revision(session))
            session.commit()

        logger.debug(f"Saved store document '{self.key}' at revision {new_revision}")
        return new_revision

    def _stored_revision(self, session: Session) -> int | None:
        result = session.execute(
            select(StoreDocument.revision).where(StoreDocument.key == self.key)
        )
        return result.scalar_one_or_none()
