"""Project store: the project collection, the current pointer and lifecycle.

All mutations are synchronous. Each one builds the next collection, writes
the whole snapshot through the document repository and only then swaps it
in, so a rejected write (revision conflict) leaves the store untouched.
Request handlers run in worker threads, so mutations are serialized by a
re-entrant lock.
"""

import functools
import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from carbonflow.core.config import Settings, get_settings
from carbonflow.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceCorruptionError,
)
from carbonflow.models import (
    ComplianceOverview,
    Financials,
    MembershipStatus,
    NavigationItemState,
    PortfolioStats,
    Project,
    ProjectCreate,
    ProjectDetails,
    ProjectSettings,
    ProjectStatus,
    ProjectType,
    ProjectUpdate,
    SetupGate,
    SetupProgress,
    StepState,
    StepStatus,
    TargetStatus,
    Team,
    TeamMember,
    TeamRole,
)
from carbonflow.services import setup_gates
from carbonflow.services.audit import AuditService
from carbonflow.services.compliance_graph import ComplianceGraph
from carbonflow.services.persistence import DocumentRepository
from carbonflow.services.portfolio import summarize_portfolio

logger = logging.getLogger(__name__)

# Nested sections merged field by field on update
MERGED_SECTIONS = ("setup_progress", "details", "financial", "compliance", "settings")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _serialized(method):
    """Run a store method while holding the store lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class ProjectStore:
    """Owns the project collection and the current project pointer."""

    def __init__(
        self,
        repository: DocumentRepository,
        settings: Settings | None = None,
        audit: AuditService | None = None,
        graph: ComplianceGraph | None = None,
    ):
        self.repository = repository
        self.settings = settings or get_settings()
        self.audit = audit
        self.graph = graph or ComplianceGraph()

        self._projects: list[Project] = []
        self._current_id: str | None = None
        self._revision = 0
        self.warnings: list[str] = []
        self._lock = threading.RLock()

    # Loading

    @_serialized
    def load(self) -> list[str]:
        """Read the persisted snapshot into memory.

        A corrupted document is not fatal: the store starts empty with no
        current project and the problem is recorded in ``warnings``.

        Returns:
            Warnings raised while loading
        """
        self.warnings = []
        try:
            snapshot = self.repository.load()
        except PersistenceCorruptionError as e:
            logger.warning(f"Discarding unreadable project store document: {e}")
            self.warnings.append(str(e))
            self._projects = []
            self._current_id = None
            # Keep the stored revision so the next write replaces the bad document
            self._revision = e.revision
            return self.warnings

        self._projects = list(snapshot.projects)
        self._revision = snapshot.revision

        ids = {p.id for p in self._projects}
        if snapshot.current_project_id in ids:
            self._current_id = snapshot.current_project_id
        else:
            self._current_id = self._projects[0].id if self._projects else None

        logger.info(
            f"Loaded {len(self._projects)} projects at revision {self._revision} "
            f"(current: {self._current_id})"
        )
        return self.warnings

    def reload(self) -> list[str]:
        """Discard in-memory state and read the stored snapshot again."""
        return self.load()

    # Queries

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def projects(self) -> list[Project]:
        return [p.model_copy(deep=True) for p in self._projects]

    @property
    def current_project_id(self) -> str | None:
        return self._current_id

    @property
    def current_project(self) -> Project | None:
        project = self._find(self._current_id)
        return project.model_copy(deep=True) if project else None

    def get(self, project_id: str) -> Project:
        """Get a project by id.

        Raises:
            NotFoundError: If the id is unknown
        """
        return self._require(project_id).model_copy(deep=True)

    def get_progress(self, project_id: str | None = None) -> float:
        """Setup completion percentage of a project, or of the current one.

        Returns 0 when no project resolves.
        """
        project = self._find(project_id if project_id is not None else self._current_id)
        if project is None:
            return 0.0
        return setup_gates.completion_percentage(project.setup_progress)

    def navigation(self, project_id: str | None = None) -> list[NavigationItemState]:
        """Status of every navigation target for a project, or the current one."""
        if project_id is not None:
            project: Project | None = self._require(project_id)
        else:
            project = self._find(self._current_id)
        return setup_gates.navigation_states(
            project.setup_progress if project else None,
            self.settings.advanced_unlock_progress,
        )

    def navigate(self, target_id: str, project_id: str | None = None) -> TargetStatus:
        """Check that a navigation target can be opened.

        Raises:
            NotFoundError: If the target or an explicit project id is unknown
            InvalidTransitionError: If the target is locked
        """
        target = setup_gates.get_target(target_id)
        if target is None:
            raise NotFoundError("navigation target", target_id)

        if project_id is not None:
            project: Project | None = self._require(project_id)
        else:
            project = self._find(self._current_id)

        status = setup_gates.target_status(
            project.setup_progress if project else None,
            target,
            self.settings.advanced_unlock_progress,
        )
        if status == TargetStatus.LOCKED:
            raise InvalidTransitionError(target_id, status.value)
        return status

    def compliance_overview(self, project_id: str | None = None) -> ComplianceOverview:
        """Compliance pipeline state for a project, or the current one.

        Raises:
            NotFoundError: If no project resolves
        """
        project = self._resolve(project_id)
        return self.graph.overview(project.id, project.compliance.completed_steps)

    def select_compliance_step(self, project_id: str, step_id: str) -> StepState:
        """Return a step's state if it can be opened.

        Raises:
            NotFoundError: If the project or step is unknown
            InvalidTransitionError: If the step is locked
        """
        project = self._require(project_id)
        return self.graph.ensure_selectable(step_id, project.compliance.completed_steps)

    def portfolio_stats(self) -> PortfolioStats:
        return summarize_portfolio(self._projects)

    # Mutations

    @_serialized
    def create(self, data: ProjectCreate | dict[str, Any] | None = None) -> str:
        """Create a project, make it current and return its id."""
        if data is None:
            data = ProjectCreate()
        elif isinstance(data, dict):
            data = ProjectCreate.model_validate(data)

        now = _utc_now()
        owner = TeamMember(
            id=self.settings.default_owner_id,
            name=self.settings.default_owner_name,
            email=self.settings.default_owner_email,
            role=TeamRole.PROJECT_OWNER,
            status=MembershipStatus.ACTIVE,
            joined_at=now,
        )
        details = ProjectDetails(
            estimated_duration=self.settings.default_estimated_duration,
            estimated_credits_per_year=self.settings.default_credits_per_year,
            timezone=self.settings.default_timezone,
        )
        if data.details is not None:
            details = ProjectDetails.model_validate(
                {**details.model_dump(), **data.details.model_dump(exclude_unset=True)}
            )

        project = Project(
            id=self._new_id(),
            name=data.name or self.settings.default_project_name,
            description=data.description or "",
            type=data.type or ProjectType.CARBON_AVOIDANCE,
            status=ProjectStatus.SETUP,
            created_at=now,
            updated_at=now,
            setup_progress=SetupProgress(project_type_selected=data.type is not None),
            details=details,
            team=Team(members=self._team_members(owner, data.members)),
            settings=data.settings or ProjectSettings(),
        )

        self._commit([*self._projects, project], project.id)
        logger.info(f"Created project {project.id} ({project.name})")
        self._record(lambda audit: audit.log_project_created(project.id, project.name, project.type.value))
        return project.id

    @_serialized
    def update(self, project_id: str, changes: ProjectUpdate | dict[str, Any]) -> Project:
        """Merge changes into a project and bump ``updated_at``.

        Raises:
            NotFoundError: If the id is unknown
            pydantic.ValidationError: If the merged project is invalid
        """
        if isinstance(changes, dict):
            changes = ProjectUpdate.model_validate(changes)

        existing = self._require(project_id)
        updated = self._merge(existing, changes)
        self._replace(updated)

        if updated.status != existing.status:
            logger.info(f"Project {project_id} status {existing.status.value} -> {updated.status.value}")
            self._record(
                lambda audit: audit.log_status_changed(
                    project_id, existing.status.value, updated.status.value
                )
            )
        return updated.model_copy(deep=True)

    @_serialized
    def switch(self, project_id: str) -> Project:
        """Make a project current.

        Raises:
            NotFoundError: If the id is unknown
        """
        project = self._require(project_id)
        self._commit(list(self._projects), project.id)
        logger.info(f"Switched current project to {project.id}")
        return project.model_copy(deep=True)

    def archive(self, project_id: str) -> Project:
        """Force a project to ``completed``."""
        return self.update(project_id, ProjectUpdate(status=ProjectStatus.COMPLETED))

    @_serialized
    def duplicate(self, project_id: str) -> str:
        """Clone a project with fresh identity and reset progress.

        The current pointer is not changed.

        Raises:
            NotFoundError: If the id is unknown
        """
        source = self._require(project_id)
        now = _utc_now()

        clone = source.model_copy(deep=True)
        clone.id = self._new_id()
        clone.name = f"{source.name} (Copy)"
        clone.status = ProjectStatus.SETUP
        clone.created_at = now
        clone.updated_at = now
        clone.setup_progress = SetupProgress()
        clone.financial = Financials()
        clone.compliance = clone.compliance.model_copy(update={"completed_steps": []})

        self._commit([*self._projects, clone], self._current_id)
        logger.info(f"Duplicated project {source.id} as {clone.id}")
        self._record(lambda audit: audit.log(
            action="PROJECT_DUPLICATED",
            resource_type="project",
            resource_id=clone.id,
            new_value={"source": source.id, "name": clone.name},
        ))
        return clone.id

    @_serialized
    def delete(self, project_id: str) -> None:
        """Remove a project, moving the pointer if it was current.

        Raises:
            NotFoundError: If the id is unknown
        """
        self._require(project_id)
        remaining = [p for p in self._projects if p.id != project_id]

        current_id = self._current_id
        if current_id == project_id:
            current_id = remaining[0].id if remaining else None

        self._commit(remaining, current_id)
        logger.info(f"Deleted project {project_id} (current: {current_id})")
        self._record(lambda audit: audit.log(
            action="PROJECT_DELETED",
            resource_type="project",
            resource_id=project_id,
        ))

    @_serialized
    def mark_setup_gate(self, project_id: str, gate: SetupGate) -> Project:
        """Record a collaborator's completion signal for a setup gate.

        Raises:
            NotFoundError: If the id is unknown
            InvalidTransitionError: If the gate is locked
        """
        project = self._require(project_id)
        status = setup_gates.gate_status(project.setup_progress, gate)
        if status == TargetStatus.COMPLETED:
            return project.model_copy(deep=True)
        if status == TargetStatus.LOCKED:
            raise InvalidTransitionError(gate.value, status.value)

        updated = self.update(
            project_id,
            ProjectUpdate.model_validate({"setup_progress": {setup_gates.GATE_FIELDS[gate]: True}}),
        )
        self._record(lambda audit: audit.log_setup_gate_completed(project_id, gate.value))
        return updated

    @_serialized
    def complete_compliance_step(self, project_id: str, step_id: str) -> ComplianceOverview:
        """Mark a compliance step done for a project.

        Completing an already completed step changes nothing.

        Raises:
            NotFoundError: If the project or step is unknown
            InvalidTransitionError: If the step is locked
        """
        project = self._require(project_id)
        completed = project.compliance.completed_steps
        state = self.graph.step_state(step_id, completed)

        if state.status != StepStatus.COMPLETED:
            completed = self.graph.complete(step_id, completed)
            self.update(
                project_id,
                ProjectUpdate.model_validate({"compliance": {"completed_steps": completed}}),
            )
            logger.info(f"Project {project_id} completed compliance step {step_id}")
            self._record(lambda audit: audit.log_step_completed(project_id, step_id))

        return self.graph.overview(project_id, completed)

    # Internals

    def _find(self, project_id: str | None) -> Project | None:
        if project_id is None:
            return None
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def _require(self, project_id: str) -> Project:
        project = self._find(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        return project

    def _resolve(self, project_id: str | None) -> Project:
        if project_id is not None:
            return self._require(project_id)
        project = self._find(self._current_id)
        if project is None:
            raise NotFoundError("project", "current")
        return project

    def _new_id(self) -> str:
        existing = {p.id for p in self._projects}
        while True:
            candidate = uuid.uuid4().hex
            if candidate not in existing:
                return candidate

    def _team_members(self, owner: TeamMember, supplied: list[TeamMember]) -> list[TeamMember]:
        # First occurrence of an id wins; the owner always comes first
        members = [owner]
        seen = {owner.id}
        for member in supplied:
            if member.id not in seen:
                seen.add(member.id)
                members.append(member)
        return members

    def _merge(self, project: Project, changes: ProjectUpdate) -> Project:
        data = project.model_dump()
        for name, value in changes.model_dump(exclude_unset=True).items():
            if name in MERGED_SECTIONS and isinstance(value, dict):
                data[name] = {**data[name], **value}
            else:
                data[name] = value
        data["updated_at"] = _utc_now()
        return Project.model_validate(data)

    def _replace(self, updated: Project) -> None:
        projects = [updated if p.id == updated.id else p for p in self._projects]
        self._commit(projects, self._current_id)

    def _commit(self, projects: list[Project], current_id: str | None) -> None:
        """Persist the next state, then make it the in-memory state.

        Raises:
            ConflictError: If another writer changed the stored document
        """
        try:
            self._revision = self.repository.save(projects, current_id, self._revision)
        except ConflictError as e:
            logger.warning(f"Project store write rejected: {e}")
            raise
        except SQLAlchemyError:
            logger.exception("Failed to persist project store; keeping in-memory state")

        self._projects = projects
        self._current_id = current_id

    def _record(self, entry: Callable[[AuditService], Any]) -> None:
        if self.audit is None:
            return
        try:
            entry(self.audit)
        except SQLAlchemyError:
            logger.exception("Failed to write audit log entry")
