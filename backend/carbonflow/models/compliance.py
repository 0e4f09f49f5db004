"""Compliance pipeline catalogue and derived-state models."""

from enum import Enum

from pydantic import computed_field

from carbonflow.models.base import DocumentModel


class CompliancePhase(str, Enum):
    """Pipeline phases, in pipeline order."""

    PREPARATION = "preparation"
    VALIDATION = "validation"
    VERIFICATION = "verification"
    REGISTRATION = "registration"
    MONITORING = "monitoring"


PHASE_ORDER: list[CompliancePhase] = list(CompliancePhase)


class StepStatus(str, Enum):
    """Derived status of a compliance step."""

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"
    LOCKED = "locked"


class ComplianceStep(DocumentModel):
    """Catalogue entry; status is derived per project, never stored here."""

    id: str
    title: str
    description: str
    phase: CompliancePhase
    estimated_duration: str
    required: bool = True


class StepState(DocumentModel):
    step: ComplianceStep
    status: StepStatus

    @computed_field
    @property
    def selectable(self) -> bool:
        return self.status != StepStatus.LOCKED


class PhaseProgress(DocumentModel):
    phase: CompliancePhase
    completed_steps: int
    total_steps: int
    percentage: float


class ComplianceOverview(DocumentModel):
    """Per-project snapshot of the compliance pipeline."""

    project_id: str
    steps: list[StepState]
    phases: list[PhaseProgress]
    current_step_id: str | None
    completed_steps: int
    total_steps: int
    overall_percentage: float
