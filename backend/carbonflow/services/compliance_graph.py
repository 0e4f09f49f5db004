"""Compliance step graph.

The compliance pipeline is a single ordered list of steps grouped into
phases. Step status is never stored: it is derived from the set of step ids a
project has completed.
"""

from collections.abc import Iterable, Sequence

from carbonflow.core.exceptions import InvalidTransitionError, NotFoundError
from carbonflow.models import (
    PHASE_ORDER,
    ComplianceOverview,
    CompliancePhase,
    ComplianceStep,
    PhaseProgress,
    StepState,
    StepStatus,
)


def _step(
    step_id: str,
    title: str,
    description: str,
    phase: CompliancePhase,
    duration: str,
) -> ComplianceStep:
    return ComplianceStep(
        id=step_id,
        title=title,
        description=description,
        phase=phase,
        estimated_duration=duration,
        required=True,
    )


COMPLIANCE_STEPS: tuple[ComplianceStep, ...] = (
    # Preparation
    _step("project-design", "Project Design Document",
          "Create comprehensive project design and methodology",
          CompliancePhase.PREPARATION, "2-4 weeks"),
    _step("baseline-assessment", "Baseline Assessment",
          "Establish emission baselines and reference scenarios",
          CompliancePhase.PREPARATION, "3-5 weeks"),
    _step("monitoring-plan", "Monitoring Plan",
          "Develop monitoring and measurement protocols",
          CompliancePhase.PREPARATION, "2-3 weeks"),
    _step("stakeholder-consultation", "Stakeholder Consultation",
          "Conduct community engagement and consultation",
          CompliancePhase.PREPARATION, "4-6 weeks"),
    _step("environmental-impact", "Environmental Impact Assessment",
          "Assess environmental impacts and mitigation measures",
          CompliancePhase.PREPARATION, "6-8 weeks"),
    # Validation
    _step("doc-validation", "Documentation Validation",
          "Third-party validation of project documentation",
          CompliancePhase.VALIDATION, "4-6 weeks"),
    _step("technical-review", "Technical Review",
          "Independent technical assessment of methodology",
          CompliancePhase.VALIDATION, "3-4 weeks"),
    _step("validation-report", "Validation Report",
          "Receive and review validation findings",
          CompliancePhase.VALIDATION, "1-2 weeks"),
    # Verification
    _step("implementation", "Project Implementation",
          "Execute project activities according to design",
          CompliancePhase.VERIFICATION, "12-24 months"),
    _step("monitoring-execution", "Monitoring Execution",
          "Implement monitoring plan and collect data",
          CompliancePhase.VERIFICATION, "Ongoing"),
    _step("verification-prep", "Verification Preparation",
          "Prepare monitoring reports for verification",
          CompliancePhase.VERIFICATION, "2-3 weeks"),
    _step("third-party-verification", "Third-Party Verification",
          "Independent verification of emission reductions",
          CompliancePhase.VERIFICATION, "4-8 weeks"),
    # Registration
    _step("credit-issuance", "Credit Issuance Request",
          "Submit verified emission reductions for credit issuance",
          CompliancePhase.REGISTRATION, "2-4 weeks"),
    _step("registry-review", "Registry Review",
          "Registry review and approval of credits",
          CompliancePhase.REGISTRATION, "2-3 weeks"),
    _step("credit-registration", "Credit Registration",
          "Final registration and issuance of carbon credits",
          CompliancePhase.REGISTRATION, "1 week"),
    # Monitoring
    _step("ongoing-monitoring", "Ongoing Monitoring",
          "Continuous monitoring and periodic verification",
          CompliancePhase.MONITORING, "Crediting period"),
)


class ComplianceGraph:
    """Derives step, phase and overall state from completed step ids."""

    def __init__(self, steps: Sequence[ComplianceStep] = COMPLIANCE_STEPS):
        if not steps:
            raise ValueError("Compliance catalogue must contain at least one step")

        ids = [step.id for step in steps]
        if len(ids) != len(set(ids)):
            raise ValueError("Compliance step ids must be unique")

        # Phases must appear in pipeline order so the steps form one total order
        phase_indexes = [PHASE_ORDER.index(step.phase) for step in steps]
        if phase_indexes != sorted(phase_indexes):
            raise ValueError("Compliance steps must be ordered by phase")

        self.steps: tuple[ComplianceStep, ...] = tuple(steps)
        self._index = {step.id: i for i, step in enumerate(self.steps)}

    def __len__(self) -> int:
        return len(self.steps)

    def get_step(self, step_id: str) -> ComplianceStep:
        """Get a catalogue step.

        Raises:
            NotFoundError: If the step id is not in the catalogue
        """
        if step_id not in self._index:
            raise NotFoundError("compliance step", step_id)
        return self.steps[self._index[step_id]]

    def current_index(self, completed: Iterable[str]) -> int | None:
        """Position of the first incomplete required step, or None."""
        done = set(completed)
        for i, step in enumerate(self.steps):
            if step.required and step.id not in done:
                return i
        return None

    def step_states(self, completed: Iterable[str]) -> list[StepState]:
        """Derive the status of every step, in pipeline order.

        Steps after the current one are locked even if they appear in
        ``completed``; unknown ids are ignored.
        """
        done = set(completed)
        current = self.current_index(done)

        states = []
        for i, step in enumerate(self.steps):
            if current is not None and i == current:
                status = StepStatus.CURRENT
            elif current is not None and i > current:
                status = StepStatus.LOCKED
            elif step.id in done:
                status = StepStatus.COMPLETED
            else:
                status = StepStatus.PENDING
            states.append(StepState(step=step, status=status))
        return states

    def step_state(self, step_id: str, completed: Iterable[str]) -> StepState:
        position = self._index.get(step_id)
        if position is None:
            raise NotFoundError("compliance step", step_id)
        return self.step_states(completed)[position]

    def ensure_selectable(self, step_id: str, completed: Iterable[str]) -> StepState:
        """Return the step's state, rejecting locked steps.

        Raises:
            NotFoundError: If the step id is not in the catalogue
            InvalidTransitionError: If the step is locked
        """
        state = self.step_state(step_id, completed)
        if not state.selectable:
            raise InvalidTransitionError(step_id, state.status.value)
        return state

    def complete(self, step_id: str, completed: Iterable[str]) -> list[str]:
        """Return the completed ids with ``step_id`` added, in pipeline order.

        Raises:
            NotFoundError: If the step id is not in the catalogue
            InvalidTransitionError: If the step is locked
        """
        done = set(completed)
        self.ensure_selectable(step_id, done)
        done.add(step_id)
        return [step.id for step in self.steps if step.id in done]

    def phase_progress(self, completed: Iterable[str]) -> list[PhaseProgress]:
        states = self.step_states(completed)
        phases = []
        for phase in PHASE_ORDER:
            in_phase = [s for s in states if s.step.phase == phase]
            if not in_phase:
                continue
            done = sum(1 for s in in_phase if s.status == StepStatus.COMPLETED)
            phases.append(
                PhaseProgress(
                    phase=phase,
                    completed_steps=done,
                    total_steps=len(in_phase),
                    percentage=done / len(in_phase) * 100,
                )
            )
        return phases

    def completed_count(self, completed: Iterable[str]) -> int:
        return sum(1 for s in self.step_states(completed) if s.status == StepStatus.COMPLETED)

    def overall_percentage(self, completed: Iterable[str]) -> float:
        return self.completed_count(completed) / len(self.steps) * 100

    def overview(self, project_id: str, completed: Iterable[str]) -> ComplianceOverview:
        """Full pipeline snapshot for one project."""
        done = set(completed)
        states = self.step_states(done)
        current = self.current_index(done)
        completed_steps = sum(1 for s in states if s.status == StepStatus.COMPLETED)
        return ComplianceOverview(
            project_id=project_id,
            steps=states,
            phases=self.phase_progress(done),
            current_step_id=self.steps[current].id if current is not None else None,
            completed_steps=completed_steps,
            total_steps=len(self.steps),
            overall_percentage=completed_steps / len(self.steps) * 100,
        )
