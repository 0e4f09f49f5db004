"""Unit tests for the compliance step graph."""

import pytest

from carbonflow.core.exceptions import InvalidTransitionError, NotFoundError
from carbonflow.models import CompliancePhase, ComplianceStep, StepStatus
from carbonflow.services.compliance_graph import COMPLIANCE_STEPS, ComplianceGraph

STEP_IDS = [step.id for step in COMPLIANCE_STEPS]


@pytest.fixture
def graph() -> ComplianceGraph:
    return ComplianceGraph()


def custom_step(step_id: str, phase: CompliancePhase, required: bool = True) -> ComplianceStep:
    return ComplianceStep(
        id=step_id,
        title=step_id.title(),
        description=f"{step_id} step",
        phase=phase,
        estimated_duration="1 week",
        required=required,
    )


class TestCatalogue:
    """Tests for the fixed step catalogue."""

    def test_sixteen_steps(self, graph):
        """Test catalogue size."""
        assert len(graph) == 16

    def test_phase_sizes(self, graph):
        """Test steps per phase."""
        counts = {p.phase: p.total_steps for p in graph.phase_progress([])}
        assert counts == {
            CompliancePhase.PREPARATION: 5,
            CompliancePhase.VALIDATION: 3,
            CompliancePhase.VERIFICATION: 4,
            CompliancePhase.REGISTRATION: 3,
            CompliancePhase.MONITORING: 1,
        }

    def test_rejects_out_of_order_phases(self):
        """Test the steps must form one order across phases."""
        with pytest.raises(ValueError):
            ComplianceGraph([
                custom_step("b", CompliancePhase.VALIDATION),
                custom_step("a", CompliancePhase.PREPARATION),
            ])

    def test_rejects_duplicate_ids(self):
        """Test step ids must be unique."""
        with pytest.raises(ValueError):
            ComplianceGraph([
                custom_step("a", CompliancePhase.PREPARATION),
                custom_step("a", CompliancePhase.VALIDATION),
            ])


class TestStepStates:
    """Tests for step status derivation."""

    def test_fresh_pipeline(self, graph):
        """Test only the first step is current."""
        states = graph.step_states([])
        assert states[0].status == StepStatus.CURRENT
        assert all(s.status == StepStatus.LOCKED for s in states[1:])

    def test_prefix_completed(self, graph):
        """Test completed prefix, then current, then locked."""
        states = graph.step_states(STEP_IDS[:3])
        assert [s.status for s in states[:4]] == [
            StepStatus.COMPLETED,
            StepStatus.COMPLETED,
            StepStatus.COMPLETED,
            StepStatus.CURRENT,
        ]
        assert all(s.status == StepStatus.LOCKED for s in states[4:])

    def test_completed_ids_past_current_stay_locked(self, graph):
        """Test a later id cannot jump the queue."""
        states = graph.step_states(["project-design", "doc-validation"])
        by_id = {s.step.id: s.status for s in states}
        assert by_id["baseline-assessment"] == StepStatus.CURRENT
        assert by_id["doc-validation"] == StepStatus.LOCKED
        assert graph.completed_count(["project-design", "doc-validation"]) == 1

    def test_all_done(self, graph):
        """Test no current step once everything is completed."""
        overview = graph.overview("p", STEP_IDS)
        assert overview.current_step_id is None
        assert overview.overall_percentage == 100
        assert all(s.status == StepStatus.COMPLETED for s in overview.steps)

    def test_optional_step_before_current_is_pending(self):
        """Test non-required steps do not block progression."""
        graph = ComplianceGraph([
            custom_step("a", CompliancePhase.PREPARATION),
            custom_step("b", CompliancePhase.PREPARATION, required=False),
            custom_step("c", CompliancePhase.VALIDATION),
            custom_step("d", CompliancePhase.VALIDATION),
        ])
        by_id = {s.step.id: s.status for s in graph.step_states(["a"])}
        assert by_id == {
            "a": StepStatus.COMPLETED,
            "b": StepStatus.PENDING,
            "c": StepStatus.CURRENT,
            "d": StepStatus.LOCKED,
        }

    def test_optional_step_after_all_required_is_pending(self):
        """Test leftover optional steps stay selectable."""
        graph = ComplianceGraph([
            custom_step("a", CompliancePhase.PREPARATION),
            custom_step("b", CompliancePhase.MONITORING, required=False),
        ])
        by_id = {s.step.id: s.status for s in graph.step_states(["a"])}
        assert by_id == {"a": StepStatus.COMPLETED, "b": StepStatus.PENDING}

    def test_current_implies_required_predecessors_completed(self, graph):
        """Test the current step invariant for every prefix."""
        for n in range(len(STEP_IDS) + 1):
            states = graph.step_states(STEP_IDS[:n])
            for i, state in enumerate(states):
                if state.status == StepStatus.CURRENT:
                    assert all(
                        s.status == StepStatus.COMPLETED for s in states[:i] if s.step.required
                    )
                if state.status == StepStatus.LOCKED:
                    assert any(
                        s.status != StepStatus.COMPLETED for s in states[:i] if s.step.required
                    )


class TestProgress:
    """Tests for phase and overall percentages."""

    def test_overall_monotonic_in_order(self, graph):
        """Test overall progress only grows as steps complete in order."""
        completed: list[str] = []
        previous = graph.overall_percentage(completed)
        assert previous == 0
        for step_id in STEP_IDS:
            completed = graph.complete(step_id, completed)
            current = graph.overall_percentage(completed)
            assert current == pytest.approx(100 * len(completed) / 16)
            assert current >= previous
            previous = current

    def test_phase_percentage(self, graph):
        """Test phase progress counts completed steps in the phase."""
        phases = {p.phase: p for p in graph.phase_progress(STEP_IDS[:6])}
        assert phases[CompliancePhase.PREPARATION].percentage == 100
        assert phases[CompliancePhase.VALIDATION].completed_steps == 1
        assert phases[CompliancePhase.VALIDATION].percentage == pytest.approx(100 / 3)
        assert phases[CompliancePhase.MONITORING].percentage == 0


class TestTransitions:
    """Tests for selecting and completing steps."""

    def test_complete_current_step(self, graph):
        """Test completing the current step returns ordered ids."""
        assert graph.complete("baseline-assessment", ["project-design"]) == [
            "project-design",
            "baseline-assessment",
        ]

    def test_complete_locked_step_rejected(self, graph):
        """Test locked steps cannot be completed."""
        with pytest.raises(InvalidTransitionError):
            graph.complete("technical-review", [])

    def test_select_locked_step_rejected(self, graph):
        """Test locked steps cannot be selected."""
        with pytest.raises(InvalidTransitionError):
            graph.ensure_selectable("ongoing-monitoring", STEP_IDS[:5])

    def test_select_completed_step(self, graph):
        """Test completed steps stay selectable."""
        state = graph.ensure_selectable("project-design", ["project-design"])
        assert state.status == StepStatus.COMPLETED
        assert state.selectable is True

    def test_unknown_step(self, graph):
        """Test unknown step ids are reported as not found."""
        with pytest.raises(NotFoundError):
            graph.complete("no-such-step", [])
