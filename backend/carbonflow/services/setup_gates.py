"""Setup gate calculator.

Pure functions over a project's five onboarding flags. Gates form a chain:
each one becomes workable once the gate before it is done, and the
navigation targets of the application are unlocked from that chain.
"""

from carbonflow.models import (
    NavigationItemState,
    NavigationTarget,
    SetupGate,
    SetupProgress,
    TargetCategory,
    TargetStatus,
)

# Gate order is significant: each gate is unlocked by the one before it.
GATE_ORDER: list[SetupGate] = list(SetupGate)

GATE_FIELDS: dict[SetupGate, str] = {
    SetupGate.PROJECT_TYPE: "project_type_selected",
    SetupGate.KYC: "kyc_completed",
    SetupGate.WALLET: "wallet_connected",
    SetupGate.DOCUMENTS: "documents_uploaded",
    SetupGate.AI_ASSISTANT: "ai_assistant_used",
}

PROJECTS_TARGET = "projects"

NAVIGATION_TARGETS: list[NavigationTarget] = [
    NavigationTarget(id=PROJECTS_TARGET, label="All Projects", category=TargetCategory.MAIN),
    NavigationTarget(id="dashboard", label="Dashboard", category=TargetCategory.MAIN),
    NavigationTarget(
        id="project-selection",
        label="Project Type",
        category=TargetCategory.SETUP,
        gate=SetupGate.PROJECT_TYPE,
    ),
    NavigationTarget(id="kyc", label="KYC Verification", category=TargetCategory.SETUP, gate=SetupGate.KYC),
    NavigationTarget(id="wallet", label="Wallet", category=TargetCategory.SETUP, gate=SetupGate.WALLET),
    NavigationTarget(id="documents", label="Documents", category=TargetCategory.SETUP, gate=SetupGate.DOCUMENTS),
    NavigationTarget(
        id="ai-assistant",
        label="AI Assistant",
        category=TargetCategory.MAIN,
        gate=SetupGate.AI_ASSISTANT,
    ),
    NavigationTarget(id="analytics", label="Analytics", category=TargetCategory.ADVANCED),
    NavigationTarget(id="marketplace", label="Marketplace", category=TargetCategory.ADVANCED),
    NavigationTarget(id="carbon-balance", label="Carbon Balance", category=TargetCategory.BUYER),
    NavigationTarget(id="collaboration", label="Team", category=TargetCategory.ADVANCED),
    NavigationTarget(id="calendar", label="Schedule", category=TargetCategory.ADVANCED),
    NavigationTarget(id="notifications", label="Notifications", category=TargetCategory.ADVANCED),
    NavigationTarget(id="settings", label="Settings", category=TargetCategory.MAIN),
    NavigationTarget(id="help", label="Help & Support", category=TargetCategory.MAIN),
]

_TARGETS_BY_ID: dict[str, NavigationTarget] = {t.id: t for t in NAVIGATION_TARGETS}


def get_target(target_id: str) -> NavigationTarget | None:
    """Look up a navigation target by id."""
    return _TARGETS_BY_ID.get(target_id)


def is_gate_done(progress: SetupProgress, gate: SetupGate) -> bool:
    return getattr(progress, GATE_FIELDS[gate])


def completed_gate_count(progress: SetupProgress) -> int:
    return sum(1 for gate in GATE_ORDER if is_gate_done(progress, gate))


def completion_percentage(progress: SetupProgress) -> float:
    """Share of gates done, 0-100. Not rounded."""
    return completed_gate_count(progress) / len(GATE_ORDER) * 100


def display_percentage(value: float) -> int:
    """Round a percentage for display (half up)."""
    return int(value + 0.5)


def gate_status(progress: SetupProgress, gate: SetupGate) -> TargetStatus:
    """Status of one gate.

    Completed if its own flag is set; current if the preceding gate is done
    (the first gate has no predecessor); locked otherwise.
    """
    if is_gate_done(progress, gate):
        return TargetStatus.COMPLETED

    index = GATE_ORDER.index(gate)
    if index == 0 or is_gate_done(progress, GATE_ORDER[index - 1]):
        return TargetStatus.CURRENT
    return TargetStatus.LOCKED


def gate_states(progress: SetupProgress) -> dict[SetupGate, TargetStatus]:
    return {gate: gate_status(progress, gate) for gate in GATE_ORDER}


def target_status(
    progress: SetupProgress | None,
    target: NavigationTarget,
    advanced_unlock_progress: float = 0.0,
) -> TargetStatus:
    """Status of a navigation target for a project's setup flags.

    Args:
        progress: Setup flags of the selected project, or None when no
            project is selected
        target: Navigation target to evaluate
        advanced_unlock_progress: Minimum completion percentage required by
            targets in the advanced category

    Returns:
        The target's status
    """
    if target.id == PROJECTS_TARGET:
        return TargetStatus.AVAILABLE

    if progress is None:
        return TargetStatus.LOCKED

    if target.gate is not None:
        return gate_status(progress, target.gate)

    if target.category == TargetCategory.BUYER:
        return TargetStatus.AVAILABLE

    if not is_gate_done(progress, GATE_ORDER[0]):
        return TargetStatus.LOCKED

    if (
        target.category == TargetCategory.ADVANCED
        and completion_percentage(progress) < advanced_unlock_progress
    ):
        return TargetStatus.LOCKED

    return TargetStatus.AVAILABLE


def navigation_states(
    progress: SetupProgress | None,
    advanced_unlock_progress: float = 0.0,
) -> list[NavigationItemState]:
    """Status of every navigation target, in menu order."""
    return [
        NavigationItemState(
            target=target,
            status=target_status(progress, target, advanced_unlock_progress),
        )
        for target in NAVIGATION_TARGETS
    ]
