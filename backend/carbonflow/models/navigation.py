"""Navigation targets and setup-gate models."""

from enum import Enum

from carbonflow.models.base import DocumentModel


class SetupGate(str, Enum):
    """Onboarding gates, in gate order."""

    PROJECT_TYPE = "project-type"
    KYC = "kyc"
    WALLET = "wallet"
    DOCUMENTS = "documents"
    AI_ASSISTANT = "ai-assistant"


class TargetStatus(str, Enum):
    """Status of a gate or navigation target."""

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"
    LOCKED = "locked"
    AVAILABLE = "available"


class TargetCategory(str, Enum):
    MAIN = "main"
    SETUP = "setup"
    ADVANCED = "advanced"
    BUYER = "buyer"


class NavigationTarget(DocumentModel):
    id: str
    label: str
    category: TargetCategory
    gate: SetupGate | None = None


class NavigationItemState(DocumentModel):
    target: NavigationTarget
    status: TargetStatus
