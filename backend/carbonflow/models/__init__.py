"""Domain and persistence models."""

from carbonflow.models.project import (
    Project,
    ProjectType,
    ProjectStatus,
    CarbonStandard,
    Currency,
    TeamRole,
    MembershipStatus,
    ValidationStatus,
    NotificationFrequency,
    SetupProgress,
    ProjectDetails,
    TeamMember,
    Team,
    Financials,
    ComplianceSummary,
    NotificationSettings,
    PrivacySettings,
    ProjectSettings,
    ProjectCreate,
    ProjectUpdate,
    SetupProgressPatch,
    ProjectDetailsPatch,
    FinancialsPatch,
    ComplianceSummaryPatch,
    ProjectSettingsPatch,
)
from carbonflow.models.compliance import (
    CompliancePhase,
    PHASE_ORDER,
    StepStatus,
    ComplianceStep,
    StepState,
    PhaseProgress,
    ComplianceOverview,
)
from carbonflow.models.navigation import (
    SetupGate,
    TargetStatus,
    TargetCategory,
    NavigationTarget,
    NavigationItemState,
)
from carbonflow.models.portfolio import PortfolioStats
from carbonflow.models.store_document import StoreDocument, StorePayload
from carbonflow.models.audit import AuditLog, AuditLogRead

__all__ = [
    # Project
    "Project",
    "ProjectType",
    "ProjectStatus",
    "CarbonStandard",
    "Currency",
    "TeamRole",
    "MembershipStatus",
    "ValidationStatus",
    "NotificationFrequency",
    "SetupProgress",
    "ProjectDetails",
    "TeamMember",
    "Team",
    "Financials",
    "ComplianceSummary",
    "NotificationSettings",
    "PrivacySettings",
    "ProjectSettings",
    "ProjectCreate",
    "ProjectUpdate",
    "SetupProgressPatch",
    "ProjectDetailsPatch",
    "FinancialsPatch",
    "ComplianceSummaryPatch",
    "ProjectSettingsPatch",
    # Compliance
    "CompliancePhase",
    "PHASE_ORDER",
    "StepStatus",
    "ComplianceStep",
    "StepState",
    "PhaseProgress",
    "ComplianceOverview",
    # Navigation
    "SetupGate",
    "TargetStatus",
    "TargetCategory",
    "NavigationTarget",
    "NavigationItemState",
    # Portfolio
    "PortfolioStats",
    # Persistence
    "StoreDocument",
    "StorePayload",
    # Audit
    "AuditLog",
    "AuditLogRead",
]
