"""Project model for environmental-credit project tracking."""

from datetime import date, datetime, timezone
from enum import Enum

from pydantic import Field, model_validator

from carbonflow.models.base import DocumentModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProjectType(str, Enum):
    """Project classification."""

    CARBON_AVOIDANCE = "carbon-avoidance"
    CARBON_SEQUESTRATION = "carbon-sequestration"
    ENERGY_EFFICIENCY = "energy-efficiency"


class ProjectStatus(str, Enum):
    """Project lifecycle states."""

    SETUP = "setup"
    IN_PROGRESS = "in-progress"
    VALIDATION = "validation"
    REGISTERED = "registered"
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class CarbonStandard(str, Enum):
    """Crediting standards."""

    VCS = "VCS"
    CAR = "CAR"
    GOLD_STANDARD = "Gold-Standard"
    ACR = "ACR"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"


class TeamRole(str, Enum):
    """Roles a team member can hold on a project."""

    PROJECT_OWNER = "project-owner"
    PROJECT_MANAGER = "project-manager"
    TECHNICAL_LEAD = "technical-lead"
    VALIDATOR = "validator"
    CONSULTANT = "consultant"


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    INVITED = "invited"


class ValidationStatus(str, Enum):
    """Validation summary mirrored from the validator."""

    PENDING = "pending"
    IN_REVIEW = "in-review"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationFrequency(str, Enum):
    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class SetupProgress(DocumentModel):
    """The five onboarding gates, in gate order."""

    project_type_selected: bool = False
    kyc_completed: bool = False
    wallet_connected: bool = False
    documents_uploaded: bool = False
    ai_assistant_used: bool = False


class ProjectDetails(DocumentModel):
    """Free-form project configuration; not gated."""

    location: str = ""
    start_date: date = Field(default_factory=lambda: utc_now().date())
    estimated_duration: str = "18 months"
    standard: CarbonStandard = CarbonStandard.VCS
    methodology: str = ""
    estimated_credits_per_year: int = Field(default=1000, ge=0)
    currency: Currency = Currency.USD
    timezone: str = "America/New_York"


class TeamMember(DocumentModel):
    id: str
    name: str
    email: str = ""
    role: TeamRole = TeamRole.CONSULTANT
    status: MembershipStatus = MembershipStatus.INVITED
    joined_at: datetime | None = None


class Team(DocumentModel):
    """Ordered project members. Ids are unique and a project owner is always present."""

    members: list[TeamMember] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_members(self) -> "Team":
        ids = [m.id for m in self.members]
        if len(ids) != len(set(ids)):
            raise ValueError("team member ids must be unique")
        if not any(m.role == TeamRole.PROJECT_OWNER for m in self.members):
            raise ValueError("team must include a project owner")
        return self


class Financials(DocumentModel):
    """Accumulators fed by settlement events."""

    estimated_revenue: float = Field(default=0, ge=0)
    actual_revenue: float = Field(default=0, ge=0)
    credits_issued: float = Field(default=0, ge=0)
    credits_traded: float = Field(default=0, ge=0)
    avg_price_per_credit: float = Field(default=0, ge=0)


class ComplianceSummary(DocumentModel):
    """Validator-facing summary plus the completed compliance step ids."""

    validation_status: ValidationStatus = ValidationStatus.PENDING
    validator_id: str | None = None
    last_validation_date: date | None = None
    next_milestone_date: date | None = None
    compliance_score: float = Field(default=0, ge=0, le=100)
    completed_steps: list[str] = Field(default_factory=list)


class NotificationSettings(DocumentModel):
    email: bool = True
    push: bool = True
    frequency: NotificationFrequency = NotificationFrequency.IMMEDIATE


class PrivacySettings(DocumentModel):
    public_profile: bool = True
    show_in_marketplace: bool = True


class ProjectSettings(DocumentModel):
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)


class Project(DocumentModel):
    """A single environmental-credit project."""

    id: str
    name: str
    description: str = ""
    type: ProjectType
    status: ProjectStatus = ProjectStatus.SETUP
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    setup_progress: SetupProgress = Field(default_factory=SetupProgress)
    details: ProjectDetails = Field(default_factory=ProjectDetails)
    team: Team
    financial: Financials = Field(default_factory=Financials)
    compliance: ComplianceSummary = Field(default_factory=ComplianceSummary)
    settings: ProjectSettings = Field(default_factory=ProjectSettings)


# Partial models. Only fields explicitly set are applied by the store.


class SetupProgressPatch(DocumentModel):
    project_type_selected: bool | None = None
    kyc_completed: bool | None = None
    wallet_connected: bool | None = None
    documents_uploaded: bool | None = None
    ai_assistant_used: bool | None = None


class ProjectDetailsPatch(DocumentModel):
    location: str | None = None
    start_date: date | None = None
    estimated_duration: str | None = None
    standard: CarbonStandard | None = None
    methodology: str | None = None
    estimated_credits_per_year: int | None = Field(default=None, ge=0)
    currency: Currency | None = None
    timezone: str | None = None


class FinancialsPatch(DocumentModel):
    estimated_revenue: float | None = Field(default=None, ge=0)
    actual_revenue: float | None = Field(default=None, ge=0)
    credits_issued: float | None = Field(default=None, ge=0)
    credits_traded: float | None = Field(default=None, ge=0)
    avg_price_per_credit: float | None = Field(default=None, ge=0)


class ComplianceSummaryPatch(DocumentModel):
    validation_status: ValidationStatus | None = None
    validator_id: str | None = None
    last_validation_date: date | None = None
    next_milestone_date: date | None = None
    compliance_score: float | None = Field(default=None, ge=0, le=100)
    completed_steps: list[str] | None = None


class ProjectSettingsPatch(DocumentModel):
    notifications: NotificationSettings | None = None
    privacy: PrivacySettings | None = None


class ProjectCreate(DocumentModel):
    """Schema for creating a project. Omitted fields take defaults."""

    name: str | None = None
    description: str | None = None
    type: ProjectType | None = None
    details: ProjectDetailsPatch | None = None
    members: list[TeamMember] = Field(default_factory=list)
    settings: ProjectSettings | None = None


class ProjectUpdate(DocumentModel):
    """Schema for updating a project.

    Top-level fields replace; nested sections merge field by field.
    """

    name: str | None = None
    description: str | None = None
    type: ProjectType | None = None
    status: ProjectStatus | None = None
    setup_progress: SetupProgressPatch | None = None
    details: ProjectDetailsPatch | None = None
    team: Team | None = None
    financial: FinancialsPatch | None = None
    compliance: ComplianceSummaryPatch | None = None
    settings: ProjectSettingsPatch | None = None
