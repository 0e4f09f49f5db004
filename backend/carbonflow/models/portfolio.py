"""Portfolio summary model."""

from carbonflow.models.base import DocumentModel


class PortfolioStats(DocumentModel):
    """Portfolio-wide totals over every project in the store."""

    total_projects: int
    active_projects: int
    total_credits: float
    total_revenue: float
    total_credits_traded: float
    status_counts: dict[str, int]  # status -> project count
