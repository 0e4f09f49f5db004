"""Portfolio aggregation over the project collection."""

from collections.abc import Iterable

from carbonflow.models import PortfolioStats, Project, ProjectStatus

ACTIVE_STATUSES = (ProjectStatus.ACTIVE, ProjectStatus.IN_PROGRESS)


def summarize_portfolio(projects: Iterable[Project]) -> PortfolioStats:
    """Roll per-project financial and credit fields into portfolio totals.

    Args:
        projects: Every project in the store

    Returns:
        Portfolio totals; all zero for an empty collection
    """
    records = list(projects)

    status_counts: dict[str, int] = {}
    for p in records:
        status_counts[p.status.value] = status_counts.get(p.status.value, 0) + 1

    return PortfolioStats(
        total_projects=len(records),
        active_projects=sum(1 for p in records if p.status in ACTIVE_STATUSES),
        total_credits=sum(p.financial.credits_issued for p in records),
        total_revenue=sum(p.financial.actual_revenue for p in records),
        total_credits_traded=sum(p.financial.credits_traded for p in records),
        status_counts=status_counts,
    )
