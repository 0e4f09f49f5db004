"""Portfolio endpoints."""

from fastapi import APIRouter

from carbonflow.core.deps import Store
from carbonflow.models import PortfolioStats

router = APIRouter(prefix="/portfolio")


@router.get("/stats", response_model=PortfolioStats)
async def get_portfolio_stats(store: Store) -> PortfolioStats:
    """Portfolio-wide project, credit and revenue totals."""
    return store.portfolio_stats()
