"""Health check endpoint."""

from fastapi import APIRouter

from carbonflow import __version__
from carbonflow.core.deps import Store

router = APIRouter()


@router.get("/health")
async def health_check(store: Store) -> dict:
    """Return service health status and any store load warnings."""
    return {
        "status": "degraded" if store.warnings else "healthy",
        "service": "carbonflow",
        "version": __version__,
        "store_revision": store.revision,
        "warnings": store.warnings,
    }
