"""Navigation gating endpoints."""

from fastapi import APIRouter

from carbonflow.core.deps import Store
from carbonflow.core.exceptions import CarbonFlowError
from carbonflow.routers.projects import http_error
from carbonflow.schemas.projects import NavigateResponse, NavigationResponse

router = APIRouter(prefix="/navigation")


@router.get("", response_model=NavigationResponse)
async def get_navigation(store: Store, project_id: str | None = None) -> NavigationResponse:
    """Status of every navigation target for a project, or the current one."""
    try:
        items = store.navigation(project_id)
    except CarbonFlowError as e:
        raise http_error(e)
    return NavigationResponse(
        project_id=project_id or store.current_project_id,
        progress=store.get_progress(project_id),
        items=items,
    )


@router.post("/{target_id}", response_model=NavigateResponse)
async def navigate(target_id: str, store: Store, project_id: str | None = None) -> NavigateResponse:
    """Check that a target can be opened; locked targets are rejected."""
    try:
        target_status = store.navigate(target_id, project_id)
    except CarbonFlowError as e:
        raise http_error(e)
    return NavigateResponse(target=target_id, status=target_status)
