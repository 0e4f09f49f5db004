"""Compliance pipeline endpoints."""

from fastapi import APIRouter

from carbonflow.core.deps import Store
from carbonflow.core.exceptions import CarbonFlowError
from carbonflow.models import ComplianceOverview, ComplianceStep, StepState
from carbonflow.routers.projects import http_error

router = APIRouter()


@router.get("/compliance/steps", response_model=list[ComplianceStep])
async def list_compliance_steps(store: Store) -> list[ComplianceStep]:
    """List the compliance step catalogue in pipeline order."""
    return list(store.graph.steps)


@router.get("/projects/{project_id}/compliance", response_model=ComplianceOverview)
async def get_compliance_overview(project_id: str, store: Store) -> ComplianceOverview:
    """Get step, phase and overall compliance progress for a project."""
    try:
        return store.compliance_overview(project_id)
    except CarbonFlowError as e:
        raise http_error(e)


@router.get("/projects/{project_id}/compliance/{step_id}", response_model=StepState)
async def select_compliance_step(project_id: str, step_id: str, store: Store) -> StepState:
    """Open a compliance step; locked steps are rejected."""
    try:
        return store.select_compliance_step(project_id, step_id)
    except CarbonFlowError as e:
        raise http_error(e)


@router.post(
    "/projects/{project_id}/compliance/{step_id}/complete",
    response_model=ComplianceOverview,
)
def complete_compliance_step(project_id: str, step_id: str, store: Store) -> ComplianceOverview:
    """Mark a compliance step as completed."""
    try:
        return store.complete_compliance_step(project_id, step_id)
    except CarbonFlowError as e:
        raise http_error(e)
