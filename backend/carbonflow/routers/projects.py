"""Project management endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from carbonflow.core.deps import Store
from carbonflow.core.exceptions import (
    CarbonFlowError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
)
from carbonflow.models import Project, ProjectCreate, ProjectUpdate, SetupGate
from carbonflow.schemas.projects import (
    CreatedProjectResponse,
    CurrentProjectResponse,
    ProgressResponse,
)
from carbonflow.services.setup_gates import display_percentage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects")

# Handlers that write through the store are plain functions: FastAPI runs them
# in its threadpool so database I/O stays off the event loop.


def http_error(error: CarbonFlowError) -> HTTPException:
    """Translate a store error into an HTTP error."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, InvalidTransitionError):
        return HTTPException(status_code=status.HTTP_423_LOCKED, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(project_data: ProjectCreate, store: Store) -> Project:
    """Create a project and make it current."""
    try:
        project_id = store.create(project_data)
    except ConflictError as e:
        raise http_error(e)
    return store.get(project_id)


@router.get("", response_model=list[Project])
async def list_projects(
    store: Store,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> list[Project]:
    """List projects in creation order."""
    return store.projects[skip : skip + limit]


@router.get("/current", response_model=CurrentProjectResponse)
async def get_current_project(store: Store) -> CurrentProjectResponse:
    """Get the current project pointer."""
    return CurrentProjectResponse(
        current_project_id=store.current_project_id,
        project=store.current_project,
    )


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(store: Store, project_id: str | None = None) -> ProgressResponse:
    """Get setup progress for a project, or for the current project."""
    progress = store.get_progress(project_id)
    return ProgressResponse(
        project_id=project_id or store.current_project_id,
        progress=progress,
        display=display_percentage(progress),
    )


@router.get("/{project_id}", response_model=Project)
async def get_project(project_id: str, store: Store) -> Project:
    """Get project details."""
    try:
        return store.get(project_id)
    except NotFoundError as e:
        raise http_error(e)


@router.put("/{project_id}", response_model=Project)
def update_project(project_id: str, project_data: ProjectUpdate, store: Store) -> Project:
    """Merge changes into a project."""
    try:
        return store.update(project_id, project_data)
    except CarbonFlowError as e:
        raise http_error(e)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: str, store: Store) -> None:
    """Delete a project."""
    try:
        store.delete(project_id)
    except CarbonFlowError as e:
        raise http_error(e)


@router.post("/{project_id}/switch", response_model=Project)
def switch_project(project_id: str, store: Store) -> Project:
    """Make a project current."""
    try:
        return store.switch(project_id)
    except CarbonFlowError as e:
        raise http_error(e)


@router.post("/{project_id}/archive", response_model=Project)
def archive_project(project_id: str, store: Store) -> Project:
    """Archive a project (status becomes completed)."""
    try:
        return store.archive(project_id)
    except CarbonFlowError as e:
        raise http_error(e)


@router.post(
    "/{project_id}/duplicate",
    response_model=CreatedProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_project(project_id: str, store: Store) -> CreatedProjectResponse:
    """Duplicate a project with reset progress and financials."""
    try:
        return CreatedProjectResponse(id=store.duplicate(project_id))
    except CarbonFlowError as e:
        raise http_error(e)


@router.post("/{project_id}/setup/{gate}", response_model=Project)
def complete_setup_gate(project_id: str, gate: SetupGate, store: Store) -> Project:
    """Record a completion signal for a setup gate (KYC, wallet, documents...)."""
    try:
        project = store.mark_setup_gate(project_id, gate)
    except CarbonFlowError as e:
        logger.info(f"Rejected setup gate {gate.value} for project {project_id}: {e}")
        raise http_error(e)
    return project
