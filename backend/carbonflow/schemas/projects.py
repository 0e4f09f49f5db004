"""Project API request/response schemas."""

from pydantic import BaseModel

from carbonflow.models import NavigationItemState, Project, TargetStatus


class ProgressResponse(BaseModel):
    """Setup progress of a project."""

    project_id: str | None
    progress: float
    display: int


class CurrentProjectResponse(BaseModel):
    """The current project pointer and the project it references."""

    current_project_id: str | None
    project: Project | None


class CreatedProjectResponse(BaseModel):
    id: str


class NavigationResponse(BaseModel):
    """Navigation target states for a project."""

    project_id: str | None
    progress: float
    items: list[NavigationItemState]


class NavigateResponse(BaseModel):
    target: str
    status: TargetStatus
