"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

# Rate limiting is per-process state; keep it out of the way of the test client
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from carbonflow.core.config import Settings
from carbonflow.core.database import create_db_engine, init_db
from carbonflow.core.deps import get_audit_service, get_store
from carbonflow.main import app
from carbonflow.models import Project, ProjectType, Team, TeamMember, TeamRole
from carbonflow.services.audit import AuditService
from carbonflow.services.persistence import DocumentRepository
from carbonflow.services.project_store import ProjectStore
from carbonflow.services.setup_gates import GATE_ORDER

TEST_DOCUMENT_KEY = "test-projects"


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, rate_limit_enabled=False)


@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """Create a file-backed SQLite engine per test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'carbonflow-test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def repository(test_engine) -> DocumentRepository:
    return DocumentRepository(test_engine, TEST_DOCUMENT_KEY)


@pytest.fixture(scope="function")
def audit_service(test_engine) -> AuditService:
    return AuditService(test_engine)


@pytest.fixture(scope="function")
def store(repository, test_settings, audit_service) -> ProjectStore:
    """Create an empty, loaded project store."""
    project_store = ProjectStore(repository, settings=test_settings, audit=audit_service)
    project_store.load()
    return project_store


@pytest.fixture(scope="function")
def make_store(repository, test_settings):
    """Build additional stores over the same document (e.g. a second process)."""

    def _make() -> ProjectStore:
        other = ProjectStore(repository, settings=test_settings)
        other.load()
        return other

    return _make


@pytest_asyncio.fixture(scope="function")
async def client(store, audit_service) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with the store injected."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_audit_service] = lambda: audit_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def complete_gates(store):
    """Mark the first ``count`` setup gates of a project done, in order."""

    def _complete(project_id: str, count: int) -> None:
        for gate in GATE_ORDER[:count]:
            store.mark_setup_gate(project_id, gate)

    return _complete


def build_project(project_id: str, name: str = "Test Project", **fields) -> Project:
    """Build a valid project without going through a store."""
    fields.setdefault("type", ProjectType.CARBON_AVOIDANCE)
    fields.setdefault("team", Team(members=[TeamMember(id="owner-1", name="Owner", role=TeamRole.PROJECT_OWNER)]))
    return Project(id=project_id, name=name, **fields)
