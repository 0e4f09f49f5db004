"""Integration tests for compliance pipeline endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def project_id(store):
    return store.create({"name": "Peatland Restoration", "type": "carbon-sequestration"})


@pytest.mark.asyncio
class TestComplianceCatalogue:
    """Tests for the step catalogue."""

    async def test_list_steps(self, client):
        """Test the catalogue lists every step in pipeline order."""
        response = await client.get(f"{API}/compliance/steps")

        assert response.status_code == 200
        steps = response.json()
        assert len(steps) == 16
        assert steps[0]["id"] == "project-design"
        assert steps[-1]["phase"] == "monitoring"
        assert steps[0]["estimatedDuration"] == "2-4 weeks"


@pytest.mark.asyncio
class TestComplianceProgress:
    """Tests for per-project compliance progress."""

    async def test_initial_overview(self, client, project_id):
        """Test a new project starts at the first step."""
        response = await client.get(f"{API}/projects/{project_id}/compliance")

        assert response.status_code == 200
        data = response.json()
        assert data["currentStepId"] == "project-design"
        assert data["completedSteps"] == 0
        assert data["totalSteps"] == 16
        assert data["overallPercentage"] == 0
        assert data["steps"][1]["status"] == "locked"
        assert data["steps"][1]["selectable"] is False

    async def test_complete_step(self, client, project_id):
        """Test completing the current step advances the pipeline."""
        response = await client.post(f"{API}/projects/{project_id}/compliance/project-design/complete")

        assert response.status_code == 200
        data = response.json()
        assert data["currentStepId"] == "baseline-assessment"
        assert data["completedSteps"] == 1
        assert data["overallPercentage"] == 6.25
        assert data["phases"][0]["completedSteps"] == 1

    async def test_complete_locked_step(self, client, project_id):
        """Test completing a locked step is refused."""
        response = await client.post(f"{API}/projects/{project_id}/compliance/registry-review/complete")
        assert response.status_code == 423

    async def test_select_step(self, client, project_id):
        """Test opening the current step and a locked one."""
        current = await client.get(f"{API}/projects/{project_id}/compliance/project-design")
        locked = await client.get(f"{API}/projects/{project_id}/compliance/monitoring-plan")

        assert current.status_code == 200
        assert current.json()["status"] == "current"
        assert locked.status_code == 423

    async def test_unknown_step(self, client, project_id):
        """Test an unknown step id."""
        response = await client.post(f"{API}/projects/{project_id}/compliance/nope/complete")
        assert response.status_code == 404

    async def test_unknown_project(self, client):
        """Test compliance for an unknown project."""
        response = await client.get(f"{API}/projects/missing/compliance")
        assert response.status_code == 404
