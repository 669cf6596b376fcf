"""API tests for the project service: projects."""

import pytest
from httpx import AsyncClient

from tests.factories import MemberCreateFactory, ProjectCreateFactory, payload
from tests.fakes import FakeRemote
from tests.helpers import assert_problem, create, error_fields

pytestmark = pytest.mark.integration

PROJECTS = "/api/v1/projects"


class TestCreateProject:
    async def test_create_project(self, project_api: AsyncClient) -> None:
        body = payload(ProjectCreateFactory, code="APOLLO", name="  Apollo  ")

        response = await project_api.post(PROJECTS, json=body)

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "APOLLO"
        assert data["name"] == "Apollo"
        assert data["status"] == "ACTIVE"
        assert data["startDate"] == "2025-01-01"
        assert data["members"] == []

    async def test_end_before_start_rejected(self, project_api: AsyncClient) -> None:
        body = payload(ProjectCreateFactory)
        body["startDate"] = "2025-06-01"
        body["endDate"] = "2025-05-31"

        response = await project_api.post(PROJECTS, json=body)

        problem = assert_problem(response, 400, "validation-error")
        assert "endDate" in error_fields(problem)

    async def test_unknown_status_rejected(self, project_api: AsyncClient) -> None:
        body = payload(ProjectCreateFactory)
        body["status"] = "ARCHIVED"

        response = await project_api.post(PROJECTS, json=body)

        problem = assert_problem(response, 400, "validation-error")
        assert error_fields(problem) == {"status"}

    async def test_code_conflict(self, project_api: AsyncClient) -> None:
        await create(project_api, PROJECTS, payload(ProjectCreateFactory, code="ATLAS"))

        response = await project_api.post(
            PROJECTS, json=payload(ProjectCreateFactory, code="ATLAS")
        )

        problem = assert_problem(response, 409, "duplicate-resource")
        assert problem["field"] == "code"


class TestReadProjects:
    async def test_get_and_by_code_include_members(
        self, project_api: AsyncClient, remote: FakeRemote
    ) -> None:
        remote.add_employee(7)
        project = await create(project_api, PROJECTS, payload(ProjectCreateFactory, code="ORION"))
        await create(
            project_api,
            f"{PROJECTS}/{project['id']}/members",
            payload(MemberCreateFactory, employee_id=7),
        )

        by_id = (await project_api.get(f"{PROJECTS}/{project['id']}")).json()
        by_code = (await project_api.get(f"{PROJECTS}/by-code/orion")).json()

        assert [m["employeeId"] for m in by_id["members"]] == [7]
        assert by_id["members"][0]["employee"] is None
        assert by_code == by_id

    async def test_list_filters(self, project_api: AsyncClient) -> None:
        await create(
            project_api,
            PROJECTS,
            payload(
                ProjectCreateFactory, name="Early bird", start_date="2024-01-01", end_date=None
            ),
        )
        await create(
            project_api,
            PROJECTS,
            payload(ProjectCreateFactory, name="Late bird", start_date="2025-03-01"),
        )
        await create(
            project_api,
            PROJECTS,
            payload(ProjectCreateFactory, name="Paused", status="ON_HOLD"),
        )

        by_status = await project_api.get(PROJECTS, params={"status": "ON_HOLD"})
        by_name = await project_api.get(PROJECTS, params={"name": "BIRD", "sort": "startDate,desc"})
        by_range = await project_api.get(
            PROJECTS, params={"from": "2025-02-01", "to": "2025-12-31"}
        )

        assert [p["name"] for p in by_status.json()["content"]] == ["Paused"]
        assert [p["name"] for p in by_name.json()["content"]] == ["Late bird", "Early bird"]
        assert [p["name"] for p in by_range.json()["content"]] == ["Late bird"]

    async def test_stats_count_every_status(self, project_api: AsyncClient) -> None:
        for status in ("ACTIVE", "ACTIVE", "PLANNED"):
            await create(project_api, PROJECTS, payload(ProjectCreateFactory, status=status))

        stats = (await project_api.get(f"{PROJECTS}/stats")).json()

        assert stats["totalProjects"] == 3
        assert stats["countByStatus"] == {
            "PLANNED": 1,
            "ACTIVE": 2,
            "ON_HOLD": 0,
            "COMPLETED": 0,
            "CANCELLED": 0,
        }

    async def test_unknown_project_is_404(self, project_api: AsyncClient) -> None:
        response = await project_api.get(f"{PROJECTS}/321")
        assert_problem(response, 404, "not-found")


class TestUpdateProject:
    async def test_put_replaces_fields(self, project_api: AsyncClient) -> None:
        project = await create(project_api, PROJECTS, payload(ProjectCreateFactory))
        body = payload(ProjectCreateFactory, code=project["code"], status="COMPLETED")

        response = await project_api.put(f"{PROJECTS}/{project['id']}", json=body)

        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"
        assert response.json()["name"] == body["name"]

    async def test_patch_checks_merged_date_range(self, project_api: AsyncClient) -> None:
        project = await create(
            project_api,
            PROJECTS,
            payload(ProjectCreateFactory, start_date="2025-01-01", end_date="2025-03-01"),
        )

        response = await project_api.patch(
            f"{PROJECTS}/{project['id']}", json={"startDate": "2025-04-01"}
        )

        problem = assert_problem(response, 400, "validation-error")
        assert error_fields(problem) == {"endDate"}

    async def test_patch_leaves_omitted_fields_unchanged(self, project_api: AsyncClient) -> None:
        project = await create(project_api, PROJECTS, payload(ProjectCreateFactory))

        response = await project_api.patch(
            f"{PROJECTS}/{project['id']}", json={"status": "ON_HOLD", "name": ""}
        )

        data = response.json()
        assert data["status"] == "ON_HOLD"
        assert data["name"] == project["name"]
        assert data["code"] == project["code"]

    async def test_patch_to_taken_code_conflicts(self, project_api: AsyncClient) -> None:
        await create(project_api, PROJECTS, payload(ProjectCreateFactory, code="TAKEN"))
        project = await create(project_api, PROJECTS, payload(ProjectCreateFactory))

        response = await project_api.patch(f"{PROJECTS}/{project['id']}", json={"code": "TAKEN"})

        assert_problem(response, 409, "duplicate-resource")


class TestDeleteProject:
    async def test_delete_refused_until_members_removed(
        self, project_api: AsyncClient, remote: FakeRemote
    ) -> None:
        remote.add_employee(5)
        project = await create(project_api, PROJECTS, payload(ProjectCreateFactory))
        members = f"{PROJECTS}/{project['id']}/members"
        await create(project_api, members, payload(MemberCreateFactory, employee_id=5))

        refused = await project_api.delete(f"{PROJECTS}/{project['id']}")

        problem = assert_problem(refused, 409, "resource-in-use")
        assert problem["dependentCount"] == 1
        assert (await project_api.get(f"{PROJECTS}/{project['id']}")).status_code == 200

        assert (await project_api.delete(f"{members}/5")).status_code == 204
        assert (await project_api.delete(f"{PROJECTS}/{project['id']}")).status_code == 204
        assert (await project_api.get(f"{PROJECTS}/{project['id']}")).status_code == 404

    async def test_delete_unknown_is_404(self, project_api: AsyncClient) -> None:
        response = await project_api.delete(f"{PROJECTS}/999")
        assert_problem(response, 404, "not-found")
