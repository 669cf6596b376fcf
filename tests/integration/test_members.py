"""API tests for the project service: members."""

import pytest
from httpx import AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.workforce.core.config import Settings
from src.workforce.models import Project, ProjectMember
from src.workforce.models.enums import OnRemoteFailure
from tests.factories import MemberCreateFactory, ProjectCreateFactory, payload
from tests.fakes import FakeRemote
from tests.helpers import assert_problem, count_rows, create, error_fields

pytestmark = pytest.mark.integration

PROJECTS = "/api/v1/projects"


@pytest.fixture
async def members_url(project_api: AsyncClient) -> str:
    project = await create(project_api, PROJECTS, payload(ProjectCreateFactory))
    return f"{PROJECTS}/{project['id']}/members"


class TestAddMember:
    async def test_add_member(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        remote.add_employee(3)

        response = await project_api.post(
            members_url, json={"employeeId": 3, "role": "Tech Lead", "allocationPercent": 80}
        )

        assert response.status_code == 201
        member = response.json()
        assert member["employeeId"] == 3
        assert member["role"] == "Tech Lead"
        assert member["allocationPercent"] == 80
        assert remote.paths() == ["/api/v1/employees/3/exists"]

    async def test_allocation_out_of_range_rejected_without_remote_call(
        self,
        project_api: AsyncClient,
        remote: FakeRemote,
        members_url: str,
        db_session: AsyncSession,
    ) -> None:
        remote.add_employee(3)

        response = await project_api.post(
            members_url, json={"employeeId": 3, "role": "Dev", "allocationPercent": 150}
        )

        problem = assert_problem(response, 400, "validation-error")
        assert error_fields(problem) == {"allocationPercent"}
        assert remote.requests == []
        assert await count_rows(db_session, ProjectMember) == 0

    async def test_unknown_employee_rejected(
        self, project_api: AsyncClient, members_url: str, db_session: AsyncSession
    ) -> None:
        response = await project_api.post(
            members_url, json=payload(MemberCreateFactory, employee_id=404)
        )

        problem = assert_problem(response, 422, "referenced-entity-not-found")
        assert problem["field"] == "employeeId"
        assert await count_rows(db_session, ProjectMember) == 0

    async def test_employee_service_down_blocks_under_block_policy(
        self,
        project_api: AsyncClient,
        remote: FakeRemote,
        settings: Settings,
        members_url: str,
    ) -> None:
        settings.reference_check_on_remote_failure = OnRemoteFailure.BLOCK
        remote.down = True

        response = await project_api.post(
            members_url, json=payload(MemberCreateFactory, employee_id=3)
        )

        assert_problem(response, 503, "remote-unavailable")

    async def test_same_employee_twice_conflicts(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        remote.add_employee(3)
        await create(project_api, members_url, payload(MemberCreateFactory, employee_id=3))

        response = await project_api.post(
            members_url, json=payload(MemberCreateFactory, employee_id=3, role="Reviewer")
        )

        problem = assert_problem(response, 409, "duplicate-resource")
        assert problem["field"] == "employeeId"

    async def test_unknown_project_is_404(self, project_api: AsyncClient) -> None:
        response = await project_api.post(
            f"{PROJECTS}/999/members", json=payload(MemberCreateFactory)
        )
        assert_problem(response, 404, "not-found")

    async def test_bulk_add_reports_each_item(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        remote.add_employee(1)
        remote.add_employee(2)
        items = [
            payload(MemberCreateFactory, employee_id=1),
            payload(MemberCreateFactory, employee_id=404),
            payload(MemberCreateFactory, employee_id=2),
            payload(MemberCreateFactory, employee_id=1),
        ]

        response = await project_api.post(f"{members_url}/bulk", json={"members": items})

        assert response.status_code == 200
        result = response.json()
        assert result["totalProcessed"] == 4
        assert result["successCount"] == 2
        assert result["errorCount"] == 2
        assert [r["success"] for r in result["results"]] == [True, False, True, False]
        assert "404" in result["results"][1]["error"]
        assert "already a member" in result["results"][3]["error"]


class TestReadMembers:
    async def test_list_enriched_with_one_batch_call(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        for employee_id in (1, 2):
            remote.add_employee(employee_id)
            await create(
                project_api, members_url, payload(MemberCreateFactory, employee_id=employee_id)
            )
        remote.requests.clear()

        response = await project_api.get(members_url, params={"enrich": "true"})

        members = response.json()
        assert [m["employee"]["lastName"] for m in members] == ["Last1", "Last2"]
        assert remote.paths() == ["/api/v1/employees/by-ids"]

    async def test_list_not_enriched_by_default(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        remote.add_employee(1)
        await create(project_api, members_url, payload(MemberCreateFactory, employee_id=1))
        remote.requests.clear()

        members = (await project_api.get(members_url)).json()

        assert members[0]["employee"] is None
        assert remote.requests == []

    async def test_get_member_enriched_and_outage_tolerated(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        remote.add_employee(1)
        await create(project_api, members_url, payload(MemberCreateFactory, employee_id=1))

        enriched = await project_api.get(f"{members_url}/1", params={"enrich": "true"})
        remote.down = True
        degraded = await project_api.get(f"{members_url}/1", params={"enrich": "true"})

        assert enriched.json()["employee"]["email"] == "employee1@example.com"
        assert degraded.status_code == 200
        assert degraded.json()["employee"] is None

    async def test_unknown_member_is_404(self, project_api: AsyncClient, members_url: str) -> None:
        response = await project_api.get(f"{members_url}/77")
        assert_problem(response, 404, "not-found")


class TestRemoveMember:
    async def test_remove_member(
        self, project_api: AsyncClient, remote: FakeRemote, members_url: str
    ) -> None:
        remote.add_employee(1)
        await create(project_api, members_url, payload(MemberCreateFactory, employee_id=1))

        assert (await project_api.delete(f"{members_url}/1")).status_code == 204
        assert (await project_api.delete(f"{members_url}/1")).status_code == 404
        assert (await project_api.get(members_url)).json() == []

    async def test_members_removed_with_their_project(
        self,
        project_api: AsyncClient,
        remote: FakeRemote,
        members_url: str,
        db_session: AsyncSession,
    ) -> None:
        """Storage cascades member rows when a project row is deleted."""
        remote.add_employee(1)
        await create(project_api, members_url, payload(MemberCreateFactory, employee_id=1))
        project_id = int(members_url.split("/")[-2])

        await db_session.execute(delete(Project).where(Project.id == project_id))
        await db_session.commit()

        assert await count_rows(db_session, ProjectMember) == 0
