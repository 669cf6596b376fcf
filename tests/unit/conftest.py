"""Unit test fixtures: reference clients wired to an in-process fake remote."""

from collections.abc import AsyncGenerator

import httpx
import pytest

from src.workforce.clients import DepartmentClient, EmployeeClient
from tests.fakes import FakeRemote


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
async def http(remote: FakeRemote) -> AsyncGenerator[httpx.AsyncClient]:
    async with remote.http_client() as client:
        yield client


@pytest.fixture
def employee_client(remote: FakeRemote, http: httpx.AsyncClient) -> EmployeeClient:
    return remote.employee_client(http)


@pytest.fixture
def department_client(remote: FakeRemote, http: httpx.AsyncClient) -> DepartmentClient:
    return remote.department_client(http)
