"""Test helper functions for common assertions and data setup."""

from typing import Any

from httpx import AsyncClient, Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

PROBLEM_FIELDS = {"type", "title", "status", "detail", "timestamp", "traceId", "instance"}


async def count_rows(session: AsyncSession, model: type[SQLModel]) -> int:
    """Number of stored rows of a table."""
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


def assert_problem(response: Response, status: int, problem_type: str) -> dict[str, Any]:
    """Assert a problem-details error response and return its body.

    Args:
        response: The HTTP response.
        status: Expected status code.
        problem_type: Expected last segment of the problem `type` URI.
    """
    assert response.status_code == status, response.text
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert PROBLEM_FIELDS <= body.keys()
    assert body["status"] == status
    assert body["type"].endswith(f"/{problem_type}")
    return body


def error_fields(body: dict[str, Any]) -> set[str]:
    return {error["field"] for error in body.get("errors", [])}


async def create(client: AsyncClient, path: str, body: dict[str, Any]) -> dict[str, Any]:
    """POST a resource and return the created representation."""
    response = await client.post(path, json=body)
    assert response.status_code == 201, response.text
    return response.json()
