"""Tests for composing page requests from raw list parameters."""

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from src.workforce.core.exceptions import MalformedInputError
from src.workforce.schemas.pagination import PageRequest, PageResponse, SortDirection, SortOrder
from src.workforce.services.query import build_query, clean_filters, parse_sort

pytestmark = pytest.mark.unit

SORTABLE = {"id", "last_name", "email"}


def query(page: int | None = None, size: int | None = None, sort: str | None = None, **filters):
    return build_query(
        page, size, sort, filters, sortable=SORTABLE, default_size=20, max_size=100
    )


class TestParseSort:
    def test_default_is_id_ascending(self) -> None:
        assert parse_sort(None, SORTABLE) == (SortOrder("id"),)
        assert parse_sort("  ", SORTABLE) == (SortOrder("id"),)

    def test_camel_case_field_with_tie_breaker(self) -> None:
        assert parse_sort("lastName,desc", SORTABLE) == (
            SortOrder("last_name", SortDirection.DESC),
            SortOrder("id"),
        )

    def test_snake_case_field_accepted(self) -> None:
        assert parse_sort("last_name", SORTABLE)[0] == SortOrder("last_name")

    @pytest.mark.parametrize("direction", ["DESC", " desc ", "Desc"])
    def test_direction_ignores_case(self, direction: str) -> None:
        assert parse_sort(f"email,{direction}", SORTABLE)[0].direction is SortDirection.DESC

    @pytest.mark.parametrize("sort", ["email,sideways", "email,", "email"])
    def test_unrecognised_direction_is_ascending(self, sort: str) -> None:
        assert parse_sort(sort, SORTABLE)[0].direction is SortDirection.ASC

    def test_sorting_by_id_has_no_extra_tie_breaker(self) -> None:
        assert parse_sort("id,desc", SORTABLE) == (SortOrder("id", SortDirection.DESC),)

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(MalformedInputError) as exc_info:
            parse_sort("salary,desc", SORTABLE)

        errors = exc_info.value.errors
        assert [e.field for e in errors] == ["sort"]
        assert "salary" in errors[0].message


class TestBuildQuery:
    def test_defaults(self) -> None:
        request = query()

        assert (request.page, request.size, request.offset) == (0, 20, 0)
        assert request.sort_description == "id: ASC"

    def test_size_clamped_to_maximum(self) -> None:
        assert query(size=1000).size == 100

    def test_invalid_page_and_size_reported_together(self) -> None:
        with pytest.raises(MalformedInputError) as exc_info:
            query(page=-1, size=0)

        assert [e.field for e in exc_info.value.errors] == ["page", "size"]

    def test_blank_and_unset_filters_dropped(self) -> None:
        request = query(last_name="  Smith ", email="   ", department_id=None)

        assert request.filters == {"last_name": "Smith"}

    def test_offset_follows_page(self) -> None:
        assert query(page=3, size=25).offset == 75


@given(page=st.integers(min_value=0, max_value=10_000), size=st.integers(min_value=1))
def test_valid_windows_are_bounded(page: int, size: int):
    request = query(page=page, size=size)

    assert request.page == page
    assert 1 <= request.size <= 100
    assert request.orders[-1] == SortOrder("id")


filter_values = st.one_of(st.none(), st.text(alphabet=st.characters(codec="ascii"), max_size=20))


@given(filters=st.dictionaries(st.sampled_from(["a", "b", "c"]), filter_values))
@settings(suppress_health_check=[HealthCheck.too_slow])
def test_clean_filters_keeps_only_meaningful_values(filters: dict[str, str | None]):
    cleaned = clean_filters(filters)

    assert all(isinstance(v, str) and v and v == v.strip() for v in cleaned.values())
    assert set(cleaned) <= set(filters)


@given(total=st.integers(min_value=0, max_value=1000), size=st.integers(min_value=1, max_value=50))
def test_page_response_totals(total: int, size: int):
    request = PageRequest(page=0, size=size, orders=(SortOrder("id"),))

    page = PageResponse[int].of([], request, total)

    assert page.total_pages * size >= total
    assert (page.total_pages - 1) * size < total or total == 0
    assert page.first
    assert page.last == (page.total_pages <= 1)
