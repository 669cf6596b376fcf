"""Request/response schemas."""

from src.workforce.schemas.pagination import PageRequest, PageResponse, SortDirection, SortOrder
from src.workforce.schemas.problem import FieldErrorDetail, ProblemDetail

__all__ = [
    "FieldErrorDetail",
    "PageRequest",
    "PageResponse",
    "ProblemDetail",
    "SortDirection",
    "SortOrder",
]
