"""Problem details returned for every surfaced error."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FieldErrorDetail(BaseModel):
    """One offending field of a malformed request."""

    field: str
    message: str


class ProblemDetail(BaseModel):
    """Structured problem object.

    `errors` is only populated for field-validation failures. `extra` carries
    error-specific properties (e.g. `dependentCount`) merged into the body.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str
    title: str
    status: int
    detail: str
    timestamp: str
    trace_id: str
    instance: str
    errors: list[FieldErrorDetail] | None = None

    def to_body(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        body = self.model_dump(by_alias=True, exclude_none=True)
        if extra:
            body.update(extra)
        return body
