"""Attach remote entity details to local read models.

Enrichment is best-effort: whatever the remote returns is attached, and a
record whose detail cannot be resolved keeps `None` in its detail field.
It never raises and never blocks the response.
"""

from pydantic import BaseModel

from src.workforce.clients.base import RemoteReferenceClient


class ReferenceEnricher[R: BaseModel, D: BaseModel]:
    """Fills `detail_field` of records from the entity named by `reference_field`.

    Args:
        client: Client for the service that owns the referenced entity.
        reference_field: Attribute holding the soft-reference id.
        detail_field: Attribute that receives the fetched detail.
    """

    def __init__(
        self,
        client: RemoteReferenceClient[D],
        reference_field: str,
        detail_field: str,
    ):
        self.client = client
        self.reference_field = reference_field
        self.detail_field = detail_field

    def _attach(self, record: R, detail: D | None) -> R:
        return record.model_copy(update={self.detail_field: detail})

    async def enrich_one(self, record: R) -> R:
        ref_id = getattr(record, self.reference_field)
        if ref_id is None:
            return self._attach(record, None)

        lookup = await self.client.fetch_one(ref_id)
        return self._attach(record, lookup.value if lookup.is_found else None)

    async def enrich_many(self, records: list[R]) -> list[R]:
        """Enrich a batch with a single remote call for all distinct references."""
        if not records:
            return []

        lookup = await self.client.fetch_many(getattr(r, self.reference_field) for r in records)
        details: dict[int, D] = {}
        if lookup.is_found and lookup.value is not None:
            details = {getattr(d, "id"): d for d in lookup.value}

        return [
            self._attach(record, details.get(getattr(record, self.reference_field)))
            for record in records
        ]
