"""Supabase repository for weight history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.weights import WeightSample
from nutrition_insights.services.weights import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for the weight_history table."""

    client: Client

    def add_sample(
        self, user_id: UUID, weight: float, recorded_at: datetime
    ) -> WeightSample:
        """Insert a weight row and return it."""
        response = (
            self.client.table("weight_history")
            .insert(
                {
                    "user_id": str(user_id),
                    "weight": weight,
                    "recorded_at": recorded_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight entry in Supabase")
        return _parse_row(response.data[0])

    def list_samples(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[WeightSample]:
        """Return weight rows in ascending time order."""
        query = (
            self.client.table("weight_history")
            .select("id, weight, recorded_at")
            .eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("recorded_at", start.isoformat())
        if end is not None:
            query = query.lte("recorded_at", end.isoformat())
        query = query.order("recorded_at", desc=False)
        if limit is not None:
            query = query.limit(limit)
        response = query.execute()
        return [_parse_row(row) for row in response.data or []]

    def get_sample(self, user_id: UUID, sample_id: UUID) -> WeightSample | None:
        """Return a weight row owned by the user."""
        response = (
            self.client.table("weight_history")
            .select("id, weight, recorded_at")
            .eq("id", str(sample_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_sample(self, sample_id: UUID) -> None:
        """Delete a weight row."""
        self.client.table("weight_history").delete().eq("id", str(sample_id)).execute()


def _parse_row(row: dict[str, object]) -> WeightSample:
    return WeightSample(
        id=UUID(str(row["id"])),
        weight=float(row.get("weight", 0.0)),
        recorded_at=datetime.fromisoformat(str(row["recorded_at"])),
    )
