"""Weight logging and history."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.measurements import Measurement, Unit, convert
from nutrition_insights.domain.weights import WeightSample
from nutrition_insights.services.profiles import ProfileService

logger = logging.getLogger(__name__)


class WeightEntryNotFoundError(LookupError):
    """Raised when a weight entry is missing or owned by another user."""


class InvalidWeightError(ValueError):
    """Raised when a logged weight is not a positive mass."""


class WeightRepository(Protocol):
    """Persistence interface for weight history."""

    def add_sample(
        self, user_id: UUID, weight: float, recorded_at: datetime
    ) -> WeightSample:
        """Store a weight sample and return it."""

    def list_samples(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[WeightSample]:
        """Return samples in ascending time order."""

    def get_sample(self, user_id: UUID, sample_id: UUID) -> WeightSample | None:
        """Return a sample owned by the user, if present."""

    def delete_sample(self, sample_id: UUID) -> None:
        """Delete a sample."""


@dataclass
class WeightService:
    """Service for the weight log."""

    repository: WeightRepository
    profile_service: ProfileService

    def log_weight(
        self,
        user_id: UUID,
        weight: Measurement,
        recorded_at: datetime | None = None,
    ) -> WeightSample:
        """Record a weight and mirror it onto the profile."""
        try:
            weight_kg = convert(weight, Unit.KG).value
        except ValueError as exc:
            raise InvalidWeightError(str(exc)) from exc
        if weight_kg <= 0:
            raise InvalidWeightError("Valid weight value is required")
        sample = self.repository.add_sample(
            user_id, weight_kg, recorded_at or datetime.now(tz=UTC)
        )
        self.profile_service.set_current_weight(user_id, weight_kg)
        logger.info(
            "Weight logged", extra={"user_id": str(user_id), "weight_kg": weight_kg}
        )
        return sample

    def history(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[WeightSample]:
        """Return weight history in ascending time order."""
        return self.repository.list_samples(user_id, start, end, limit)

    def delete_entry(self, user_id: UUID, sample_id: UUID) -> None:
        """Delete one of the user's weight entries."""
        sample = self.repository.get_sample(user_id, sample_id)
        if sample is None:
            raise WeightEntryNotFoundError(str(sample_id))
        self.repository.delete_sample(sample_id)
        logger.info(
            "Weight entry deleted",
            extra={"user_id": str(user_id), "entry_id": str(sample_id)},
        )
