"""Domain models for weight tracking."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class WeightSample:
    """A single weight measurement in kilograms."""

    id: UUID
    weight: float
    recorded_at: datetime
