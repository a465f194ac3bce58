"""Tests for the weight log service."""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest

from nutrition_insights.domain.measurements import Measurement, Unit
from nutrition_insights.services.weights import (
    InvalidWeightError,
    WeightEntryNotFoundError,
    WeightService,
)
from tests.conftest import NOW


@pytest.fixture
def weight_service(weight_repository, profile_service) -> WeightService:
    return WeightService(repository=weight_repository, profile_service=profile_service)


def test_log_weight_converts_and_updates_profile(
    weight_service: WeightService, profile_service, user_id: UUID
) -> None:
    profile_service.get_profile(user_id)

    sample = weight_service.log_weight(
        user_id, Measurement(value=165.0, unit=Unit.LB), NOW
    )

    assert sample.weight == pytest.approx(74.8427)
    assert sample.recorded_at == NOW
    assert profile_service.get_profile(user_id).current_weight == pytest.approx(
        74.8427
    )


def test_log_weight_defaults_to_now(weight_service: WeightService, user_id) -> None:
    sample = weight_service.log_weight(user_id, Measurement(value=80, unit=Unit.KG))

    assert sample.recorded_at.tzinfo is not None


def test_log_weight_rejects_invalid_values(
    weight_service: WeightService, user_id: UUID
) -> None:
    with pytest.raises(InvalidWeightError):
        weight_service.log_weight(user_id, Measurement(value=0, unit=Unit.KG))
    with pytest.raises(InvalidWeightError):
        weight_service.log_weight(user_id, Measurement(value=180, unit=Unit.CM))


def test_history_filters_by_range(weight_service: WeightService, user_id) -> None:
    for days in (10, 5, 1):
        weight_service.log_weight(
            user_id,
            Measurement(value=80 - days / 10, unit=Unit.KG),
            NOW - timedelta(days=days),
        )

    history = weight_service.history(user_id, start=NOW - timedelta(days=6))

    assert [sample.weight for sample in history] == [79.5, pytest.approx(79.9)]


def test_delete_entry_checks_ownership(weight_service: WeightService, user_id) -> None:
    sample = weight_service.log_weight(user_id, Measurement(value=80, unit=Unit.KG))

    with pytest.raises(WeightEntryNotFoundError):
        weight_service.delete_entry(uuid4(), sample.id)

    weight_service.delete_entry(user_id, sample.id)
    assert weight_service.history(user_id) == []
