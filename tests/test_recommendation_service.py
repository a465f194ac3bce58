"""Tests for food recommendations against today's remaining intake."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from nutrition_insights.services.insights import FALLBACK_RECOMMENDATIONS
from nutrition_insights.services.profiles import ProfileNotFoundError
from nutrition_insights.services.recommendations import (
    RecommendationRequest,
    RecommendationService,
)
from tests.conftest import (
    NOW,
    RECOMMENDATIONS_RESPONSE,
    FakeInsightClient,
    make_meal,
)


def _client(*verdicts: str) -> FakeInsightClient:
    return FakeInsightClient(
        json_responses={"food_recommendations": RECOMMENDATIONS_RESPONSE},
        text_responses=list(verdicts),
    )


def _service(  # type: ignore[no-untyped-def]
    profile_service, meal_repository, client=None
):
    return RecommendationService(
        profile_service=profile_service,
        meal_repository=meal_repository,
        client=client,
        model="gpt-test",
    )


def test_prompt_uses_remaining_macros_and_request(
    profile_service, meal_repository, user_id
) -> None:
    meal_repository.add(
        user_id, make_meal(NOW - timedelta(hours=4), 500, protein=30, name="Omelette")
    )
    meal_repository.add(
        user_id, make_meal(NOW - timedelta(days=3), 900, name="Pasta bake")
    )
    client = _client("YES")
    service = _service(profile_service, meal_repository, client)
    request = RecommendationRequest(
        query="High protein lunch?", meal_type="lunch", time_of_day="noon"
    )

    recommendations = asyncio.run(service.recommend(user_id, request, NOW))

    assert [item.title for item in recommendations] == ["Greek Yogurt"]
    prompt = client.json_calls[0]["prompt"]
    assert "Remaining: 1500 kcal, 120g protein" in prompt
    assert "Consumed: 500 kcal, 30g protein" in prompt
    assert '"High protein lunch?"' in prompt
    assert "Meal type: lunch" in prompt
    assert "Time of day: noon" in prompt
    assert "Recent meals: Pasta bake, Omelette" in prompt
    assert "Goals: lose_weight" in prompt
    assert client.text_calls[0]["messages"] == [
        {"role": "user", "content": "High protein lunch?"}
    ]


def test_excluded_profile_details_stay_out_of_prompt(
    profile_service, meal_repository, user_id
) -> None:
    client = _client("YES")
    service = _service(profile_service, meal_repository, client)
    request = RecommendationRequest(include_allergies=False, include_goals=False)

    asyncio.run(service.recommend(user_id, request, NOW))

    prompt = client.json_calls[0]["prompt"]
    assert "Allergies" not in prompt
    assert "Goals:" not in prompt
    assert '"What should I eat?"' in prompt


def test_recent_meals_are_capped(profile_service, meal_repository, user_id) -> None:
    for day in range(12):
        meal_repository.add(
            user_id, make_meal(NOW - timedelta(days=day + 1), 500, name=f"meal-{day}")
        )
    client = _client("YES")
    service = _service(profile_service, meal_repository, client)

    asyncio.run(service.recommend(user_id, RecommendationRequest(), NOW))

    prompt = client.json_calls[0]["prompt"]
    assert "meal-9" in prompt
    assert "meal-10" not in prompt


def test_off_topic_query_gets_redirect(
    profile_service, meal_repository, user_id
) -> None:
    client = _client("NO")
    service = _service(profile_service, meal_repository, client)

    [recommendation] = asyncio.run(
        service.recommend(user_id, RecommendationRequest(query="Fix my laptop"), NOW)
    )

    assert recommendation.title == "Stay On Topic!"
    assert "2000 calories" in recommendation.description
    assert "lose_weight goals" in recommendation.description
    assert client.json_calls == []


@pytest.mark.parametrize("client", [None, FakeInsightClient(fail=True)])
def test_fallback_without_working_client(
    profile_service, meal_repository, user_id, client
) -> None:
    service = _service(profile_service, meal_repository, client)

    recommendations = asyncio.run(
        service.recommend(user_id, RecommendationRequest(), NOW)
    )

    assert recommendations == FALLBACK_RECOMMENDATIONS
    assert recommendations[0] is not FALLBACK_RECOMMENDATIONS[0]


def test_unknown_user_raises(profile_service, meal_repository) -> None:
    service = _service(profile_service, meal_repository, _client("YES"))

    with pytest.raises(ProfileNotFoundError):
        asyncio.run(service.recommend(uuid4(), RecommendationRequest(), NOW))
