"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from nutrition_insights.api.app import create_app
from nutrition_insights.config import Settings
from nutrition_insights.containers import AppContainer
from nutrition_insights.domain.meals import MealRecord
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.domain.weights import WeightSample
from nutrition_insights.services.analytics import AnalyticsService, MealRepository
from nutrition_insights.services.auth import TokenVerifier
from nutrition_insights.services.cache import InMemoryCache
from nutrition_insights.services.chat import ChatService
from nutrition_insights.services.insights import InsightClient, InsightService
from nutrition_insights.services.profiles import ProfileRepository, ProfileService
from nutrition_insights.services.rate_limit import SlidingWindowRateLimiter
from nutrition_insights.services.recommendations import RecommendationService
from nutrition_insights.services.weights import WeightRepository, WeightService

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=UTC)
TOKEN = "valid-token"


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    reads: int = 0
    updates: list[tuple[UUID, dict[str, object]]] = field(default_factory=list)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        self.reads += 1
        return self.profiles.get(user_id)

    def update_profile(
        self, user_id: UUID, changes: dict[str, object]
    ) -> UserProfile | None:
        self.updates.append((user_id, changes))
        profile = self.profiles.get(user_id)
        if profile is None:
            return None
        normalized = {
            name: tuple(value) if isinstance(value, list) else value
            for name, value in changes.items()
        }
        updated = replace(profile, **normalized)
        self.profiles[user_id] = updated
        return updated


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight history for tests."""

    samples: dict[UUID, list[WeightSample]] = field(default_factory=dict)

    def add_sample(
        self, user_id: UUID, weight: float, recorded_at: datetime
    ) -> WeightSample:
        sample = WeightSample(id=uuid4(), weight=weight, recorded_at=recorded_at)
        self.samples.setdefault(user_id, []).append(sample)
        return sample

    def list_samples(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[WeightSample]:
        rows = sorted(
            self.samples.get(user_id, []), key=lambda sample: sample.recorded_at
        )
        if start is not None:
            rows = [row for row in rows if row.recorded_at >= start]
        if end is not None:
            rows = [row for row in rows if row.recorded_at <= end]
        return rows[:limit] if limit is not None else rows

    def get_sample(self, user_id: UUID, sample_id: UUID) -> WeightSample | None:
        for sample in self.samples.get(user_id, []):
            if sample.id == sample_id:
                return sample
        return None

    def delete_sample(self, sample_id: UUID) -> None:
        for rows in self.samples.values():
            rows[:] = [row for row in rows if row.id != sample_id]


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal log for tests."""

    meals: dict[UUID, list[MealRecord]] = field(default_factory=dict)
    queries: list[tuple[datetime, datetime]] = field(default_factory=list)

    def add(self, user_id: UUID, meal: MealRecord) -> None:
        self.meals.setdefault(user_id, []).append(meal)

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        self.queries.append((start, end))
        return sorted(
            (
                meal
                for meal in self.meals.get(user_id, [])
                if start <= meal.consumed_at <= end
            ),
            key=lambda meal: meal.consumed_at,
        )

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        meals = sorted(
            self.meals.get(user_id, []), key=lambda meal: meal.consumed_at
        )
        return meals[-limit:]


@dataclass
class FakeInsightClient(InsightClient):
    """Fake LLM client with canned outputs."""

    json_responses: dict[str, dict[str, object]] = field(default_factory=dict)
    text_responses: list[str] = field(default_factory=list)
    fail: bool = False
    json_calls: list[dict[str, object]] = field(default_factory=list)
    text_calls: list[dict[str, object]] = field(default_factory=list)

    async def generate_json(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        self.json_calls.append(
            {"model": model, "prompt": prompt, "schema_name": schema_name}
        )
        if self.fail:
            raise RuntimeError("LLM unavailable")
        return self.json_responses[schema_name]

    async def generate_text(
        self,
        *,
        model: str,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        self.text_calls.append(
            {"model": model, "instructions": instructions, "messages": messages}
        )
        if self.fail:
            raise RuntimeError("LLM unavailable")
        return self.text_responses.pop(0)


@dataclass
class FakeTokenVerifier(TokenVerifier):
    """Token verifier backed by a static token map."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def verify(self, token: str) -> UUID | None:
        return self.tokens.get(token)


def make_profile(user_id: UUID, **overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "id": user_id,
        "first_name": "Alex",
        "current_weight": 80.0,
        "target_weight": 75.0,
        "height": 180.0,
        "date_of_birth": date(1990, 6, 1),
        "gender": "male",
        "activity_level": "moderately_active",
        "fitness_goals": ("lose_weight",),
        "daily_calorie_goal": 2000,
        "protein_goal": 150.0,
        "carbs_goal": 200.0,
        "fat_goal": 65.0,
    }
    values.update(overrides)
    return UserProfile(**values)


def make_meal(
    consumed_at: datetime,
    calories: float,
    *,
    protein: float = 0.0,
    carbs: float = 0.0,
    fat: float = 0.0,
    name: str = "Meal",
) -> MealRecord:
    return MealRecord(
        id=uuid4(),
        meal_name=name,
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fat=fat,
        consumed_at=consumed_at,
    )


def sample(weight: float, recorded_at: datetime) -> WeightSample:
    return WeightSample(id=uuid4(), weight=weight, recorded_at=recorded_at)


INSIGHTS_RESPONSE: dict[str, object] = {
    "summary": "Steady progress this month.",
    "key_findings": ["Weight is trending down"],
    "concerns": [],
    "achievements": ["Logged every day"],
    "action_items": ["Keep protein high"],
    "motivational_message": "Keep going!",
    "weekly_score": 82,
}

RECOMMENDATIONS_RESPONSE: dict[str, object] = {
    "recommendations": [
        {
            "type": "food",
            "title": "Greek Yogurt",
            "description": "High-protein snack.",
            "priority": "high",
            "actionable": True,
            "estimated_impact": "Adds 15g protein",
        }
    ]
}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def profile_repository(user_id: UUID) -> InMemoryProfileRepository:
    return InMemoryProfileRepository(profiles={user_id: make_profile(user_id)})


@pytest.fixture
def weight_repository() -> InMemoryWeightRepository:
    return InMemoryWeightRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def insight_client() -> FakeInsightClient:
    return FakeInsightClient(
        json_responses={
            "progress_insights": INSIGHTS_RESPONSE,
            "food_recommendations": RECOMMENDATIONS_RESPONSE,
        }
    )


@pytest.fixture
def profile_service(profile_repository: InMemoryProfileRepository) -> ProfileService:
    return ProfileService(repository=profile_repository, cache=InMemoryCache())


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_id: UUID,
    profile_service: ProfileService,
    weight_repository: InMemoryWeightRepository,
    meal_repository: InMemoryMealRepository,
    insight_client: FakeInsightClient,
) -> AppContainer:
    insight_service = InsightService(client=insight_client, model=settings.openai_model)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_verifier=FakeTokenVerifier(tokens={TOKEN: user_id}),
        profile_service=profile_service,
        weight_service=WeightService(
            repository=weight_repository, profile_service=profile_service
        ),
        analytics_service=AnalyticsService(
            profile_service=profile_service,
            weight_repository=weight_repository,
            meal_repository=meal_repository,
            insight_service=insight_service,
        ),
        chat_service=ChatService(
            profile_service=profile_service,
            meal_repository=meal_repository,
            minute_limiter=SlidingWindowRateLimiter(limit=10, window_seconds=60),
            daily_limiter=SlidingWindowRateLimiter(limit=50, window_seconds=86400),
            client=insight_client,
            model=settings.openai_model,
        ),
        recommendation_service=RecommendationService(
            profile_service=profile_service,
            meal_repository=meal_repository,
            client=insight_client,
            model=settings.openai_model,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TOKEN}"}
