"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_insights.adapters.openai_insight_client import OpenAIInsightClient
from nutrition_insights.adapters.supabase_meal_repository import (
    SupabaseMealRepository,
)
from nutrition_insights.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_insights.adapters.supabase_token_verifier import (
    SupabaseTokenVerifier,
)
from nutrition_insights.adapters.supabase_weight_repository import (
    SupabaseWeightRepository,
)
from nutrition_insights.config import Settings
from nutrition_insights.services.analytics import AnalyticsService
from nutrition_insights.services.auth import TokenVerifier
from nutrition_insights.services.cache import InMemoryCache
from nutrition_insights.services.chat import ChatService
from nutrition_insights.services.insights import InsightService
from nutrition_insights.services.profiles import ProfileService
from nutrition_insights.services.rate_limit import SlidingWindowRateLimiter
from nutrition_insights.services.recommendations import RecommendationService
from nutrition_insights.services.weights import WeightService

SECONDS_PER_MINUTE = 60
SECONDS_PER_DAY = 86400


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_verifier: TokenVerifier
    profile_service: ProfileService
    weight_service: WeightService
    analytics_service: AnalyticsService
    chat_service: ChatService
    recommendation_service: RecommendationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    weight_repository = SupabaseWeightRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    profile_service = ProfileService(
        repository=profile_repository,
        cache=InMemoryCache(max_entries=resolved_settings.profile_cache_max_entries),
        ttl_seconds=resolved_settings.profile_cache_ttl_seconds,
    )

    openai_client = None
    insight_service = None
    if resolved_settings.ai_enabled:
        openai_client = OpenAIInsightClient.create(
            api_key=resolved_settings.openai_api_key or "",
            timeout=resolved_settings.openai_timeout_seconds,
        )
        insight_service = InsightService(
            client=openai_client, model=resolved_settings.openai_model
        )

    chat_service = ChatService(
        profile_service=profile_service,
        meal_repository=meal_repository,
        minute_limiter=SlidingWindowRateLimiter(
            limit=resolved_settings.chat_requests_per_minute,
            window_seconds=SECONDS_PER_MINUTE,
        ),
        daily_limiter=SlidingWindowRateLimiter(
            limit=resolved_settings.chat_requests_per_day,
            window_seconds=SECONDS_PER_DAY,
        ),
        client=openai_client,
        model=resolved_settings.openai_model,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_verifier=SupabaseTokenVerifier(supabase_client),
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
        chat_service=chat_service,
        recommendation_service=RecommendationService(
            profile_service=profile_service,
            meal_repository=meal_repository,
            client=openai_client,
            model=resolved_settings.openai_model,
        ),
        close_resources=close_resources,
    )
