"""Conversational nutrition assistant with spam guards."""

import logging
import random
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrition_insights.domain.chat import ChatMessage
from nutrition_insights.domain.meals import MealRecord
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.services.analytics import MealRepository
from nutrition_insights.services.insights import InsightClient
from nutrition_insights.services.profiles import ProfileService
from nutrition_insights.services.rate_limit import (
    RateLimitExceededError,
    SlidingWindowRateLimiter,
)

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 500
MIN_MESSAGE_LENGTH = 3
HISTORY_TURNS = 6
DEFAULT_DAILY_CALORIES = 2500

MEAL_WINDOWS = (
    (6, 11, "breakfast"),
    (11, 15, "lunch"),
    (15, 18, "snack"),
    (18, 22, "dinner"),
)

SPAM_PATTERNS = (
    re.compile(r"(.)\1{10,}"),
    re.compile(r"test\s*test\s*test", re.IGNORECASE),
    re.compile(r"\b(?:spam|bot|hack|attack)\b", re.IGNORECASE),
)

REPEATED_REPLY = (
    "I see you're asking the same question again. Is there something specific "
    "you'd like me to clarify about my previous response?"
)
MINUTE_LIMIT_MESSAGE = "Too many requests. Please wait a moment before asking again."
DAILY_LIMIT_MESSAGE = "Daily AI request limit reached. Please try again tomorrow."
SPAM_REPLY = (
    "I noticed your message might not be a genuine nutrition question. Please ask "
    "me something about your health, diet, or fitness goals!"
)
FALLBACK_REPLIES = (
    "Hi {name}! I'm here to help with your nutrition and health goals. "
    "What would you like to know?",
    "I'd love to help you with your nutrition questions! Could you tell me more "
    "about what you're looking for?",
    "I'm your AI nutrition assistant! Feel free to ask me about meal planning, "
    "food recommendations, or your progress.",
)


class ChatValidationError(ValueError):
    """Raised when a chat message fails basic validation."""


@dataclass(frozen=True)
class Nutrients:
    """Calorie and macro amounts for a day."""

    calories: float
    protein: float
    carbs: float
    fat: float


def daily_goals(profile: UserProfile) -> Nutrients:
    """Return daily goals, deriving missing macros from the calorie goal."""
    calories = profile.daily_calorie_goal or DEFAULT_DAILY_CALORIES
    return Nutrients(
        calories=calories,
        protein=profile.protein_goal or round(calories * 0.3 / 4),
        carbs=profile.carbs_goal or round(calories * 0.4 / 4),
        fat=profile.fat_goal or round(calories * 0.3 / 9),
    )


def consumed(meals: list[MealRecord]) -> Nutrients:
    """Sum the nutrients of a set of meals."""
    return Nutrients(
        calories=sum(meal.total_calories for meal in meals),
        protein=sum(meal.total_protein for meal in meals),
        carbs=sum(meal.total_carbs for meal in meals),
        fat=sum(meal.total_fat for meal in meals),
    )


def remaining(goals: Nutrients, eaten: Nutrients) -> Nutrients:
    """Return what is left of each goal, never negative."""
    return Nutrients(
        calories=max(0, goals.calories - eaten.calories),
        protein=max(0, goals.protein - eaten.protein),
        carbs=max(0, goals.carbs - eaten.carbs),
        fat=max(0, goals.fat - eaten.fat),
    )


def meal_context(hour: int) -> str:
    """Name the meal that fits a local hour of day."""
    for start, end, name in MEAL_WINDOWS:
        if start <= hour < end:
            return name
    return "late night snack"


def is_spam(message: str) -> bool:
    """Return True for obvious non-questions."""
    if not any(char.isalpha() for char in message):
        return True
    return any(pattern.search(message) for pattern in SPAM_PATTERNS)


@dataclass
class ChatService:
    """Answers nutrition questions using the user's daily intake."""

    profile_service: ProfileService
    meal_repository: MealRepository
    minute_limiter: SlidingWindowRateLimiter
    daily_limiter: SlidingWindowRateLimiter
    client: InsightClient | None = None
    model: str = ""

    async def reply(
        self,
        user_id: UUID,
        message: str,
        history: list[ChatMessage],
        now: datetime,
    ) -> str:
        """Return the assistant's reply to a user message."""
        text = _validate(message)
        last_user = next(
            (turn for turn in reversed(history) if turn.role == "user"), None
        )
        if last_user and last_user.content.strip().lower() == text.lower():
            return REPEATED_REPLY

        self._check_limits(user_id)
        if is_spam(message):
            return SPAM_REPLY

        profile = self.profile_service.get_profile(user_id)
        intake = todays_intake(profile, self.meal_repository, now)
        goals, eaten, left = intake.goals, intake.consumed, intake.remaining
        context = intake.meal_context
        logger.info(
            "Chat request",
            extra={
                "user_id": str(user_id),
                "message_length": len(message),
                "meal_context": context,
            },
        )

        if self.client is not None:
            try:
                if not await is_on_topic(self.client, self.model, message):
                    return _off_topic_reply(left)
                instructions = build_system_prompt(
                    profile, goals, eaten, left, context
                )
                turns = [turn.model_dump() for turn in history[-HISTORY_TURNS:]]
                turns.append({"role": "user", "content": message})
                answer = await self.client.generate_text(
                    model=self.model, instructions=instructions, messages=turns
                )
                if answer:
                    return answer
            except Exception:
                logger.exception("AI chat failed", extra={"user_id": str(user_id)})

        return random.choice(FALLBACK_REPLIES).format(  # noqa: S311
            name=profile.first_name or "there"
        )

    def _check_limits(self, user_id: UUID) -> None:
        key = str(user_id)
        # check both windows before spending a slot in either
        if self.minute_limiter.remaining(key) <= 0:
            raise RateLimitExceededError(MINUTE_LIMIT_MESSAGE)
        if self.daily_limiter.remaining(key) <= 0:
            raise RateLimitExceededError(DAILY_LIMIT_MESSAGE)
        if not self.minute_limiter.try_acquire(key):
            raise RateLimitExceededError(MINUTE_LIMIT_MESSAGE)
        if not self.daily_limiter.try_acquire(key):
            raise RateLimitExceededError(DAILY_LIMIT_MESSAGE)


@dataclass(frozen=True)
class DailyIntake:
    """Today's goals, consumption and what is left, in the user's timezone."""

    goals: Nutrients
    consumed: Nutrients
    remaining: Nutrients
    meal_context: str


def todays_intake(
    profile: UserProfile, meal_repository: MealRepository, now: datetime
) -> DailyIntake:
    """Sum the meals logged since local midnight against the daily goals."""
    local_now = now.astimezone(ZoneInfo(profile.timezone))
    day_start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    meals = meal_repository.list_meals(
        profile.id, day_start, day_start + timedelta(days=1)
    )
    goals = daily_goals(profile)
    eaten = consumed(meals)
    return DailyIntake(
        goals=goals,
        consumed=eaten,
        remaining=remaining(goals, eaten),
        meal_context=meal_context(local_now.hour),
    )


async def is_on_topic(client: InsightClient, model: str, message: str) -> bool:
    """Ask the model whether a message is about nutrition or health."""
    verdict = await client.generate_text(
        model=model,
        instructions=TOPIC_CHECK_INSTRUCTIONS,
        messages=[{"role": "user", "content": message}],
    )
    return verdict.strip().upper().startswith("YES")


TOPIC_CHECK_INSTRUCTIONS = (
    "Decide whether the user's message is about nutrition, food, cuisines, "
    "recipes, meals, calories, macros, weight, fitness goals, progress, "
    "exercise, body composition, hydration, sleep or general wellness. "
    "The message may be in any language; judge its meaning. "
    'Answer with only "YES" if it is, or "NO" if it is unrelated.'
)


def build_system_prompt(
    profile: UserProfile,
    goals: Nutrients,
    eaten: Nutrients,
    left: Nutrients,
    context: str,
) -> str:
    """Describe the user and today's intake for the assistant."""
    name = profile.first_name or "the user"
    goals_text = ", ".join(profile.fitness_goals) or "general health"
    allergies = ", ".join(profile.allergies) or "none"
    preferences = ", ".join(profile.dietary_preferences) or "none"
    return "\n".join(
        [
            f"You are a friendly, knowledgeable nutrition assistant helping {name}.",
            "Reply in the same language the user writes in.",
            "",
            "User profile:",
            f"- Current weight: {profile.current_weight or 'not set'} kg",
            f"- Target weight: {profile.target_weight or 'not set'} kg",
            f"- Height: {profile.height or 'not set'} cm",
            f"- Goals: {goals_text}",
            f"- Allergies: {allergies}",
            f"- Dietary preferences: {preferences}",
            "",
            f"Today's nutrition ({context}):",
            f"- Goals: {format_nutrients(goals)}",
            f"- Consumed: {format_nutrients(eaten)}",
            f"- Remaining: {format_nutrients(left)}",
            "",
            "Only answer questions about nutrition, health, fitness, food and "
            "wellness, and politely redirect anything else.",
            "Suggest foods that fit the remaining calories and macros, respect "
            "allergies and preferences, give portion sizes, and keep replies "
            "under 400 words.",
        ]
    )


def format_nutrients(nutrients: Nutrients) -> str:
    return (
        f"{nutrients.calories:.0f} kcal, {nutrients.protein:.0f}g protein, "
        f"{nutrients.carbs:.0f}g carbs, {nutrients.fat:.0f}g fat"
    )


def _off_topic_reply(left: Nutrients) -> str:
    return (
        "I'm your nutrition assistant, so I can only help with food, diet, health, "
        "and fitness questions! Try asking about meals that fit your remaining "
        f"{left.calories:.0f} calories for today, or how you're doing with your goals."
    )


def _validate(message: str) -> str:
    if len(message) > MAX_MESSAGE_LENGTH:
        raise ChatValidationError(
            "Message too long. Please keep it under 500 characters."
        )
    text = message.strip()
    if len(text) < MIN_MESSAGE_LENGTH:
        raise ChatValidationError("Message too short. Please ask a proper question.")
    return text
