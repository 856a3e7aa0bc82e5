"""
Read-only summaries derived from the user aggregate.
"""
import math
from datetime import datetime
from typing import Optional

from app.journey.steps import TOTAL_STEPS
from app.users.aggregate import count_journeys
from app.users.domain import (
    JOURNEY_ACTIVE,
    JOURNEY_COMPLETED,
    JOURNEY_PAUSED,
    Journey,
    User,
    utcnow,
)

SECONDS_PER_DAY = 24 * 60 * 60


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _ceil_days(start: datetime, end: datetime) -> int:
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def journey_progress(journey: Journey) -> int:
    """Percentage of the seven steps completed, 0-100."""
    return _round_half_up(len(journey.completed_steps) / TOTAL_STEPS * 100)


def days_active(journey: Journey, now: Optional[datetime] = None) -> int:
    """Whole days from start to completion, or to now for unfinished journeys."""
    end = journey.completed_date or now or utcnow()
    return _ceil_days(journey.start_date, end)


def average_completion_days(user: User) -> int:
    completed = [
        j for j in user.journeys
        if j.status == JOURNEY_COMPLETED and j.completed_date is not None
    ]
    if not completed:
        return 0
    total_days = sum(_ceil_days(j.start_date, j.completed_date) for j in completed)
    return _round_half_up(total_days / len(completed))


def compute_stats(user: User) -> dict:
    stats = user.stats
    return {
        "totalJourneys": stats.total_journeys_started,
        "activeJourneys": count_journeys(user, JOURNEY_ACTIVE),
        "pausedJourneys": count_journeys(user, JOURNEY_PAUSED),
        "completedJourneys": count_journeys(user, JOURNEY_COMPLETED),
        "completedResources": stats.total_resources_completed,
        "totalAIConversations": stats.total_ai_conversations,
        "currentStreak": stats.current_streak,
        "lastActiveDate": stats.last_active_date.isoformat() if stats.last_active_date else None,
        "averageCompletionDays": average_completion_days(user),
    }
