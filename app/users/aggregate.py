"""
Cross-journey operations on the user aggregate.

Lookups return None when nothing matches; the require_* variants raise
the matching NotFound error instead. Creation is never a side effect of
a lookup.
"""
from datetime import datetime
from typing import Optional

from app.core.errors import JourneyNotFound, ValidationFailure
from app.users.domain import (
    JOURNEY_ACTIVE,
    JOURNEY_STATUSES,
    CompletedResource,
    Journey,
    User,
    utcnow,
)


def record_activity(user: User, now: Optional[datetime] = None) -> None:
    """Refresh lastActiveDate and keep the daily streak (UTC calendar days)."""
    now = now or utcnow()
    stats = user.stats
    last = stats.last_active_date

    if last is None or stats.current_streak <= 0:
        stats.current_streak = 1
    else:
        gap = (now.date() - last.date()).days
        if gap == 1:
            stats.current_streak += 1
        elif gap > 1:
            stats.current_streak = 1
        # gap == 0 (same day) or clock skew: keep the streak

    stats.last_active_date = now


def find_active_journey(user: User) -> Optional[Journey]:
    """First journey in active status, in creation order."""
    for journey in user.journeys:
        if journey.status == JOURNEY_ACTIVE:
            return journey
    return None


def count_journeys(user: User, status: str) -> int:
    return sum(1 for j in user.journeys if j.status == status)


def find_journey(user: User, journey_number: int) -> Optional[Journey]:
    for journey in user.journeys:
        if journey.journey_number == journey_number:
            return journey
    return None


def require_journey(user: User, journey_number: int) -> Journey:
    journey = find_journey(user, journey_number)
    if journey is None:
        raise JourneyNotFound(f"Journey {journey_number} not found")
    return journey


def list_journeys(user: User, status: Optional[str] = None) -> list[Journey]:
    """Journeys filtered by status ("all" or None means every journey), newest first."""
    if status and status != "all" and status not in JOURNEY_STATUSES:
        raise ValidationFailure(f"Unknown journey status: {status}")

    journeys = list(user.journeys)
    if status and status != "all":
        journeys = [j for j in journeys if j.status == status]

    # Stable on equal start dates: later journey numbers first
    journeys.sort(key=lambda j: (j.start_date, j.journey_number), reverse=True)
    return journeys


def find_completed_resource(user: User, resource_id: str) -> Optional[CompletedResource]:
    for resource in user.completed_resources:
        if resource.resource_id == resource_id:
            return resource
    return None


def complete_resource(user: User, resource_id, resource_name: str = "") -> CompletedResource:
    """
    Record that the user finished a resource.

    First completion adds a ledger entry and bumps totalResourcesCompleted;
    later completions only increment timesCompleted and refresh completedAt.
    """
    if resource_id is None or str(resource_id).strip() == "":
        raise ValidationFailure("resourceId is required")
    resource_id = str(resource_id)

    now = utcnow()
    resource = find_completed_resource(user, resource_id)
    if resource is not None:
        resource.times_completed += 1
        resource.completed_at = now
    else:
        resource = CompletedResource(
            resource_id=resource_id,
            resource_name=resource_name or "",
            completed_at=now,
            times_completed=1,
        )
        user.completed_resources.append(resource)
        user.stats.total_resources_completed += 1

    record_activity(user, now)
    return resource
