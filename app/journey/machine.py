"""
Journey state machine.

    active <-> paused
    active --(7th distinct step completed)--> completed   (terminal)

All checks run before the first mutation, so a rejected call leaves the
aggregate untouched.
"""
from app.core.log import get_logger
from app.core.config import FREE_ACTIVE_JOURNEY_LIMIT
from app.core.errors import EntitlementRequired, InvalidTransition, ValidationFailure
from app.journey.steps import TOTAL_STEPS, validate_step
from app.users.aggregate import count_journeys, record_activity
from app.users.domain import (
    JOURNEY_ACTIVE,
    JOURNEY_COMPLETED,
    JOURNEY_PAUSED,
    Journey,
    User,
    utcnow,
)

logger = get_logger(__name__)


def start(user: User, resentment_description: str, premium: bool) -> Journey:
    """Open a new active journey at step 1."""
    if not resentment_description or not resentment_description.strip():
        raise ValidationFailure("resentmentDescription is required")

    if not premium and count_journeys(user, JOURNEY_ACTIVE) >= FREE_ACTIVE_JOURNEY_LIMIT:
        raise EntitlementRequired("Upgrade to premium for unlimited journeys")

    now = utcnow()
    journey = Journey(
        journey_number=user.stats.total_journeys_started + 1,
        resentment_description=resentment_description.strip(),
        start_date=now,
    )
    user.journeys.append(journey)
    user.stats.total_journeys_started += 1
    record_activity(user, now)

    logger.info("[JOURNEY] user=%s started journey #%s", user.id, journey.journey_number)
    return journey


def advance_step(user: User, journey: Journey, step_number, completed: bool) -> Journey:
    """
    Navigate to a step, or mark a step done.

    completed=False jumps to step_number with no reachability check.
    completed=True adds the step to completedSteps (idempotent), moves on to
    the next step when the current one was just finished, and closes the
    journey once all seven steps are done.
    """
    step_number = validate_step(step_number)
    now = utcnow()

    if not completed:
        journey.current_step = step_number
        record_activity(user, now)
        return journey

    if step_number not in journey.completed_steps:
        journey.completed_steps = sorted(set(journey.completed_steps) | {step_number})

    if step_number == journey.current_step and step_number < TOTAL_STEPS:
        journey.current_step = step_number + 1

    if len(journey.completed_steps) == TOTAL_STEPS and journey.status != JOURNEY_COMPLETED:
        journey.status = JOURNEY_COMPLETED
        journey.completed_date = now
        user.stats.total_journeys_completed += 1
        logger.info("[JOURNEY] user=%s completed journey #%s", user.id, journey.journey_number)

    record_activity(user, now)
    return journey


def pause(user: User, journey: Journey) -> Journey:
    if journey.status == JOURNEY_COMPLETED:
        raise InvalidTransition("A completed journey cannot be paused")
    journey.status = JOURNEY_PAUSED
    return journey


def resume(user: User, journey: Journey) -> Journey:
    if journey.status == JOURNEY_COMPLETED:
        raise InvalidTransition("A completed journey cannot be resumed")
    journey.status = JOURNEY_ACTIVE
    record_activity(user)
    return journey
