from datetime import datetime, timezone

import pytest

from app.core.errors import EntitlementRequired, InvalidTransition, ValidationFailure
from app.journey import machine
from app.users.domain import User


def _user():
    return User(id=1, screen_name="sam")


def test_start_creates_active_journey_at_step_one():
    user = _user()
    journey = machine.start(user, "my brother", premium=False)

    assert journey.journey_number == 1
    assert journey.current_step == 1
    assert journey.completed_steps == []
    assert journey.status == "active"
    assert journey.completed_date is None
    assert user.stats.total_journeys_started == 1
    assert user.stats.last_active_date is not None


def test_walking_all_seven_steps_completes_the_journey():
    user = _user()
    journey = machine.start(user, "my brother", premium=False)

    machine.advance_step(user, journey, 1, completed=True)
    assert journey.current_step == 2
    assert journey.completed_steps == [1]

    for step in range(2, 8):
        machine.advance_step(user, journey, step, completed=True)

    assert journey.current_step == 7
    assert journey.completed_steps == [1, 2, 3, 4, 5, 6, 7]
    assert journey.status == "completed"
    assert journey.completed_date is not None
    assert user.stats.total_journeys_completed == 1


def test_marking_a_step_twice_is_idempotent():
    user = _user()
    journey = machine.start(user, "my boss", premium=False)

    machine.advance_step(user, journey, 1, completed=True)
    machine.advance_step(user, journey, 1, completed=True)

    assert journey.completed_steps == [1]
    assert journey.current_step == 2


def test_completed_steps_stay_sorted_when_marked_out_of_order():
    user = _user()
    journey = machine.start(user, "an old friend", premium=False)

    for step in (5, 2, 7, 2):
        machine.advance_step(user, journey, step, completed=True)

    assert journey.completed_steps == [2, 5, 7]
    assert journey.current_step == 1
    assert journey.status == "active"


def test_navigation_jumps_to_any_step():
    user = _user()
    journey = machine.start(user, "my landlord", premium=False)

    machine.advance_step(user, journey, 6, completed=False)
    assert journey.current_step == 6
    assert journey.completed_steps == []

    machine.advance_step(user, journey, 2, completed=False)
    assert journey.current_step == 2


@pytest.mark.parametrize("bad_step", [0, 8, -1, "3", None, True])
def test_invalid_step_is_rejected_without_mutation(bad_step):
    user = _user()
    journey = machine.start(user, "my ex", premium=False)
    before = (journey.current_step, list(journey.completed_steps), journey.status)

    with pytest.raises(ValidationFailure):
        machine.advance_step(user, journey, bad_step, completed=True)

    assert (journey.current_step, journey.completed_steps, journey.status) == before


def test_free_user_cannot_hold_two_active_journeys():
    user = _user()
    machine.start(user, "first", premium=False)

    with pytest.raises(EntitlementRequired):
        machine.start(user, "second", premium=False)

    assert len(user.journeys) == 1
    assert user.stats.total_journeys_started == 1

    second = machine.start(user, "second", premium=True)
    assert second.journey_number == 2


def test_free_user_may_start_again_once_the_active_journey_is_paused():
    user = _user()
    first = machine.start(user, "first", premium=False)
    machine.pause(user, first)

    second = machine.start(user, "second", premium=False)
    assert second.journey_number == 2
    assert second.status == "active"


def test_journey_numbers_strictly_increase():
    user = _user()
    numbers = [machine.start(user, f"resentment {i}", premium=True).journey_number for i in range(4)]

    assert numbers == [1, 2, 3, 4]
    assert user.stats.total_journeys_started == 4


def test_blank_description_is_rejected():
    user = _user()
    with pytest.raises(ValidationFailure):
        machine.start(user, "   ", premium=True)
    assert user.journeys == []
    assert user.stats.total_journeys_started == 0


def test_pause_and_resume_toggle_status():
    user = _user()
    journey = machine.start(user, "my neighbor", premium=False)

    machine.pause(user, journey)
    assert journey.status == "paused"

    machine.resume(user, journey)
    assert journey.status == "active"


def test_pause_and_resume_are_noops_on_same_status():
    user = _user()
    journey = machine.start(user, "my neighbor", premium=False)

    machine.resume(user, journey)
    assert journey.status == "active"

    machine.pause(user, journey)
    machine.pause(user, journey)
    assert journey.status == "paused"


def test_remarking_a_step_and_resuming_refresh_activity():
    user = _user()
    journey = machine.start(user, "my cousin", premium=False)
    machine.advance_step(user, journey, 1, completed=True)
    old = datetime(2020, 1, 1, tzinfo=timezone.utc)

    user.stats.last_active_date = old
    machine.advance_step(user, journey, 1, completed=True)
    assert journey.completed_steps == [1]
    assert user.stats.last_active_date > old

    machine.pause(user, journey)
    user.stats.last_active_date = old
    machine.resume(user, journey)
    assert user.stats.last_active_date > old


def _completed_journey(user):
    journey = machine.start(user, "my father", premium=True)
    for step in range(1, 8):
        machine.advance_step(user, journey, step, completed=True)
    return journey


def test_completed_journey_is_terminal():
    user = _user()
    journey = _completed_journey(user)

    with pytest.raises(InvalidTransition):
        machine.pause(user, journey)
    with pytest.raises(InvalidTransition):
        machine.resume(user, journey)

    machine.advance_step(user, journey, 3, completed=False)
    machine.advance_step(user, journey, 7, completed=True)

    assert journey.status == "completed"
    assert journey.current_step == 3
    assert user.stats.total_journeys_completed == 1
