import dataclasses

import pytest

from app.ai.context import (
    BareContext,
    JourneyContext,
    build_context,
    context_to_dict,
    render_instructions,
)
from app.journey import machine
from app.users.domain import User


def _user():
    user = User(id=3, screen_name="juniper", subscription_tier="premium")
    user.stats.current_streak = 4
    return user


def test_bare_context_without_journey():
    context = build_context(_user())

    assert type(context) is BareContext
    assert context.screen_name == "juniper"
    assert context.current_streak == 4
    assert context_to_dict(context)["kind"] == "bare"
    assert "currentJourney" not in context_to_dict(context)


def test_journey_context_carries_active_journey():
    user = _user()
    journey = machine.start(user, "my sister", premium=True)
    machine.advance_step(user, journey, 1, completed=True)
    machine.advance_step(user, journey, 2, completed=True)

    context = build_context(user, journey)

    assert isinstance(context, JourneyContext)
    assert context.journey_number == 1
    assert context.current_step == 3
    assert context.completed_steps == (1, 2)
    assert context.total_journeys == 1

    snapshot = context_to_dict(context)
    assert snapshot["kind"] == "journey"
    assert snapshot["currentJourney"]["resentmentDescription"] == "my sister"


def test_context_shapes_are_distinct_types():
    user = _user()
    journey = machine.start(user, "my sister", premium=True)

    bare = build_context(user)
    with_journey = build_context(user, journey)

    assert not isinstance(with_journey, BareContext)
    assert not isinstance(bare, JourneyContext)
    assert not hasattr(bare, "journey_number")


def test_context_is_immutable():
    context = build_context(_user())
    with pytest.raises(dataclasses.FrozenInstanceError):
        context.screen_name = "someone else"


def test_instructions_name_current_step_and_journey():
    user = _user()
    journey = machine.start(user, "my sister", premium=True)
    machine.advance_step(user, journey, 1, completed=True)
    machine.advance_step(user, journey, 2, completed=True)

    text = render_instructions(build_context(user, journey))

    assert "7-step RELEASE method" in text
    assert "Current Step: 3 (Learn)" in text
    assert "Working on: my sister" in text
    assert "Completed Steps: 1, 2" in text
    assert "2-3 paragraphs max" in text
    assert "Never diagnose" in text


def test_instructions_always_include_crisis_lines():
    bare = render_instructions(build_context(_user()))

    assert "988" in bare
    assert "Text HOME to 741741" in bare
    assert "Working on:" not in bare


def test_instructions_are_deterministic():
    user = _user()
    assert render_instructions(build_context(user)) == render_instructions(build_context(user))
