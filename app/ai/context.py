"""
Coaching context and system instructions for the AI coach.

The context is one of two shapes:
    BareContext     - user standing only (no active journey)
    JourneyContext  - user standing plus the active journey
Consumers branch on the type, never on missing attributes.
"""
from dataclasses import asdict, dataclass
from typing import Optional, Union

from app.ai.crisis import CRISIS_TEXT_LINE, SUICIDE_PREVENTION_LIFELINE
from app.journey.steps import STEP_DESCRIPTIONS, STEP_NAMES, step_name
from app.users.domain import Journey, User


@dataclass(frozen=True)
class _Standing:
    """Fields shared by both context shapes; never instantiated directly."""

    screen_name: str
    subscription_tier: str
    total_journeys: int
    completed_journeys: int
    completed_resources: int
    current_streak: int


@dataclass(frozen=True)
class BareContext(_Standing):
    kind = "bare"


@dataclass(frozen=True)
class JourneyContext(_Standing):
    journey_number: int
    current_step: int
    completed_steps: tuple
    resentment_description: str

    kind = "journey"


Context = Union[BareContext, JourneyContext]


def build_context(user: User, journey: Optional[Journey] = None) -> Context:
    stats = user.stats
    base = dict(
        screen_name=user.screen_name,
        subscription_tier=user.subscription_tier,
        total_journeys=stats.total_journeys_started,
        completed_journeys=stats.total_journeys_completed,
        completed_resources=stats.total_resources_completed,
        current_streak=stats.current_streak,
    )
    if journey is None:
        return BareContext(**base)
    return JourneyContext(
        **base,
        journey_number=journey.journey_number,
        current_step=journey.current_step,
        completed_steps=tuple(journey.completed_steps),
        resentment_description=journey.resentment_description,
    )


def context_to_dict(context: Context) -> dict:
    """Serialized snapshot stored on a conversation thread."""
    data = asdict(context)
    out = {
        "kind": context.kind,
        "screenName": data["screen_name"],
        "subscriptionTier": data["subscription_tier"],
        "totalJourneys": data["total_journeys"],
        "completedJourneys": data["completed_journeys"],
        "completedResources": data["completed_resources"],
        "currentStreak": data["current_streak"],
    }
    if isinstance(context, JourneyContext):
        out["currentJourney"] = {
            "journeyNumber": context.journey_number,
            "currentStep": context.current_step,
            "completedSteps": list(context.completed_steps),
            "resentmentDescription": context.resentment_description,
        }
    return out


def _method_lines() -> str:
    return "\n".join(
        f"{name[0]} - {name}: {desc}" for name, desc in zip(STEP_NAMES, STEP_DESCRIPTIONS)
    )


def _journey_lines(context: Context) -> str:
    if not isinstance(context, JourneyContext):
        return "- Current Journey: none active (help them get started with step 1, Recognize)"

    completed = ", ".join(str(s) for s in context.completed_steps) or "none yet"
    return (
        f"- Current Journey: #{context.journey_number}\n"
        f"- Current Step: {context.current_step} ({step_name(context.current_step)})\n"
        f"- Working on: {context.resentment_description}\n"
        f"- Completed Steps: {completed}"
    )


def render_instructions(context: Context) -> str:
    return f"""You are a compassionate forgiveness coach for the RELEASE Resentments app. You help users work through resentments using the 7-step RELEASE method:

{_method_lines()}

Current User Context:
- Screen Name: {context.screen_name}
- Subscription: {context.subscription_tier}
- Total Journeys Started: {context.total_journeys}
- Completed Journeys: {context.completed_journeys}
- Completed Resources: {context.completed_resources}
- Current Streak: {context.current_streak} day(s)
{_journey_lines(context)}

Guidelines:
- Be empathetic, warm, and non-judgmental
- Use "I understand" not "I know"
- Offer choices, not commands
- Validate emotions first, then guide
- Keep responses concise (2-3 paragraphs max)
- End with a question or gentle action suggestion
- Focus on the user's current step in their journey
- Remind them that forgiveness is for their freedom, not about the other person
- Never diagnose mental health conditions
- If detecting crisis language, immediately provide crisis resources

CRITICAL: If you detect self-harm, suicide ideation, or harm to others, immediately provide:
National Suicide Prevention Lifeline: {SUICIDE_PREVENTION_LIFELINE}
Crisis Text Line: {CRISIS_TEXT_LINE}
And encourage them to seek immediate professional help.

Maintain a therapeutic but accessible tone - you're a supportive coach, not a replacement for therapy."""
