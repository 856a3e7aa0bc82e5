"""
AI coach chat path.

Load user -> premium gate -> crisis scan -> context -> thread -> completion
-> append turns -> save. A failing completion provider never fails the
request: the user gets a fixed fallback reply and nothing is written.
"""
from typing import Optional

from app.ai import crisis, threads
from app.ai.context import build_context, render_instructions
from app.billing.entitlement import require_premium
from app.core.config import SUPPORT_EMAIL
from app.core.log import get_logger
from app.core.errors import UpstreamUnavailable, ValidationFailure
from app.journey.steps import STEP_NAMES, step_guidance
from app.users.aggregate import find_active_journey, record_activity, require_journey
from app.users.domain import ROLE_ASSISTANT, ROLE_USER, Journey
from app.users.store import UserStore

logger = get_logger(__name__)

FALLBACK_MESSAGE = (
    "I'm having trouble connecting right now. In the meantime, try reviewing your "
    "current step's resources, or join our next live group session for support. "
    f"You can also email {SUPPORT_EMAIL} for assistance."
)


def _step_metadata(journey: Optional[Journey]) -> dict:
    if journey is None:
        return {"currentStep": None, "stepName": None}
    return {
        "currentStep": journey.current_step,
        "stepName": STEP_NAMES[journey.current_step - 1],
    }


def send_message(
    store: UserStore,
    billing,
    provider,
    user_id,
    message: Optional[str],
    session_id: Optional[str] = None,
) -> dict:
    if not message or not str(message).strip() or user_id in (None, ""):
        raise ValidationFailure("Message and userId required")

    user = store.require(user_id)
    require_premium(billing, user, "Upgrade to premium to access 24/7 AI coaching support")

    is_crisis = crisis.detect(message)
    if is_crisis:
        logger.warning("[CHAT] crisis language detected user=%s", user.id)

    journey = find_active_journey(user)
    context = build_context(user, journey)

    thread, created = threads.get_or_create(user, session_id, context)
    threads.append_turn(thread, ROLE_USER, message)

    crisis_payload = crisis.crisis_resources() if is_crisis else None

    try:
        reply = provider.generate(render_instructions(context), threads.completion_messages(thread))
    except UpstreamUnavailable as e:
        logger.error("[CHAT] completion failed user=%s: %s", user.id, e.message)
        return {
            "success": True,
            "response": {
                "message": FALLBACK_MESSAGE,
                "sessionId": thread.session_id,
                "isCrisis": is_crisis,
                "crisisResources": crisis_payload,
                "degraded": True,
                "supportEmail": SUPPORT_EMAIL,
            },
            # The user turn above is not saved; report the stored thread only
            "metadata": {
                "conversationId": None if created else thread.conversation_id,
                "messageCount": 0 if created else len(thread.messages) - 1,
                "userContext": _step_metadata(journey),
            },
        }

    threads.append_turn(thread, ROLE_ASSISTANT, reply)
    if created:
        user.stats.total_ai_conversations += 1
    record_activity(user)
    store.save(user)

    return {
        "success": True,
        "response": {
            "message": reply,
            "sessionId": thread.session_id,
            "isCrisis": is_crisis,
            "crisisResources": crisis_payload,
            "degraded": False,
        },
        "metadata": {
            "conversationId": thread.conversation_id,
            "messageCount": len(thread.messages),
            "userContext": _step_metadata(journey),
        },
    }


def journey_support(store: UserStore, billing, user_id, journey_number, step_number) -> dict:
    """Static guidance for one step, framed by one of the user's journeys."""
    user = store.require(user_id)
    require_premium(billing, user, "Upgrade to premium for guided step support")
    journey = require_journey(user, journey_number)

    guidance = step_guidance(step_number)
    guidance["journey"] = {
        "number": journey.journey_number,
        "resentment": journey.resentment_description,
        "completedSteps": list(journey.completed_steps),
    }
    return guidance
