"""
Crisis language detection.

A plain keyword net, not a classifier: case-insensitive substring match
against a fixed phrase list. The result never blocks the chat call; it
makes the API attach the crisis resources below to the reply.
"""
from types import MappingProxyType

CRISIS_KEYWORDS = (
    "suicide",
    "kill myself",
    "end it all",
    "want to die",
    "no reason to live",
    "self harm",
    "hurt myself",
    "cut myself",
    "overdose",
    "hopeless",
    "can't go on",
    "better off dead",
    "harm others",
    "kill someone",
    "revenge",
    "make them pay",
)

SUICIDE_PREVENTION_LIFELINE = "988"
CRISIS_TEXT_LINE = "Text HOME to 741741"
EMERGENCY_MESSAGE = (
    "If you are in immediate danger, please call 911 or go to your nearest emergency room."
)

CRISIS_RESOURCES = MappingProxyType({
    "suicidePreventionLifeline": SUICIDE_PREVENTION_LIFELINE,
    "crisisTextLine": CRISIS_TEXT_LINE,
    "message": EMERGENCY_MESSAGE,
})


def detect(message: str) -> bool:
    if not message:
        return False
    lowered = message.lower()
    return any(keyword in lowered for keyword in CRISIS_KEYWORDS)


def crisis_resources() -> dict:
    return dict(CRISIS_RESOURCES)
