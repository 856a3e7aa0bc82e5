"""
The RELEASE method: seven fixed, ordered steps.

Step numbers are 1-based everywhere (journeys, API, prompts).
"""
from types import MappingProxyType

from app.core.errors import ValidationFailure

STEP_NAMES = ("Recognize", "Examine", "Learn", "Embrace", "Affirm", "Sustain", "Evolve")

TOTAL_STEPS = len(STEP_NAMES)
ALL_STEPS = frozenset(range(1, TOTAL_STEPS + 1))

STEP_DESCRIPTIONS = (
    "Identify and acknowledge resentments",
    "Explore roots and patterns",
    "Practice cognitive reframing techniques",
    "Shift perspective and find understanding",
    "Create personal affirmations",
    "Develop maintenance practices",
    "Integrate growth and wisdom",
)

STEP_GUIDANCE = MappingProxyType({
    1: "In the Recognize step, acknowledge your resentment without judgment. Name it, identify who it's toward, and how it affects you physically and emotionally.",
    2: "In the Examine step, explore the roots of your resentment. When did it start? What patterns do you notice? What unmet needs or values are involved?",
    3: "In the Learn step, practice cognitive reframing. Challenge thoughts like 'always' and 'never'. Look for alternative perspectives and more balanced views.",
    4: "In the Embrace step, work on shifting your perspective. Try to understand the other person's viewpoint, their struggles, and their humanity.",
    5: "In the Affirm step, create personal affirmations that support your healing. Replace old narratives with empowering truths about yourself and forgiveness.",
    6: "In the Sustain step, develop practices to maintain your progress. Create daily rituals, identify triggers, and build a support system.",
    7: "In the Evolve step, integrate what you've learned. Recognize your growth, share your wisdom, and celebrate your transformation.",
})


def validate_step(step_number) -> int:
    """Return step_number as an int, or raise ValidationFailure if it is not 1-7."""
    if isinstance(step_number, bool) or not isinstance(step_number, int):
        raise ValidationFailure("stepNumber must be an integer between 1 and 7")
    if step_number not in ALL_STEPS:
        raise ValidationFailure("stepNumber must be an integer between 1 and 7")
    return step_number


def step_name(step_number: int) -> str:
    return STEP_NAMES[validate_step(step_number) - 1]


def step_guidance(step_number: int) -> dict:
    step_number = validate_step(step_number)
    return {
        "step": step_number,
        "stepName": STEP_NAMES[step_number - 1],
        "summary": STEP_DESCRIPTIONS[step_number - 1],
        "description": STEP_GUIDANCE[step_number],
    }
