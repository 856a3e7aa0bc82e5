"""
User aggregate: the user plus everything the user exclusively owns.

Journeys, completed resources and AI conversation threads have no life
outside their user. The whole aggregate is loaded, mutated and saved as
one document (see app.users.store).
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

JOURNEY_ACTIVE = "active"
JOURNEY_PAUSED = "paused"
JOURNEY_COMPLETED = "completed"
JOURNEY_STATUSES = (JOURNEY_ACTIVE, JOURNEY_PAUSED, JOURNEY_COMPLETED)

TIER_FREE = "free"
TIER_PREMIUM = "premium"

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
MESSAGE_ROLES = (ROLE_USER, ROLE_ASSISTANT)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dt_out(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _dt_in(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Stats:
    total_journeys_started: int = 0
    total_journeys_completed: int = 0
    total_resources_completed: int = 0
    total_ai_conversations: int = 0
    current_streak: int = 0
    last_active_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "totalJourneysStarted": self.total_journeys_started,
            "totalJourneysCompleted": self.total_journeys_completed,
            "totalResourcesCompleted": self.total_resources_completed,
            "totalAIConversations": self.total_ai_conversations,
            "currentStreak": self.current_streak,
            "lastActiveDate": _dt_out(self.last_active_date),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stats":
        return cls(
            total_journeys_started=data.get("totalJourneysStarted", 0),
            total_journeys_completed=data.get("totalJourneysCompleted", 0),
            total_resources_completed=data.get("totalResourcesCompleted", 0),
            total_ai_conversations=data.get("totalAIConversations", 0),
            current_streak=data.get("currentStreak", 0),
            last_active_date=_dt_in(data.get("lastActiveDate")),
        )


@dataclass
class Journey:
    journey_number: int
    resentment_description: str
    start_date: datetime
    current_step: int = 1
    # Kept sorted ascending, no duplicates
    completed_steps: list[int] = field(default_factory=list)
    status: str = JOURNEY_ACTIVE
    completed_date: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        return self.status == JOURNEY_COMPLETED

    def to_dict(self) -> dict:
        return {
            "journeyNumber": self.journey_number,
            "resentmentDescription": self.resentment_description,
            "currentStep": self.current_step,
            "completedSteps": list(self.completed_steps),
            "status": self.status,
            "startDate": _dt_out(self.start_date),
            "completedDate": _dt_out(self.completed_date),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Journey":
        return cls(
            journey_number=data["journeyNumber"],
            resentment_description=data.get("resentmentDescription", ""),
            start_date=_dt_in(data["startDate"]),
            current_step=data.get("currentStep", 1),
            completed_steps=sorted(set(data.get("completedSteps", []))),
            status=data.get("status", JOURNEY_ACTIVE),
            completed_date=_dt_in(data.get("completedDate")),
        )


@dataclass
class CompletedResource:
    resource_id: str
    resource_name: str
    completed_at: datetime
    times_completed: int = 1

    def to_dict(self) -> dict:
        return {
            "resourceId": self.resource_id,
            "resourceName": self.resource_name,
            "completedAt": _dt_out(self.completed_at),
            "timesCompleted": self.times_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedResource":
        return cls(
            resource_id=data["resourceId"],
            resource_name=data.get("resourceName", ""),
            completed_at=_dt_in(data["completedAt"]),
            times_completed=data.get("timesCompleted", 1),
        )


@dataclass
class Message:
    role: str
    content: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content, "timestamp": _dt_out(self.timestamp)}

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        return cls(role=data["role"], content=data["content"], timestamp=_dt_in(data["timestamp"]))


@dataclass
class ConversationThread:
    conversation_id: str
    session_id: str
    started_at: datetime
    last_message_at: datetime
    # Snapshot of app.ai.context at creation, stored in its serialized form
    context: dict = field(default_factory=dict)
    messages: list[Message] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "conversationId": self.conversation_id,
            "sessionId": self.session_id,
            "messages": [m.to_dict() for m in self.messages],
            "context": dict(self.context),
            "startedAt": _dt_out(self.started_at),
            "lastMessageAt": _dt_out(self.last_message_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConversationThread":
        return cls(
            conversation_id=data["conversationId"],
            session_id=data["sessionId"],
            started_at=_dt_in(data["startedAt"]),
            last_message_at=_dt_in(data["lastMessageAt"]),
            context=data.get("context") or {},
            messages=[Message.from_dict(m) for m in data.get("messages", [])],
        )


@dataclass
class User:
    id: Optional[int]
    screen_name: str
    email: str = ""
    subscription_tier: str = TIER_FREE
    subscription_status: str = "none"
    external_ref: Optional[str] = None
    # Optimistic-concurrency stamp, owned by the store
    version: int = 0
    stats: Stats = field(default_factory=Stats)
    journeys: list[Journey] = field(default_factory=list)
    completed_resources: list[CompletedResource] = field(default_factory=list)
    conversations: list[ConversationThread] = field(default_factory=list)

    def document(self) -> dict:
        """The JSON-serializable part of the aggregate stored in users.document."""
        return {
            "stats": self.stats.to_dict(),
            "journeys": [j.to_dict() for j in self.journeys],
            "completedResources": [r.to_dict() for r in self.completed_resources],
            "aiConversations": [c.to_dict() for c in self.conversations],
        }

    def load_document(self, data: Optional[dict]) -> None:
        data = data or {}
        self.stats = Stats.from_dict(data.get("stats") or {})
        self.journeys = [Journey.from_dict(j) for j in data.get("journeys", [])]
        self.completed_resources = [
            CompletedResource.from_dict(r) for r in data.get("completedResources", [])
        ]
        self.conversations = [
            ConversationThread.from_dict(c) for c in data.get("aiConversations", [])
        ]

    def profile(self) -> dict:
        return {
            "userId": self.id,
            "screenName": self.screen_name,
            "email": self.email,
            "subscriptionTier": self.subscription_tier,
            "subscriptionStatus": self.subscription_status,
            "stats": self.stats.to_dict(),
        }
