"""
AI conversation threads owned by a user.

A thread is keyed by sessionId (supplied by the client or generated here)
and carries its own conversationId. Messages are only ever appended.
"""
import uuid
from typing import Optional

from app.ai.context import Context, context_to_dict
from app.core.config import CONVERSATION_HISTORY_LIMIT, PREVIEW_LENGTH
from app.core.errors import ConversationNotFound, ValidationFailure
from app.users.domain import MESSAGE_ROLES, ConversationThread, Message, User, utcnow


def new_session_id() -> str:
    return f"session_{uuid.uuid4().hex}"


def new_conversation_id() -> str:
    return f"conv_{uuid.uuid4().hex}"


def find_thread(user: User, session_id: Optional[str]) -> Optional[ConversationThread]:
    if not session_id:
        return None
    for thread in user.conversations:
        if thread.session_id == session_id:
            return thread
    return None


def create_thread(user: User, session_id: Optional[str], context: Context) -> ConversationThread:
    now = utcnow()
    thread = ConversationThread(
        conversation_id=new_conversation_id(),
        session_id=session_id or new_session_id(),
        started_at=now,
        last_message_at=now,
        context=context_to_dict(context),
    )
    user.conversations.append(thread)
    return thread


def get_or_create(
    user: User, session_id: Optional[str], context: Context
) -> tuple[ConversationThread, bool]:
    """Return (thread, created). The context is only used for a new thread."""
    thread = find_thread(user, session_id)
    if thread is not None:
        return thread, False
    return create_thread(user, session_id, context), True


def append_turn(thread: ConversationThread, role: str, text: str) -> Message:
    if role not in MESSAGE_ROLES:
        raise ValidationFailure(f"Unknown message role: {role}")
    message = Message(role=role, content=text, timestamp=utcnow())
    thread.messages.append(message)
    thread.last_message_at = message.timestamp
    return message


def completion_messages(thread: ConversationThread) -> list[dict]:
    """Full role/content history in the shape the completion provider expects."""
    return [{"role": m.role, "content": m.content} for m in thread.messages]


def preview(thread: ConversationThread) -> Optional[str]:
    if not thread.messages:
        return None
    return thread.messages[-1].content[:PREVIEW_LENGTH] + "..."


def summarize(thread: ConversationThread) -> dict:
    return {
        "conversationId": thread.conversation_id,
        "sessionId": thread.session_id,
        "messageCount": len(thread.messages),
        "startedAt": thread.started_at.isoformat(),
        "lastMessageAt": thread.last_message_at.isoformat(),
        "preview": preview(thread),
    }


def list_summaries(user: User, session_id: Optional[str] = None) -> list[dict]:
    threads = list(user.conversations)
    if session_id:
        threads = [t for t in threads if t.session_id == session_id]
    threads.sort(key=lambda t: t.last_message_at, reverse=True)
    return [summarize(t) for t in threads[:CONVERSATION_HISTORY_LIMIT]]


def find_by_conversation_id(user: User, conversation_id: str) -> Optional[ConversationThread]:
    for thread in user.conversations:
        if thread.conversation_id == conversation_id:
            return thread
    return None


def require_thread(user: User, conversation_id: str) -> ConversationThread:
    thread = find_by_conversation_id(user, conversation_id)
    if thread is None:
        raise ConversationNotFound()
    return thread


def delete_thread(user: User, conversation_id: str) -> bool:
    """Remove the thread; returns False (not an error) when it does not exist."""
    before = len(user.conversations)
    user.conversations = [t for t in user.conversations if t.conversation_id != conversation_id]
    return len(user.conversations) != before
