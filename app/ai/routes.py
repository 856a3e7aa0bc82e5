"""
AI coach API: chat, conversation history, journey step support.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.ai import chat, threads
from app.billing.entitlement import require_premium
from app.core.deps import get_billing, get_completion_provider, get_store
from app.users.store import UserStore

router = APIRouter(prefix="/api/ai", tags=["ai"])


class ChatIn(BaseModel):
    userId: Optional[int] = None
    message: Optional[str] = None
    sessionId: Optional[str] = None


class UserRefIn(BaseModel):
    userId: Optional[int] = None


class JourneySupportIn(BaseModel):
    userId: Optional[int] = None
    journeyNumber: Optional[int] = None
    stepNumber: Optional[int] = None


@router.post("/chat")
def chat_message(
    body: ChatIn,
    store: UserStore = Depends(get_store),
    billing=Depends(get_billing),
    provider=Depends(get_completion_provider),
):
    return chat.send_message(store, billing, provider, body.userId, body.message, body.sessionId)


@router.get("/conversation-history/{user_id}")
def conversation_history(
    user_id: int,
    sessionId: Optional[str] = Query(None),
    store: UserStore = Depends(get_store),
    billing=Depends(get_billing),
):
    user = store.require(user_id)
    require_premium(billing, user, "Upgrade to premium to access your coaching history")
    return {"success": True, "conversations": threads.list_summaries(user, sessionId)}


@router.get("/conversation/{conversation_id}")
def get_conversation(
    conversation_id: str,
    userId: Optional[int] = Query(None),
    store: UserStore = Depends(get_store),
):
    user = store.require(userId)
    thread = threads.require_thread(user, conversation_id)
    return {"success": True, "conversation": thread.to_dict()}


@router.delete("/conversation/{conversation_id}")
def delete_conversation(
    conversation_id: str,
    body: UserRefIn,
    store: UserStore = Depends(get_store),
):
    user = store.require(body.userId)
    if threads.delete_thread(user, conversation_id):
        store.save(user)
    return {"success": True, "message": "Conversation deleted"}


@router.post("/journey-support")
def journey_support(
    body: JourneySupportIn,
    store: UserStore = Depends(get_store),
    billing=Depends(get_billing),
):
    guidance = chat.journey_support(store, billing, body.userId, body.journeyNumber, body.stepNumber)
    return {"success": True, "guidance": guidance}
