from fastapi import Depends
from sqlalchemy.orm import Session

from app.ai.openai_client import OpenAICompletionProvider
from app.billing.entitlement import SubscriptionBilling
from app.db.session import get_db
from app.users.store import UserStore


def get_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_billing() -> SubscriptionBilling:
    """Billing collaborator; overridden in tests."""
    return SubscriptionBilling()


def get_completion_provider() -> OpenAICompletionProvider:
    """Completion collaborator; overridden in tests."""
    return OpenAICompletionProvider()
