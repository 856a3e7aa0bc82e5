from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func

from app.db.base import Base


class UserRecord(Base):
    """
    One row per user aggregate.

    Scalar columns are the ones we look users up by (or billing writes);
    everything the user owns (stats, journeys, completed resources,
    AI conversations) lives in the JSON document and is always written
    back as a whole.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String, unique=True, index=True, nullable=True)
    screen_name = Column(String, nullable=False)

    # free | premium
    subscription_tier = Column(String, default="free", nullable=False)
    # none | active | trialing | past_due | canceled (owned by billing)
    subscription_status = Column(String, default="none", nullable=False)

    # Billing provider customer id, used to correlate webhooks
    external_ref = Column(String, unique=True, index=True, nullable=True)

    # Optimistic concurrency stamp, bumped on every save
    version = Column(Integer, default=1, nullable=False)

    document = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
