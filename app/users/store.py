"""
User store: loads and saves whole user aggregates.

save() is optimistic: it only writes when the row still carries the
version the aggregate was loaded with, and raises Conflict otherwise.
Retrying is the caller's decision.
"""
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.log import get_logger
from app.core.errors import Conflict, UserNotFound, ValidationFailure
from app.users.domain import TIER_FREE, User
from app.users.models import UserRecord

logger = get_logger(__name__)


def _to_domain(record: UserRecord) -> User:
    user = User(
        id=record.id,
        screen_name=record.screen_name,
        email=record.email or "",
        subscription_tier=record.subscription_tier,
        subscription_status=record.subscription_status,
        external_ref=record.external_ref,
        version=record.version,
    )
    user.load_document(record.document)
    return user


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        screen_name: str,
        email: str = "",
        subscription_tier: str = TIER_FREE,
        subscription_status: str = "none",
        external_ref: Optional[str] = None,
    ) -> User:
        if not screen_name or not screen_name.strip():
            raise ValidationFailure("screenName is required")

        email = (email or "").strip().lower() or None
        if email and self._email_taken(email):
            raise ValidationFailure("Email already registered")

        user = User(
            id=None,
            screen_name=screen_name.strip(),
            email=email or "",
            subscription_tier=subscription_tier,
            subscription_status=subscription_status,
            external_ref=external_ref,
        )
        record = UserRecord(
            screen_name=user.screen_name,
            email=email,
            subscription_tier=user.subscription_tier,
            subscription_status=user.subscription_status,
            external_ref=external_ref,
            version=1,
            document=user.document(),
        )
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            self.db.rollback()
            raise ValidationFailure("Email already registered")
        self.db.refresh(record)

        logger.info("[STORE] created user=%s", record.id)
        return _to_domain(record)

    def _email_taken(self, email: str) -> bool:
        return self.db.query(UserRecord).filter(UserRecord.email == email).first() is not None

    def load_by_id(self, user_id) -> Optional[User]:
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            return None
        record = self.db.get(UserRecord, user_id)
        if record is None:
            return None
        # Always read the committed row, not a cached identity
        self.db.refresh(record)
        return _to_domain(record)

    def load_by_external_ref(self, ref: str) -> Optional[User]:
        if not ref:
            return None
        record = self.db.query(UserRecord).filter(UserRecord.external_ref == ref).first()
        return _to_domain(record) if record else None

    def require(self, user_id) -> User:
        if user_id is None or user_id == "":
            raise ValidationFailure("userId is required")
        user = self.load_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user

    def save(self, user: User) -> User:
        """Write the aggregate back; bumps user.version on success."""
        result = self.db.execute(
            update(UserRecord)
            .where(UserRecord.id == user.id, UserRecord.version == user.version)
            .values(
                screen_name=user.screen_name,
                subscription_tier=user.subscription_tier,
                subscription_status=user.subscription_status,
                external_ref=user.external_ref,
                version=user.version + 1,
                document=user.document(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            logger.warning("[STORE] stale save user=%s version=%s", user.id, user.version)
            raise Conflict("User was modified by another request; reload and retry")

        self.db.commit()
        user.version += 1
        return user
