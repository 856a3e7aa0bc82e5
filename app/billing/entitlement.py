"""
Premium entitlement.

Subscription lifecycle lives with the payment provider; the engine only
asks one question: does this user have premium access right now.
"""
from app.core.errors import EntitlementRequired
from app.users.domain import TIER_PREMIUM, User

# Subscription statuses that still grant premium features
PREMIUM_STATUSES = frozenset({"active", "trialing"})


class SubscriptionBilling:
    def has_premium_access(self, user: User) -> bool:
        return (
            user.subscription_tier == TIER_PREMIUM
            and user.subscription_status in PREMIUM_STATUSES
        )


def require_premium(billing, user: User, message: str) -> None:
    if not billing.has_premium_access(user):
        raise EntitlementRequired(message)
