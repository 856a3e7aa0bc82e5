from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.deps import get_billing, get_store
from app.users.store import UserStore

router = APIRouter(prefix="/api/users", tags=["users"])


class SignupIn(BaseModel):
    screenName: Optional[str] = None
    email: Optional[str] = None


# =========================
# SIGNUP
# =========================
@router.post("")
def create_user(body: SignupIn, store: UserStore = Depends(get_store)):
    user = store.create(screen_name=body.screenName, email=body.email or "")
    print(f"[USERS] signup user={user.id}", flush=True)
    return {"success": True, "message": "Signup successful", "user": user.profile()}


# =========================
# PROFILE
# =========================
@router.get("/{user_id}")
def get_user(
    user_id: int,
    store: UserStore = Depends(get_store),
    billing=Depends(get_billing),
):
    user = store.require(user_id)
    profile = user.profile()
    profile["hasPremiumAccess"] = billing.has_premium_access(user)
    return {"success": True, "user": profile}
