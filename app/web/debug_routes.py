from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pathlib import Path

from app.ai.openai_client import get_last_error, key_fingerprint, key_present
from app.db.session import get_db
from app.users.models import UserRecord
from app.db.base import engine

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/users")
def debug_users(db: Session = Depends(get_db)):
    users = db.query(UserRecord).order_by(UserRecord.id.asc()).all()
    return [
        {
            "id": u.id,
            "screen_name": u.screen_name,
            "subscription_tier": u.subscription_tier,
            "subscription_status": u.subscription_status,
            "version": u.version,
            "journeys": len((u.document or {}).get("journeys", [])),
            "created_at": str(getattr(u, "created_at", "")),
        }
        for u in users
    ]


@router.get("/diagnostics/ai")
def ai_diagnostics():
    return {
        "key_present": key_present(),
        "key_fingerprint": key_fingerprint(),
        "last_error": get_last_error(),
    }


@router.get("/diagnostics/db")
def db_diagnostics():
    """
    Lightweight DB diagnostics for debugging deployments.

    This endpoint is meant to be exposed only when ENABLE_DEBUG_ROUTES=1.
    It intentionally avoids leaking secrets while still being useful.
    """
    url = engine.url
    backend = url.get_backend_name()
    rendered = url.render_as_string(hide_password=True)

    info = {
        "backend": backend,
        "url": rendered,
    }

    if backend == "sqlite":
        db_path = Path(url.database or "").resolve()
        exists = db_path.exists()
        size = db_path.stat().st_size if exists else 0
        info.update(
            {
                "sqlite_path": str(db_path),
                "sqlite_exists": exists,
                "sqlite_size_bytes": size,
            }
        )
    else:
        info.update(
            {
                "database": url.database,
                "host": url.host,
                "port": url.port,
                "drivername": url.drivername,
            }
        )

    return info
