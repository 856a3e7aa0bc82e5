from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import ENABLE_DEBUG_ROUTES
from app.core.errors import EngineError, ValidationFailure
from app.db.base import Base, engine
from app.db.base import log_startup as _db_log_startup
from app.users.models import UserRecord  # noqa: F401  Import so create_all picks it up

from app.ai.routes import router as ai_router
from app.journey.routes import router as journey_router
from app.users.routes import router as users_router
from app.web.debug_routes import router as debug_router


app = FastAPI(title="RELEASE Resentments", version="1.0.0")

# Only expose debug routes (including diagnostics) when explicitly enabled.
if ENABLE_DEBUG_ROUTES:
    app.include_router(debug_router)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)

# Startup diagnostics
try:
    _db_log_startup()
except Exception as exc:
    # Never crash app on logging
    print("[DB] Failed to log DB diagnostics:", repr(exc), flush=True)

try:
    from app.ai.openai_client import log_startup as _ai_log_startup
    _ai_log_startup()
except Exception as _e:
    print(f"[AI] startup log failed: {_e}", flush=True)


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) for err in exc.errors())
    error = ValidationFailure(f"Invalid request: {fields}" if fields else None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Include routers
app.include_router(users_router)
app.include_router(journey_router)
app.include_router(ai_router)


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}
