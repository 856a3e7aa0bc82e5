"""
Error taxonomy for the journey / coaching engine.

Every error carries the HTTP status and the short error label the API
returns, so routes can simply let them propagate to the handler in app.main.
"""


class EngineError(Exception):
    status_code = 500
    error = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.error, "message": self.message}


# ======================
# NOT FOUND
# ======================

class NotFound(EngineError):
    status_code = 404
    error = "Not found"


class UserNotFound(NotFound):
    error = "User not found"


class JourneyNotFound(NotFound):
    error = "Journey not found"


class ConversationNotFound(NotFound):
    error = "Conversation not found"


# ======================
# REJECTIONS
# ======================

class EntitlementRequired(EngineError):
    status_code = 403
    error = "Premium required"


class ValidationFailure(EngineError):
    status_code = 400
    error = "Validation failed"


class InvalidTransition(EngineError):
    """Status change not allowed from the journey's current status."""
    status_code = 409
    error = "Invalid journey transition"


class Conflict(EngineError):
    """The aggregate was saved by someone else since it was loaded."""
    status_code = 409
    error = "Conflict"


# ======================
# UPSTREAM
# ======================

class UpstreamUnavailable(EngineError):
    status_code = 502
    error = "AI coach temporarily unavailable"
