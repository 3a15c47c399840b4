"""
Error Types
===========

Every error the app knows how to answer carries its HTTP status and a
fixed message. The routers let these propagate and a single exception
handler in main.py turns them into `{"detail": ...}` responses.

Unauthorized is a single type with a single message: an
unknown plant ID and a wrong secret look identical to the caller.
"""


class PotbotError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    detail: str = "server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class Unauthorized(PotbotError):
    """Device credentials were missing, unknown, or wrong."""

    status_code = 401
    detail = "invalid plant credentials"

    def __init__(self):
        # No custom message: every failure must produce the same response.
        super().__init__()


class NotAuthenticated(PotbotError):
    status_code = 401
    detail = "unauthorized"


class InvalidCredentials(PotbotError):
    status_code = 401
    detail = "invalid credentials"


class NotOwner(PotbotError):
    status_code = 403
    detail = "you do not own this plant"


class PlantNotFound(PotbotError):
    status_code = 404
    detail = "plant not found"


class PlantAlreadyClaimed(PotbotError):
    status_code = 400
    detail = "plant ID already associated with a user"


class RegistrationError(PotbotError):
    status_code = 400
    detail = "account already exists"


class InvalidPlantID(PotbotError):
    """Claim of a plant ID that was never provisioned."""

    status_code = 400
    detail = "invalid plant ID"
