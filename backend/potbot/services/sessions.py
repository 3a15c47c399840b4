"""
User Session Cookies
====================

A logged-in user carries a signed cookie holding their user ID. The
signature (itsdangerous) stops anyone from editing the ID; the timestamp
inside it lets old cookies expire.

Anything that fails to decode (tampered, expired, wrong key, garbage) is
simply "no session".
"""

import logging
from typing import Optional

from fastapi import Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

logger = logging.getLogger(__name__)

COOKIE_NAME = "potbot_session"


class SessionManager:
    """Encodes and decodes the session cookie."""

    def __init__(self, secret_key: str, max_age: int = 86400, secure: bool = False):
        self.serializer = URLSafeTimedSerializer(secret_key, salt=COOKIE_NAME)
        self.max_age = max_age
        self.secure = secure

    def encode(self, user_id: int) -> str:
        return self.serializer.dumps({"user_id": str(user_id)})

    def decode(self, token: Optional[str]) -> Optional[int]:
        """User ID from a cookie value, or None if it is not a valid session."""
        if not token:
            return None
        try:
            value = self.serializer.loads(token, max_age=self.max_age)
        except SignatureExpired:
            logger.debug("Session cookie expired")
            return None
        except BadSignature:
            logger.debug("Session cookie signature invalid")
            return None

        if not isinstance(value, dict):
            return None
        try:
            return int(value["user_id"])
        except (KeyError, TypeError, ValueError):
            return None

    def set_cookie(self, response: Response, user_id: int):
        response.set_cookie(
            key=COOKIE_NAME,
            value=self.encode(user_id),
            max_age=self.max_age,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def clear_cookie(self, response: Response):
        response.delete_cookie(key=COOKIE_NAME, path="/", httponly=True)
