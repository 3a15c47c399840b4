"""
Plant Credential Verifier
=========================

Plants are small devices with no login flow. Each one is provisioned with
an ID and a random secret; only a bcrypt hash of the secret is stored.
Every request a plant makes carries both and goes through verify() first.

verify() raises Unauthorized for every kind of failure (no such plant,
wrong secret, missing values) so the caller cannot probe which plant IDs
exist. For the same reason an unknown plant still pays for one bcrypt
check against a throwaway hash.

No rate limiting happens here.
"""

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Optional, Protocol

import bcrypt

from potbot.errors import Unauthorized

logger = logging.getLogger(__name__)

SECRET_ALPHABET = string.ascii_letters + string.digits

# bcrypt only looks at the first 72 bytes; longer input is rejected outright.
MAX_SECRET_BYTES = 72


class IdentityStore(Protocol):
    """The one read the verifier needs from the relational store."""

    def get_secret_hash(self, plant_id: str) -> Optional[str]:
        ...


@dataclass(frozen=True)
class VerifiedPlant:
    """Proof that the caller presented valid credentials for `plant_id`."""
    plant_id: str


def hash_secret(secret: str, rounds: int = 12) -> str:
    """Salt and hash a secret (plant secret or user password)."""
    return bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def check_secret(secret: str, stored_hash: str) -> bool:
    """Constant-time comparison of `secret` against a stored bcrypt hash."""
    encoded = secret.encode("utf-8")
    if len(encoded) > MAX_SECRET_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, stored_hash.encode("ascii"))
    except ValueError:
        # Malformed hash in the store
        logger.error("Stored secret hash is not a valid bcrypt hash")
        return False


def generate_secret(length: int = 16) -> str:
    """Random alphanumeric secret for a newly provisioned plant."""
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))


class CredentialVerifier:
    """
    Checks a plant's presented ID and secret against the identity store.
    """

    def __init__(self, store: IdentityStore, rounds: int = 12):
        """
        Args:
            store: Anything with get_secret_hash(plant_id)
            rounds: bcrypt cost of the placeholder hash used for unknown
                plants. Should match the cost used at provisioning.
        """
        self.store = store
        self._dummy_hash = hash_secret(generate_secret(), rounds=rounds)

    def verify(self, plant_id: Optional[str], presented_secret: Optional[str]) -> VerifiedPlant:
        """
        Verify a plant's credentials.

        Returns:
            VerifiedPlant for the given ID

        Raises:
            Unauthorized: Missing values, unknown plant, or wrong secret.
                Database errors are not caught and propagate as-is.
        """
        if not plant_id or not presented_secret:
            logger.info("Plant credentials missing")
            raise Unauthorized()

        stored_hash = self.store.get_secret_hash(plant_id)

        if stored_hash is None:
            check_secret(presented_secret, self._dummy_hash)
            logger.info(f"[{plant_id}] Rejected plant credentials")
            raise Unauthorized()

        if not check_secret(presented_secret, stored_hash):
            logger.info(f"[{plant_id}] Rejected plant credentials")
            raise Unauthorized()

        return VerifiedPlant(plant_id=plant_id)
