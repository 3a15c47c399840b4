"""
Plant Repository
================

All SQL touching the `plants` and `plant_logs` tables.

WHAT IT DOES:
------------
1. Answers the credential verifier's one question: the secret hash for a plant
2. Provisions new plants (random ID + secret, only the hash is stored)
3. Lets a user claim an unowned plant, and lists a user's plants
4. Stores and queries sensor readings

Times are stored as naive UTC.

Author: Potbot Team
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.engine import Engine

from potbot.db import plant_logs_table, plants_table, users_table
from potbot.errors import InvalidPlantID, PlantAlreadyClaimed, PlantNotFound
from potbot.models import LogType, PlantLogEntry, PlantResponse
from potbot.services.credentials import generate_secret, hash_secret

logger = logging.getLogger(__name__)


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class PlantRepository:
    """
    Database access for plants and their logs.
    """

    # Give up provisioning after this many ID collisions in one call
    MAX_ID_ATTEMPTS = 1000

    def __init__(self, engine: Engine, bcrypt_rounds: int = 12):
        self.engine = engine
        self.bcrypt_rounds = bcrypt_rounds

    # =========================================================================
    # IDENTITY
    # =========================================================================

    def get_secret_hash(self, plant_id: str) -> Optional[str]:
        """Stored secret hash for the plant, or None if it does not exist."""
        with self.engine.connect() as conn:
            return conn.execute(
                select(plants_table.c.plant_secret_hash).where(plants_table.c.plant_id == plant_id)
            ).scalar_one_or_none()

    def get_owner_id(self, plant_id: str) -> Optional[int]:
        """
        User ID that owns the plant, or None if nobody has claimed it.

        Raises:
            PlantNotFound: No plant with this ID
        """
        with self.engine.connect() as conn:
            row = conn.execute(
                select(plants_table.c.user_id).where(plants_table.c.plant_id == plant_id)
            ).first()
        if row is None:
            raise PlantNotFound()
        return row.user_id

    def get_owner_email(self, plant_id: str) -> Optional[str]:
        """Email of the plant's owner, or None if the plant is unclaimed."""
        query = (
            select(users_table.c.email)
            .select_from(plants_table.join(users_table, plants_table.c.user_id == users_table.c.user_id))
            .where(plants_table.c.plant_id == plant_id)
        )
        with self.engine.connect() as conn:
            return conn.execute(query).scalar_one_or_none()

    # =========================================================================
    # PROVISIONING
    # =========================================================================

    def provision_plants(self, count: int = 10) -> list[tuple[str, str]]:
        """
        Create `count` new unclaimed plants.

        IDs look like plant_00042. Secrets are 16 random alphanumerics.

        Returns:
            List of (plant_id, plain secret) pairs. The plain secrets are not
            stored anywhere and cannot be recovered later.
        """
        logger.info(f"Generating {count} plant IDs and secrets")
        created: list[tuple[str, str]] = []
        attempts = 0

        while len(created) < count:
            attempts += 1
            if attempts > self.MAX_ID_ATTEMPTS:
                raise RuntimeError(f"Could not find a free plant ID after {self.MAX_ID_ATTEMPTS} attempts")

            plant_id = f"plant_{secrets.randbelow(100000):05d}"
            if self.get_secret_hash(plant_id) is not None:
                continue

            secret = generate_secret(16)
            with self.engine.begin() as conn:
                conn.execute(
                    insert(plants_table).values(
                        plant_id=plant_id,
                        plant_secret_hash=hash_secret(secret, rounds=self.bcrypt_rounds),
                    )
                )
            created.append((plant_id, secret))

        return created

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    def claim_plant(self, user_id: int, plant_id: str, plant_name: str, plant_type: str):
        """
        Associate an unclaimed plant with a user.

        Raises:
            InvalidPlantID: No plant with this ID
            PlantAlreadyClaimed: Someone already owns it
        """
        with self.engine.begin() as conn:
            row = conn.execute(
                select(plants_table.c.user_id).where(plants_table.c.plant_id == plant_id)
            ).first()
            if row is None:
                raise InvalidPlantID()
            if row.user_id is not None:
                raise PlantAlreadyClaimed()

            # Guarded on user_id IS NULL so two concurrent claims cannot both win
            result = conn.execute(
                update(plants_table)
                .where(and_(plants_table.c.plant_id == plant_id, plants_table.c.user_id.is_(None)))
                .values(user_id=user_id, plant_name=plant_name or None, plant_type=plant_type)
            )
            if result.rowcount != 1:
                raise PlantAlreadyClaimed()

        logger.info(f"[{plant_id}] Claimed by user {user_id}")

    def list_plants(self, user_id: int) -> list[PlantResponse]:
        """Every plant the user owns."""
        query = (
            select(plants_table.c.plant_name, plants_table.c.plant_id, plants_table.c.plant_type)
            .where(plants_table.c.user_id == user_id)
            .order_by(plants_table.c.plant_id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).all()
        return [
            PlantResponse(plant_name=row.plant_name, plant_id=row.plant_id, plant_type=row.plant_type)
            for row in rows
        ]

    # =========================================================================
    # LOGS
    # =========================================================================

    def insert_log(self, plant_id: str, log_type: LogType, value: float, at: Optional[datetime] = None):
        """Store one reading, stamped with the server's current time by default."""
        log_time = to_utc_naive(at or datetime.now(timezone.utc))
        with self.engine.begin() as conn:
            conn.execute(
                insert(plant_logs_table).values(
                    plant_id=plant_id,
                    log_type=LogType(log_type).value,
                    log_time=log_time,
                    log_value=value,
                )
            )

    def get_logs(self, plant_id: str, start: datetime, end: datetime) -> dict[str, list[PlantLogEntry]]:
        """
        Readings between `start` and `end` (inclusive), newest first.

        Returns:
            Dict keyed by every log type; types with no readings map to [].
        """
        result: dict[str, list[PlantLogEntry]] = {t.value: [] for t in LogType}
        query = (
            select(plant_logs_table.c.log_type, plant_logs_table.c.log_value, plant_logs_table.c.log_time)
            .where(
                and_(
                    plant_logs_table.c.plant_id == plant_id,
                    plant_logs_table.c.log_time.between(to_utc_naive(start), to_utc_naive(end)),
                )
            )
            .order_by(plant_logs_table.c.log_time.desc())
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).all()

        for row in rows:
            if row.log_type not in result:
                logger.warning(f"Unknown log type in database: {row.log_type}")
                continue
            result[row.log_type].append(
                PlantLogEntry(val=row.log_value, time=row.log_time.replace(tzinfo=timezone.utc))
            )
        return result
