"""
User Service
============

Accounts and plant ownership.

Passwords are stored as bcrypt hashes, same as plant secrets. Login
failures say "invalid credentials" whether the username or the password
was wrong, and both cases pay for one bcrypt check.

require_owner() is the ownership gate the routers run before touching a
plant's commands or logs. The command queue never checks ownership itself.

Author: Potbot Team
"""

import logging
from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from potbot.db import users_table
from potbot.errors import InvalidCredentials, NotOwner, PlantNotFound, RegistrationError
from potbot.models import UserResponse
from potbot.services.credentials import MAX_SECRET_BYTES, check_secret, generate_secret, hash_secret
from potbot.services.plant_repository import PlantRepository

logger = logging.getLogger(__name__)


class UserService:
    """
    Registration, login and ownership checks.
    """

    def __init__(self, engine: Engine, plants: PlantRepository, bcrypt_rounds: int = 12):
        self.engine = engine
        self.plants = plants
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_hash = hash_secret(generate_secret(), rounds=bcrypt_rounds)

    def register(self, email: str, password: str, username: Optional[str] = None) -> UserResponse:
        """
        Create an account.

        Raises:
            RegistrationError: Email or username already taken, or the
                password is longer than bcrypt accepts
        """
        if len(password.encode("utf-8")) > MAX_SECRET_BYTES:
            raise RegistrationError(f"password must be at most {MAX_SECRET_BYTES} bytes")

        password_hash = hash_secret(password, rounds=self.bcrypt_rounds)
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    insert(users_table).values(
                        email=email,
                        password_hash=password_hash,
                        username=username or None,
                    )
                )
                user_id = result.inserted_primary_key[0]
        except IntegrityError:
            logger.info(f"Registration rejected, duplicate account for {email}")
            raise RegistrationError()

        logger.info(f"Registered user {user_id}")
        return UserResponse(user_id=user_id, email=email, username=username or "")

    def authenticate(self, username: str, password: str) -> UserResponse:
        """
        Check a username and password.

        Raises:
            InvalidCredentials: Unknown username or wrong password
        """
        with self.engine.connect() as conn:
            row = conn.execute(
                select(users_table.c.user_id, users_table.c.password_hash, users_table.c.email)
                .where(users_table.c.username == username)
            ).first()

        if row is None:
            # Same bcrypt cost as a real check, so timing does not reveal the username
            check_secret(password, self._dummy_hash)
            raise InvalidCredentials()
        if not check_secret(password, row.password_hash):
            raise InvalidCredentials()

        return UserResponse(user_id=row.user_id, email=row.email, username=username)

    def get_user(self, user_id: int) -> Optional[UserResponse]:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(users_table.c.user_id, users_table.c.email, users_table.c.username)
                .where(users_table.c.user_id == user_id)
            ).first()
        if row is None:
            return None
        return UserResponse(user_id=row.user_id, email=row.email, username=row.username or "")

    def require_owner(self, user_id: int, plant_id: str):
        """
        Make sure `user_id` owns `plant_id`.

        Raises:
            PlantNotFound: No such plant, or nobody has claimed it yet
            NotOwner: Another user owns it
        """
        owner_id = self.plants.get_owner_id(plant_id)
        if owner_id is None:
            raise PlantNotFound()
        if owner_id != user_id:
            logger.info(f"[{plant_id}] User {user_id} is not the owner")
            raise NotOwner()
