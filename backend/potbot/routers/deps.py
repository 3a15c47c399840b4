"""
Router Dependencies
===================

Gives the endpoints access to the services, and turns cookies into
"who is calling".

- get_services(): the services built at startup
- get_verified_plant(): plant credentials from the plant_id / plant_secret
  cookies, checked by the CredentialVerifier
- verified_body(model): JSON body of a plant request, parsed after the
  credential check
- get_current_user_id(): user ID from the signed session cookie
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from potbot.config import Config
from potbot.errors import NotAuthenticated
from potbot.services import (
    CommandQueue,
    CredentialVerifier,
    EmailService,
    PlantRepository,
    SessionManager,
    UserService,
    VerifiedPlant,
)
from potbot.services.sessions import COOKIE_NAME


@dataclass
class Services:
    """Everything the routers need, wired together once at startup."""
    config: Config
    command_queue: CommandQueue
    verifier: CredentialVerifier
    plants: PlantRepository
    users: UserService
    sessions: SessionManager
    email: EmailService


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

_services: Optional[Services] = None  # This gets set when the app starts


def set_services(services: Optional[Services]):
    """Called from the app lifespan with the freshly built services."""
    global _services
    _services = services


def get_services() -> Services:
    if _services is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return _services


# Sync def: verify() blocks on a DB read and a bcrypt check, so
# FastAPI runs it in the thread pool instead of on the event loop.
def get_verified_plant(
    plant_id: Optional[str] = Cookie(None),
    plant_secret: Optional[str] = Cookie(None),
    services: Services = Depends(get_services),
) -> VerifiedPlant:
    """Raises Unauthorized unless the cookies carry valid plant credentials."""
    return services.verifier.verify(plant_id, plant_secret)


def verified_body(model: type[BaseModel]):
    """
    Dependency that parses the JSON body as `model`, but only after the
    plant's credentials have been checked.

    Declaring the model as a plain body parameter would make FastAPI
    decode the JSON first, so a bad body from an unauthenticated plant
    would get 422 instead of 401.
    """
    async def dependency(
        request: Request,
        plant: VerifiedPlant = Depends(get_verified_plant),
    ) -> BaseModel:
        try:
            payload = await request.json()
        except ValueError as e:
            raise RequestValidationError([{
                "type": "json_invalid",
                "loc": ("body",),
                "msg": "JSON decode error",
                "input": {},
                "ctx": {"error": str(e)},
            }])
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise RequestValidationError([
                {**error, "loc": ("body", *error["loc"])}
                for error in e.errors(include_url=False, include_context=False)
            ])

    return dependency


def get_current_user_id(
    session_cookie: Optional[str] = Cookie(None, alias=COOKIE_NAME),
    services: Services = Depends(get_services),
) -> int:
    """Raises NotAuthenticated unless there is a valid session cookie."""
    user_id = services.sessions.decode(session_cookie)
    if user_id is None:
        raise NotAuthenticated()
    return user_id
