"""
Users API Router
================

The endpoints the web frontend calls on behalf of a logged-in user.

Auth: signed session cookie `potbot_session`, set by register/login.

ALL ENDPOINTS:
-------------
POST /api/register          - Create an account and log in
POST /api/login             - Log in
POST /api/logout            - Log out
GET  /api/me                - Who am I?
POST /api/add_plant         - Claim a provisioned plant
GET  /api/get_all_my_plants - List my plants
POST /api/issue_command     - Queue a command for one of my plants
POST /api/get_plant_logs    - Sensor readings for one of my plants

Anything that touches a specific plant checks ownership first:
404 if the plant does not exist, 403 if someone else owns it.

Author: Potbot Team
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from potbot.models import (
    AddPlantRequest,
    IssueCommandRequest,
    LoginRequest,
    PlantLogEntry,
    PlantLogsRequest,
    PlantResponse,
    RegisterRequest,
    StatusResponse,
    UserResponse,
)
from potbot.routers.deps import Services, get_current_user_id, get_services
from potbot.utils.validation import validate_plant_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


# =============================================================================
# ACCOUNT ENDPOINTS
# =============================================================================

@router.post("/register", response_model=UserResponse)
def register(body: RegisterRequest, response: Response, services: Services = Depends(get_services)):
    """
    Create an account and log straight in.

    Send us:
    - email (required)
    - password (required)
    - username (optional, needed to log in later)
    """
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="email and password required")

    user = services.users.register(body.email, body.password, body.username)
    services.sessions.set_cookie(response, user.user_id)
    return user


@router.post("/login", response_model=UserResponse)
def login(body: LoginRequest, response: Response, services: Services = Depends(get_services)):
    """Log in with username and password. Sets the session cookie."""
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="username and password required")

    user = services.users.authenticate(body.username, body.password)
    services.sessions.set_cookie(response, user.user_id)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(services: Services = Depends(get_services)):
    """Clear the session cookie."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    services.sessions.clear_cookie(response)
    return response


@router.get("/me", response_model=UserResponse)
def me(user_id: int = Depends(get_current_user_id), services: Services = Depends(get_services)):
    """The logged-in user."""
    user = services.users.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="user not found")
    return user


# =============================================================================
# PLANT ENDPOINTS
# =============================================================================

@router.post("/add_plant", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
def add_plant(
    body: AddPlantRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Claim a plant using the ID that shipped with the device.

    Send us:
    - plantId: e.g. "plant_00042"
    - plantName: what you want to call it
    - type: what kind of plant it is
    """
    if not body.plant_id or not body.plant_type:
        raise HTTPException(status_code=400, detail="plantId and type are required")
    if not validate_plant_id(body.plant_id):
        raise HTTPException(status_code=400, detail="invalid plant ID")

    services.plants.claim_plant(user_id, body.plant_id, body.plant_name, body.plant_type)
    return StatusResponse(status="success")


@router.get("/get_all_my_plants", response_model=list[PlantResponse])
def get_all_my_plants(
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """Every plant the logged-in user has claimed."""
    return services.plants.list_plants(user_id)


@router.post("/issue_command", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
def issue_command(
    body: IssueCommandRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Queue a command for one of your plants.

    The plant picks it up the next time it polls /api/plant/commands.
    Queued commands only live in server memory; a server restart loses
    them.
    """
    if not body.plant_id:
        raise HTTPException(status_code=400, detail="plantId is required")
    if not body.command:
        raise HTTPException(status_code=400, detail="command is required")

    services.users.require_owner(user_id, body.plant_id)
    services.command_queue.enqueue(body.plant_id, body.command)

    logger.info(f"[{body.plant_id}] User {user_id} queued {body.command!r}")
    return StatusResponse(status="queued")


@router.post("/get_plant_logs", response_model=dict[str, list[PlantLogEntry]])
def get_plant_logs(
    body: PlantLogsRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Sensor readings for one of your plants within a date range.

    Returns {"light": [...], "temp": [...], "moisture": [...]}, each list
    newest first with entries {"val": <number>, "time": <timestamp>}.
    """
    if not body.plant_id:
        raise HTTPException(status_code=400, detail="plantId is required")

    services.users.require_owner(user_id, body.plant_id)
    return services.plants.get_logs(body.plant_id, body.start_date, body.end_date)
