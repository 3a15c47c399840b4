"""
Plant (Device) API Router
=========================

The endpoints a plant calls on its own. Every one of them checks the
plant's credentials first, before the request body is even decoded;
nothing is processed for a plant that fails.

Auth: cookies `plant_id` and `plant_secret`. Any failure is the same
401 {"detail": "invalid plant credentials"}.

ALL ENDPOINTS:
-------------
GET  /api/plant/verify    - Check credentials only
POST /api/plant/log       - Report a sensor reading
GET  /api/plant/commands  - Collect (and clear) queued commands
POST /api/plant/notify    - Email the owner about an event

The endpoints are plain `def`, so FastAPI runs them in its thread pool
(database and bcrypt calls block).

Author: Potbot Team
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from potbot.models import PlantLogRequest, PlantNotifyRequest, StatusResponse, LogType
from potbot.routers.deps import Services, get_services, get_verified_plant, verified_body
from potbot.services import VerifiedPlant
from potbot.utils.validation import validate_log_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plant", tags=["plant"])


@router.get("/verify", response_model=StatusResponse)
def verify_plant_credentials(plant: VerifiedPlant = Depends(get_verified_plant)):
    """
    Lets a plant check its credentials during setup.

    Returns {"status": "valid"} or 401.
    """
    return StatusResponse(status="valid")


@router.post("/log", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
def log_plant_value(
    body: PlantLogRequest = Depends(verified_body(PlantLogRequest)),
    plant: VerifiedPlant = Depends(get_verified_plant),
    services: Services = Depends(get_services),
):
    """
    Store one sensor reading, stamped with the server's current time.

    **Body (JSON)**
    - logType: one of light, temp, moisture
    - logValue: the reading
    """
    if not validate_log_type(body.log_type):
        raise HTTPException(status_code=400, detail="invalid log type")

    try:
        services.plants.insert_log(plant.plant_id, LogType(body.log_type), body.log_value)
    except Exception:
        logger.exception(f"[{plant.plant_id}] Error inserting plant log")
        raise HTTPException(status_code=500, detail="server error")

    return StatusResponse(status="ok")


@router.get("/commands", response_model=list[str])
def fetch_commands(
    plant: VerifiedPlant = Depends(get_verified_plant),
    services: Services = Depends(get_services),
):
    """
    Hand the plant every command queued for it, oldest first.

    The commands are removed as they are returned; asking again right away
    gives []. Never null.
    """
    return services.command_queue.drain(plant.plant_id)


@router.post("/notify", response_model=StatusResponse)
def notify_owner(
    body: PlantNotifyRequest = Depends(verified_body(PlantNotifyRequest)),
    plant: VerifiedPlant = Depends(get_verified_plant),
    services: Services = Depends(get_services),
):
    """
    Email the plant's owner about an event.

    **Body (JSON)**
    - notificationType: e.g. "FALLEN" (gets a dedicated message) or any
      other non-empty string
    """
    if not body.notification_type:
        raise HTTPException(status_code=400, detail="notification_type is required")

    owner_email = services.plants.get_owner_email(plant.plant_id)
    if not owner_email:
        raise HTTPException(status_code=400, detail="plant has no associated user")

    if not services.email.send_plant_notification(owner_email, plant.plant_id, body.notification_type):
        raise HTTPException(status_code=500, detail="server error")

    return StatusResponse(status="notified")
