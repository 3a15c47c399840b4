"""
Admin / Utility Router
======================

POST /api/generate_plants - Provision new plant IDs and secrets
GET  /api/ping            - Liveness check for devices ("pong")

Provisioning prints secrets in the clear, so it needs the
`X-Admin-Token` header to match POTBOT_ADMIN_TOKEN. With no token
configured the endpoint is switched off.
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import PlainTextResponse

from potbot.models import GeneratePlantsRequest, GeneratedPlantsResponse
from potbot.routers.deps import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin"])


def verify_admin_token(
    admin_token: Optional[str] = Header(None, alias="X-Admin-Token"),
    services: Services = Depends(get_services),
) -> str:
    """
    Check the X-Admin-Token header.

    Raises:
        HTTPException: 503 if provisioning is disabled, 401 if the token is
            missing or wrong
    """
    expected = services.config.admin_token
    if not expected:
        raise HTTPException(status_code=503, detail="plant provisioning disabled (POTBOT_ADMIN_TOKEN not set)")
    if not admin_token or not secrets.compare_digest(admin_token.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="invalid admin token")
    return admin_token


@router.post("/generate_plants", response_model=GeneratedPlantsResponse)
def generate_plants(
    body: Optional[GeneratePlantsRequest] = None,
    _token: str = Depends(verify_admin_token),
    services: Services = Depends(get_services),
):
    """
    Provision new plants (default 10).

    Returns {"plantIds": [...], "plantSecrets": [...]} in matching order.
    Flash each pair onto a device; the secrets cannot be shown again.
    """
    count = body.count if body else 10
    try:
        created = services.plants.provision_plants(count)
    except Exception:
        logger.exception("Error provisioning plants")
        raise HTTPException(status_code=500, detail="server error")

    return GeneratedPlantsResponse(
        plant_ids=[plant_id for plant_id, _ in created],
        plant_secrets=[secret for _, secret in created],
    )


@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"
