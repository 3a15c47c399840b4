"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from potbot.models import LogType, AddPlantRequest
"""

from .plant import (
    # Enums
    LogType,
    NotificationType,

    # What plants send us
    PlantLogRequest,
    PlantNotifyRequest,

    # What the frontend sends us
    AddPlantRequest,
    IssueCommandRequest,
    PlantLogsRequest,
    GeneratePlantsRequest,

    # What we send back
    PlantResponse,
    PlantLogEntry,
    StatusResponse,
    GeneratedPlantsResponse,
)
from .user import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
)

__all__ = [
    "LogType",
    "NotificationType",
    "PlantLogRequest",
    "PlantNotifyRequest",
    "AddPlantRequest",
    "IssueCommandRequest",
    "PlantLogsRequest",
    "GeneratePlantsRequest",
    "PlantResponse",
    "PlantLogEntry",
    "StatusResponse",
    "GeneratedPlantsResponse",
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
]
