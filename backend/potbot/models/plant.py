"""
Plant Models
============
Pydantic models for plant requests and responses.

Field names on the wire are camelCase because that is what the frontend
and the plant firmware already send. Python code uses snake_case; the
aliases bridge the two.

Author: Potbot Team
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class LogType(str, Enum):
    """
    Kinds of sensor reading a plant can report.
    """
    LIGHT = "light"
    TEMP = "temp"
    MOISTURE = "moisture"


class NotificationType(str, Enum):
    """
    Notification types with a dedicated email template.

    Plants may send any other non-empty type; those get the generic email.
    """
    FALLEN = "FALLEN"


class CamelModel(BaseModel):
    """Accepts both the camelCase alias and the Python field name."""
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# REQUEST MODELS - What plants send
# =============================================================================

class PlantLogRequest(CamelModel):
    """
    A single sensor reading.

    Example Request:
        POST /api/plant/log
        {"logType": "moisture", "logValue": 41.5}
    """
    log_type: str = Field(..., alias="logType", description="One of: light, temp, moisture")
    log_value: float = Field(..., alias="logValue", description="Reading value")


class PlantNotifyRequest(CamelModel):
    """
    Ask the server to email the plant's owner.

    Example Request:
        POST /api/plant/notify
        {"notificationType": "FALLEN"}
    """
    notification_type: str = Field("", alias="notificationType", description="Event name, e.g. FALLEN")


# =============================================================================
# REQUEST MODELS - What the frontend sends
# =============================================================================

class AddPlantRequest(CamelModel):
    """
    Claim a provisioned plant for the logged-in user.

    Example Request:
        POST /api/add_plant
        {"plantId": "plant_00042", "plantName": "Fern", "type": "fern"}
    """
    plant_id: str = Field("", alias="plantId", description="ID printed on the device")
    plant_name: str = Field("", alias="plantName", description="Name chosen by the user")
    plant_type: str = Field("", alias="type", description="Kind of plant")


class IssueCommandRequest(CamelModel):
    """
    Queue a command for one of the user's plants.

    Example Request:
        POST /api/issue_command
        {"plantId": "plant_00042", "command": "WATER_NOW"}
    """
    plant_id: str = Field("", alias="plantId")
    command: str = Field("", description="Opaque instruction for the device")


class PlantLogsRequest(CamelModel):
    """Date range query for a plant's readings."""
    plant_id: str = Field("", alias="plantID")
    start_date: datetime = Field(..., alias="startDate", description="Start of range (RFC 3339)")
    end_date: datetime = Field(..., alias="endDate", description="End of range (RFC 3339)")


class GeneratePlantsRequest(BaseModel):
    """How many plants to provision in one go."""
    count: int = Field(10, ge=1, le=100)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class PlantResponse(CamelModel):
    """A plant as shown in the user's plant list."""
    plant_name: Optional[str] = Field(None, alias="plantName")
    plant_id: str = Field(..., alias="plantID")
    plant_type: Optional[str] = Field(None, alias="type")


class PlantLogEntry(BaseModel):
    """One reading in a log query result."""
    val: float
    time: datetime


class StatusResponse(BaseModel):
    status: str


class GeneratedPlantsResponse(CamelModel):
    """
    Freshly provisioned plants.

    The secrets are shown exactly once; only their hashes are stored.
    """
    plant_ids: list[str] = Field(..., alias="plantIds")
    plant_secrets: list[str] = Field(..., alias="plantSecrets")
