"""
Services Package
================

These are the "workers" that do the actual work.

- CommandQueue: In-memory mailboxes of commands waiting for each plant
- CredentialVerifier: Checks a plant's ID and secret
- PlantRepository: Plants and sensor logs in the database
- UserService: Accounts, login and plant ownership
- SessionManager: Signed user session cookies
- EmailService: Owner notifications over SMTP
"""

from .command_queue import CommandQueue
from .credentials import CredentialVerifier, VerifiedPlant
from .plant_repository import PlantRepository
from .user_service import UserService
from .sessions import SessionManager
from .email_service import EmailService

__all__ = [
    "CommandQueue",
    "CredentialVerifier",
    "VerifiedPlant",
    "PlantRepository",
    "UserService",
    "SessionManager",
    "EmailService",
]
