"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .plants import router as plants_router
from .users import router as users_router
from .admin import router as admin_router
from .deps import Services, set_services, get_services

__all__ = [
    "plants_router",
    "users_router",
    "admin_router",
    "Services",
    "set_services",
    "get_services",
]
