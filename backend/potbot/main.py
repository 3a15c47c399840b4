"""
Potbot - Backend API
====================
FastAPI application for the Potbot plant-monitoring product.

ARCHITECTURE:

    [Web Frontend] --session cookie--> [users router] --ownership check--+
                                                                          |
                                                                   enqueue|
                                                                          v
                                                                 [Command Queue]
                                                                          ^
                                                                     drain|
                                                                          |
    [Plant Device] --plant_id/plant_secret--> [plants router] --verify---+
                                                   |
                                                   v
                                          [Relational store]

    Users claim plants and queue commands for them. Plants poll for those
    commands, push sensor readings, and can ask us to email their owner.
    Queued commands live in memory only.

HOW TO RUN:
    # Install
    pip install -e .

    # Copy environment config and edit it
    cp env.example.txt .env

    # Run the server (from backend/)
    uvicorn potbot.main:app --reload --port 8080

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:8080/docs
    - ReDoc: http://localhost:8080/redoc

Author: Potbot Team
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from potbot.config import DEV_SECRET_KEY, Config, configure_logging
from potbot.db import create_db_engine, init_db
from potbot.errors import PotbotError
from potbot.routers import Services, admin_router, plants_router, set_services, users_router
from potbot.services import (
    CommandQueue,
    CredentialVerifier,
    EmailService,
    PlantRepository,
    SessionManager,
    UserService,
)

logger = logging.getLogger(__name__)


def build_services(config: Config, engine) -> Services:
    """Wire every service together from one config and one engine."""
    plants = PlantRepository(engine, bcrypt_rounds=config.bcrypt_rounds)
    return Services(
        config=config,
        command_queue=CommandQueue(max_commands_per_plant=config.max_commands_per_plant),
        verifier=CredentialVerifier(plants, rounds=config.bcrypt_rounds),
        plants=plants,
        users=UserService(engine, plants, bcrypt_rounds=config.bcrypt_rounds),
        sessions=SessionManager(
            config.secret_key,
            max_age=config.session_max_age,
            secure=config.cookie_secure,
        ),
        email=EmailService(
            from_email=config.email_address,
            password=config.email_password,
            smtp_host=config.mail_server,
            smtp_port=config.mail_port,
        ),
    )


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use. Defaults to Config.from_env().
    """
    config = config or Config.from_env()
    configure_logging(config.log_level)

    # =========================================================================
    # APPLICATION LIFESPAN
    # =========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        STARTUP:
            1. Connect to the database and create missing tables
            2. Build services and inject them into the routers

        SHUTDOWN:
            1. Discard pending commands (they are not persisted)
            2. Close database connections
        """
        # ========== STARTUP ==========
        logger.info("=" * 60)
        logger.info("POTBOT - Starting Backend")
        logger.info("=" * 60)

        engine = create_db_engine(config.database_url)
        init_db(engine)

        services = build_services(config, engine)
        set_services(services)

        if config.secret_key == DEV_SECRET_KEY:
            logger.warning("POTBOT_SECRET_KEY not set, using the development key for session cookies")
        if config.max_commands_per_plant:
            logger.info(f"   Mailbox cap: {config.max_commands_per_plant} commands per plant")
        else:
            logger.info("   Mailbox cap: unbounded")
        logger.info(f"   CORS origins: {len(config.cors_origins)} configured")
        logger.info("Services initialized")

        yield  # Application runs here

        # ========== SHUTDOWN ==========
        logger.info("Shutting down...")
        services.command_queue.clear()
        set_services(None)
        engine.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Potbot API",
        description="""
## Overview

Backend for Potbot plant monitors.

- **Users** register, claim plants by the ID that shipped with the device,
  read their sensor logs and queue commands.
- **Plants** authenticate with their ID and secret (cookies `plant_id` and
  `plant_secret`), report readings, collect queued commands and notify
  their owner.

Queued commands are kept in memory and are lost if the server restarts.
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # =========================================================================
    # CORS MIDDLEWARE
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Admin-Token"],
    )

    # =========================================================================
    # ERROR RESPONSES
    # =========================================================================

    @app.exception_handler(PotbotError)
    async def potbot_error_handler(request: Request, exc: PotbotError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        # Database and other store failures end up here
        logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "server error"})

    # =========================================================================
    # INCLUDE ROUTERS
    # =========================================================================

    app.include_router(users_router)
    app.include_router(plants_router)
    app.include_router(admin_router)

    @app.get("/health", summary="Health Check")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "mailbox_cap": config.max_commands_per_plant,
        }

    # Serve the built frontend, if there is one. Mounted last so the API
    # routes above take precedence.
    frontend_dir = Path(config.frontend_dir)
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
        logger.info(f"Serving frontend from {frontend_dir}")

    return app


app = create_app()
