"""
Relational Store
================

Table definitions and engine setup (SQLAlchemy Core).

TABLES:
    users      - accounts (bcrypt password hashes)
    plants     - provisioned devices, their secret hash and owner
    plant_logs - sensor readings pushed by devices

Production runs on MySQL (set DATABASE_URL), local development and the
tests use SQLite.
"""

import logging

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
)
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

metadata = MetaData()

users_table = Table(
    "users", metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), unique=True, nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("username", String(255), unique=True, nullable=True),
)

plants_table = Table(
    "plants", metadata,
    Column("plant_id", String(64), primary_key=True),
    Column("plant_secret_hash", String(255), nullable=False),
    Column("user_id", Integer, ForeignKey("users.user_id"), nullable=True),
    Column("plant_name", String(255), nullable=True),
    Column("plant_type", String(64), nullable=True),
)

plant_logs_table = Table(
    "plant_logs", metadata,
    Column("log_id", Integer, primary_key=True, autoincrement=True),
    Column("plant_id", String(64), ForeignKey("plants.plant_id"), nullable=False, index=True),
    Column("log_type", String(32), nullable=False),
    Column("log_time", DateTime, nullable=False, index=True),
    Column("log_value", Float, nullable=False),
)


def create_db_engine(database_url: str) -> Engine:
    """
    Create the engine for `database_url`.

    SQLite connections are shared across FastAPI's worker threads, so the
    same-thread check is switched off for them.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def init_db(engine: Engine):
    """Create any missing tables."""
    metadata.create_all(engine)
