# database.py
"""Database configuration and session management."""

import os
import logging
from datetime import datetime, timezone
from sqlalchemy import create_engine, NullPool
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from the .env file
load_dotenv()

# Get database URL from environment
DATABASE_URL = os.getenv('DATABASE_URL')
if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL environment variable is not set. "
        "Please set it in your .env file or environment."
    )

logger.info("Connecting to database...")


def engine_options(url: str) -> dict:
    """Driver specific keyword arguments for create_engine."""
    if url.startswith("sqlite"):
        # FastAPI serves sync routes from a threadpool
        return {"connect_args": {"check_same_thread": False}}
    if url.startswith("postgresql"):
        return {"client_encoding": "utf8", "poolclass": NullPool}
    return {"poolclass": NullPool}


# Create the SQLAlchemy engine
engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))

# Create a configured "SessionLocal" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def utc_now():
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a client supplied datetime to UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
