"""
Core module - configuration and database wiring.
"""
from .config import Settings, get_settings
from .db import Base, build_engine, build_session_factory, create_tables

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "build_engine",
    "build_session_factory",
    "create_tables",
]
