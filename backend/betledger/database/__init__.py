"""
Database module initialization.
Exports database components for use throughout the application.
"""

from betledger.database.base import Base
from betledger.database.connection import (
    check_db_connection,
    close_db,
    get_db_info,
    init_db,
)
from betledger.database.dependencies import get_db
from betledger.database.session import (
    configure_engine,
    get_db_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    # Declarative base
    "Base",
    # Lifecycle
    "init_db",
    "close_db",
    "configure_engine",
    "get_engine",
    "get_session_factory",
    # Dependencies
    "get_db",
    "get_db_session",
    # Utilities
    "check_db_connection",
    "get_db_info",
]
