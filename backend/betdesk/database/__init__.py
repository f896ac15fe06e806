"""
Database module initialization.
Exports database components for use throughout the application.
"""

from betdesk.database.base import Base
from betdesk.database.dependencies import get_db
from betdesk.database.session import (
    DatabaseContext,
    close_db,
    get_database,
    get_db_session,
    init_db,
    set_database,
)

__all__ = [
    # Connection management
    "DatabaseContext",
    "init_db",
    "close_db",
    "get_database",
    "set_database",
    # Sessions
    "get_db",
    "get_db_session",
    # Base classes
    "Base",
]
