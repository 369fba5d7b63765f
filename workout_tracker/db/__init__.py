"""Database module.

This module provides database session management and engine configuration.
"""

from workout_tracker.db.session import (
    create_engine,
    create_session_factory,
    get_db,
    store_operation,
)

__all__ = [
    "create_engine",
    "create_session_factory",
    "get_db",
    "store_operation",
]
