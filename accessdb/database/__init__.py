#!/usr/bin/env python3
"""
accessdb Database Package
-------------------------
Database layer for the accessibility database.

This package provides:
- The AccessDB manager (engine, sessions, migrations)
- ORM models for the five entry categories, labels and community data
- Managers for entries, tags, features, comments and reviews
- Cross-category queries
"""

from .manager import AccessDB
from accessdb.core.exceptions import (
    AuthorizationError,
    DatabaseError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
)
from .completeness import is_entry_complete, missing_fields
from .decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from .search import NameSearch, SearchBackend

__version__ = "1.0.0"

__all__ = [
    # Main manager
    "AccessDB",
    # Exceptions
    "AuthorizationError",
    "DatabaseError",
    "NotAuthenticatedError",
    "NotFoundError",
    "ValidationError",
    # Completeness
    "is_entry_complete",
    "missing_fields",
    # Decorators
    "DatabaseOperation",
    "handle_db_errors",
    "log_database_operation",
    "validate_metadata",
    # Search
    "NameSearch",
    "SearchBackend",
]
