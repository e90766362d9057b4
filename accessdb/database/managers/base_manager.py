#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common store operations and utilities.
All managers inherit from this class.

Key Features:
    - Retry logic for SQLite lock handling
    - Generic get-or-create with race handling on unique keys
    - Identity and ownership checks shared by the mutating managers

Usage:
    class ReviewManager(BaseManager):
        def add(self, user_id, ref, rating, comment):
            user_id = self._require_user(user_id, "add a review")
            with DatabaseOperation(self.logger, "add_review"):
                ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import Any, Callable, Dict, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

# --- Local imports ---
from accessdb.core.exceptions import (
    AuthorizationError,
    DatabaseError,
    NotAuthenticatedError,
)
from accessdb.core.logging_manager import AccessLogger, safe_logger
from accessdb.core.validators import DataValidator

T = TypeVar("T")


class BaseManager(ABC):
    """
    Abstract base manager providing shared helpers.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[AccessLogger] = None):
        """
        Initialize the base manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _execute_with_retry(
        self,
        operation: Callable,
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> Any:
        """
        Execute database operation with retry on lock.

        Args:
            operation: Callable that performs the operation
            max_retries: Maximum number of retry attempts
            retry_delay: Base delay between retries (exponential backoff)

        Returns:
            Result of the operation

        Raises:
            OperationalError: If all retries exhausted
        """
        for attempt in range(max_retries):
            try:
                return operation()
            except OperationalError as e:
                error_msg = str(e).lower()

                if (
                    "locked" in error_msg or "busy" in error_msg
                ) and attempt < max_retries - 1:
                    wait_time = retry_delay * (2**attempt)

                    safe_logger(self.logger).log_debug(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": max_retries},
                    )

                    time.sleep(wait_time)
                    continue

                raise

        raise DatabaseError("Retry loop completed without success")

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Get a row matching lookup_fields, or create it.

        A concurrent insert of the same unique key is resolved by
        re-reading inside a savepoint rollback, so the caller always
        receives the single surviving row.

        Args:
            model_class: ORM model class to query or create
            lookup_fields: Dictionary of field_name: value to filter/create
            extra_fields: Additional fields for new object creation only

        Returns:
            ORM instance of the model class

        Raises:
            DatabaseError: If creation fails after handling race condition
        """
        obj = self.session.scalars(
            select(model_class).filter_by(**lookup_fields)
        ).first()
        if obj is not None:
            return obj

        fields = dict(lookup_fields)
        if extra_fields:
            fields.update(extra_fields)

        try:
            with self.session.begin_nested():
                obj = model_class(**fields)
                self.session.add(obj)
            return obj
        except IntegrityError:
            obj = self.session.scalars(
                select(model_class).filter_by(**lookup_fields)
            ).first()
            if obj is not None:
                return obj
            raise DatabaseError(
                f"Failed to create {model_class.__name__} even after handling race condition"
            )

    # -------------------------------------------------------------------------
    # Identity Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_user(user_id: Optional[str], action: str) -> str:
        """
        Ensure a caller identity is present.

        Args:
            user_id: Identity of the caller
            action: Phrase completing "You must be logged in to ..."

        Raises:
            NotAuthenticatedError: If user_id is None or blank
        """
        normalized = DataValidator.normalize_string(user_id)
        if not normalized:
            raise NotAuthenticatedError(f"You must be logged in to {action}")
        return normalized

    @staticmethod
    def _require_owner(owner_id: Optional[str], user_id: str, message: str) -> None:
        """
        Ensure user_id owns a record.

        Records without a recorded owner are editable by any signed-in user.

        Raises:
            AuthorizationError: If the record belongs to someone else
        """
        if owner_id is not None and owner_id != user_id:
            raise AuthorizationError(message)
