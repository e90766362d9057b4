#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators and context managers for database operations.

- DatabaseOperation: timing, logging and SQLAlchemy error translation
  around a block of manager code
- log_database_operation: the same logging as a method decorator
- handle_db_errors: SQLAlchemy error translation as a decorator
- validate_metadata: required-field check on a metadata dictionary
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# --- Local imports ---
from accessdb.core.exceptions import DatabaseError
from accessdb.core.logging_manager import AccessLogger, safe_logger
from accessdb.core.validators import DataValidator


class DatabaseOperation:
    """
    Context manager wrapping a database operation with logging and error handling.

    On success, logs "<name>_completed" with the duration. On failure,
    logs the error once, converts IntegrityError and other SQLAlchemy
    errors into DatabaseError and lets every other exception propagate
    unchanged.

    Usage:
        with DatabaseOperation(self.logger, "create_tag"):
            tag = Tag(name=name, slug=slug)
            self.session.add(tag)
            self.session.flush()
    """

    def __init__(
        self,
        logger: Optional[AccessLogger],
        operation_name: str,
        log_start: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger = safe_logger(logger)
        self.operation_name = operation_name
        self.log_start = log_start
        self.context = context or {}
        self._start: float = 0.0

    def __enter__(self) -> "DatabaseOperation":
        self._start = time.perf_counter()
        if self.log_start:
            self.logger.log_debug(f"Starting {self.operation_name}", self.context)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        duration = float(time.perf_counter() - self._start)

        if exc_value is None:
            self.logger.log_operation(
                f"{self.operation_name}_completed",
                {**self.context, "duration_seconds": duration, "success": True},
            )
            return False

        self.logger.log_error(
            exc_value,
            {
                **self.context,
                "operation": self.operation_name,
                "duration_seconds": duration,
            },
        )

        if isinstance(exc_value, IntegrityError):
            raise DatabaseError(f"Data integrity violation: {exc_value}") from exc_value
        if isinstance(exc_value, SQLAlchemyError):
            raise DatabaseError(f"Database operation failed: {exc_value}") from exc_value
        return False


def log_database_operation(operation_name: str):
    """
    Decorator to log manager methods with timing and context.

    The wrapped method's instance must expose a `logger` attribute
    (None is allowed).

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = safe_logger(getattr(self, "logger", None))
            start_time = datetime.now()
            operation_id = f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"

            logger.log_debug(
                f"Starting {operation_name}",
                {
                    "operation_id": operation_id,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "operation_id": operation_id,
                        "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    },
                )
                raise

            logger.log_operation(
                f"{operation_name}_completed",
                {
                    "operation_id": operation_id,
                    "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def validate_metadata(required_fields: List[str]):
    """
    Decorator to validate a metadata dictionary before processing.

    The metadata is taken from the `metadata` keyword argument, or
    from the first positional argument after self.

    Args:
        required_fields: List of required field names

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            if "metadata" in kwargs:
                metadata = kwargs["metadata"]
            else:
                metadata = args[0] if args else {}

            DataValidator.validate_required_fields(metadata or {}, required_fields)

            return function(self, *args, **kwargs)

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator translating SQLAlchemy errors into DatabaseError.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Data integrity violation: {e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper
