#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the accessdb project.

This module defines a hierarchy of exceptions used throughout the project
to signal specific error conditions. Every error raised by a manager is
surfaced directly to the caller; none of them is retried or swallowed.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all store-related errors
    ├── ValidationError - Data validation failures (raised before mutating)
    ├── NotFoundError - Referenced record does not exist
    ├── AuthorizationError - Caller does not own the record
    └── NotAuthenticatedError - Caller is not signed in

Usage:
    from accessdb.core.exceptions import DatabaseError, ValidationError

    try:
        db.features.add_to_entry(ref, feature_id, rating=7)
    except ValidationError as e:
        logger.error(f"Invalid data: {e}")
"""


class DatabaseError(Exception):
    """
    Base exception for database-related errors.

    Raised when store operations fail due to connection issues,
    query errors, integrity violations, or other database problems.
    SQLAlchemy errors are translated into this type at the manager
    boundary.

    Examples:
        >>> raise DatabaseError("Connection to database failed")
        >>> raise DatabaseError("Data integrity violation: duplicate link")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised synchronously before any mutation is applied, so a
    ValidationError never leaves partial state behind:
    - Ratings outside 1-5
    - Missing required fields
    - Unknown entry types or accessibility types
    - Empty comment content

    Examples:
        >>> raise ValidationError("Rating must be between 1 and 5")
        >>> raise ValidationError("Required field 'name' missing or empty")
    """

    pass


class NotFoundError(Exception):
    """
    Exception for missing records.

    Raised when an operation targets an entry, tag, feature, comment,
    review or association that does not exist. No mutation is applied.

    Examples:
        >>> raise NotFoundError("Tag not found with id: 12")
        >>> raise NotFoundError("Feature not associated with this entry")
    """

    pass


class AuthorizationError(Exception):
    """
    Exception for ownership violations.

    Raised when a signed-in user edits or deletes a record owned by
    someone else. Entries with no recorded owner are editable by any
    signed-in user and never raise this.

    Examples:
        >>> raise AuthorizationError("You can only edit entries you created")
    """

    pass


class NotAuthenticatedError(Exception):
    """
    Exception for mutations attempted without a signed-in user.

    Checked before any other validation.

    Examples:
        >>> raise NotAuthenticatedError("You must be logged in to create an entry")
    """

    pass
