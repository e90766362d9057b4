#!/usr/bin/env python3
"""
search.py
--------------------
Entry search backends.

Full-text search is not implemented here. Query code talks to a
SearchBackend, and the default NameSearch does a case-insensitive
substring match on entry names. A real full-text index can be plugged
in by passing another backend to AccessDB.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import List, Protocol, Type

# --- Third party imports ---
from sqlalchemy import func, select
from sqlalchemy.orm import Session

# --- Local imports ---
from accessdb.database.models import EntryMixin


class SearchBackend(Protocol):
    """Anything that can search one entry table."""

    def search(
        self, session: Session, model: Type[EntryMixin], query: str, limit: int
    ) -> List[EntryMixin]:
        """Return up to limit entries of model matching query."""
        ...


class NameSearch:
    """Case-insensitive substring match on the entry name, newest first."""

    def search(
        self, session: Session, model: Type[EntryMixin], query: str, limit: int
    ) -> List[EntryMixin]:
        statement = (
            select(model)
            .where(func.lower(model.name).contains(query.lower(), autoescape=True))
            .order_by(model.created_at.desc())
            .limit(limit)
        )
        return list(session.scalars(statement))
