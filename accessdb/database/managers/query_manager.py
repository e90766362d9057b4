#!/usr/bin/env python3
"""
query_manager.py
--------------------
Read-only queries spanning the five entry tables.

Cross-category reads fan out one sub-query per table on a thread pool,
each with its own session, and combine the results once every sub-query
has finished. If any sub-query fails the whole read fails with a
DatabaseError; a category is never silently left out.

Key Features:
    - Newest entries, for one category or merged across all five
    - Search through a pluggable SearchBackend
    - Lookup of an entry by id alone
    - Entry counts per category

Usage:
    queries = EntryQueries(db.ReadSessionLocal, logger)

    for item in queries.get_entries(limit=20):
        print(item.category, item.entry.name)

    found = queries.get_entry(entry_id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

# --- Third party imports ---
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from accessdb.core.exceptions import DatabaseError
from accessdb.core.logging_manager import AccessLogger
from accessdb.core.validators import DataValidator
from accessdb.database.decorators import DatabaseOperation
from accessdb.database.models import ENTRY_MODELS, EntryMixin, EntryType, model_for
from accessdb.database.search import NameSearch, SearchBackend

R = TypeVar("R")

DEFAULT_LIMIT = 50
SEARCH_LIMIT = 20


@dataclass(frozen=True)
class CategorizedEntry:
    """An entry together with the category it was read from."""

    category: EntryType
    entry: EntryMixin

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def created_at(self):
        return self.entry.created_at

    def to_dict(self) -> Dict[str, Any]:
        return self.entry.to_dict()


class EntryQueries:
    """
    Cross-table entry reads.

    Attributes:
        session_factory: Creates one session per sub-query
        logger: Optional logger for operation tracking
        search_backend: Backend used by search_entries()
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        logger: Optional[AccessLogger] = None,
        search_backend: Optional[SearchBackend] = None,
        max_workers: int = len(EntryType),
    ):
        self.session_factory = session_factory
        self.logger = logger
        self.search_backend = search_backend or NameSearch()
        self.max_workers = max_workers

    # -------------------------------------------------------------------------
    # Fan-out
    # -------------------------------------------------------------------------

    def _run(self, entry_type: EntryType, query: Callable[[Session, EntryType], R]) -> R:
        """Run one sub-query in a fresh session."""
        with self.session_factory() as session:
            return query(session, entry_type)

    def _fan_out(
        self, query: Callable[[Session, EntryType], R]
    ) -> Dict[EntryType, R]:
        """
        Run query against every category concurrently.

        Returns:
            Result per category, in EntryType order

        Raises:
            DatabaseError: If any sub-query fails
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                entry_type: executor.submit(self._run, entry_type, query)
                for entry_type in EntryType
            }
            wait(futures.values(), return_when=FIRST_EXCEPTION)
            for future in futures.values():
                future.cancel()

        results: Dict[EntryType, R] = {}
        for entry_type, future in futures.items():
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                raise DatabaseError(
                    f"Query on {entry_type.table_name} failed: {error}"
                ) from error
            results[entry_type] = future.result()

        if len(results) != len(futures):
            raise DatabaseError("Query across categories did not complete")
        return results

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @staticmethod
    def _newest(limit: int) -> Callable[[Session, EntryType], List[CategorizedEntry]]:
        def query(session: Session, entry_type: EntryType) -> List[CategorizedEntry]:
            model = model_for(entry_type)
            rows = session.scalars(
                select(model).order_by(model.created_at.desc()).limit(limit)
            )
            return [CategorizedEntry(entry_type, row) for row in rows]

        return query

    def get_entries(
        self,
        category: Optional[Union[EntryType, str]] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[CategorizedEntry]:
        """
        Newest entries, newest first.

        With a category, only that table is read. Without one, each table
        contributes at most `limit` rows and the merged list is cut to
        `limit`, so a very active category can crowd out the others.

        Args:
            category: Optional category filter
            limit: Maximum number of entries (default: 50)
        """
        limit = DataValidator.validate_limit(limit)
        with DatabaseOperation(self.logger, "get_entries", context={"limit": limit}):
            if category is not None:
                entry_type = DataValidator.validate_choice(category, EntryType)
                return self._run(entry_type, self._newest(limit))

            merged = [
                item
                for items in self._fan_out(self._newest(limit)).values()
                for item in items
            ]
            merged.sort(key=lambda item: item.created_at, reverse=True)
            return merged[:limit]

    def search_entries(
        self,
        query: Optional[str],
        category: Optional[Union[EntryType, str]] = None,
    ) -> List[CategorizedEntry]:
        """
        Search entries through the search backend.

        A blank query returns no results. Across all categories the
        per-table results are concatenated in category order and cut to 20.
        """
        text = DataValidator.normalize_string(query)
        if not text:
            return []

        backend = self.search_backend

        def search(session: Session, entry_type: EntryType) -> List[CategorizedEntry]:
            rows = backend.search(session, model_for(entry_type), text, SEARCH_LIMIT)
            return [CategorizedEntry(entry_type, row) for row in rows]

        with DatabaseOperation(self.logger, "search_entries", context={"query": text}):
            if category is not None:
                entry_type = DataValidator.validate_choice(category, EntryType)
                return self._run(entry_type, search)

            merged = [
                item for items in self._fan_out(search).values() for item in items
            ]
            return merged[:SEARCH_LIMIT]

    def get_entry(self, entry_id: str) -> Optional[CategorizedEntry]:
        """
        Find an entry by id without knowing its category.

        Returns:
            The entry with its category, or None if no table has the id
        """
        normalized = DataValidator.normalize_string(entry_id)
        if not normalized:
            return None

        def lookup(session: Session, entry_type: EntryType) -> Optional[CategorizedEntry]:
            row = session.get(model_for(entry_type), normalized)
            return CategorizedEntry(entry_type, row) if row is not None else None

        with DatabaseOperation(self.logger, "get_entry", context={"entry_id": normalized}):
            for found in self._fan_out(lookup).values():
                if found is not None:
                    return found
            return None

    def count_entries_per_category(self) -> Dict[EntryType, int]:
        """Number of entries in each category."""

        def count(session: Session, entry_type: EntryType) -> int:
            model = ENTRY_MODELS[entry_type]
            return session.scalar(select(func.count()).select_from(model)) or 0

        with DatabaseOperation(self.logger, "count_entries_per_category"):
            return self._fan_out(count)
