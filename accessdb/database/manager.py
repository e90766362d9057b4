#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the accessdb accessibility database.

Provides the AccessDB class for interacting with the SQLite database.
Handles:
    - Initialization of the database engine and sessionmaker
    - Transactional session scopes exposing the managers
    - Migration management via Alembic
    - Rotating log files for every operation

Managers available inside session_scope():
    db.entries    EntryManager     Entries of the five categories
    db.tags       TagManager       Tags and entry-tag links
    db.features   FeatureManager   Features and rated entry-feature links
    db.comments   CommentManager   Comments on entries
    db.reviews    ReviewManager    Reviews of entries

Available at any time (opens its own sessions):
    db.queries    EntryQueries     Cross-category reads

Notes
==============
- A fresh database gets every table from the ORM models and is stamped
  at the latest Alembic revision; an existing one is upgraded.
- All datetime fields are UTC-aware on write.
- SQLite lock contention is retried by the managers.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

# --- Third party ---
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Engine, create_engine, event, inspect
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from accessdb.core.exceptions import DatabaseError
from accessdb.core.logging_manager import AccessLogger, safe_logger
from accessdb.core.paths import ALEMBIC_INI
from .decorators import handle_db_errors, log_database_operation
from .managers import (
    CommentManager,
    EntryManager,
    EntryQueries,
    FeatureManager,
    ReviewManager,
    TagManager,
)
from .models import Base
from .search import SearchBackend


def _enable_sqlite_transactions(engine: Engine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself on pysqlite connections.

    Without this the driver defers BEGIN and SAVEPOINTs
    (Session.begin_nested) do not nest inside the outer transaction.

    Connections carrying the "sqlite_begin" execution option open their
    transaction with that mode instead, e.g. BEGIN IMMEDIATE for writers,
    so a second writer waits on the busy timeout rather than failing its
    lock upgrade mid-transaction.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(connection):
        mode = connection.get_execution_options().get("sqlite_begin")
        connection.exec_driver_sql(f"BEGIN {mode}" if mode else "BEGIN")


# ----- Main Database Manager -----
class AccessDB:
    """
    Main database manager for the accessdb database.

    Attributes:
        - db_path (Path): Filesystem path to the SQLite database file.
        - alembic_dir (Path): Filesystem path to the Alembic directory.
        - engine (Engine): SQLAlchemy engine instance.
        - SessionLocal (sessionmaker): Session factory for writes (BEGIN IMMEDIATE).
        - ReadSessionLocal (sessionmaker): Session factory for read-only queries.
        - logger (AccessLogger | None): Logger, when log_dir is given.

    Usage:
        db = AccessDB("~/data/accessdb.db", ALEMBIC_DIR)
        with db.session_scope():
            tag_id = db.tags.create({"name": "Subtitles", "accessibility_type": "auditory"})
            db.tags.add_to_entry(("game", game_id), tag_id)
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        search_backend: Optional[SearchBackend] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path (str | Path): Path to the SQLite file.
            alembic_dir (str | Path): Path to the Alembic directory.
            log_dir (str | Path): Directory for log files (optional)
            search_backend: Backend for entry search (default: name match)
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()
        self.search_backend = search_backend

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve()
            self.logger: Optional[AccessLogger] = AccessLogger(
                self.log_dir, component_name="database"
            )
        else:
            self.log_dir = None
            self.logger = None

        # Managers bound to the active session_scope
        self._entry_manager: Optional[EntryManager] = None
        self._tag_manager: Optional[TagManager] = None
        self._feature_manager: Optional[FeatureManager] = None
        self._comment_manager: Optional[CommentManager] = None
        self._review_manager: Optional[ReviewManager] = None

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        log = safe_logger(self.logger)
        try:
            log.log_operation(
                "database_init_start",
                {"db_path": str(self.db_path), "alembic_dir": str(self.alembic_dir)},
            )

            is_new = not self.db_path.exists()
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
                connect_args={"check_same_thread": False},
            )
            _enable_sqlite_transactions(self.engine)

            # Write sessions take the database write lock on BEGIN
            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine.execution_options(sqlite_begin="IMMEDIATE"),
                autoflush=True,
                expire_on_commit=False,
            )
            self.ReadSessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if is_new:
                self.initialize_schema()

            log.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            log.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success and rolls back on any exception. The managers
        (db.entries, db.tags, ...) are bound to this session while the
        scope is open.

        Usage:
            with db.session_scope() as session:
                game = db.entries.create("game", user_id, metadata)
                db.tags.set_for_entry(("game", game.id), [1, 2])
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log = safe_logger(self.logger)

        self._entry_manager = EntryManager(session, self.logger)
        self._tag_manager = TagManager(session, self.logger)
        self._feature_manager = FeatureManager(session, self.logger)
        self._comment_manager = CommentManager(session, self.logger)
        self._review_manager = ReviewManager(session, self.logger)

        log.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            log.log_debug("session_commit", {"session_id": session_id})
        except Exception as e:
            session.rollback()
            log.log_error(e, {"operation": "session_rollback", "session_id": session_id})
            raise
        finally:
            self._entry_manager = None
            self._tag_manager = None
            self._feature_manager = None
            self._comment_manager = None
            self._review_manager = None

            session.close()
            log.log_debug("session_close", {"session_id": session_id})

    def get_session(self) -> Session:
        """Create and return a new SQLAlchemy session."""
        return self.SessionLocal()

    # -------------------------------------------------------------------------
    # Manager Properties
    # -------------------------------------------------------------------------

    @staticmethod
    def _require(manager, name: str, example: str):
        if manager is None:
            raise DatabaseError(
                f"{name} requires active session. "
                f"Use within session_scope: "
                f"with db.session_scope() as session: {example}"
            )
        return manager

    @property
    def entries(self) -> EntryManager:
        """
        Access EntryManager for entry operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require(
            self._entry_manager, "EntryManager", "db.entries.create(...)"
        )

    @property
    def tags(self) -> TagManager:
        """
        Access TagManager for tag operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require(self._tag_manager, "TagManager", "db.tags.create(...)")

    @property
    def features(self) -> FeatureManager:
        """
        Access FeatureManager for accessibility feature operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require(
            self._feature_manager, "FeatureManager", "db.features.create(...)"
        )

    @property
    def comments(self) -> CommentManager:
        """
        Access CommentManager for comment operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require(
            self._comment_manager, "CommentManager", "db.comments.add(...)"
        )

    @property
    def reviews(self) -> ReviewManager:
        """
        Access ReviewManager for review operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require(
            self._review_manager, "ReviewManager", "db.reviews.add(...)"
        )

    @property
    def queries(self) -> EntryQueries:
        """Cross-category reads; each call opens its own sessions."""
        return EntryQueries(self.ReadSessionLocal, self.logger, self.search_backend)

    # ---- Alembic setup ----
    def _setup_alembic(self) -> Config:
        """Setup Alembic configuration."""
        try:
            safe_logger(self.logger).log_debug("Setting up Alembic configuration...")

            alembic_cfg = Config(str(ALEMBIC_INI)) if ALEMBIC_INI.is_file() else Config()
            alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
            alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
            alembic_cfg.set_main_option(
                "file_template",
                "%%(year)d%%(month).2d%%(day).2d_%%(hour).2d%%(minute).2d_%%(slug)s",
            )
            return alembic_cfg
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "setup_alembic"})
            raise DatabaseError(f"Alembic configuration failed: {e}") from e

    @handle_db_errors
    @log_database_operation("init_alembic")
    def init_alembic(self) -> bool:
        """
        Create the Alembic directory if it does not exist yet.

        The generated env.py is pointed at the accessdb models.

        Returns:
            True if the directory was created
        """
        if self.alembic_dir.is_dir():
            safe_logger(self.logger).log_debug(
                f"Alembic already initialized in {self.alembic_dir}"
            )
            return False

        if self.alembic_cfg.config_file_name is None:
            self.alembic_cfg.config_file_name = str(self.alembic_dir.parent / "alembic.ini")

        try:
            command.init(self.alembic_cfg, str(self.alembic_dir))
        except Exception as e:
            raise DatabaseError(f"Alembic initialization failed: {e}") from e
        self._update_alembic_env()
        return True

    def _update_alembic_env(self) -> None:
        """Point a freshly generated env.py at the accessdb models."""
        env_path = self.alembic_dir / "env.py"
        if not env_path.exists():
            return

        try:
            content = env_path.read_text(encoding="utf-8")
            if "target_metadata = None" in content:
                env_path.write_text(
                    content.replace(
                        "target_metadata = None",
                        "from accessdb.database.models import Base\n\n"
                        "target_metadata = Base.metadata",
                    ),
                    encoding="utf-8",
                )
                safe_logger(self.logger).log_operation(
                    "alembic_env_updated", {"env_path": str(env_path)}
                )
        except OSError as e:
            safe_logger(self.logger).log_error(e, {"operation": "update_alembic_env"})
            raise DatabaseError(f"Could not update Alembic environment: {e}") from e

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """
        Create tables if the database is empty, otherwise run migrations.

        A fresh database gets every table from the ORM models and is
        stamped at the head revision.
        """
        with self.engine.connect() as conn:
            table_names = inspect(conn).get_table_names()

        if not table_names:
            Base.metadata.create_all(bind=self.engine)
            try:
                command.stamp(self.alembic_cfg, "head")
            except Exception as e:
                safe_logger(self.logger).log_error(e, {"operation": "stamp_database"})
            safe_logger(self.logger).log_operation(
                "fresh_database_created",
                {"tables_created": len(Base.metadata.tables)},
            )
        else:
            self.upgrade_database()
            safe_logger(self.logger).log_operation(
                "existing_database_migrated", {"table_count": len(table_names)}
            )

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to the given Alembic revision.

        Args:
            revision: Target revision (default: 'head')
        """
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    @handle_db_errors
    def get_migration_status(self) -> Dict[str, Optional[str]]:
        """
        Current Alembic revision of the database.

        Returns:
            Dictionary with 'current_revision' and 'status'
            ('up_to_date' or 'needs_migration')
        """
        with self.engine.connect() as conn:
            current_rev = MigrationContext.configure(conn).get_current_revision()

        return {
            "current_revision": current_rev,
            "status": "up_to_date" if current_rev else "needs_migration",
        }

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()

    def __enter__(self) -> "AccessDB":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
