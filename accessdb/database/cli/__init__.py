#!/usr/bin/env python3
"""
accessdb Database Management CLI
--------------------------------

Command-line interface for the accessibility database.

This module provides the main CLI group and shared context setup
for all commands.

Command Structure:
    - Setup & Initialization (init)
    - Browse & Search (entries)
    - Labels (tags, features)
    - Maintenance (maintenance)

Usage:
    # Get general help
    accessdb --help

    # Get help for a specific command group
    accessdb tags --help

    # Get help for a specific command
    accessdb entries search --help
"""
import logging
from pathlib import Path

import click

from accessdb.core.paths import ALEMBIC_DIR, DB_PATH, LOG_DIR
from accessdb.database.manager import AccessDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--alembic-dir",
    type=click.Path(),
    default=str(ALEMBIC_DIR),
    help="Path to Alembic directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, alembic_dir, log_dir, verbose):
    """accessdb accessibility database CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["alembic_dir"] = Path(alembic_dir)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose


def get_db(ctx) -> AccessDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = AccessDB(
            db_path=ctx.obj["db_path"],
            alembic_dir=ctx.obj["alembic_dir"],
            log_dir=ctx.obj["log_dir"],
        )
        ctx.obj["logger"] = ctx.obj["db"].logger
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init  # noqa: E402
from .entries import entries  # noqa: E402
from .labels import features, tags  # noqa: E402
from .maintenance import maintenance  # noqa: E402

cli.add_command(init)
cli.add_command(entries)
cli.add_command(tags)
cli.add_command(features)
cli.add_command(maintenance)


if __name__ == "__main__":
    cli(obj={})
