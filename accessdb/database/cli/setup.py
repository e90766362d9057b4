"""
Setup & Initialization Commands
--------------------------------

Database and Alembic initialization.

Commands:
    - init: Initialize Alembic and the database schema
"""
import click

from accessdb.core.exceptions import DatabaseError
from accessdb.core.logging_manager import handle_cli_error
from . import get_db


@click.command()
@click.option("--alembic-only", is_flag=True, help="Initialize Alembic only")
@click.option("--db-only", is_flag=True, help="Initialize database only")
@click.pass_context
def init(ctx, alembic_only, db_only):
    """Initialize database and Alembic (complete setup)."""
    try:
        db = get_db(ctx)

        if alembic_only:
            click.echo("📁 Initializing Alembic...")
            db.init_alembic()
            click.echo("✅ Alembic initialized!")
        elif db_only:
            click.echo("🗄️  Initializing database schema...")
            db.initialize_schema()
            click.echo("✅ Database initialized!")
        else:
            click.echo("🚀 Initializing accessdb database...")
            click.echo("📁 Initializing Alembic...")
            db.init_alembic()
            click.echo("🗄️  Initializing database schema...")
            db.initialize_schema()
            click.echo("✅ Complete setup finished!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")
