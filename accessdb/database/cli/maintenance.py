"""
Maintenance Commands
---------------------

Repair commands for the label bookkeeping.

Commands:
    - maintenance recount: Recompute usage counts from the link rows
    - maintenance prune: Remove links whose label or entry is gone
    - maintenance status: Show the Alembic revision of the database
"""
import click

from accessdb.core.exceptions import DatabaseError
from accessdb.core.logging_manager import handle_cli_error
from . import get_db


@click.group()
@click.pass_context
def maintenance(ctx: click.Context) -> None:
    """Database maintenance and repair."""
    pass


@maintenance.command("recount")
@click.pass_context
def recount(ctx):
    """Recompute tag and feature usage counts."""
    try:
        db = get_db(ctx)
        click.echo("🔢 Recounting usage...")

        with db.session_scope():
            drifted = {
                "tags": db.tags.recount_usage(),
                "features": db.features.recount_usage(),
            }

            total = 0
            for kind, labels in drifted.items():
                for label in labels:
                    click.echo(f"  • {kind}: {label.slug} -> {label.usage_count}")
                total += len(labels)

        if total == 0:
            click.echo("✅ All usage counts were correct")
        else:
            click.echo(f"\n✅ Corrected {total} usage counts")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "recount")


@maintenance.command("prune")
@click.confirmation_option(prompt="This will remove dangling tag and feature links. Continue?")
@click.pass_context
def prune(ctx):
    """Remove links pointing at deleted labels or entries."""
    try:
        db = get_db(ctx)
        click.echo("🧹 Pruning dangling links...")

        with db.session_scope():
            results = {
                "entry_tags": db.tags.prune_dangling(),
                "entry_features": db.features.prune_dangling(),
            }

        total_removed = 0
        for table, count in results.items():
            if count > 0:
                click.echo(f"  • {table}: {count} removed")
                total_removed += count

        if total_removed == 0:
            click.echo("  No dangling links found")
        else:
            click.echo(f"\nTotal removed: {total_removed}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "prune")


@maintenance.command("status")
@click.pass_context
def status(ctx):
    """Show the current schema revision."""
    try:
        db = get_db(ctx)
        info = db.get_migration_status()
        click.echo(f"📌 Revision: {info['current_revision'] or 'none'}")
        click.echo(f"   Status: {info['status']}")
    except DatabaseError as e:
        handle_cli_error(ctx, e, "status")
