"""
Browse & Search Commands
-------------------------

Read-only commands over the five entry categories.

Commands:
    - entries list: Newest entries
    - entries search: Search entries by name
    - entries show: Show one entry with its tags, features and reviews
    - entries stats: Number of entries per category
"""
import click

from accessdb.core.cli_options import category_option, limit_option
from accessdb.core.exceptions import DatabaseError, NotFoundError, ValidationError
from accessdb.core.logging_manager import handle_cli_error
from accessdb.database.models import EntryRef
from . import get_db


def _entry_line(item) -> str:
    entry = item.entry
    marker = "✅" if entry.complete else "⚪"
    return (
        f"  {marker} [{item.category.value}] {entry.name} "
        f"(★ {entry.overall_rating}) - {entry.id}"
    )


@click.group()
@click.pass_context
def entries(ctx: click.Context) -> None:
    """Browse and search entries."""
    pass


@entries.command("list")
@category_option
@limit_option(default=50)
@click.pass_context
def list_entries(ctx, category, limit):
    """List the newest entries."""
    try:
        db = get_db(ctx)
        items = db.queries.get_entries(category=category, limit=limit)

        if not items:
            click.echo("No entries found")
            return

        click.echo(f"\n📚 {len(items)} entries:")
        for item in items:
            click.echo(_entry_line(item))

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "list_entries", {"category": category})


@entries.command("search")
@click.argument("query")
@category_option
@click.pass_context
def search_entries(ctx, query, category):
    """Search entries by name."""
    try:
        db = get_db(ctx)
        items = db.queries.search_entries(query, category=category)

        if not items:
            click.echo(f"No entries match '{query}'")
            return

        click.echo(f"\n🔍 {len(items)} results for '{query}':")
        for item in items:
            click.echo(_entry_line(item))

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "search_entries", {"query": query})


@entries.command("show")
@click.argument("entry_id")
@click.pass_context
def show_entry(ctx, entry_id):
    """Show an entry with its tags, features and reviews."""
    try:
        db = get_db(ctx)
        item = db.queries.get_entry(entry_id)
        if item is None:
            raise NotFoundError(f"Entry not found with id: {entry_id}")

        entry = item.entry
        ref = EntryRef.for_entry(entry)

        click.echo(f"\n📄 {entry.name} ({item.category.display_name})")
        click.echo("=" * 50)
        if entry.description:
            click.echo(entry.description)
        click.echo(f"  Overall rating: {entry.overall_rating}")
        for dimension in ("visual", "auditory", "motor", "cognitive"):
            value = getattr(entry, f"{dimension}_accessibility")
            click.echo(f"  {dimension.title()}: {value if value is not None else '?'}")
        if entry.website:
            click.echo(f"  Website: {entry.website}")
        click.echo(f"  Complete: {'yes' if entry.complete else 'no'}")

        with db.session_scope():
            tag_names = [tag.name for tag in db.tags.get_for_entry(ref)]
            rated = db.features.get_for_entry(ref)
            reviews = db.reviews.get_for_entry(ref)
            comment_count = db.comments.count_for_entry(ref)

            if tag_names:
                click.echo(f"\n🏷️  Tags: {', '.join(tag_names)}")
            if rated:
                click.echo("\n♿ Features:")
                for item_feature in rated:
                    notes = f" - {item_feature.notes}" if item_feature.notes else ""
                    click.echo(
                        f"  • {item_feature.feature.name}: {item_feature.rating}/5{notes}"
                    )
            if reviews:
                average = sum(review.rating for review in reviews) / len(reviews)
                click.echo(f"\n⭐ {len(reviews)} reviews (average {average:.1f})")
            click.echo(f"💬 {comment_count} comments")

    except (DatabaseError, NotFoundError) as e:
        handle_cli_error(ctx, e, "show_entry", {"entry_id": entry_id})


@entries.command("stats")
@click.pass_context
def stats(ctx):
    """Show the number of entries per category."""
    try:
        db = get_db(ctx)
        counts = db.queries.count_entries_per_category()

        click.echo("\n📊 Entries per category:")
        for entry_type, count in counts.items():
            click.echo(f"  • {entry_type.display_name}: {count}")
        click.echo(f"\nTotal: {sum(counts.values())}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats")
