"""
Label Commands
---------------

Manage tags and accessibility features.

Both groups offer the same commands:
    - list: All labels, ordered by name
    - popular: Most used labels
    - search: Labels whose name contains a query
    - create: Create a label (or report the existing one with the same slug)
    - rename: Rename a label
    - delete: Delete a label and every link to it
    - for: Labels linked to one entry
"""
import click

from accessdb.core.cli_options import (
    accessibility_type_option,
    entry_type_argument,
    limit_option,
)
from accessdb.core.exceptions import DatabaseError, NotFoundError, ValidationError
from accessdb.core.logging_manager import handle_cli_error
from accessdb.database.models import AccessibilityType, EntryRef
from . import get_db

CLI_ERRORS = (DatabaseError, NotFoundError, ValidationError)


def _label_line(label) -> str:
    return (
        f"  • {label.name} [{label.slug}] "
        f"({label.accessibility_type.value}, used {label.usage_count}x) - #{label.id}"
    )


def _manager(db, kind: str):
    return db.tags if kind == "tag" else db.features


def _build_group(kind: str) -> click.Group:
    """Build the command group for one label kind ('tag' or 'feature')."""
    plural = f"{kind}s"

    @click.group(name=plural, help=f"Manage {plural}.")
    @click.pass_context
    def group(ctx: click.Context) -> None:
        pass

    @group.command("list", help=f"List {plural} by name.")
    @accessibility_type_option
    @limit_option(default=100)
    @click.pass_context
    def list_labels(ctx, accessibility_type, limit):
        try:
            db = get_db(ctx)
            with db.session_scope():
                labels = _manager(db, kind).get_all(accessibility_type, limit=limit)
                if not labels:
                    click.echo(f"No {plural} found")
                    return
                click.echo(f"\n🏷️  {len(labels)} {plural}:")
                for label in labels:
                    click.echo(_label_line(label))
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"list_{plural}")

    @group.command("popular", help=f"Show the most used {plural}.")
    @accessibility_type_option
    @limit_option(default=20)
    @click.pass_context
    def popular(ctx, accessibility_type, limit):
        try:
            db = get_db(ctx)
            with db.session_scope():
                labels = _manager(db, kind).get_popular(accessibility_type, limit=limit)
                if not labels:
                    click.echo(f"No {plural} found")
                    return
                click.echo(f"\n🔥 Popular {plural}:")
                for label in labels:
                    click.echo(_label_line(label))
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"popular_{plural}")

    @group.command("search", help=f"Search {plural} by name.")
    @click.argument("query")
    @accessibility_type_option
    @click.pass_context
    def search(ctx, query, accessibility_type):
        try:
            db = get_db(ctx)
            with db.session_scope():
                labels = _manager(db, kind).search(query, accessibility_type)
                if not labels:
                    click.echo(f"No {plural} match '{query}'")
                    return
                for label in labels:
                    click.echo(_label_line(label))
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"search_{plural}", {"query": query})

    @group.command("create", help=f"Create a {kind}.")
    @click.argument("name")
    @click.option(
        "-t", "--type", "accessibility_type",
        type=click.Choice(AccessibilityType.choices()),
        required=True,
        help="Accessibility dimension",
    )
    @click.option("-d", "--description", default=None, help="Optional description")
    @click.pass_context
    def create(ctx, name, accessibility_type, description):
        try:
            db = get_db(ctx)
            with db.session_scope():
                manager = _manager(db, kind)
                label_id = manager.create(
                    {
                        "name": name,
                        "accessibility_type": accessibility_type,
                        "description": description,
                    }
                )
                label = manager.get(label_id)
                click.echo(f"✅ {kind.title()} '{label.name}' ready (#{label.id}, {label.slug})")
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"create_{kind}", {"name": name})

    @group.command("rename", help=f"Rename a {kind}.")
    @click.argument("label_id", type=int)
    @click.argument("name")
    @click.pass_context
    def rename(ctx, label_id, name):
        try:
            db = get_db(ctx)
            with db.session_scope():
                manager = _manager(db, kind)
                manager.update(label_id, {"name": name})
                label = manager.get(label_id)
                click.echo(f"✅ Renamed #{label_id} to '{label.name}' ({label.slug})")
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"rename_{kind}", {"label_id": label_id})

    @group.command("delete", help=f"Delete a {kind} and all its entry links.")
    @click.argument("label_id", type=int)
    @click.confirmation_option(prompt=f"This will unlink the {kind} from every entry. Continue?")
    @click.pass_context
    def delete(ctx, label_id):
        try:
            db = get_db(ctx)
            with db.session_scope():
                removed = _manager(db, kind).delete(label_id)
            click.echo(f"🗑️  Deleted {kind} #{label_id} ({removed} links removed)")
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"delete_{kind}", {"label_id": label_id})

    @group.command("for", help=f"Show the {plural} linked to an entry.")
    @entry_type_argument
    @click.argument("entry_id")
    @click.pass_context
    def for_entry(ctx, entry_type, entry_id):
        try:
            db = get_db(ctx)
            ref = EntryRef.of(entry_type, entry_id)
            with db.session_scope():
                linked = _manager(db, kind).get_for_entry(ref)
                if not linked:
                    click.echo(f"No {plural} linked to {ref}")
                    return
                click.echo(f"\n🏷️  {plural.title()} of {ref}:")
                for item in linked:
                    if kind == "feature":
                        click.echo(f"{_label_line(item.feature)} rated {item.rating}/5")
                    else:
                        click.echo(_label_line(item))
        except CLI_ERRORS as e:
            handle_cli_error(ctx, e, f"{plural}_for_entry", {"entry_id": entry_id})

    return group


tags = _build_group("tag")
features = _build_group("feature")
