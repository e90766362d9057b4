#!/usr/bin/env python3
"""
cli_options.py
-------------------
Reusable Click option decorators for consistent CLI interfaces.

Usage:
    from accessdb.core.cli_options import category_option, limit_option

    @entries.command("list")
    @category_option
    @limit_option(default=50)
    def list_entries(category, limit):
        pass
"""
import click

from accessdb.database.models import AccessibilityType, EntryType


# ═══════════════════════════════════════════════════════════════════════════
# FILTER OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

category_option = click.option(
    "-c", "--category",
    type=click.Choice(EntryType.choices()),
    default=None,
    help="Restrict to one entry category",
)

accessibility_type_option = click.option(
    "-t", "--type", "accessibility_type",
    type=click.Choice(AccessibilityType.choices()),
    default=None,
    help="Restrict to one accessibility dimension",
)


def limit_option(default: int):
    """Maximum number of rows to show."""
    return click.option(
        "-n", "--limit",
        type=click.IntRange(min=1),
        default=default,
        show_default=True,
        help="Maximum number of results",
    )


# ═══════════════════════════════════════════════════════════════════════════
# ARGUMENTS
# ═══════════════════════════════════════════════════════════════════════════

entry_type_argument = click.argument(
    "entry_type", type=click.Choice(EntryType.choices())
)
