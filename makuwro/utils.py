"""
Utility functions for the Makuwro command-line tool.
"""

import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

import click

from .models import Account, Content


class OutputFormat(Enum):
    """Output format options."""
    TABLE = "table"
    JSON = "json"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging for the CLI."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # urllib3 connection chatter is not useful even in verbose mode
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_success(message: str) -> None:
    click.echo(click.style("✓ ", fg="green") + message)


def print_error(message: str, details: Optional[str] = None) -> None:
    click.echo(click.style("✗ Error: ", fg="red") + message, err=True)
    if details:
        click.echo(f"  {details}", err=True)


def print_info(message: str) -> None:
    click.echo(click.style("ℹ ", fg="blue") + message)


def to_jsonable(value: Any) -> Any:
    """Convert models (and lists of them) into plain JSON-compatible data."""
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    return value


def print_json(data: Any) -> None:
    click.echo(json.dumps(to_jsonable(data), indent=2, ensure_ascii=False, default=str))


def truncate_string(value: Optional[str], max_length: int = 50) -> str:
    """Truncate a string, marking the cut with an ellipsis."""
    if not value:
        return "-"
    if len(value) <= max_length:
        return value
    return value[:max_length - 3] + "..."


def print_table(headers: Sequence[str], rows: List[Sequence[Any]]) -> None:
    """Print rows as an aligned plain-text table."""
    cells = [[str(c) if c is not None else "-" for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    click.echo("  ".join(click.style(h.ljust(widths[i]), bold=True) for i, h in enumerate(headers)))
    click.echo("  ".join("-" * w for w in widths))
    for row in cells:
        click.echo("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))


def format_account(account: Account, fmt: OutputFormat) -> None:
    if fmt == OutputFormat.JSON:
        print_json(account)
        return

    click.echo(f"\n{account.display_name or account.username} (@{account.username})")
    click.echo(f"  ID:      {account.id}")
    click.echo(f"  Banned:  {'Yes' if account.is_banned else 'No'}")
    if account.avatar_path:
        click.echo(f"  Avatar:  {account.avatar_path}")


def format_content_list(items: List[Content], fmt: OutputFormat) -> None:
    if fmt == OutputFormat.JSON:
        print_json(items)
        return

    if not items:
        print_info("Nothing found.")
        return

    headers = ["Slug", "Title", "Owner", "Description"]
    rows = [
        [
            item.slug,
            getattr(item, "title", None) or getattr(item, "name", None),
            item.owner.username if item.owner else None,
            truncate_string(item.description, 40),
        ]
        for item in items
    ]
    print_table(headers, rows)


def confirm_action(message: str, default: bool = False) -> bool:
    return click.confirm(message, default=default)
