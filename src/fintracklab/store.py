"""Load and save whole books as JSON or YAML documents."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date
from pathlib import Path

import yaml

from fintracklab.book import FinanceBook
from fintracklab.config import TrackerSettings, read_mapping
from fintracklab.core.errors import ConfigError

__all__ = ["load_book", "save_book"]


def load_book(
    path: str | Path,
    settings: TrackerSettings | None = None,
    today: date | Callable[[], date] | None = None,
) -> FinanceBook:
    """
    Read a book document.

    The document holds the camelCase collections ``transactions``,
    ``allocations``, ``recurringTransactions``, ``receivables``, ``reminders``
    and an optional ``filter``; missing collections are empty.
    """
    mapping, _ = read_mapping(path)
    return FinanceBook.from_dict(mapping, settings=settings, today=today)


def save_book(book: FinanceBook, path: str | Path) -> None:
    """Write a book document; the format follows the file suffix (JSON by default)."""
    path = Path(path)
    data = book.to_dict()
    fmt = path.suffix.lstrip(".").lower()
    if fmt in {"yaml", "yml"}:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    elif fmt in {"json", ""}:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    else:
        raise ConfigError(f"Unsupported book format '{fmt}' for {path}")
    path.write_text(text, encoding="utf-8")
