#!/usr/bin/env python3
"""
Seed the debate store with debates from a JSON file.

The file holds a list of debate objects in the same camelCase shape that
POST /api/debates accepts.

Usage:
    python scripts/seed_debates.py
    python scripts/seed_debates.py --file scripts/sample_debates.json --database-url sqlite:///./data/debates.db
"""

import argparse
import json
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress

from debaterag.store import DebateCreate, DebateStore

console = Console()

DEFAULT_FILE = Path(__file__).with_name("sample_debates.json")


def seed_debates(store: DebateStore, file_path: Path) -> int:
    """
    Insert every debate in file_path into the store.

    Args:
        store: Target store (schema must exist)
        file_path: JSON file with a list of debates

    Returns:
        Number of debates inserted
    """
    raw = json.loads(file_path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{file_path} must contain a JSON list of debates")

    debates = [DebateCreate.model_validate(item) for item in raw]

    with Progress() as progress:
        task = progress.add_task("Seeding...", total=len(debates))
        for debate in debates:
            store.create(debate)
            progress.advance(task)

    return len(debates)


def main():
    from debaterag.config import settings

    parser = argparse.ArgumentParser(
        description="Seed the debate store from a JSON file"
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=DEFAULT_FILE,
        help=f"JSON file with debates (default: {DEFAULT_FILE.name})",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=settings.database_url,
        help="SQLAlchemy database URL (default: DATABASE_URL)",
    )

    args = parser.parse_args()

    if args.database_url.startswith("sqlite:///"):
        Path(args.database_url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)

    store = DebateStore.from_url(args.database_url)
    store.init_schema()

    console.print(f"[blue]Seeding debates from {args.file}...[/blue]")
    try:
        count = seed_debates(store, args.file)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid debate file: {e}[/red]")
        raise SystemExit(1)

    console.print(f"[green]✓ Inserted {count} debates into {args.database_url}[/green]")


if __name__ == "__main__":
    main()
