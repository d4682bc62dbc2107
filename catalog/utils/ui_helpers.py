import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_list_result(books: List[Any]) -> None:
    """Print the book list in the current output mode.
    - plain: 'ID - Title by Author [Genre] (Status)' lines, or 'No books found.'
    - json: JSON array of book dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books found.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Genre", style="white")
        table.add_column("Status", style="green")
        table.add_column("Created at", style="dim")
        for b in books:
            table.add_row(str(b.id), b.title, b.author, b.genre, b.status, b.format_created_at())
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} [{b.genre}] ({b.status})")


def print_book_detail(book: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Author:[/] {book.author}\n"
            f"[bold]Genre:[/] {book.genre}\n"
            f"[bold]Status:[/] {book.status}\n"
            f"[bold]Created at:[/] {book.format_created_at()}"
        )
        _console.print(Panel.fit(content, title=f"📖 {book.title}", border_style="blue"))
    else:
        print(f"ID: {book.id}")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Genre: {book.genre}")
        print(f"Status: {book.status}")
        print(f"Created at: {book.format_created_at()}")


def _counts_table(title: str, label: str, counts: Dict[str, int]) -> Table:
    table = Table(title=title, header_style="bold cyan")
    table.add_column(label, style="white")
    table.add_column("Books", style="magenta", justify="right")
    table.add_column("", style="green")
    for key, value in counts.items():
        table.add_row(key, str(value), "█" * value)
    return table


def print_dashboard_result(charts: Dict[str, Dict[str, Any]]) -> None:
    """Print the dashboard aggregates in the current output mode."""
    mode = get_output_mode()

    sections = [
        ("Books Read per Month", "Month", "books_per_month"),
        ("Genre Distribution", "Genre", "genre_distribution"),
        ("Books by Author", "Author", "author_counts"),
        ("Status Breakdown", "Status", "status_breakdown"),
    ]
    counts = {}
    for _, _, key in sections:
        chart = charts.get(key) or {"labels": [], "datasets": [{"data": []}]}
        data = chart["datasets"][0]["data"] if chart.get("datasets") else []
        counts[key] = dict(zip(chart.get("labels", []), data))

    if mode == "json":
        print(json.dumps(counts, ensure_ascii=False))
        return

    if mode == "rich":
        for title, label, key in sections:
            _console.print(_counts_table(f"📊 {title}", label, counts[key]))
        return

    for title, _, key in sections:
        print(title)
        if not counts[key]:
            print("  (none)")
        for name, value in counts[key].items():
            # Months with no books are noise in plain output
            if key == "books_per_month" and value == 0:
                continue
            print(f"  {name}: {value}")
