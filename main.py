import asyncio
import subprocess
import sys
import webbrowser
from typing import Optional

import typer
from rich.console import Console

import config
from catalog.library import open_library
from catalog.services.supabase_service import SupabaseError
from catalog.views import BookFormView, DashboardView, HomeView
from catalog.utils.ui_helpers import (
    print_book_detail,
    print_dashboard_result,
    print_list_result,
    set_output_mode,
)

APP_NAME = "Library CLI"

console = Console()

app = typer.Typer(help="Manage the library catalog from the terminal.")


def _run(coro):
    """Run one screen action; missing configuration ends the command."""
    try:
        return asyncio.run(coro)
    except config.ConfigurationError as e:
        print(f"Configuration error: {e}")
        raise typer.Exit(code=1)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    config.setup_logging("WARNING")
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list():
    """List every book in the catalog."""

    async def _list():
        async with open_library(config.settings) as lib:
            view = HomeView(lib)
            await view.load()
            return view

    view = _run(_list())
    if view.fetch_error:
        print(view.fetch_error)
        raise typer.Exit(code=1)
    print_list_result(view.books)


@app.command("show")
def cli_show(book_id: str):
    """Show the details of one book."""

    async def _show():
        async with open_library(config.settings) as lib:
            return await lib.get_book(book_id)

    try:
        book = _run(_show())
    except SupabaseError:
        print("Could not fetch the book!")
        raise typer.Exit(code=1)
    if not book:
        print(f"Book {book_id} not found.")
        raise typer.Exit(code=1)
    print_book_detail(book)


@app.command("add")
def cli_add(
    title: str = typer.Option("", "--title", "-t", help="Book title"),
    author: str = typer.Option("", "--author", "-a", help="Author name"),
    genre: str = typer.Option("", "--genre", "-g", help="Genre"),
    status: str = typer.Option("", "--status", "-s", help="Available | Checked Out | Unavailable"),
):
    """Add a book to the catalog."""

    async def _add():
        async with open_library(config.settings) as lib:
            view = BookFormView(lib)
            view.fill(title, author, genre, status or None)
            await view.submit()
            return view

    view = _run(_add())
    if view.form_error:
        print(view.form_error)
        raise typer.Exit(code=1)
    print(view.notice)
    print(f"{view.saved.id} - {view.saved.title} by {view.saved.author}")


@app.command("update")
def cli_update(
    book_id: str,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
    genre: Optional[str] = typer.Option(None, "--genre", "-g", help="New genre"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="New status"),
):
    """Edit a book. Fields not given keep their stored values."""

    async def _update():
        async with open_library(config.settings) as lib:
            view = BookFormView(lib, book_id=book_id)
            if not await view.load():
                return None
            view.fill(title, author, genre, status)
            await view.submit()
            return view

    view = _run(_update())
    if view is None:
        print(f"Book {book_id} not found.")
        raise typer.Exit(code=1)
    if view.form_error:
        print(view.form_error)
        raise typer.Exit(code=1)
    print(view.notice)
    print(f"{view.saved.id} - {view.saved.title} by {view.saved.author}")


@app.command("remove")
def cli_remove(book_id: str):
    """Delete a book by id."""

    async def _remove():
        async with open_library(config.settings) as lib:
            view = HomeView(lib)
            deleted = await view.delete(book_id)
            return view, deleted

    view, deleted = _run(_remove())
    if view.delete_error:
        print(view.delete_error)
        raise typer.Exit(code=1)
    if not deleted:
        print(f"Book {book_id} not found.")
        raise typer.Exit(code=1)
    print(f"Book {book_id} has been removed.")


@app.command("dashboard")
def cli_dashboard():
    """Show books per month, genre, author and status."""

    async def _dashboard():
        async with open_library(config.settings) as lib:
            view = DashboardView(lib)
            await view.load()
            return view

    view = _run(_dashboard())
    if view.error:
        print(view.error)
        raise typer.Exit(code=1)
    print_dashboard_result(view.charts)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open the web UI in a browser"),
):
    """Start the web UI with Uvicorn."""
    try:
        config.settings.require_backend()
    except config.ConfigurationError as e:
        print(f"Configuration error: {e}")
        raise typer.Exit(code=1)

    host = host or config.settings.api_host
    port = int(port or config.settings.api_port)
    url = f"http://{host}:{port}"
    print(f"Starting web UI on {url}")
    if open_browser:
        webbrowser.open(url)
    try:
        subprocess.run(
            [sys.executable, "-m", "uvicorn", "api:app", "--host", host, "--port", str(port)],
            check=False,
        )
    except KeyboardInterrupt:
        console.print("[green]Server stopped.[/]")


if __name__ == "__main__":
    app()
