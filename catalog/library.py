import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from catalog.analytics import count_by_author, count_by_genre, count_by_status
from catalog.book import Book
from catalog.services.supabase_service import SupabaseClient, SupabaseError, SupabaseTable
from catalog.utils.validators import BookFormValidator

logger = logging.getLogger(__name__)


class Library:
    """Catalog operations on the hosted books table.

    Holds no state of its own: every call goes to the backend and the result is
    returned as-is, so each screen always works on fresh data.
    """

    def __init__(self, table: SupabaseTable) -> None:
        self.table = table

    # ------------------------- Core operations ------------------------- #
    async def list_books(self) -> List[Book]:
        try:
            rows = await self.table.select()
        except SupabaseError as e:
            logger.error("Error while fetching books: %s", e.message)
            raise
        return [Book.from_dict(row) for row in rows]

    async def get_book(self, book_id: Any) -> Optional[Book]:
        """Fetch one record. Returns None for an unknown or malformed id."""
        try:
            row = await self.table.select_one(book_id)
        except SupabaseError as e:
            if e.is_invalid_input:
                return None
            logger.error("Error while fetching book %s: %s", book_id, e.message)
            raise
        return Book.from_dict(row) if row else None

    async def add_book(self, title: str, author: str, genre: str, status: str) -> Book:
        """Insert a new record. Raises ValueError when the form is incomplete."""
        payload = BookFormValidator.clean(title, author, genre, status)
        try:
            rows = await self.table.insert([payload])
        except SupabaseError as e:
            logger.error("Error while inserting data: %s", e.message)
            raise
        if not rows:
            raise SupabaseError("Insert returned no rows")
        book = Book.from_dict(rows[0])
        logger.info("Book was added successfully: %r", book)
        return book

    async def update_book(self, book_id: Any, title: str, author: str, genre: str,
                          status: str) -> Optional[Book]:
        """Overwrite all editable fields. Returns None when no row has that id."""
        payload = BookFormValidator.clean(title, author, genre, status)
        try:
            rows = await self.table.update(payload, id=book_id)
        except SupabaseError as e:
            if e.is_invalid_input:
                return None
            logger.error("Error while updating data: %s", e.message)
            raise
        if not rows:
            return None
        book = Book.from_dict(rows[0])
        logger.info("Book was updated successfully: %r", book)
        return book

    async def remove_book(self, book_id: Any) -> bool:
        try:
            rows = await self.table.delete(id=book_id)
        except SupabaseError as e:
            if e.is_invalid_input:
                return False
            logger.error("Error while deleting the book: %s", e.message)
            raise
        if rows:
            logger.info("Deleted book: %s", book_id)
        return bool(rows)

    # ------------------------- Statistics ------------------------- #
    async def get_statistics(self) -> Dict[str, Any]:
        books = await self.list_books()
        return {
            "total_books": len(books),
            "unique_authors": len(count_by_author(books)),
            "unique_genres": len(count_by_genre(books)),
            "status_counts": count_by_status(books),
        }


@asynccontextmanager
async def open_library(settings) -> AsyncIterator[Library]:
    """Connect to the configured backend for the duration of the block."""
    client = SupabaseClient.from_settings(settings)
    try:
        yield Library(client.table(settings.supabase_table))
    finally:
        await client.close()
