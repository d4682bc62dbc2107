"""Screen state for the list, form and dashboard views.

Each view keeps only loading/error flags and the data of its last fetch. Views
never reuse data across screens; loading a view always hits the backend.
"""

import logging
from typing import Any, Dict, List, Optional

from catalog.analytics import build_dashboard
from catalog.book import STATUS_PLACEHOLDER, Book
from catalog.library import Library
from catalog.services.supabase_service import SupabaseError, SupabaseRequestError
from catalog.utils.validators import BookFormValidator

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Could not fetch the books!"
FETCH_EXCEPTION_MESSAGE = "An error occurred while fetching the books!"
DELETE_ERROR_MESSAGE = "Error while deleting the book. Please try again."
EMPTY_LIST_MESSAGE = "No books found."
LOADING_MESSAGE = "Loading..."


class HomeView:
    """The book list screen."""

    def __init__(self, library: Library) -> None:
        self.library = library
        self.books: Optional[List[Book]] = None
        self.fetch_error: Optional[str] = None
        self.delete_error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.books is None and self.fetch_error is None

    @property
    def empty(self) -> bool:
        return self.books is not None and not self.books

    async def load(self) -> None:
        try:
            books = await self.library.list_books()
        except SupabaseRequestError as e:
            logger.error("Fetch error: %s", e.message)
            self.books = None
            self.fetch_error = FETCH_EXCEPTION_MESSAGE
            return
        except SupabaseError as e:
            logger.error("Supabase error: %s", e.message)
            self.books = None
            self.fetch_error = FETCH_ERROR_MESSAGE
            return
        self.books = books
        self.fetch_error = None

    async def delete(self, book_id: Any) -> bool:
        """Delete on the backend, then drop exactly that id from the displayed list."""
        try:
            deleted = await self.library.remove_book(book_id)
        except SupabaseError as e:
            logger.error("Deleting failed: %s", e.message)
            self.delete_error = DELETE_ERROR_MESSAGE
            return False

        self.delete_error = None
        # A missing row is gone either way, so it leaves the list too
        if self.books is not None:
            key = str(book_id)
            self.books = [b for b in self.books if str(b.id) != key]
        return deleted


class BookFormView:
    """The create form, or the edit form when ``book_id`` is given."""

    def __init__(self, library: Library, book_id: Any = None) -> None:
        self.library = library
        self.book_id = book_id
        self.title = ""
        self.author = ""
        self.genre = ""
        self.status = STATUS_PLACEHOLDER
        self.form_error: Optional[str] = None
        self.notice: Optional[str] = None
        self.saved: Optional[Book] = None

    @property
    def is_edit(self) -> bool:
        return self.book_id is not None

    def fill(self, title: Optional[str] = None, author: Optional[str] = None,
             genre: Optional[str] = None, status: Optional[str] = None) -> None:
        """Overwrite the given fields, leaving the others as they are."""
        if title is not None:
            self.title = title
        if author is not None:
            self.author = author
        if genre is not None:
            self.genre = genre
        if status is not None:
            self.status = status

    async def load(self) -> bool:
        """Prefill the edit form. False means the caller should go back to the list."""
        if not self.is_edit:
            return True
        try:
            book = await self.library.get_book(self.book_id)
        except SupabaseError:
            return False
        if book is None:
            return False
        self.fill(book.title, book.author, book.genre, book.status)
        return True

    async def submit(self) -> Optional[Book]:
        error = BookFormValidator.validate(self.title, self.author, self.genre, self.status)
        if error:
            self.form_error = error
            return None

        action = "updating" if self.is_edit else "adding"
        try:
            if self.is_edit:
                book = await self.library.update_book(self.book_id, self.title, self.author, self.genre, self.status)
            else:
                book = await self.library.add_book(self.title, self.author, self.genre, self.status)
        except SupabaseError:
            book = None

        if book is None:
            self.form_error = f"Error while {action} the book. Please try again."
            self.notice = None
            return None

        self.form_error = None
        self.notice = "Book updated successfully!" if self.is_edit else "Book added successfully!"
        self.saved = book
        return book


class DashboardView:
    """The aggregate charts screen."""

    def __init__(self, library: Library) -> None:
        self.library = library
        self.books: List[Book] = []
        self.error: Optional[str] = None

    async def load(self) -> None:
        try:
            self.books = await self.library.list_books()
            self.error = None
        except SupabaseError as e:
            logger.error("Error while fetching books: %s", e.message)
            self.books = []
            self.error = FETCH_ERROR_MESSAGE

    @property
    def charts(self) -> Dict[str, Dict[str, Any]]:
        return build_dashboard(self.books)
