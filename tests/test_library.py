import pytest

from catalog.book import STATUS_PLACEHOLDER
from catalog.library import Library, open_library
from catalog.services.supabase_service import SupabaseError
from catalog.utils.validators import FORM_ERROR_MESSAGE
from config import ConfigurationError, Settings


async def test_list_books(lib):
    books = await lib.list_books()
    assert [b.title for b in books] == ["Dune", "Emma", "Persuasion"]


async def test_get_book(lib):
    book = await lib.get_book("2")
    assert book.title == "Emma"
    assert await lib.get_book(999) is None


async def test_add_book_inserts_only_form_fields(lib, books_table):
    book = await lib.add_book(" Neuromancer ", "William Gibson", "Science Fiction", "Available")

    assert book.id == 4
    assert book.title == "Neuromancer"
    assert book.created_at is not None
    assert books_table.calls[-1] == ("insert", [{
        "title": "Neuromancer",
        "author": "William Gibson",
        "genre": "Science Fiction",
        "status": "Available",
    }])


async def test_add_book_rejects_incomplete_form_without_backend_call(lib, books_table):
    with pytest.raises(ValueError, match=FORM_ERROR_MESSAGE):
        await lib.add_book("Neuromancer", "William Gibson", "Science Fiction", STATUS_PLACEHOLDER)
    assert books_table.calls == []


async def test_update_book_overwrites_all_fields(lib, books_table):
    book = await lib.update_book(1, "Dune Messiah", "Frank Herbert", "Sci-Fi", "Checked Out")
    assert book.title == "Dune Messiah"
    assert book.genre == "Sci-Fi"
    assert book.status == "Checked Out"
    assert books_table.calls[-1][0] == "update"
    assert set(books_table.calls[-1][2]) == {"title", "author", "genre", "status"}


async def test_update_book_not_found(lib):
    assert await lib.update_book(999, "T", "A", "G", "Available") is None


async def test_remove_book(lib):
    assert await lib.remove_book(1) is True
    assert await lib.remove_book(1) is False
    assert [b.id for b in await lib.list_books()] == [2, 3]


async def test_get_statistics(lib):
    stats = await lib.get_statistics()
    assert stats == {
        "total_books": 3,
        "unique_authors": 2,
        "unique_genres": 2,
        "status_counts": {"Available": 2, "Checked Out": 1, "Unavailable": 0},
    }


async def test_backend_errors_are_logged_and_reraised(failing_lib, caplog):
    with pytest.raises(SupabaseError):
        await failing_lib.list_books()
    assert "permission denied for table books" in caplog.text

    with pytest.raises(SupabaseError):
        await failing_lib.add_book("Dune", "Frank Herbert", "Science Fiction", "Available")
    assert "Error while inserting data" in caplog.text


async def test_insert_without_returned_rows_is_an_error(books_table):
    async def insert(rows):
        return []

    books_table.insert = insert
    with pytest.raises(SupabaseError):
        await Library(books_table).add_book("Dune", "Frank Herbert", "Science Fiction", "Available")


async def test_open_library_requires_configuration():
    with pytest.raises(ConfigurationError):
        async with open_library(Settings()):
            pass


async def test_malformed_id_is_not_found(books_table, caplog):
    error = SupabaseError('invalid input syntax for type bigint: "abc"', status_code=400, code="22P02")

    async def reject(*args, **kwargs):
        raise error

    books_table.select_one = reject
    books_table.update = reject
    books_table.delete = reject
    library = Library(books_table)

    assert await library.get_book("abc") is None
    assert await library.update_book("abc", "T", "A", "G", "Available") is None
    assert await library.remove_book("abc") is False
    assert "invalid input syntax" not in caplog.text
