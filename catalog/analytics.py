"""Dashboard aggregation over an already-fetched list of books.

Results use the Chart.js data layout (``labels`` plus ``datasets``) so the
front end can hand them to a chart unchanged.
"""

from collections import Counter
from typing import Any, Dict, Iterable, List

from catalog.book import MONTH_NAMES, STATUS_OPTIONS, Book

GENRE_COLORS = ["#e74c3c", "#2980b9", "#f1c40f", "#1abc9c", "#8e44ad", "#e67e22"]
STATUS_COLORS = {
    "Available": "#2ecc71",
    "Checked Out": "#f39c12",
    "Unavailable": "#95a5a6",
}
OTHER_STATUS_COLOR = "#34495e"


def count_by_genre(books: Iterable[Book]) -> Dict[str, int]:
    return dict(Counter(book.genre for book in books))


def count_by_author(books: Iterable[Book]) -> Dict[str, int]:
    return dict(Counter(book.author for book in books))


def count_by_status(books: Iterable[Book]) -> Dict[str, int]:
    """Counts for every known status (zeros included), then any unexpected values."""
    counts = {status: 0 for status in STATUS_OPTIONS}
    for book in books:
        counts[book.status] = counts.get(book.status, 0) + 1
    return counts


def count_by_month(books: Iterable[Book]) -> List[int]:
    """Books per calendar month of creation, January first. Years are merged."""
    per_month = [0] * 12
    for book in books:
        created = book.created_date
        if created is None:
            continue
        per_month[created.month - 1] += 1
    return per_month


def _palette(size: int) -> List[str]:
    return [GENRE_COLORS[i % len(GENRE_COLORS)] for i in range(size)]


def books_per_month_chart(books: Iterable[Book]) -> Dict[str, Any]:
    return {
        "labels": list(MONTH_NAMES),
        "datasets": [
            {
                "label": "Books Read",
                "data": count_by_month(books),
                "backgroundColor": "rgba(75, 192, 192, 0.6)",
                "borderColor": "rgba(75, 192, 192, 1)",
                "borderWidth": 1,
            }
        ],
    }


def genre_distribution_chart(books: Iterable[Book]) -> Dict[str, Any]:
    counts = count_by_genre(books)
    return {
        "labels": list(counts.keys()),
        "datasets": [
            {
                "data": list(counts.values()),
                "backgroundColor": _palette(len(counts)),
            }
        ],
    }


def author_counts_chart(books: Iterable[Book]) -> Dict[str, Any]:
    counts = count_by_author(books)
    return {
        "labels": list(counts.keys()),
        "datasets": [
            {
                "label": "Books by Author",
                "data": list(counts.values()),
                "backgroundColor": "rgba(153, 102, 255, 0.6)",
                "borderColor": "rgba(153, 102, 255, 1)",
                "borderWidth": 1,
            }
        ],
    }


def status_breakdown_chart(books: Iterable[Book]) -> Dict[str, Any]:
    counts = count_by_status(books)
    return {
        "labels": list(counts.keys()),
        "datasets": [
            {
                "data": list(counts.values()),
                "backgroundColor": [STATUS_COLORS.get(s, OTHER_STATUS_COLOR) for s in counts],
            }
        ],
    }


def build_dashboard(books: Iterable[Book]) -> Dict[str, Dict[str, Any]]:
    books = list(books)
    return {
        "books_per_month": books_per_month_chart(books),
        "genre_distribution": genre_distribution_chart(books),
        "author_counts": author_counts_chart(books),
        "status_breakdown": status_breakdown_chart(books),
    }
