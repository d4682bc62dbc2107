from __future__ import annotations

from datetime import datetime, timezone

STATUS_PLACEHOLDER = "- Select Status -"
STATUS_OPTIONS = ["Available", "Checked Out", "Unavailable"]

# Fixed English names; calendar.month_name follows the process locale
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a backend ISO-8601 timestamp into an aware UTC datetime.

    Naive values are treated as UTC. Returns None for missing or malformed input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class Book:
    """A single book record stored in the hosted catalog table."""

    def __init__(self, title: str, author: str, genre: str, status: str,
                 id: int | str | None = None, created_at: str | None = None) -> None:
        self.id = id
        self.title = title.strip()
        self.author = author.strip()
        self.genre = genre.strip()
        self.status = status.strip()
        self.created_at = created_at

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.genre}, {self.status})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r})"

    @property
    def created_date(self) -> datetime | None:
        return parse_timestamp(self.created_at)

    def format_created_at(self) -> str:
        """Long date for display, e.g. 'March 5, 2024'."""
        created = self.created_date
        if created is None:
            return ""
        return f"{MONTH_NAMES[created.month - 1]} {created.day}, {created.year}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "status": self.status,
            "created_at": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        created_at = data.get("created_at")
        if created_at is not None and not isinstance(created_at, str):
            created_at = str(created_at)
        return Book(
            id=data.get("id"),
            title=data.get("title") or "",
            author=data.get("author") or "",
            genre=data.get("genre") or "",
            status=data.get("status") or "",
            created_at=created_at,
        )
