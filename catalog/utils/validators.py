from typing import Dict, Optional

from catalog.book import STATUS_OPTIONS, STATUS_PLACEHOLDER

FORM_ERROR_MESSAGE = "Please fill in all the fields correctly"


class BookFormValidator:
    """Checks the create/edit form before anything is sent to the backend."""

    @staticmethod
    def is_filled(value: Optional[str]) -> bool:
        return value is not None and bool(str(value).strip())

    @staticmethod
    def is_valid_status(status: Optional[str]) -> bool:
        # The placeholder is never a real status
        if not BookFormValidator.is_filled(status):
            return False
        status = status.strip()
        return status != STATUS_PLACEHOLDER and status in STATUS_OPTIONS

    @staticmethod
    def validate(title: Optional[str], author: Optional[str], genre: Optional[str],
                 status: Optional[str]) -> Optional[str]:
        """Return the form error message, or None when the form can be submitted."""
        fields = (title, author, genre)
        if not all(BookFormValidator.is_filled(f) for f in fields):
            return FORM_ERROR_MESSAGE
        if not BookFormValidator.is_valid_status(status):
            return FORM_ERROR_MESSAGE
        return None

    @staticmethod
    def clean(title: Optional[str], author: Optional[str], genre: Optional[str],
              status: Optional[str]) -> Dict[str, str]:
        error = BookFormValidator.validate(title, author, genre, status)
        if error:
            raise ValueError(error)
        return {
            "title": title.strip(),
            "author": author.strip(),
            "genre": genre.strip(),
            "status": status.strip(),
        }
