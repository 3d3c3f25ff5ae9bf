# services/catalog-service/catalog/core/validation.py
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from catalog.core.errors import InvalidPublicationInput

MIN_RELEASE_YEAR = 1000
IDENTIFIER_DIGITS = 13

# Genre options offered by the create/edit forms. The API's category list is
# derived from stored data instead (see CatalogService.list_categories).
AVAILABLE_CATEGORIES = [
    "Sci-Fi",
    "Fantasy",
    "Mystery",
    "Horror",
    "Romance",
    "Thriller",
    "Biography",
    "History",
    "Self-Help",
    "Business",
    "Science",
    "Philosophy",
    "Poetry",
    "Drama",
    "Comedy",
    "Adventure",
    "Political Satire",
    "Non-Fiction",
    "Children",
    "Young Adult",
]

TITLE_REQUIRED = "Publication title cannot be empty."
WRITER_REQUIRED = "Please select a writer from the list."
CATEGORY_REQUIRED = "Literary category must be specified."
YEAR_REQUIRED = "Release year is mandatory."
IDENTIFIER_REQUIRED = "Publication identifier is required."
IDENTIFIER_FORMAT = "Identifier must contain exactly 13 digits (formatting characters will be removed)."

_SEPARATORS = re.compile(r"[-\s]")
_CANONICAL = re.compile(r"^[0-9]{13}$")


def current_year() -> int:
    return date.today().year


def year_range_message(max_year: Optional[int] = None) -> str:
    return f"Release year must be between {MIN_RELEASE_YEAR} and {max_year or current_year()}."


def canonicalize_identifier(raw: str) -> str:
    """Strip hyphens and whitespace: '978-0-441-01359-3' -> '9780441013593'."""
    return _SEPARATORS.sub("", raw or "")


def is_valid_identifier(raw: str) -> bool:
    return bool(_CANONICAL.match(canonicalize_identifier(raw)))


def check_title(title: Optional[str]) -> Optional[str]:
    if not (title or "").strip():
        return TITLE_REQUIRED
    return None


def check_release_year(year: Optional[int], *, max_year: Optional[int] = None) -> Optional[str]:
    if year is None:
        return YEAR_REQUIRED
    upper = max_year or current_year()
    if year < MIN_RELEASE_YEAR or year > upper:
        return year_range_message(upper)
    return None


def check_identifier(raw: Optional[str]) -> Optional[str]:
    if not (raw or "").strip():
        return IDENTIFIER_REQUIRED
    if not is_valid_identifier(raw or ""):
        return IDENTIFIER_FORMAT
    return None


def check_category(category: Optional[str]) -> Optional[str]:
    if not (category or "").strip():
        return CATEGORY_REQUIRED
    return None


def ensure_publication_fields(
    *,
    title: Optional[str] = None,
    category: Optional[str] = None,
    release_year: Optional[int] = None,
    identifier: Optional[str] = None,
    partial: bool = False,
) -> None:
    """
    Server-side repeat of the form gate. With `partial=True` (updates) only the
    supplied (non-None) fields are checked.
    """
    checks = (
        ("title", title, check_title),
        ("category", category, check_category),
        ("releaseYear", release_year, check_release_year),
        ("identifier", identifier, check_identifier),
    )
    for field, value, check in checks:
        if partial and value is None:
            continue
        message = check(value)
        if message:
            raise InvalidPublicationInput(field, message)
