# services/catalog-service/catalog/pages/forms.py
from __future__ import annotations

import re
from typing import Dict, Optional

from pydantic import BaseModel

from ..core.validation import (
    MIN_RELEASE_YEAR,
    WRITER_REQUIRED,
    YEAR_REQUIRED,
    canonicalize_identifier,
    check_category,
    check_identifier,
    check_title,
    current_year,
    year_range_message,
)


class PublicationForm(BaseModel):
    """Raw form state, as typed by the user (every field is text)."""

    book_title: str = ""
    writer_id: str = ""
    category: str = ""
    release_year: str = ""
    identifier: str = ""


_PLAIN_YEAR = re.compile(r"[0-9]+")


def parse_release_year(raw: str) -> Optional[int]:
    text = raw.strip()
    if not _PLAIN_YEAR.fullmatch(text):
        return None
    return int(text)


def validate_publication_form(form: PublicationForm, *, max_year: Optional[int] = None) -> Dict[str, str]:
    """
    Field name -> message for every failing field; empty when the form can be
    submitted.
    """
    errors: Dict[str, str] = {}

    if msg := check_title(form.book_title):
        errors["book_title"] = msg
    if not form.writer_id:
        errors["writer_id"] = WRITER_REQUIRED
    if msg := check_category(form.category):
        errors["category"] = msg

    if not form.release_year.strip():
        errors["release_year"] = YEAR_REQUIRED
    else:
        upper = max_year or current_year()
        year = parse_release_year(form.release_year)
        if year is None or year < MIN_RELEASE_YEAR or year > upper:
            errors["release_year"] = year_range_message(upper)

    if msg := check_identifier(form.identifier):
        errors["identifier"] = msg

    return errors


def form_variables(form: PublicationForm) -> Dict[str, object]:
    """GraphQL variables for a form that passed validation."""
    return {
        "bookTitle": form.book_title,
        "writerId": form.writer_id,
        "category": form.category,
        "releaseYear": parse_release_year(form.release_year),
        "identifier": canonicalize_identifier(form.identifier),
    }
