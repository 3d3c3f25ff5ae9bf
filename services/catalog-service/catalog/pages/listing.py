# services/catalog-service/catalog/pages/listing.py
from __future__ import annotations

from typing import Iterable, List

from .client import PublicationCard

ALL_CATEGORIES = "all"


def filter_publications(
    publications: Iterable[PublicationCard],
    *,
    category: str = ALL_CATEGORIES,
    search: str = "",
) -> List[PublicationCard]:
    """
    Client-side filter over an already-fetched list: exact category match
    (unless "all"), then case-insensitive substring on title or writer name.
    """
    rows = list(publications)

    if category and category != ALL_CATEGORIES:
        rows = [p for p in rows if p.category == category]

    term = search.strip().lower()
    if term:
        rows = [
            p
            for p in rows
            if term in p.book_title.lower() or (p.writer is not None and term in p.writer.full_name.lower())
        ]
    return rows
