# services/catalog-service/catalog/seeds/seed_catalog.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from ..core.errors import ConnectionFailureCause, DatabaseConnectionFailure
from ..dal import publication_dal, writer_dal
from ..models.catalog import PublicationSummary, SeedStatistics, WriterSummary

log = logging.getLogger("catalog.seeds")

SEED_WRITERS: List[Dict[str, Any]] = [
    {"name": "George Orwell", "nationality": "British", "birthYear": 1903},
    {"name": "Isaac Asimov", "nationality": "American", "birthYear": 1920},
    {"name": "Agatha Christie", "nationality": "British", "birthYear": 1890},
    {"name": "J.K. Rowling", "nationality": "British", "birthYear": 1965},
    {"name": "Stephen King", "nationality": "American", "birthYear": 1947},
]

# (title, index into SEED_WRITERS, genre, year, isbn)
SEED_PUBLICATIONS = [
    ("1984", 0, "Sci-Fi", 1949, "9780451524935"),
    ("Animal Farm", 0, "Political Satire", 1945, "9780451526342"),
    ("Foundation", 1, "Sci-Fi", 1951, "9780553803716"),
    ("I, Robot", 1, "Sci-Fi", 1950, "9780553294385"),
    ("The Murder of Roger Ackroyd", 2, "Mystery", 1926, "9780007527526"),
    ("And Then There Were None", 2, "Mystery", 1939, "9780062073488"),
    ("Harry Potter and the Philosopher's Stone", 3, "Fantasy", 1997, "9780747532699"),
    ("Harry Potter and the Chamber of Secrets", 3, "Fantasy", 1998, "9780747538493"),
    ("The Shining", 4, "Horror", 1977, "9780307743657"),
    ("It", 4, "Horror", 1986, "9781501142970"),
    ("The Stand", 4, "Horror", 1978, "9780307743688"),
]


def build_seed_documents() -> tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Writer ids are generated here, before anything is inserted, so the
    publication documents can carry them as `authorId`.
    """
    writers = [{"_id": ObjectId(), **w} for w in SEED_WRITERS]
    books = [
        {
            "title": title,
            "authorId": writers[idx]["_id"],
            "genre": genre,
            "publicationYear": year,
            "isbn": isbn,
        }
        for title, idx, genre, year, isbn in SEED_PUBLICATIONS
    ]
    return writers, books


async def seed_catalog(db: AsyncIOMotorDatabase) -> SeedStatistics:
    """
    Destructive reseed: clears `authors` and `books`, inserts the sample set and
    then tries to create the unique isbn index. Nothing is rolled back if the
    publications insert fails after the writers went in.
    """
    log.info("[seed] removing existing catalog entries")
    await writer_dal.delete_all_writers(db)
    await publication_dal.delete_all_publications(db)

    writers, books = build_seed_documents()

    created = await writer_dal.insert_writers(db, writers)
    log.info("[seed] writer profiles created: %d", created)

    added = await publication_dal.insert_publications(db, books)
    log.info("[seed] publication records added: %d", added)

    try:
        await publication_dal.ensure_indexes(db)
        log.info("[seed] isbn uniqueness constraint ensured")
    except PyMongoError as exc:
        log.warning("[seed] could not create isbn constraint (may already exist): %s", exc)

    categories = list(dict.fromkeys(b["genre"] for b in books))
    return SeedStatistics(
        writers_created=len(writers),
        publications_added=len(books),
        categories_available=categories,
        writer_summary=[WriterSummary(name=w["name"], nationality=w["nationality"]) for w in writers],
        publication_summary=[
            PublicationSummary(title=b["title"], genre=b["genre"], year=b["publicationYear"]) for b in books
        ],
    )


def describe_seed_failure(exc: BaseException) -> str:
    message = str(exc)
    if isinstance(exc, DatabaseConnectionFailure):
        if exc.cause is ConnectionFailureCause.HOST_RESOLUTION:
            return "Network connectivity issue. Please check your internet connection."
        if exc.cause is ConnectionFailureCause.AUTHENTICATION:
            return "Database authentication failed. Please verify your credentials."
        return message
    if "ENOTFOUND" in message:
        return "Network connectivity issue. Please check your internet connection."
    if (isinstance(exc, OperationFailure) and exc.code == 18) or "authentication failed" in message.lower():
        return "Database authentication failed. Please verify your credentials."
    if isinstance(exc, DuplicateKeyError) or "duplicate key" in message:
        return "Duplicate data detected. The population may have been run previously."
    return message or "An unexpected error occurred during population"
