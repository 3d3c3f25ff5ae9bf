# services/catalog-service/catalog/services/catalog_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ..core.errors import (
    DuplicateIdentifier,
    InvalidIdentifier,
    PublicationNotFound,
    WriterNotFound,
)
from ..core.validation import canonicalize_identifier, ensure_publication_fields
from ..dal import publication_dal, writer_dal
from ..models.catalog import Publication, PublicationCreate, PublicationUpdate, Writer

log = logging.getLogger("catalog.services")

PUBLICATION_ID_INVALID = "Publication identifier format is invalid"
WRITER_ID_INVALID = "Writer identifier format is incorrect"
IDENTIFIER_TAKEN_ON_UPDATE = "Another publication already uses this identifier."


def _object_id(value: str, message: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise InvalidIdentifier(message)
    return ObjectId(value)


class CatalogService:
    """
    Queries and mutations over the `authors` / `books` collections.

    Uniqueness of `isbn` is checked before each write for a friendly error, but
    the check and the write are separate operations. The unique index on
    `books.isbn` is what actually enforces it; an index violation is reported
    as the same DuplicateIdentifier.
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.db = db

    # ---------- queries ---------- #

    async def list_publications(self) -> List[Publication]:
        docs = await publication_dal.list_publications(self.db)
        return await self._with_writers(docs)

    async def get_publication(self, publication_id: str) -> Optional[Publication]:
        oid = _object_id(publication_id, PUBLICATION_ID_INVALID)
        doc = await publication_dal.get_publication(self.db, oid)
        if not doc:
            return None
        return (await self._with_writers([doc]))[0]

    async def list_publications_by_category(self, category: str) -> List[Publication]:
        docs = await publication_dal.list_publications_by_genre(self.db, category)
        return await self._with_writers(docs)

    async def list_writers(self) -> List[Writer]:
        docs = await writer_dal.list_writers(self.db)
        return [Writer.from_document(d) for d in docs]

    async def list_categories(self) -> List[str]:
        genres = await publication_dal.distinct_genres(self.db)
        return sorted(set(genres))

    # ---------- mutations ---------- #

    async def create_publication(self, body: PublicationCreate) -> Publication:
        ensure_publication_fields(
            title=body.title,
            category=body.category,
            release_year=body.release_year,
            identifier=body.identifier,
        )
        isbn = canonicalize_identifier(body.identifier)

        if await publication_dal.find_by_isbn(self.db, isbn):
            raise DuplicateIdentifier()

        writer_oid = _object_id(body.writer_id, WRITER_ID_INVALID)
        writer_doc = await writer_dal.get_writer(self.db, writer_oid)
        if not writer_doc:
            raise WriterNotFound()

        doc: Dict[str, Any] = {
            "title": body.title,
            "authorId": writer_oid,
            "genre": body.category,
            "publicationYear": body.release_year,
            "isbn": isbn,
        }
        try:
            inserted_id = await publication_dal.insert_publication(self.db, doc)
        except DuplicateKeyError as exc:
            raise DuplicateIdentifier() from exc

        doc["_id"] = inserted_id
        log.info("Publication created id=%s isbn=%s", inserted_id, isbn)
        return Publication.from_document(doc, Writer.from_document(writer_doc))

    async def update_publication(self, publication_id: str, patch: PublicationUpdate) -> Publication:
        oid = _object_id(publication_id, PUBLICATION_ID_INVALID)
        current = await publication_dal.get_publication(self.db, oid)
        if not current:
            raise PublicationNotFound()

        ensure_publication_fields(
            title=patch.title,
            category=patch.category,
            release_year=patch.release_year,
            identifier=patch.identifier,
            partial=True,
        )

        set_fields: Dict[str, Any] = {}
        if patch.title is not None:
            set_fields["title"] = patch.title
        if patch.category is not None:
            set_fields["genre"] = patch.category
        if patch.release_year is not None:
            set_fields["publicationYear"] = patch.release_year

        if patch.identifier is not None:
            isbn = canonicalize_identifier(patch.identifier)
            if isbn != current.get("isbn"):
                if await publication_dal.find_by_isbn(self.db, isbn, exclude_id=oid):
                    raise DuplicateIdentifier(IDENTIFIER_TAKEN_ON_UPDATE)
            set_fields["isbn"] = isbn

        if patch.writer_id is not None:
            if patch.writer_id != str(current.get("authorId")):
                writer_oid = _object_id(patch.writer_id, WRITER_ID_INVALID)
                if not await writer_dal.get_writer(self.db, writer_oid):
                    raise WriterNotFound("Selected writer not found in database.")
            set_fields["authorId"] = ObjectId(patch.writer_id)

        try:
            doc = await publication_dal.update_publication(self.db, oid, set_fields)
        except DuplicateKeyError as exc:
            raise DuplicateIdentifier(IDENTIFIER_TAKEN_ON_UPDATE) from exc
        if not doc:
            # removed between the existence check and the write
            raise PublicationNotFound()

        log.info("Publication updated id=%s fields=%s", publication_id, sorted(set_fields))
        return (await self._with_writers([doc]))[0]

    # ---------- helpers ---------- #

    async def _with_writers(self, docs: List[Dict[str, Any]]) -> List[Publication]:
        writers = await writer_dal.get_writers_by_ids(self.db, (d["authorId"] for d in docs))
        out: List[Publication] = []
        for d in docs:
            w = writers.get(d["authorId"])
            if w is None:
                log.warning("Publication %s references missing writer %s", d["_id"], d["authorId"])
            out.append(Publication.from_document(d, Writer.from_document(w) if w else None))
        return out
