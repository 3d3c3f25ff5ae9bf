# services/catalog-service/catalog/models/catalog.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Read models (mapped from the `authors` / `books` documents)
class Writer(BaseModel):
    id: str
    name: str
    nationality: Optional[str] = None
    birth_year: Optional[int] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Writer":
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            nationality=doc.get("nationality"),
            birth_year=doc.get("birthYear"),
        )


class Publication(BaseModel):
    id: str
    title: str
    writer_id: str
    category: str
    release_year: int
    identifier: str
    # null only when the stored authorId no longer resolves
    writer: Optional[Writer] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any], writer: Optional[Writer] = None) -> "Publication":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            writer_id=str(doc["authorId"]),
            category=doc["genre"],
            release_year=doc["publicationYear"],
            identifier=doc["isbn"],
            writer=writer,
        )


# Input models
class PublicationCreate(BaseModel):
    title: str
    writer_id: str
    category: str
    release_year: int
    identifier: str


class PublicationUpdate(BaseModel):
    title: Optional[str] = None
    writer_id: Optional[str] = None
    category: Optional[str] = None
    release_year: Optional[int] = None
    identifier: Optional[str] = None

    def supplied(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# Seed statistics (serialized with camelCase keys)
class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WriterSummary(_CamelModel):
    name: str
    nationality: Optional[str] = None


class PublicationSummary(_CamelModel):
    title: str
    genre: str
    year: int


class SeedStatistics(_CamelModel):
    writers_created: int
    publications_added: int
    categories_available: List[str] = Field(default_factory=list)
    writer_summary: List[WriterSummary] = Field(default_factory=list)
    publication_summary: List[PublicationSummary] = Field(default_factory=list)
