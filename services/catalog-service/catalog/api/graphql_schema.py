# services/catalog-service/catalog/api/graphql_schema.py
from typing import List, Optional

import strawberry
from strawberry.types import Info

from ..models.catalog import Publication, PublicationCreate, PublicationUpdate, Writer
from ..services.catalog_service import CatalogService


def _service(info: Info) -> CatalogService:
    return info.context["catalog_service"]


@strawberry.type(name="Writer", description="Writer entity representing book authors")
class WriterType:
    id: strawberry.ID
    full_name: str
    country: Optional[str] = None
    year_of_birth: Optional[int] = None

    @classmethod
    def from_model(cls, w: Writer) -> "WriterType":
        return cls(
            id=strawberry.ID(w.id),
            full_name=w.name,
            country=w.nationality,
            year_of_birth=w.birth_year,
        )


@strawberry.type(name="Publication", description="Publication entity for the library catalog")
class PublicationType:
    id: strawberry.ID
    book_title: str
    writer: Optional[WriterType]
    category: str
    release_year: int
    identifier: str

    @classmethod
    def from_model(cls, p: Publication) -> "PublicationType":
        return cls(
            id=strawberry.ID(p.id),
            book_title=p.title,
            writer=WriterType.from_model(p.writer) if p.writer else None,
            category=p.category,
            release_year=p.release_year,
            identifier=p.identifier,
        )


@strawberry.type
class Query:
    @strawberry.field(description="Complete publication catalog")
    async def fetch_all_publications(self, info: Info) -> List[PublicationType]:
        rows = await _service(info).list_publications()
        return [PublicationType.from_model(p) for p in rows]

    @strawberry.field(description="Single publication, or null when absent")
    async def retrieve_publication_info(self, info: Info, id: strawberry.ID) -> Optional[PublicationType]:
        item = await _service(info).get_publication(str(id))
        return PublicationType.from_model(item) if item else None

    @strawberry.field
    async def find_publications_by_category(self, info: Info, category: str) -> List[PublicationType]:
        rows = await _service(info).list_publications_by_category(category)
        return [PublicationType.from_model(p) for p in rows]

    @strawberry.field
    async def fetch_all_writers(self, info: Info) -> List[WriterType]:
        rows = await _service(info).list_writers()
        return [WriterType.from_model(w) for w in rows]

    @strawberry.field(description="Distinct categories present among stored publications")
    async def retrieve_all_categories(self, info: Info) -> List[str]:
        return await _service(info).list_categories()


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_publication(
        self,
        info: Info,
        book_title: str,
        writer_id: strawberry.ID,
        category: str,
        release_year: int,
        identifier: str,
    ) -> Optional[PublicationType]:
        body = PublicationCreate(
            title=book_title,
            writer_id=str(writer_id),
            category=category,
            release_year=release_year,
            identifier=identifier,
        )
        item = await _service(info).create_publication(body)
        return PublicationType.from_model(item)

    @strawberry.mutation(description="Partial update: omitted or null arguments are left unchanged")
    async def modify_publication(
        self,
        info: Info,
        id: strawberry.ID,
        book_title: Optional[str] = None,
        writer_id: Optional[strawberry.ID] = None,
        category: Optional[str] = None,
        release_year: Optional[int] = None,
        identifier: Optional[str] = None,
    ) -> Optional[PublicationType]:
        patch = PublicationUpdate(
            title=book_title,
            writer_id=str(writer_id) if writer_id is not None else None,
            category=category,
            release_year=release_year,
            identifier=identifier,
        )
        item = await _service(info).update_publication(str(id), patch)
        return PublicationType.from_model(item)


schema = strawberry.Schema(query=Query, mutation=Mutation)
