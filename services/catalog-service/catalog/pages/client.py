# services/catalog-service/catalog/pages/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..api.graphql_routes import GRAPHQL_PATH
from ..config import settings

logger = logging.getLogger("catalog.pages.client")

FETCH_CATALOG_DATA = """
query FetchCatalogData {
  fetchAllPublications {
    id
    bookTitle
    writer { id fullName }
    category
    releaseYear
  }
  retrieveAllCategories
}
"""

RETRIEVE_PUBLICATION_DETAILS = """
query RetrievePublicationDetails($id: ID!) {
  retrievePublicationInfo(id: $id) {
    id
    bookTitle
    category
    releaseYear
    identifier
    writer { id fullName country yearOfBirth }
  }
}
"""

FETCH_WRITERS_AND_CATEGORIES = """
query FetchWritersAndCategories {
  fetchAllWriters { id fullName }
  retrieveAllCategories
}
"""

REGISTER_PUBLICATION = """
mutation RegisterPublication($bookTitle: String!, $writerId: ID!, $category: String!, $releaseYear: Int!, $identifier: String!) {
  createPublication(bookTitle: $bookTitle, writerId: $writerId, category: $category, releaseYear: $releaseYear, identifier: $identifier) {
    id
  }
}
"""

MODIFY_PUBLICATION = """
mutation ModifyPublication($id: ID!, $bookTitle: String, $writerId: ID, $category: String, $releaseYear: Int, $identifier: String) {
  modifyPublication(id: $id, bookTitle: $bookTitle, writerId: $writerId, category: $category, releaseYear: $releaseYear, identifier: $identifier) {
    id
    bookTitle
    category
    releaseYear
    identifier
    writer { id fullName }
  }
}
"""


class WriterRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    full_name: str = Field(alias="fullName")
    country: Optional[str] = None
    year_of_birth: Optional[int] = Field(default=None, alias="yearOfBirth")


class PublicationCard(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    book_title: str = Field(alias="bookTitle")
    category: str
    release_year: int = Field(alias="releaseYear")
    identifier: Optional[str] = None
    writer: Optional[WriterRef] = None


class CatalogApiError(RuntimeError):
    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


class CatalogClient:
    """
    GraphQL-over-HTTP client used by the presentation pages.
    Pass `http` to reuse an existing httpx.AsyncClient (tests hand in one bound
    to the ASGI app).
    """

    def __init__(self, base_url: Optional[str] = None, *, http: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=base_url or settings.catalog_api_url,
            timeout=settings.http_client_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def execute(
        self, query: str, variables: Optional[Dict[str, Any]] = None, operation_name: Optional[str] = None
    ) -> Dict[str, Any]:
        try:
            resp = await self._http.post(
                GRAPHQL_PATH,
                json={"query": query, "variables": variables or {}, "operationName": operation_name},
            )
        except httpx.HTTPError as exc:
            raise CatalogApiError(f"Network communication error occurred: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            raise CatalogApiError(f"Catalog API HTTP {resp.status_code}", status=resp.status_code)

        errors = body.get("errors") or []
        if errors:
            first = errors[0]
            raise CatalogApiError(
                first.get("message", "Catalog API error"),
                code=(first.get("extensions") or {}).get("code"),
                status=resp.status_code,
            )
        if resp.status_code >= 400:
            raise CatalogApiError(body.get("detail") or f"Catalog API HTTP {resp.status_code}", status=resp.status_code)
        return body.get("data") or {}

    # ---------- named operations ---------- #

    async def fetch_catalog(self) -> Tuple[List[PublicationCard], List[str]]:
        data = await self.execute(FETCH_CATALOG_DATA, operation_name="FetchCatalogData")
        items = [PublicationCard.model_validate(p) for p in data.get("fetchAllPublications") or []]
        return items, list(data.get("retrieveAllCategories") or [])

    async def fetch_publication(self, publication_id: str) -> Optional[PublicationCard]:
        data = await self.execute(
            RETRIEVE_PUBLICATION_DETAILS, {"id": publication_id}, operation_name="RetrievePublicationDetails"
        )
        item = data.get("retrievePublicationInfo")
        return PublicationCard.model_validate(item) if item else None

    async def fetch_writers_and_categories(self) -> Tuple[List[WriterRef], List[str]]:
        data = await self.execute(FETCH_WRITERS_AND_CATEGORIES, operation_name="FetchWritersAndCategories")
        writers = [WriterRef.model_validate(w) for w in data.get("fetchAllWriters") or []]
        return writers, list(data.get("retrieveAllCategories") or [])

    async def register_publication(
        self, *, book_title: str, writer_id: str, category: str, release_year: int, identifier: str
    ) -> str:
        data = await self.execute(
            REGISTER_PUBLICATION,
            {
                "bookTitle": book_title,
                "writerId": writer_id,
                "category": category,
                "releaseYear": release_year,
                "identifier": identifier,
            },
            operation_name="RegisterPublication",
        )
        return data["createPublication"]["id"]

    async def modify_publication(self, publication_id: str, **fields: Any) -> PublicationCard:
        variables = {"id": publication_id, **fields}
        data = await self.execute(MODIFY_PUBLICATION, variables, operation_name="ModifyPublication")
        return PublicationCard.model_validate(data["modifyPublication"])

    async def populate_catalog(self) -> Dict[str, Any]:
        try:
            resp = await self._http.post("/api/seed")
        except httpx.HTTPError as exc:
            raise CatalogApiError(f"Network communication error occurred: {exc}") from exc
        return resp.json()
