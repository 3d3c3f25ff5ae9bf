# services/catalog-service/catalog/pages/views.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.validation import AVAILABLE_CATEGORIES
from .client import CatalogApiError, CatalogClient, PublicationCard, WriterRef
from .forms import PublicationForm, form_variables, validate_publication_form
from .listing import ALL_CATEGORIES, filter_publications

logger = logging.getLogger("catalog.pages")

CATALOG_LINK = "/"
NOT_LOCATED_TITLE = "Publication Not Located"
NOT_LOCATED_MESSAGE = "The requested publication cannot be found or may have been removed from the catalog."


def publication_link(publication_id: str) -> str:
    return f"/book/{publication_id}"


# ─────────────────────────────────────────────────────────────
# View models
# ─────────────────────────────────────────────────────────────
class ListingView(BaseModel):
    publications: List[PublicationCard]
    categories: List[str]
    active_category: str = ALL_CATEGORIES
    search: str = ""
    total: int = 0

    @property
    def shown(self) -> int:
        return len(self.publications)


class DetailView(BaseModel):
    publication: Optional[PublicationCard] = None
    not_found: bool = False
    title: Optional[str] = None
    message: Optional[str] = None
    back_link: str = CATALOG_LINK
    edit_link: Optional[str] = None


class FormView(BaseModel):
    form: PublicationForm = Field(default_factory=PublicationForm)
    writers: List[WriterRef] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=lambda: list(AVAILABLE_CATEGORIES))
    not_found: bool = False
    back_link: str = CATALOG_LINK


class SubmitResult(BaseModel):
    ok: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    error: Optional[str] = None
    redirect: Optional[str] = None
    publication_id: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Loaders
# ─────────────────────────────────────────────────────────────
async def load_listing(client: CatalogClient, *, category: str = ALL_CATEGORIES, search: str = "") -> ListingView:
    publications, categories = await client.fetch_catalog()
    return ListingView(
        publications=filter_publications(publications, category=category, search=search),
        categories=categories,
        active_category=category or ALL_CATEGORIES,
        search=search,
        total=len(publications),
    )


def _not_located() -> DetailView:
    return DetailView(not_found=True, title=NOT_LOCATED_TITLE, message=NOT_LOCATED_MESSAGE)


async def load_detail(client: CatalogClient, publication_id: str) -> DetailView:
    try:
        item = await client.fetch_publication(publication_id)
    except CatalogApiError as exc:
        logger.warning("Publication retrieval failed: %s", exc.message)
        return _not_located()
    if item is None:
        return _not_located()
    return DetailView(publication=item, title=item.book_title, edit_link=f"{publication_link(item.id)}/edit")


async def load_create_form(client: CatalogClient) -> FormView:
    writers, _ = await client.fetch_writers_and_categories()
    return FormView(writers=writers)


async def load_edit_form(client: CatalogClient, publication_id: str) -> FormView:
    try:
        item = await client.fetch_publication(publication_id)
    except CatalogApiError as exc:
        logger.warning("Publication retrieval failed: %s", exc.message)
        item = None
    if item is None:
        return FormView(not_found=True)

    writers, _ = await client.fetch_writers_and_categories()
    form = PublicationForm(
        book_title=item.book_title,
        writer_id=item.writer.id if item.writer else "",
        category=item.category,
        release_year=str(item.release_year),
        identifier=item.identifier or "",
    )
    return FormView(form=form, writers=writers, back_link=publication_link(publication_id))


# ─────────────────────────────────────────────────────────────
# Submissions (validation gate runs before any network call)
# ─────────────────────────────────────────────────────────────
async def submit_create_form(client: CatalogClient, form: PublicationForm) -> SubmitResult:
    errors = validate_publication_form(form)
    if errors:
        return SubmitResult(ok=False, errors=errors)

    variables = form_variables(form)
    try:
        new_id = await client.register_publication(
            book_title=variables["bookTitle"],
            writer_id=variables["writerId"],
            category=variables["category"],
            release_year=variables["releaseYear"],
            identifier=variables["identifier"],
        )
    except CatalogApiError as exc:
        return SubmitResult(ok=False, error=exc.message)
    return SubmitResult(ok=True, redirect=CATALOG_LINK, publication_id=new_id)


async def submit_edit_form(client: CatalogClient, publication_id: str, form: PublicationForm) -> SubmitResult:
    errors = validate_publication_form(form)
    if errors:
        return SubmitResult(ok=False, errors=errors)

    try:
        item = await client.modify_publication(publication_id, **form_variables(form))
    except CatalogApiError as exc:
        return SubmitResult(ok=False, error=exc.message)
    return SubmitResult(ok=True, redirect=publication_link(publication_id), publication_id=item.id)


async def trigger_population(client: CatalogClient) -> Dict[str, Any]:
    """Admin seed page: returns the API envelope, or a failure envelope on network errors."""
    try:
        return await client.populate_catalog()
    except CatalogApiError as exc:
        return {"success": False, "error": exc.message}
