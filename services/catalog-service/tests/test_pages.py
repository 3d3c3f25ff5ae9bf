import httpx
import pytest
from bson import ObjectId

from catalog.core.validation import current_year
from catalog.pages.client import CatalogClient, PublicationCard, WriterRef
from catalog.pages.forms import PublicationForm, form_variables, parse_release_year, validate_publication_form
from catalog.pages.listing import filter_publications
from catalog.pages.views import (
    NOT_LOCATED_TITLE,
    load_create_form,
    load_detail,
    load_edit_form,
    load_listing,
    submit_create_form,
    submit_edit_form,
    trigger_population,
)
from catalog.seeds.seed_catalog import seed_catalog


@pytest.fixture
async def client(api):
    transport = httpx.ASGITransport(app=api)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield CatalogClient(http=http)


@pytest.fixture
async def seeded(db):
    return await seed_catalog(db)


class NoNetworkClient:
    """Fails the test if a page tries to reach the API."""

    async def register_publication(self, **kwargs):
        raise AssertionError("form submitted despite validation errors")

    async def modify_publication(self, *args, **kwargs):
        raise AssertionError("form submitted despite validation errors")


def card(title, writer, category):
    return PublicationCard(
        id=str(ObjectId()),
        book_title=title,
        category=category,
        release_year=1990,
        writer=WriterRef(id=str(ObjectId()), full_name=writer),
    )


def valid_form(writer_id, **overrides):
    fields = dict(
        book_title="Dune",
        writer_id=writer_id,
        category="Sci-Fi",
        release_year="1965",
        identifier="978-0-441-01359-3",
    )
    fields.update(overrides)
    return PublicationForm(**fields)


# ─────────────────────────────────────────────────────────────
# Pure helpers
# ─────────────────────────────────────────────────────────────
def test_filter_by_category_and_search():
    rows = [
        card("The Shining", "Stephen King", "Horror"),
        card("It", "Stephen King", "Horror"),
        card("Foundation", "Isaac Asimov", "Sci-Fi"),
        card("I, Robot", "Isaac Asimov", "Sci-Fi"),
    ]

    assert len(filter_publications(rows)) == 4
    assert [p.book_title for p in filter_publications(rows, category="Sci-Fi")] == ["Foundation", "I, Robot"]
    assert [p.book_title for p in filter_publications(rows, search="ROBOT")] == ["I, Robot"]
    assert len(filter_publications(rows, search="king")) == 2
    assert filter_publications(rows, category="Horror", search="asimov") == []
    assert len(filter_publications(rows, search="   ")) == 4


def test_empty_form_reports_every_field():
    errors = validate_publication_form(PublicationForm())

    assert set(errors) == {"book_title", "writer_id", "category", "release_year", "identifier"}
    assert errors["release_year"] == "Release year is mandatory."


def test_form_year_and_identifier_rules():
    errors = validate_publication_form(valid_form("w1", release_year="3000", identifier="978-0-441"))

    assert errors["release_year"] == f"Release year must be between 1000 and {current_year()}."
    assert errors["identifier"].startswith("Identifier must contain exactly 13 digits")
    assert validate_publication_form(valid_form("w1", release_year="nineteen"))["release_year"].startswith(
        "Release year must be between"
    )
    assert validate_publication_form(valid_form("w1")) == {}


@pytest.mark.parametrize("raw", ["1_999", "1999.5", "\u0661\u0669\u0669\u0669", "+1999", ""])
def test_release_year_takes_plain_decimal_only(raw):
    assert parse_release_year(raw) is None
    assert "release_year" in validate_publication_form(valid_form("w1", release_year=raw))


def test_release_year_trims_whitespace():
    assert parse_release_year(" 1999 ") == 1999


def test_form_variables_are_cleaned():
    assert form_variables(valid_form("w1", identifier="978 0441 01359-3")) == {
        "bookTitle": "Dune",
        "writerId": "w1",
        "category": "Sci-Fi",
        "releaseYear": 1965,
        "identifier": "9780441013593",
    }


async def test_invalid_year_never_reaches_the_api():
    result = await submit_create_form(NoNetworkClient(), valid_form("w1", release_year="3000"))

    assert result.ok is False
    assert result.errors == {"release_year": f"Release year must be between 1000 and {current_year()}."}

    edit = await submit_edit_form(NoNetworkClient(), str(ObjectId()), valid_form("w1", book_title=" "))
    assert edit.ok is False
    assert "book_title" in edit.errors


# ─────────────────────────────────────────────────────────────
# Pages against the ASGI app
# ─────────────────────────────────────────────────────────────
async def test_listing_page(client, seeded):
    view = await load_listing(client)
    assert view.total == 11
    assert view.shown == 11
    assert set(view.categories) == {"Sci-Fi", "Political Satire", "Mystery", "Fantasy", "Horror"}

    horror = await load_listing(client, category="Horror")
    assert horror.shown == 3
    assert horror.total == 11

    harry = await load_listing(client, search="harry")
    assert {p.book_title for p in harry.publications} == {
        "Harry Potter and the Philosopher's Stone",
        "Harry Potter and the Chamber of Secrets",
    }

    orwell = await load_listing(client, search="ORWELL")
    assert {p.book_title for p in orwell.publications} == {"1984", "Animal Farm"}


async def test_detail_page(client, seeded):
    listing = await load_listing(client, search="Foundation")
    target = listing.publications[0]

    view = await load_detail(client, target.id)

    assert view.not_found is False
    assert view.publication.writer.full_name == "Isaac Asimov"
    assert view.publication.writer.year_of_birth == 1920
    assert view.edit_link == f"/book/{target.id}/edit"


async def test_detail_page_for_missing_publication(client, seeded):
    missing = await load_detail(client, str(ObjectId()))
    malformed = await load_detail(client, "not-an-id")

    for view in (missing, malformed):
        assert view.not_found is True
        assert view.title == NOT_LOCATED_TITLE
        assert view.back_link == "/"
        assert view.publication is None


async def test_create_form_round_trip(client, seeded):
    form_view = await load_create_form(client)
    assert len(form_view.writers) == 5
    assert "Young Adult" in form_view.categories
    asimov = next(w.id for w in form_view.writers if w.full_name == "Isaac Asimov")

    result = await submit_create_form(client, valid_form(asimov))

    assert result.ok is True
    assert result.redirect == "/"
    stored = await client.fetch_publication(result.publication_id)
    assert stored.identifier == "9780441013593"


async def test_create_form_surfaces_api_errors(client, seeded):
    form_view = await load_create_form(client)
    orwell = next(w.id for w in form_view.writers if w.full_name == "George Orwell")

    result = await submit_create_form(client, valid_form(orwell, identifier="9780451524935"))

    assert result.ok is False
    assert result.error == "This publication identifier already exists in our catalog."


async def test_edit_form_updates_only_changed_field(client, seeded):
    target = (await load_listing(client, search="The Stand")).publications[0]
    before = await client.fetch_publication(target.id)

    form_view = await load_edit_form(client, target.id)
    assert form_view.form.book_title == "The Stand"
    assert form_view.form.release_year == "1978"
    assert form_view.back_link == f"/book/{target.id}"

    form = form_view.form.model_copy(update={"category": "Thriller"})
    result = await submit_edit_form(client, target.id, form)

    assert result.ok is True
    assert result.redirect == f"/book/{target.id}"
    after = await client.fetch_publication(target.id)
    assert after.category == "Thriller"
    assert after.book_title == before.book_title
    assert after.release_year == before.release_year
    assert after.identifier == before.identifier
    assert after.writer.id == before.writer.id


async def test_edit_form_for_missing_publication(client, seeded):
    view = await load_edit_form(client, str(ObjectId()))

    assert view.not_found is True
    assert view.back_link == "/"


async def test_population_page(client):
    body = await trigger_population(client)

    assert body["success"] is True
    assert body["statistics"]["publicationsAdded"] == 11
