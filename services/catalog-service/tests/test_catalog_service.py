import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from catalog.core.errors import (
    DuplicateIdentifier,
    InvalidIdentifier,
    InvalidPublicationInput,
    PublicationNotFound,
    WriterNotFound,
)
from catalog.dal import publication_dal
from catalog.models.catalog import PublicationCreate, PublicationUpdate
from catalog.seeds.seed_catalog import seed_catalog

SEEDED_CATEGORIES = {"Sci-Fi", "Political Satire", "Mystery", "Fantasy", "Horror"}


@pytest.fixture
async def seeded(db):
    return await seed_catalog(db)


async def writer_id(service, name):
    writers = await service.list_writers()
    return next(w.id for w in writers if w.name == name)


async def publication_by_title(service, title):
    rows = await service.list_publications()
    return next(p for p in rows if p.title == title)


def dune(writer, **overrides):
    fields = dict(
        title="Dune",
        writer_id=writer,
        category="Sci-Fi",
        release_year=1965,
        identifier="978-0-441-01359-3",
    )
    fields.update(overrides)
    return PublicationCreate(**fields)


async def test_list_publications_resolves_writers(service, seeded):
    rows = await service.list_publications()

    assert len(rows) == 11
    assert all(p.writer is not None for p in rows)
    nineteen = next(p for p in rows if p.title == "1984")
    assert nineteen.writer.name == "George Orwell"
    assert nineteen.writer.nationality == "British"
    assert nineteen.writer_id == nineteen.writer.id


async def test_list_categories_after_seed(service, seeded):
    categories = await service.list_categories()

    assert set(categories) == SEEDED_CATEGORIES
    assert len(categories) == len(SEEDED_CATEGORIES)


async def test_list_categories_tracks_stored_data(service, seeded):
    asimov = await writer_id(service, "Isaac Asimov")
    await service.create_publication(dune(asimov, category="Space Opera"))

    assert set(await service.list_categories()) == SEEDED_CATEGORIES | {"Space Opera"}


async def test_list_by_category_is_a_passthrough_filter(service, seeded):
    horror = await service.list_publications_by_category("Horror")
    assert {p.title for p in horror} == {"The Shining", "It", "The Stand"}
    assert await service.list_publications_by_category("Not A Genre") == []


async def test_list_writers(service, seeded):
    writers = await service.list_writers()
    assert {w.name for w in writers} == {
        "George Orwell",
        "Isaac Asimov",
        "Agatha Christie",
        "J.K. Rowling",
        "Stephen King",
    }
    king = next(w for w in writers if w.name == "Stephen King")
    assert king.birth_year == 1947


async def test_get_publication(service, seeded):
    target = await publication_by_title(service, "Foundation")

    found = await service.get_publication(target.id)

    assert found.title == "Foundation"
    assert found.writer.name == "Isaac Asimov"
    assert await service.get_publication(str(ObjectId())) is None


async def test_get_publication_rejects_malformed_id(service):
    with pytest.raises(InvalidIdentifier):
        await service.get_publication("not-an-object-id")


async def test_create_stores_canonical_identifier(service, seeded):
    asimov = await writer_id(service, "Isaac Asimov")

    created = await service.create_publication(dune(asimov))

    assert created.identifier == "9780441013593"
    assert created.writer.name == "Isaac Asimov"
    reread = await service.get_publication(created.id)
    assert reread.identifier == "9780441013593"
    assert reread.release_year == 1965


async def test_create_duplicate_identifier_leaves_catalog_unchanged(service, seeded):
    orwell = await writer_id(service, "George Orwell")
    before = len(await service.list_publications())

    with pytest.raises(DuplicateIdentifier):
        await service.create_publication(dune(orwell, title="1984 again", identifier="978-0451524935"))

    assert len(await service.list_publications()) == before


async def test_create_with_unknown_writer(service, seeded):
    before = len(await service.list_publications())

    with pytest.raises(WriterNotFound):
        await service.create_publication(dune(str(ObjectId())))
    with pytest.raises(InvalidIdentifier):
        await service.create_publication(dune("nope"))

    assert len(await service.list_publications()) == before


async def test_create_rejects_invalid_fields(service, seeded):
    asimov = await writer_id(service, "Isaac Asimov")

    with pytest.raises(InvalidPublicationInput) as exc:
        await service.create_publication(dune(asimov, release_year=3000))
    assert exc.value.field == "releaseYear"

    with pytest.raises(InvalidPublicationInput) as exc:
        await service.create_publication(dune(asimov, title="   "))
    assert exc.value.field == "title"


async def test_index_violation_reported_as_duplicate(service, seeded, monkeypatch):
    asimov = await writer_id(service, "Isaac Asimov")

    async def racing_insert(db, doc):
        raise DuplicateKeyError("E11000 duplicate key error collection: library.books index: uk_isbn")

    monkeypatch.setattr(publication_dal, "insert_publication", racing_insert)

    with pytest.raises(DuplicateIdentifier):
        await service.create_publication(dune(asimov))


async def test_update_category_only(service, seeded):
    target = await publication_by_title(service, "It")

    updated = await service.update_publication(target.id, PublicationUpdate(category="Thriller"))

    assert updated.category == "Thriller"
    reread = await service.get_publication(target.id)
    assert reread.category == "Thriller"
    assert reread.title == target.title
    assert reread.writer_id == target.writer_id
    assert reread.release_year == target.release_year
    assert reread.identifier == target.identifier


async def test_update_with_own_identifier_is_not_a_duplicate(service, seeded):
    target = await publication_by_title(service, "The Stand")

    updated = await service.update_publication(
        target.id, PublicationUpdate(identifier="978-0-307-74368-8", release_year=1990)
    )

    assert updated.identifier == "9780307743688"
    assert updated.release_year == 1990


async def test_update_identifier_taken_by_another(service, seeded):
    target = await publication_by_title(service, "The Stand")
    other = await publication_by_title(service, "The Shining")

    with pytest.raises(DuplicateIdentifier):
        await service.update_publication(target.id, PublicationUpdate(identifier=other.identifier))

    assert (await service.get_publication(target.id)).identifier == "9780307743688"


async def test_update_writer(service, seeded):
    target = await publication_by_title(service, "It")
    christie = await writer_id(service, "Agatha Christie")

    updated = await service.update_publication(target.id, PublicationUpdate(writer_id=christie))
    assert updated.writer.name == "Agatha Christie"

    with pytest.raises(WriterNotFound):
        await service.update_publication(target.id, PublicationUpdate(writer_id=str(ObjectId())))
    with pytest.raises(InvalidIdentifier):
        await service.update_publication(target.id, PublicationUpdate(writer_id="bad"))


async def test_update_missing_publication(service, seeded):
    with pytest.raises(PublicationNotFound):
        await service.update_publication(str(ObjectId()), PublicationUpdate(title="Ghost"))
    with pytest.raises(InvalidIdentifier):
        await service.update_publication("bad", PublicationUpdate(title="Ghost"))


async def test_empty_update_returns_current_state(service, seeded):
    target = await publication_by_title(service, "Animal Farm")

    unchanged = await service.update_publication(target.id, PublicationUpdate())

    assert unchanged == target


async def test_dangling_writer_reference_resolves_to_none(service, db, seeded):
    await db["authors"].delete_many({"name": "Stephen King"})

    rows = await service.list_publications()

    assert len(rows) == 11
    assert {p.title for p in rows if p.writer is None} == {"The Shining", "It", "The Stand"}


async def test_create_rejects_non_ascii_identifier(service, seeded):
    asimov = await writer_id(service, "Isaac Asimov")
    before = len(await service.list_publications())

    with pytest.raises(InvalidPublicationInput) as exc:
        await service.create_publication(dune(asimov, identifier="٩٧٨٠٤٤١٠١٣٥٩٣"))
    assert exc.value.field == "identifier"

    assert len(await service.list_publications()) == before
