# services/catalog-service/catalog/dal/publication_dal.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

COLLECTION = "books"
ISBN_INDEX = "uk_isbn"

# ─────────────────────────────────────────────────────────────
# Indexes
# ─────────────────────────────────────────────────────────────
async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    col = db[COLLECTION]
    await col.create_index([("isbn", ASCENDING)], name=ISBN_INDEX, unique=True)
    await col.create_index([("genre", ASCENDING)], name="ix_genre")
    await col.create_index([("authorId", ASCENDING)], name="ix_author_id")

# ─────────────────────────────────────────────────────────────
# Reads
# ─────────────────────────────────────────────────────────────
async def list_publications(db: AsyncIOMotorDatabase) -> List[Dict[str, Any]]:
    return [d async for d in db[COLLECTION].find({})]


async def list_publications_by_genre(db: AsyncIOMotorDatabase, genre: str) -> List[Dict[str, Any]]:
    return [d async for d in db[COLLECTION].find({"genre": genre})]


async def get_publication(db: AsyncIOMotorDatabase, publication_id: ObjectId) -> Optional[Dict[str, Any]]:
    return await db[COLLECTION].find_one({"_id": publication_id})


async def find_by_isbn(
    db: AsyncIOMotorDatabase, isbn: str, *, exclude_id: Optional[ObjectId] = None
) -> Optional[Dict[str, Any]]:
    conds: Dict[str, Any] = {"isbn": isbn}
    if exclude_id is not None:
        conds["_id"] = {"$ne": exclude_id}
    return await db[COLLECTION].find_one(conds)


async def distinct_genres(db: AsyncIOMotorDatabase) -> List[str]:
    return await db[COLLECTION].distinct("genre")

# ─────────────────────────────────────────────────────────────
# Writes
# ─────────────────────────────────────────────────────────────
async def insert_publication(db: AsyncIOMotorDatabase, doc: Dict[str, Any]) -> ObjectId:
    res = await db[COLLECTION].insert_one(doc)
    return res.inserted_id


async def update_publication(
    db: AsyncIOMotorDatabase, publication_id: ObjectId, set_fields: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    if not set_fields:
        return await get_publication(db, publication_id)
    return await db[COLLECTION].find_one_and_update(
        {"_id": publication_id},
        {"$set": set_fields},
        return_document=ReturnDocument.AFTER,
    )


async def insert_publications(db: AsyncIOMotorDatabase, docs: List[Dict[str, Any]]) -> int:
    res = await db[COLLECTION].insert_many(docs)
    return len(res.inserted_ids)


async def delete_all_publications(db: AsyncIOMotorDatabase) -> int:
    res = await db[COLLECTION].delete_many({})
    return res.deleted_count
