# services/catalog-service/catalog/dal/writer_dal.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

COLLECTION = "authors"


async def list_writers(db: AsyncIOMotorDatabase) -> List[Dict[str, Any]]:
    return [d async for d in db[COLLECTION].find({})]


async def get_writer(db: AsyncIOMotorDatabase, writer_id: ObjectId) -> Optional[Dict[str, Any]]:
    return await db[COLLECTION].find_one({"_id": writer_id})


async def get_writers_by_ids(
    db: AsyncIOMotorDatabase, writer_ids: Iterable[ObjectId]
) -> Dict[ObjectId, Dict[str, Any]]:
    ids = list({oid for oid in writer_ids})
    if not ids:
        return {}
    cursor = db[COLLECTION].find({"_id": {"$in": ids}})
    return {d["_id"]: d async for d in cursor}


async def insert_writers(db: AsyncIOMotorDatabase, docs: List[Dict[str, Any]]) -> int:
    res = await db[COLLECTION].insert_many(docs)
    return len(res.inserted_ids)


async def delete_all_writers(db: AsyncIOMotorDatabase) -> int:
    res = await db[COLLECTION].delete_many({})
    return res.deleted_count
