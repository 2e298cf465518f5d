"""
Database Helper Functions

MongoDB access for the portfolio API. Every collection is named after the
lowercased schema class (Hero -> "hero", ContactMessage -> "contactmessage").
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

db = None

if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]


class DatabaseUnavailable(RuntimeError):
    pass


def get_db():
    """Return the active database handle or raise if none is configured."""
    if db is None:
        raise DatabaseUnavailable("Database not available")
    return db


def now() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """Insert a document with timestamps and return it as read back from the store."""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump(by_alias=True)
    else:
        data_dict = dict(data)

    stamp = now()
    data_dict["created_at"] = stamp
    data_dict["updated_at"] = stamp

    collection = get_db()[collection_name]
    result = collection.insert_one(data_dict)
    return collection.find_one({"_id": result.inserted_id})


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None,
                  sort: Optional[List] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = get_db()[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document(collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
    oid = to_object_id(doc_id)
    if oid is None:
        return None
    return get_db()[collection_name].find_one({"_id": oid})


def update_document(collection_name: str, doc_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply ``changes`` with a fresh ``updated_at``; None if the id is unknown."""
    oid = to_object_id(doc_id)
    if oid is None:
        return None
    return get_db()[collection_name].find_one_and_update(
        {"_id": oid},
        {"$set": {**changes, "updated_at": now()}},
        return_document=True,
    )


def delete_document(collection_name: str, doc_id: str) -> bool:
    oid = to_object_id(doc_id)
    if oid is None:
        return False
    res = get_db()[collection_name].delete_one({"_id": oid})
    return res.deleted_count > 0


def ensure_indexes(database) -> None:
    # One row per singleton kind
    for name in ("hero", "about", "contact", "siteconfig"):
        database[name].create_index([("key", ASCENDING)], unique=True)
    database["revokedtoken"].create_index([("jti", ASCENDING)], unique=True)
    # Revocations are only needed until the token itself expires
    database["revokedtoken"].create_index([("exp", ASCENDING)], expireAfterSeconds=0)
    logger.info("Database indexes ensured")
