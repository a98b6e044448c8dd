"""
Database helpers

Thin wrappers around a pymongo ``Database``. The handle is created once by
``connect`` and passed to whoever needs it.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.database import Database

log = logging.getLogger(__name__)

MAPS = "maps"
PLAYERS = "players"
ROUNDS = "rounds"


def connect(uri: str, db_name: str, timeout_ms: int = 5000) -> Database:
    client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
    # MongoClient connects lazily, force a round-trip so bad URIs fail here
    client.admin.command("ping")
    log.info(f"Connected to MongoDB database '{db_name}'")
    return client[db_name]


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    if isinstance(value, dict):
        return serialize_doc(value)
    return value


def serialize_doc(doc):
    """Convert a Mongo document to its JSON shape: ``_id`` becomes ``id`` and
    ObjectIds (including nested ones) become hex strings."""
    if not doc:
        return doc
    return {("id" if k == "_id" else k): _serialize_value(v) for k, v in doc.items()}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_document(db: Database, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
    now = _now()
    doc = dict(data)
    doc["createdAt"] = now
    doc["updatedAt"] = now
    result = db[collection].insert_one(doc)
    doc["_id"] = result.inserted_id
    log.info(f"Inserted document {result.inserted_id} into '{collection}'")
    return doc


def create_documents(db: Database, collection: str, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not items:
        log.warning(f"Attempted bulk insert of an empty list into '{collection}'")
        return []
    now = _now()
    docs = []
    for item in items:
        doc = dict(item)
        doc.setdefault("createdAt", now)
        doc.setdefault("updatedAt", now)
        docs.append(doc)
    result = db[collection].insert_many(docs)
    for doc, inserted_id in zip(docs, result.inserted_ids):
        doc["_id"] = inserted_id
    log.info(f"Inserted {len(docs)} documents into '{collection}'")
    return docs


def get_documents(db: Database, collection: str, filter_dict: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = db[collection].find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document(db: Database, collection: str, doc_id: ObjectId) -> Optional[Dict[str, Any]]:
    return db[collection].find_one({"_id": doc_id})
