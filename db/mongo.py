"""
MongoDB connection and the query executor for the expenses collection.
Connection settings come from Settings (MONGODB_URI, MONGODB_DB_NAME, MONGODB_COLLECTION).
"""
import logging
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from db.models import serialize_record
from utils.config import Settings, get_settings
from utils.errors import ExecutionError, NetworkError

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None


def _get_client(settings: Settings) -> MongoClient:
    """Lazy connection to MongoDB."""
    global _client
    if _client is None:
        if not settings.mongodb_uri:
            raise ExecutionError("MONGODB_URI is not set")
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=settings.mongodb_timeout_ms)
    return _client


def get_collection(settings: Optional[Settings] = None):
    settings = settings or get_settings()
    return _get_client(settings)[settings.mongodb_db_name][settings.mongodb_collection]


def _wrap_errors(op: str, e: PyMongoError) -> Exception:
    if isinstance(e, ConnectionFailure):
        return NetworkError(f"MongoDB {op} failed: {e}")
    if isinstance(e, OperationFailure):
        return ExecutionError(f"MongoDB rejected {op}: {e}")
    return ExecutionError(f"MongoDB {op} failed: {e}")


def find_expenses(filter_doc: Dict[str, Any], settings: Optional[Settings] = None) -> List[dict]:
    """Run find(filter_doc), capped at settings.max_results."""
    settings = settings or get_settings()
    coll = get_collection(settings)
    try:
        cursor = coll.find(filter_doc).limit(settings.max_results)
        rows = [serialize_record(doc) for doc in cursor]
    except PyMongoError as e:
        raise _wrap_errors("find", e) from e
    logger.info("mongo_find: rows=%d", len(rows))
    return rows


def aggregate_expenses(pipeline: List[Dict[str, Any]], settings: Optional[Settings] = None) -> List[dict]:
    settings = settings or get_settings()
    coll = get_collection(settings)
    try:
        rows = [serialize_record(doc) for doc in coll.aggregate(pipeline)]
    except PyMongoError as e:
        raise _wrap_errors("aggregate", e) from e
    logger.info("mongo_aggregate: stages=%d rows=%d", len(pipeline), len(rows))
    return rows


def insert_expense(doc: dict, settings: Optional[Settings] = None) -> str:
    """Insert one expense document. Returns the inserted id as string."""
    try:
        result = get_collection(settings).insert_one(doc)
    except PyMongoError as e:
        raise _wrap_errors("insert", e) from e
    return str(result.inserted_id)


def delete_expenses(filter_doc: Dict[str, Any], settings: Optional[Settings] = None) -> int:
    try:
        result = get_collection(settings).delete_many(filter_doc)
    except PyMongoError as e:
        raise _wrap_errors("delete", e) from e
    return result.deleted_count
