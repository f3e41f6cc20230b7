"""
Data agent — runs a normalized, tenant-scoped query against MongoDB.
Filter -> find, Pipeline -> aggregate. Failures propagate (no fallback data exists).
"""
import logging
from typing import List, Optional

from db import mongo
from utils.config import Settings
from utils.errors import ExecutionError
from utils.query_normalizer import QueryPayload
from utils.tenant_guard import TENANT_FIELD

logger = logging.getLogger(__name__)


def _is_scoped(payload: QueryPayload) -> bool:
    if payload.is_pipeline:
        return bool(payload.body) and TENANT_FIELD in payload.body[0].get("$match", {})
    return TENANT_FIELD in payload.body


def fetch_expenses(payload: QueryPayload, settings: Optional[Settings] = None) -> List[dict]:
    """Execute the query. Refuses any payload that does not carry the tenant constraint."""
    if not _is_scoped(payload):
        logger.error("data_agent: abort - query has no %s constraint", TENANT_FIELD)
        raise ExecutionError("Refusing to execute a query without a tenant constraint")
    if payload.is_pipeline:
        return mongo.aggregate_expenses(payload.body, settings)
    return mongo.find_expenses(payload.body, settings)
