"""
Default date range: when the query carries no date constraint, bound it to the
current month to date (inclusive), in the dd/mm/yyyy convention of the expenses schema.
"""
import copy
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from utils.query_normalizer import QueryPayload, leading_match_index

logger = logging.getLogger(__name__)

DATE_FIELD = "date"
DATE_FORMAT = "%d/%m/%Y"
_LOGICAL_OPERATORS = ("$and", "$or", "$nor")


def default_date_range(now: Optional[datetime] = None) -> Dict[str, str]:
    """{"$gte": first of the month, "$lte": today} as dd/mm/yyyy strings."""
    now = now or datetime.now()
    return {
        "$gte": now.replace(day=1).strftime(DATE_FORMAT),
        "$lte": now.strftime(DATE_FORMAT),
    }


def has_date_constraint(filter_doc: Any) -> bool:
    """True if a date key appears at top level or inside $and/$or/$nor clauses."""
    if not isinstance(filter_doc, dict):
        return False
    if DATE_FIELD in filter_doc:
        return True
    for op in _LOGICAL_OPERATORS:
        clauses = filter_doc.get(op)
        if isinstance(clauses, list) and any(has_date_constraint(c) for c in clauses):
            return True
    return False


def ensure_date_range(payload: QueryPayload, now: Optional[datetime] = None) -> QueryPayload:
    """
    Filter: add a top-level date range when none exists.
    Pipeline: only the first $match stage counts. When it has no date constraint, the range
    goes into the leading $match or a new $match at the head; a later $match that filters
    grouped rows never bounds the scan.
    """
    body = copy.deepcopy(payload.body)

    if not payload.is_pipeline:
        if has_date_constraint(body):
            return payload.with_body(body)
        body[DATE_FIELD] = default_date_range(now)
        logger.info("date_range_injected: shape=filter range=%s", body[DATE_FIELD])
        return payload.with_body(body)

    first_match = next((stage["$match"] for stage in body if "$match" in stage), None)
    if has_date_constraint(first_match):
        return payload.with_body(body)
    date_range = default_date_range(now)
    idx = leading_match_index(body)
    if idx == -1:
        body.insert(0, {"$match": {DATE_FIELD: date_range}})
    else:
        body[idx]["$match"][DATE_FIELD] = date_range
    logger.info("date_range_injected: shape=pipeline range=%s", date_range)
    return payload.with_body(body)
