"""
Tenant scope guard — the last step before a query reaches MongoDB.
The caller-supplied tenant id always overrides whatever the generator wrote for userId.
"""
import copy
import logging

from utils.errors import ValidationError
from utils.query_normalizer import QueryPayload, leading_match_index

logger = logging.getLogger(__name__)

TENANT_FIELD = "userId"


def inject_tenant(payload: QueryPayload, tenant_id: str) -> QueryPayload:
    """
    Filter: set top-level userId (top-level keys are ANDed, so nested $or/$and clauses
    cannot widen the scope).
    Pipeline: set userId on the leading $match stage, inserting one at the head when the
    pipeline does not start with $match, so the constraint applies before any reshaping stage.
    """
    if not tenant_id or not str(tenant_id).strip():
        raise ValidationError("Tenant id is required")
    tenant_id = str(tenant_id)
    body = copy.deepcopy(payload.body)

    if not payload.is_pipeline:
        overridden = body.get(TENANT_FIELD)
        body[TENANT_FIELD] = tenant_id
    else:
        idx = leading_match_index(body)
        if idx == -1:
            overridden = None
            body.insert(0, {"$match": {TENANT_FIELD: tenant_id}})
        else:
            overridden = body[idx]["$match"].get(TENANT_FIELD)
            body[idx]["$match"][TENANT_FIELD] = tenant_id

    if overridden is not None and overridden != tenant_id:
        logger.warning("tenant_override: generator supplied userId=%r, replaced with caller tenant", overridden)
    return payload.with_body(body)
