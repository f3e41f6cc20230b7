import pytest

from agents.orchestrator import prepare_query
from utils.date_range import has_date_constraint
from utils.errors import ValidationError
from utils.query_normalizer import normalize
from utils.tenant_guard import TENANT_FIELD, inject_tenant


def test_filter_gets_top_level_tenant():
    body = {"$and": [
        {"reason": {"$regex": "milk", "$options": "i"}},
        {"date": {"$gte": "02/03/2025", "$lte": "17/09/2025"}},
    ]}
    result = inject_tenant(normalize(body), "u2")
    assert result.body == {**body, "userId": "u2"}


def test_generator_supplied_tenant_is_overridden():
    result = inject_tenant(normalize({"userId": "someone-else", "amount": 5}), "u1")
    assert result.body == {"userId": "u1", "amount": 5}


def test_pipeline_leading_match_is_merged():
    stages = [{"$match": {"category": "Travel", "userId": "u9"}}, {"$limit": 1}]
    result = inject_tenant(normalize(stages), "u1")
    assert result.body[0] == {"$match": {"category": "Travel", "userId": "u1"}}
    assert len(result.body) == 2


def test_pipeline_not_starting_with_match_gets_head_match():
    stages = [{"$group": {"_id": "$userId", "total": {"$sum": "$amount"}}}, {"$match": {"_id": "u9"}}]
    result = inject_tenant(normalize(stages), "u1")
    assert result.body[0] == {"$match": {"userId": "u1"}}
    assert result.body[1:] == stages


@pytest.mark.parametrize("tenant", ["", "   ", None])
def test_blank_tenant_is_rejected(tenant):
    with pytest.raises(ValidationError):
        inject_tenant(normalize({}), tenant)


def test_injection_is_idempotent():
    once = inject_tenant(normalize([{"$limit": 3}]), "u1")
    assert inject_tenant(once, "u1") == once


@pytest.mark.parametrize("raw", [
    {},
    {"amount": {"$gt": 1000}},
    {"$or": [{"userId": "u2"}, {"category": "Travel"}]},
    {"find": "expenses", "filter": {"userId": "u2"}},
    [],
    [{"$group": {"_id": None, "total": {"$sum": "$amount"}}}],
    [{"$match": {"date": {"$gte": "01/%m/%Y"}}}, {"$sort": {"amount": -1}}],
    {"aggregate": [{"$sort": {"amount": 1}}, {"$match": {"userId": "u2"}}]},
])
def test_full_chain_always_scopes_to_tenant(raw, now):
    result = prepare_query(normalize(raw), "u1", now=now)
    if result.is_pipeline:
        scope = result.body[0]["$match"]
    else:
        scope = result.body
    assert scope[TENANT_FIELD] == "u1"
    if result.is_pipeline:
        assert any(has_date_constraint(stage.get("$match")) for stage in result.body)
    else:
        assert has_date_constraint(result.body)
