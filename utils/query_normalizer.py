"""
Query normalization layer BEFORE placeholder resolution and injection.
Classifies the parsed generator value as a Filter (single MongoDB filter document) or a
Pipeline (list of aggregation stages), unwraps the {find, filter} / {aggregate} envelopes
the generator sometimes emits, and rejects shapes that are unsafe to execute.
"""
import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from utils.errors import NormalizationError


class QueryShape(str, Enum):
    FILTER = "filter"
    PIPELINE = "pipeline"


# Stage operators accepted in a Pipeline
PIPELINE_STAGES = {
    "$match", "$group", "$sort", "$limit", "$skip", "$project", "$count",
    "$unwind", "$addFields", "$set", "$unset", "$facet", "$bucket", "$bucketAuto",
    "$sortByCount", "$replaceRoot", "$replaceWith", "$sample",
}

# Operators that write, read other collections or run server-side JavaScript.
# Rejected anywhere in the payload (including inside $facet sub-pipelines).
FORBIDDEN_OPERATORS = {
    "$out", "$merge", "$lookup", "$graphLookup", "$unionWith",
    "$where", "$function", "$accumulator",
}


@dataclass(frozen=True)
class QueryPayload:
    """A normalized query: shape discriminator plus the Filter dict or Pipeline list."""

    shape: QueryShape
    body: Union[Dict[str, Any], List[Dict[str, Any]]]

    @property
    def is_pipeline(self) -> bool:
        return self.shape is QueryShape.PIPELINE

    def with_body(self, body) -> "QueryPayload":
        return QueryPayload(self.shape, body)


def _check_forbidden(value: Any) -> None:
    if isinstance(value, dict):
        for k, v in value.items():
            if k in FORBIDDEN_OPERATORS:
                raise NormalizationError(f"Operator {k} is not allowed")
            _check_forbidden(v)
    elif isinstance(value, list):
        for item in value:
            _check_forbidden(item)


def _unwrap(raw: Any) -> Any:
    """Reduce the enveloped conventions to a bare filter or pipeline."""
    if not isinstance(raw, dict):
        return raw
    if "find" in raw and "filter" in raw:
        return raw["filter"]
    if "aggregate" in raw:
        agg = raw["aggregate"]
        if isinstance(agg, list):
            return agg
        # command style: {"aggregate": "expenses", "pipeline": [...]}
        if isinstance(raw.get("pipeline"), list):
            return raw["pipeline"]
        raise NormalizationError("'aggregate' envelope does not contain a stage list")
    return raw


def _validate_pipeline(stages: List[Any]) -> None:
    for i, stage in enumerate(stages):
        if not isinstance(stage, dict) or len(stage) != 1:
            raise NormalizationError(f"Pipeline stage {i} must be an object with exactly one operator")
        (op,) = stage.keys()
        if op not in PIPELINE_STAGES:
            raise NormalizationError(f"Unrecognized pipeline stage {op!r} at position {i}")
        if op == "$match" and not isinstance(stage[op], dict):
            raise NormalizationError(f"$match at position {i} must be an object")


def normalize(raw: Any) -> QueryPayload:
    """
    Decide which of the two shapes a parsed generator value represents.
    list -> Pipeline; dict -> Filter (after envelope unwrapping). Anything else raises
    NormalizationError. Returns a deep copy; the caller's value is never mutated.
    """
    value = _unwrap(raw)
    if isinstance(value, list):
        _validate_pipeline(value)
        shape = QueryShape.PIPELINE
    elif isinstance(value, dict):
        shape = QueryShape.FILTER
    else:
        raise NormalizationError(f"Expected a filter object or a pipeline array, got {type(value).__name__}")
    _check_forbidden(value)
    return QueryPayload(shape, copy.deepcopy(value))


def leading_match_index(stages: List[Dict[str, Any]]) -> int:
    """Index of a $match stage at the head of the pipeline, or -1."""
    if stages and "$match" in stages[0]:
        return 0
    return -1


def group_field(payload: QueryPayload) -> Optional[str]:
    """Field the first $group keys on when its _id is a plain "$field" reference, else None."""
    if not payload.is_pipeline:
        return None
    for stage in payload.body:
        if "$group" in stage:
            key = (stage["$group"] or {}).get("_id")
            if isinstance(key, str) and key.startswith("$") and len(key) > 1:
                return key[1:]
            return None
    return None
