"""
Date placeholder resolution: %Y (year), %m (month), %d (day of month).
Substitution is textual over the JSON-serialized payload so it works for both shapes.
"""
import json
from datetime import datetime
from typing import Optional

from utils.query_normalizer import QueryPayload

YEAR_TOKEN = "%Y"
MONTH_TOKEN = "%m"
DAY_TOKEN = "%d"


def resolve_placeholders(payload: QueryPayload, now: Optional[datetime] = None) -> QueryPayload:
    """Replace every placeholder token with the current calendar value. Returns a new payload."""
    now = now or datetime.now()
    text = (
        json.dumps(payload.body)
        .replace(YEAR_TOKEN, f"{now.year:04d}")
        .replace(MONTH_TOKEN, f"{now.month:02d}")
        .replace(DAY_TOKEN, f"{now.day:02d}")
    )
    return payload.with_body(json.loads(text))
