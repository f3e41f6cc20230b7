"""
Data model for expense documents (collection: expenses).
Dates are stored as "dd/mm/yyyy" strings; userId scopes every document to one tenant.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from bson import ObjectId

EXPENSE_FIELDS = ["amount", "reason", "category", "date", "paymentMethod", "type", "userId", "insertTimestamp"]


def expense_doc(
    user_id: str,
    amount: float,
    category: str,
    date: str,
    reason: Optional[str] = None,
    payment_method: Optional[str] = None,
    expense_type: Optional[str] = None,
    insert_timestamp: Optional[datetime] = None,
) -> dict:
    """Build an expense document for insertion. date must already be dd/mm/yyyy."""
    datetime.strptime(date, "%d/%m/%Y")
    return {
        "amount": float(amount),
        "reason": reason,
        "category": category,
        "date": date,
        "paymentMethod": payment_method,
        "type": expense_type,
        "userId": user_id,
        "insertTimestamp": insert_timestamp or datetime.now(timezone.utc),
    }


def serialize_value(v: Any) -> Any:
    """ObjectId/datetime/Decimal -> JSON-friendly values; recurse into dicts and lists."""
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, datetime):
        return v.isoformat()
    if isinstance(v, Decimal):
        return float(v)
    if isinstance(v, dict):
        return {k: serialize_value(x) for k, x in v.items()}
    if isinstance(v, list):
        return [serialize_value(x) for x in v]
    return v


def serialize_record(doc: dict) -> dict:
    return {k: serialize_value(v) for k, v in doc.items()}
