"""
Analyst agent — calculations only, no text generation.
Uses Decimal for accurate monetary sums; rounds half-up to 2 decimals for output.
Works on plain expense records and on grouped pipeline rows (e.g. {"_id": "UPI", "total": 500}).
"""
import re
from collections import defaultdict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

# Keys we treat as amount-like (summable), in order of preference
AMOUNT_KEYS = ("amount", "total", "sum", "value")
HIGHLIGHT_FIELDS = ("reason", "category", "date", "paymentMethod")
GROUPED_TOPS = {"category": "top_category", "paymentMethod": "top_payment_method"}

QUESTION_DATE_RE = re.compile(r"\b(\d{2}/\d{2}/\d{4})\b")
CURRENCY = "₹"
QUANTIZE = Decimal("0.01")


def _round2(val) -> float:
    """Round to 2 decimal places using half-up."""
    if val is None:
        return 0.0
    d = Decimal(str(val)).quantize(QUANTIZE, rounding=ROUND_HALF_UP)
    return float(d)


def _numeric(val: Any) -> Optional[float]:
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return float(val)
    try:
        return float(str(val).replace(",", "").strip())
    except (ValueError, TypeError):
        return None


def days_in_question(question: str) -> Optional[int]:
    """
    Inclusive day count between the two dd/mm/yyyy dates in the question.
    None unless exactly two valid dates are present and the range is not reversed.
    """
    matches = QUESTION_DATE_RE.findall(question or "")
    if len(matches) != 2:
        return None
    try:
        start = datetime.strptime(matches[0], "%d/%m/%Y").date()
        end = datetime.strptime(matches[1], "%d/%m/%Y").date()
    except ValueError:
        return None
    days = (end - start).days + 1
    return days if days > 0 else None


def find_amount_key(rows: List[dict]) -> Optional[str]:
    for key in AMOUNT_KEYS:
        if any(_numeric(r.get(key)) is not None for r in rows):
            return key
    return None


def _top_by_amount(rows: List[dict], label_key: str, amount_key: str) -> Optional[Dict[str, Any]]:
    """Label with the largest summed amount; ties go to the first label seen."""
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for r in rows:
        label = r.get(label_key)
        n = _numeric(r.get(amount_key))
        if label is None or not str(label).strip() or n is None:
            continue
        totals[str(label).strip()] += Decimal(str(n))
    if not totals:
        return None
    name, amount = max(totals.items(), key=lambda kv: kv[1])
    return {"name": name, "amount": _round2(amount)}


def analyze(question: str, rows: List[dict], group_by: Optional[str] = None) -> dict:
    """
    Compute summary figures over the rows. Never invents values: an empty row list gives zero
    totals; rows with no summable field (e.g. grouped {"_id": null, "avg": 350}) give None.
    group_by names the field a $group keyed on, so grouped rows can fill the top category or
    payment method from their _id.
    """
    result = {
        "count": len(rows),
        "total": 0.0,
        "average": 0.0,
        "average_per_day": None,
        "highest_expense": None,
        "top_category": None,
        "top_payment_method": None,
    }
    if not rows:
        return result
    amount_key = find_amount_key(rows)
    if amount_key is None:
        result["total"] = result["average"] = None
        return result

    total = Decimal("0")
    highest_row, highest = None, None
    for r in rows:
        n = _numeric(r.get(amount_key))
        if n is None:
            continue
        total += Decimal(str(n))
        if highest is None or n > highest:
            highest_row, highest = r, n

    result["total"] = _round2(total)
    result["average"] = _round2(total / len(rows))
    days = days_in_question(question)
    if days:
        result["average_per_day"] = _round2(total / days)

    if highest_row is not None:
        expense = {"amount": _round2(highest)}
        expense.update({k: highest_row[k] for k in HIGHLIGHT_FIELDS if highest_row.get(k) is not None})
        if amount_key != "amount" and "_id" in highest_row:
            expense["label"] = highest_row["_id"]
        result["highest_expense"] = expense

    result["top_category"] = _top_by_amount(rows, "category", amount_key)
    result["top_payment_method"] = _top_by_amount(rows, "paymentMethod", amount_key)
    grouped_key = GROUPED_TOPS.get(group_by)
    if grouped_key and result[grouped_key] is None:
        result[grouped_key] = _top_by_amount(rows, "_id", amount_key)
    return result


def local_summary_text(stats: dict) -> str:
    """Deterministic one-paragraph summary used when the generator is unavailable."""
    if stats.get("total") is None:
        return f"Found {stats['count']} result(s); no amount field to total."
    highest = (stats.get("highest_expense") or {}).get("amount", 0)
    text = (
        f"Total spent: {CURRENCY}{stats['total']:,.2f}. "
        f"Highest single expense: {CURRENCY}{highest:,.2f}. "
        f"Average per item: {CURRENCY}{stats['average']:,.2f}."
    )
    if stats.get("average_per_day") is not None:
        text += f" Average per day (based on date range): {CURRENCY}{stats['average_per_day']:,.2f}."
    top = stats.get("top_category")
    if top:
        text += f" Top category: {top['name']} ({CURRENCY}{top['amount']:,.2f})."
    top_pm = stats.get("top_payment_method")
    if top_pm:
        text += f" Most spent via: {top_pm['name']} ({CURRENCY}{top_pm['amount']:,.2f})."
    return text
