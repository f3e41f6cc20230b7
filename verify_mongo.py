#!/usr/bin/env python3
"""
Verification: insert one expense for a throwaway tenant, query it back through the
scoped executor (find and aggregate), then delete it.
Requires MONGODB_URI in .env or environment.
Run from the project root:  python verify_mongo.py
"""
import sys
import uuid
from datetime import datetime

from agents.data_agent import fetch_expenses
from agents.orchestrator import prepare_query
from db import mongo
from db.models import expense_doc
from utils.config import get_settings
from utils.errors import ExpenseQAError
from utils.query_normalizer import normalize


def main():
    settings = get_settings()
    if not settings.mongodb_uri:
        print("MONGODB_URI not set. Add it to .env or the environment.")
        return 1

    tenant = f"verify-{uuid.uuid4().hex[:8]}"
    today = datetime.now().strftime("%d/%m/%Y")
    try:
        mongo.insert_expense(expense_doc(tenant, 120.0, "Groceries", today, reason="milk",
                                         payment_method="UPI", expense_type="debit"), settings)
        print(f"  Inserted 1 expense for tenant {tenant}")

        found = fetch_expenses(prepare_query(normalize({"reason": {"$regex": "milk", "$options": "i"}}), tenant), settings)
        grouped = fetch_expenses(
            prepare_query(normalize([{"$group": {"_id": "$paymentMethod", "total": {"$sum": "$amount"}}}]), tenant),
            settings,
        )
    except ExpenseQAError as e:
        print(f"Verification failed: {e}")
        return 1
    finally:
        try:
            mongo.delete_expenses({"userId": tenant}, settings)
        except ExpenseQAError as e:
            print(f"  Cleanup failed for tenant {tenant}: {e}")

    if len(found) == 1 and grouped and grouped[0].get("total") == 120.0:
        print("  find and aggregate returned the scoped expense. MongoDB verification passed.")
        return 0
    print(f"Unexpected results: find={found} aggregate={grouped}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
