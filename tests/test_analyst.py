import pytest

from agents.analyst import analyze, days_in_question, find_amount_key, local_summary_text


def test_totals_and_averages(expenses):
    stats = analyze("all my expenses", expenses)
    assert stats["count"] == 3
    assert stats["total"] == 400.0
    assert stats["average"] == 133.33
    assert stats["average_per_day"] is None


def test_highest_expense(expenses):
    highest = analyze("q", expenses)["highest_expense"]
    assert highest == {"amount": 250.5, "reason": "Train ticket", "category": "Travel",
                       "date": "05/09/2025", "paymentMethod": "Card"}


def test_top_category_and_payment_method_by_summed_amount(expenses):
    stats = analyze("q", expenses)
    assert stats["top_category"] == {"name": "Travel", "amount": 250.5}
    assert stats["top_payment_method"] == {"name": "Card", "amount": 250.5}

    expenses.append({"amount": 300, "category": "Groceries", "paymentMethod": "UPI"})
    stats = analyze("q", expenses)
    assert stats["top_category"] == {"name": "Groceries", "amount": 449.5}
    assert stats["top_payment_method"] == {"name": "UPI", "amount": 449.5}


def test_average_per_day_uses_inclusive_day_count(expenses):
    stats = analyze("Spending between 01/09/2025 and 10/09/2025", expenses)
    assert stats["average_per_day"] == 40.0


def test_days_in_question():
    assert days_in_question("between 01/09/2025 and 01/09/2025") == 1
    assert days_in_question("from 28/02/2024 to 01/03/2024") == 3
    assert days_in_question("on 01/09/2025") is None
    assert days_in_question("01/09/2025, 02/09/2025 and 03/09/2025") is None
    assert days_in_question("from 10/09/2025 to 01/09/2025") is None
    assert days_in_question("from 31/02/2025 to 01/03/2025") is None


def test_grouped_rows_use_total_key():
    rows = [{"_id": "UPI", "total": 300}, {"_id": "Cash", "total": 100.25}]
    assert find_amount_key(rows) == "total"
    stats = analyze("Total per payment method", rows)
    assert stats["total"] == 400.25
    assert stats["highest_expense"] == {"amount": 300.0, "label": "UPI"}
    assert stats["top_category"] is None


def test_empty_rows_give_zeros():
    stats = analyze("q", [])
    assert stats["total"] == 0.0
    assert stats["average"] == 0.0
    assert stats["highest_expense"] is None


@pytest.mark.parametrize("rows", [
    [{"_id": None, "avg": 350.0}],
    [{"_id": "Groceries", "count": 4}],
    [{"_id": "x", "count": "n/a"}],
])
def test_rows_without_amount_field_give_no_figures(rows):
    stats = analyze("What is the average grocery expense in March 2025", rows)
    assert stats["count"] == len(rows)
    assert stats["total"] is None
    assert stats["average"] is None
    assert stats["highest_expense"] is None
    assert local_summary_text(stats) == "Found 1 result(s); no amount field to total."


def test_group_by_fills_top_from_row_ids():
    rows = [{"_id": "UPI", "total": 300}, {"_id": "Card", "total": 120}]
    assert analyze("q", rows, group_by="paymentMethod")["top_payment_method"] == {"name": "UPI", "amount": 300.0}
    assert analyze("q", rows, group_by="category")["top_category"] == {"name": "UPI", "amount": 300.0}
    stats = analyze("q", rows, group_by="date")
    assert stats["top_category"] is None
    assert stats["top_payment_method"] is None


def test_half_up_rounding():
    stats = analyze("q", [{"amount": 0.125}, {"amount": 0.0}])
    assert stats["total"] == 0.13
    assert stats["average"] == 0.06


def test_local_summary_text(expenses):
    text = local_summary_text(analyze("between 01/09/2025 and 10/09/2025", expenses))
    assert text.startswith("Total spent: ₹400.00. Highest single expense: ₹250.50. Average per item: ₹133.33.")
    assert "Average per day (based on date range): ₹40.00." in text
    assert "Top category: Travel (₹250.50)." in text
