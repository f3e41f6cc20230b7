from agents.summarizer import NO_DATA_SUMMARY, ResultSummarizer, SummaryReport, filter_by_reason
from fakes import FakeTextClient
from utils.errors import NetworkError, NoCandidateError

GOOD_REPLY = """```json
{"summary": "You spent ₹400 across 3 expenses.", "insights": ["Most expenses are via UPI", "Travel is the largest item"],}
```"""


def test_empty_results_skip_the_generator():
    client = FakeTextClient([GOOD_REPLY])
    report = ResultSummarizer(client).summarize("anything", [])
    assert report.summary == NO_DATA_SUMMARY == "No data available to summarize."
    assert report.total == 0.0 and report.count == 0 and report.insights == []
    assert client.calls == 0


def test_search_term_without_match_skips_the_generator(expenses):
    client = FakeTextClient([GOOD_REPLY])
    report = ResultSummarizer(client).summarize("q", expenses, search_term=" pizza ")
    assert report.summary == "No matching expenses found for 'pizza'."
    assert report.total == 0.0
    assert client.calls == 0


def test_search_term_filters_records_case_insensitively(expenses):
    client = FakeTextClient([GOOD_REPLY])
    report = ResultSummarizer(client).summarize("milk spend", expenses, search_term="MILK")
    assert report.count == 2
    assert report.total == 149.5
    assert client.calls == 1
    assert "Train ticket" not in client.prompts[0]


def test_filter_by_reason_handles_missing_reason():
    rows = [{"reason": None}, {"amount": 5}, {"reason": "Oat milk"}]
    assert filter_by_reason(rows, "milk") == [{"reason": "Oat milk"}]


def test_structured_reply_sets_prose_and_insights(expenses):
    client = FakeTextClient([GOOD_REPLY])
    report = ResultSummarizer(client).summarize("Show my expenses", expenses)
    assert report.summary == "You spent ₹400 across 3 expenses."
    assert report.insights == ["Most expenses are via UPI", "Travel is the largest item"]
    assert report.total == 400.0
    assert report.average == 133.33
    assert report.top_category == "Travel"
    assert report.top_payment_method == "Card"
    assert report.highest_expense["amount"] == 250.5
    assert "Show my expenses" in client.prompts[0]


def test_unparsable_reply_falls_back_to_raw_text(expenses):
    client = FakeTextClient(["Your spending looks healthy this month."])
    report = ResultSummarizer(client).summarize("q", expenses)
    assert report.summary == "Your spending looks healthy this month."
    assert report.insights == []
    assert report.total == 400.0


def test_reply_without_summary_key_falls_back_to_raw_text(expenses):
    client = FakeTextClient(['{"total": 999}'])
    report = ResultSummarizer(client).summarize("q", expenses)
    assert report.summary == '{"total": 999}'
    assert report.total == 400.0


def test_generator_failure_uses_local_summary(expenses):
    for error in (NetworkError("down"), NoCandidateError("empty")):
        report = ResultSummarizer(FakeTextClient(error=error)).summarize("q", expenses)
        assert report.summary.startswith("Total spent: ₹400.00.")
        assert report.count == 3


def test_no_client_uses_local_summary(expenses):
    report = ResultSummarizer().summarize("q", expenses)
    assert report.summary.startswith("Total spent: ₹400.00.")


def test_to_dict_uses_camel_case():
    d = SummaryReport(summary="s", average_per_day=2.0, top_category="Food").to_dict()
    assert d == {
        "summary": "s", "total": 0.0, "average": 0.0, "averagePerDay": 2.0,
        "topCategory": "Food", "topPaymentMethod": None, "highestExpense": None,
        "insights": [], "count": 0,
    }


def test_grouped_average_row_sends_no_zero_figures():
    client = FakeTextClient(['{"summary": "Your average grocery expense was ₹350."}'])
    report = ResultSummarizer(client).summarize(
        "What is the average grocery expense in March 2025", [{"_id": None, "avg": 350.0}])
    figures_line = next(line for line in client.prompts[0].splitlines() if "Computed figures" in line)
    assert '"count": 1' in figures_line
    assert '"total"' not in figures_line
    assert '"average"' not in figures_line
    assert '"avg": 350.0' in client.prompts[0]
    assert report.total is None
    assert report.to_dict()["average"] is None


def test_group_by_payment_method_sets_top_payment_method():
    rows = [{"_id": "Cash", "total": 80}, {"_id": "UPI", "total": 300}]
    report = ResultSummarizer().summarize("Total per payment method", rows, group_by="paymentMethod")
    assert report.top_payment_method == "UPI"
    assert report.top_category is None
