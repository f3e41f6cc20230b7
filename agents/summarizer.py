"""
Summarizer agent — turns query results into a SummaryReport.
Figures come from the analyst (local, deterministic); the generator only writes the prose
summary and insights. Any generator problem degrades to a fallback report, never an error.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from agents.analyst import analyze, local_summary_text
from agents.prompts import build_summary_prompt
from llm.clients import TextClient
from utils.errors import LLMError, NetworkError
from utils.extraction import extract_and_parse

logger = logging.getLogger(__name__)

NO_DATA_SUMMARY = "No data available to summarize."
NO_MATCH_SUMMARY = "No matching expenses found for '{term}'."


@dataclass
class SummaryReport:
    summary: str
    total: Optional[float] = 0.0
    average: Optional[float] = 0.0
    average_per_day: Optional[float] = None
    top_category: Optional[str] = None
    top_payment_method: Optional[str] = None
    highest_expense: Optional[Dict[str, Any]] = None
    insights: List[str] = field(default_factory=list)
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """camelCase keys for the API response."""
        d = asdict(self)
        return {
            "summary": d["summary"],
            "total": d["total"],
            "average": d["average"],
            "averagePerDay": d["average_per_day"],
            "topCategory": d["top_category"],
            "topPaymentMethod": d["top_payment_method"],
            "highestExpense": d["highest_expense"],
            "insights": d["insights"],
            "count": d["count"],
        }


def filter_by_reason(records: List[dict], search_term: str) -> List[dict]:
    """Case-insensitive substring match on the reason field."""
    term = search_term.strip().lower()
    return [r for r in records if term in str(r.get("reason") or "").lower()]


def _report_from_stats(stats: dict, summary: str) -> SummaryReport:
    return SummaryReport(
        summary=summary,
        total=stats["total"],
        average=stats["average"],
        average_per_day=stats["average_per_day"],
        top_category=(stats["top_category"] or {}).get("name"),
        top_payment_method=(stats["top_payment_method"] or {}).get("name"),
        highest_expense=stats["highest_expense"],
        count=stats["count"],
    )


class ResultSummarizer:
    def __init__(self, client: Optional[TextClient] = None):
        self.client = client

    def summarize(self, question: str, records: List[dict], search_term: Optional[str] = None,
                  group_by: Optional[str] = None) -> SummaryReport:
        if not records:
            return SummaryReport(summary=NO_DATA_SUMMARY)

        rows = records
        if search_term and search_term.strip():
            rows = filter_by_reason(records, search_term)
            if not rows:
                return SummaryReport(summary=NO_MATCH_SUMMARY.format(term=search_term.strip()))

        stats = analyze(question, rows, group_by=group_by)
        report = _report_from_stats(stats, summary="")

        if self.client is None:
            report.summary = local_summary_text(stats)
            return report

        try:
            raw = self.client.generate(build_summary_prompt(question, rows, stats))
        except (NetworkError, LLMError) as e:
            logger.warning("summary_generation_failed: %s", e)
            report.summary = local_summary_text(stats)
            return report

        try:
            parsed = extract_and_parse(raw)
        except LLMError as e:
            logger.warning("summary_parse_failed: %s raw=%r", e, raw)
            report.summary = raw or local_summary_text(stats)
            return report

        if not isinstance(parsed, dict) or not str(parsed.get("summary") or "").strip():
            report.summary = raw
            return report
        report.summary = str(parsed["summary"]).strip()
        insights = parsed.get("insights")
        if isinstance(insights, list):
            report.insights = [str(i) for i in insights if str(i).strip()]
        elif isinstance(insights, str) and insights.strip():
            report.insights = [insights.strip()]
        return report
