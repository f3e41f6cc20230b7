"""
Orchestrator — fixed pipeline for one question:
translate -> resolve placeholders -> default date range -> tenant scope -> execute -> summarize.
Steps run strictly in this order; the tenant guard is always the last step before execution.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from agents.data_agent import fetch_expenses
from agents.summarizer import ResultSummarizer
from agents.translator import TRANSLATION_FAILED_MESSAGE, QueryTranslator
from llm.clients import build_text_client
from utils.config import Settings, get_settings
from utils.date_range import ensure_date_range
from utils.placeholders import resolve_placeholders
from utils.query_normalizer import QueryPayload, group_field
from utils.tenant_guard import inject_tenant

logger = logging.getLogger(__name__)

ANSWER_FOUND = "Expenses fetched successfully"
ANSWER_EMPTY = "No matching expenses found"

Executor = Callable[[QueryPayload], List[dict]]


def prepare_query(payload: QueryPayload, tenant_id: str, now: Optional[datetime] = None) -> QueryPayload:
    """Placeholders first, then the default range, then the tenant constraint (last)."""
    now = now or datetime.now()
    payload = resolve_placeholders(payload, now=now)
    payload = ensure_date_range(payload, now=now)
    return inject_tenant(payload, tenant_id)


class ExpenseQAPipeline:
    def __init__(self, translator: QueryTranslator, summarizer: ResultSummarizer,
                 executor: Executor = fetch_expenses):
        self.translator = translator
        self.summarizer = summarizer
        self.executor = executor

    def run(
        self,
        question: str,
        tenant_id: str,
        search_term: Optional[str] = None,
        include_results: bool = False,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Returns {"answer", "resultsAvailable", "summary"[, "results"]} on success, or the
        error envelope {"error", "details"} when translation fails (no query is executed).
        Execution errors propagate to the caller.
        """
        logger.info("question: tenant=%s question=%s", tenant_id, question)
        translation = self.translator.translate(question, tenant_id=tenant_id)
        if not translation.ok:
            return {"error": TRANSLATION_FAILED_MESSAGE, "details": str(translation.error)}

        query = prepare_query(translation.payload, tenant_id, now=now)
        logger.info("query_ready: shape=%s body=%s", query.shape.value, query.body)

        results = self.executor(query)
        report = self.summarizer.summarize(question, results, search_term=search_term,
                                           group_by=group_field(query))

        response = {
            "answer": ANSWER_FOUND if results else ANSWER_EMPTY,
            "resultsAvailable": bool(results),
            "summary": report.to_dict(),
        }
        if include_results:
            response["results"] = results
        return response


def build_pipeline(settings: Optional[Settings] = None) -> ExpenseQAPipeline:
    """Wire the pipeline from settings: one text client shared by translator and summarizer."""
    settings = settings or get_settings()
    client = build_text_client(settings)
    translator = QueryTranslator(client, settings.load_query_prompt())
    return ExpenseQAPipeline(
        translator=translator,
        summarizer=ResultSummarizer(client),
        executor=lambda payload: fetch_expenses(payload, settings),
    )
