"""
Translator agent — natural-language question -> normalized MongoDB query.
One generator call, then extract-and-parse and shape normalization. Every failure on the
way is reported as a failed TranslationResult instead of an exception.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from agents.prompts import build_query_prompt
from llm.clients import TextClient
from utils.errors import LLMError, NetworkError
from utils.extraction import extract_and_parse
from utils.query_normalizer import QueryPayload, normalize

logger = logging.getLogger(__name__)

TRANSLATION_FAILED_MESSAGE = "Failed to parse LLM output or call LLM"


@dataclass(frozen=True)
class TranslationResult:
    """Either payload (success) or error (failure) is set."""

    payload: Optional[QueryPayload] = None
    error: Optional[Exception] = None
    raw_text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.payload is not None and self.error is None


class QueryTranslator:
    def __init__(self, client: TextClient, prompt_template: str):
        self.client = client
        self.prompt_template = prompt_template

    def translate(self, question: str, tenant_id: Optional[str] = None,
                  prompt_template: Optional[str] = None) -> TranslationResult:
        """
        Ask the generator for a query and return it normalized to a Filter or Pipeline.
        tenant_id is only used for log context; it is never sent to the generator.
        """
        prompt = build_query_prompt(prompt_template or self.prompt_template, question)
        raw_text = None
        try:
            raw_text = self.client.generate(prompt)
            payload = normalize(extract_and_parse(raw_text))
        except (LLMError, NetworkError) as e:
            logger.warning("translation_failed: tenant=%s error=%s raw=%r", tenant_id, e, raw_text)
            return TranslationResult(error=e, raw_text=raw_text)

        logger.info("translation_ok: tenant=%s shape=%s", tenant_id, payload.shape.value)
        return TranslationResult(payload=payload, raw_text=raw_text)
