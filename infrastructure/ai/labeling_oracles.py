"""
Labeling oracles.

Adapters that turn the two semantic questions the labeling service asks into
LLM calls:

- classification: which allowed category does a set of labels belong to?
- opposition: which labels of a category hold opposing viewpoints?

The adapters only shape prompts and coerce replies. They never validate the
classification against the allow-list; the labeling service owns that policy.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from config import settings
from infrastructure.ai.model_factory import build_chat_model
from infrastructure.errors import OracleFailure
from prompts.labeling import (
    category_classification_prompt,
    opposite_pairs_prompt,
    render_categories,
    render_labels,
)
from schemas.labeling import OppositeLabelPairs

logger = logging.getLogger(__name__)

LabelPair = Tuple[str, str]


class ClassificationOracle(Protocol):
    """Picks one category for a set of labels. May answer outside ``allowed_categories``."""

    async def classify(self, labels: Sequence[str], allowed_categories: Sequence[str]) -> str:
        ...


class OppositionOracle(Protocol):
    """Lists label pairs judged to oppose each other within ``category``."""

    async def find_opposites(self, labels: Sequence[str], category: str) -> List[LabelPair]:
        ...


async def _invoke_with_retry(chain: Runnable, payload: dict, max_attempts: int) -> Any:
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_random_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_not_exception_type(ValidationError),
        reraise=True,
    ):
        with attempt:
            return await chain.ainvoke(payload)


class LLMClassificationOracle:
    """Classifies labels with a chat model prompted to answer one category name."""

    name = "classification oracle"

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        *,
        chain: Runnable | None = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        if chain is None:
            if llm is None:
                raise ValueError("Either an LLM or a prepared chain must be provided.")
            chain = category_classification_prompt | llm | StrOutputParser()
        self._chain = chain
        self.max_attempts = settings.ORACLE_MAX_ATTEMPTS if max_attempts is None else max_attempts

    async def classify(self, labels: Sequence[str], allowed_categories: Sequence[str]) -> str:
        payload = {
            "labels": render_labels(labels),
            "categories": render_categories(allowed_categories),
        }
        try:
            raw = await _invoke_with_retry(self._chain, payload, self.max_attempts)
        except Exception as exc:
            logger.warning("Category classification failed for labels=%s: %s", list(labels), exc)
            raise OracleFailure(self.name, str(exc)) from exc

        category = self._parse_category(raw)
        logger.info("Classified labels=%s as category=%r", list(labels), category)
        return category

    @staticmethod
    def _parse_category(raw: Any) -> str:
        text = raw if isinstance(raw, str) else str(raw or "")
        cleaned = text.strip()
        if cleaned.startswith("```"):
            cleaned = cleaned.strip("`").strip()
            if cleaned.lower().startswith("json"):
                cleaned = cleaned[4:].strip()

        try:
            parsed = json.loads(cleaned)
        except ValueError:
            parsed = cleaned

        if isinstance(parsed, dict):
            parsed = parsed.get("category", "")
        if isinstance(parsed, list):
            parsed = parsed[0] if parsed else ""
        return str(parsed).strip().strip('"').strip("'").strip()


class LLMOppositionOracle:
    """Finds opposing label pairs with a chat model bound to a structured output schema."""

    name = "opposition oracle"

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        *,
        chain: Runnable | None = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        if chain is None:
            if llm is None:
                raise ValueError("Either an LLM or a prepared chain must be provided.")
            chain = opposite_pairs_prompt | llm.with_structured_output(OppositeLabelPairs)
        self._chain = chain
        self.max_attempts = settings.ORACLE_MAX_ATTEMPTS if max_attempts is None else max_attempts

    async def find_opposites(self, labels: Sequence[str], category: str) -> List[LabelPair]:
        payload = {"labels": render_labels(labels), "category": category}
        try:
            raw = await _invoke_with_retry(self._chain, payload, self.max_attempts)
            response = self._coerce_response(raw)
        except Exception as exc:
            logger.warning("Opposite label pairing failed for category=%r: %s", category, exc)
            raise OracleFailure(self.name, str(exc)) from exc

        pairs = [(pair.first, pair.second) for pair in response.pairs]
        logger.info("Opposition oracle returned %d pair(s) for category=%r", len(pairs), category)
        return pairs

    @staticmethod
    def _coerce_response(raw: Any) -> OppositeLabelPairs:
        if isinstance(raw, OppositeLabelPairs):
            return raw
        if hasattr(raw, "model_dump"):
            raw = raw.model_dump()
        if isinstance(raw, list):
            # bare list of [l1, l2] tuples
            raw = {
                "pairs": [
                    pair if isinstance(pair, dict) else {"first": pair[0], "second": pair[1]}
                    for pair in raw
                ]
            }
        return OppositeLabelPairs.model_validate(raw)


def build_classification_oracle(model_name: Optional[str] = None) -> LLMClassificationOracle:
    llm = build_chat_model(model_name=model_name or settings.CATEGORY_CLASSIFICATION_MODEL)
    return LLMClassificationOracle(llm)


def build_opposition_oracle(model_name: Optional[str] = None) -> LLMOppositionOracle:
    llm = build_chat_model(model_name=model_name or settings.OPPOSITION_PAIRING_MODEL)
    return LLMOppositionOracle(llm)


__all__ = [
    "ClassificationOracle",
    "OppositionOracle",
    "LLMClassificationOracle",
    "LLMOppositionOracle",
    "build_classification_oracle",
    "build_opposition_oracle",
]
