from __future__ import annotations

import json
import logging
import os
from typing import Any, List, Optional, Type

from langchain_anthropic import ChatAnthropic
from langchain_aws import ChatBedrockConverse
from langchain_core.callbacks import CallbackManagerForLLMRun
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from langchain_core.runnables import RunnableLambda
from langchain_openai import ChatOpenAI

from config import settings
from schemas.labeling import Category

logger = logging.getLogger(__name__)


class OfflineLabelingChatModel(BaseChatModel):
    """
    Chat model for running the labeling flow without provider traffic.

    Plain calls answer the fallback category, so every label set lands in
    ``all``. Structured calls return the requested schema with its defaults,
    which for opposite-label pairing means no pairs.
    """

    answer: str = Category.ALL.value
    call_count: int = 0

    @property
    def _llm_type(self) -> str:
        return "offline-labeling"

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Optional[CallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> ChatResult:
        self.call_count += 1
        logger.info("offline model call #%s (%d message(s))", self.call_count, len(messages))
        message = AIMessage(content=json.dumps(self.answer))
        return ChatResult(generations=[ChatGeneration(message=message)])

    def with_structured_output(self, schema: Type[Any], **kwargs: Any):
        def _defaults(_input):
            self.call_count += 1
            logger.info("offline model structured call #%s -> %s", self.call_count, schema.__name__)
            return schema.model_validate({})

        return RunnableLambda(_defaults)


def _resolve_provider(model_name: str | None) -> str:
    """Infer the provider from the model name, then from ``LLM_PROVIDER``."""
    if os.getenv("USE_DUMMY_LLM", "").strip().lower() in {"1", "true", "yes"}:
        return "dummy"

    for candidate in ((model_name or "").lower(), settings.LLM_PROVIDER or ""):
        if candidate.startswith("dummy"):
            return "dummy"
        if candidate.startswith(("claude", "anthropic")):
            return "anthropic"
        if candidate.startswith(("gpt", "o1", "openai")):
            return "openai"
        if candidate.startswith(("aws", "bedrock", "amazon")):
            return "aws"
    return settings.LLM_PROVIDER or ""


def build_chat_model(model_name: str, temperature: float = 0.0, **kwargs: Any) -> BaseChatModel:
    """Chat model backing a labeling oracle (classification or opposite pairing)."""
    provider = _resolve_provider(model_name)
    logger.debug("Building chat model=%s provider=%s", model_name, provider)

    if provider == "dummy":
        return OfflineLabelingChatModel(**kwargs)

    if provider == "anthropic":
        api_key = kwargs.pop("api_key", settings.ANTHROPIC_API_KEY)
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY is not set.")
        return ChatAnthropic(model_name=model_name, temperature=temperature, api_key=api_key, **kwargs)

    if provider == "openai":
        api_key = kwargs.pop("api_key", settings.OPENAI_API_KEY)
        if not api_key:
            raise ValueError("OPENAI_API_KEY is not set.")
        return ChatOpenAI(model_name=model_name, temperature=temperature, openai_api_key=api_key, **kwargs)

    if provider == "aws":
        return ChatBedrockConverse(model=model_name, temperature=temperature, region_name="us-east-1", **kwargs)

    raise ValueError(
        f"Unsupported model name '{model_name}' for a labeling oracle. "
        "Expected an anthropic, openai, bedrock or dummy model."
    )


__all__ = ["OfflineLabelingChatModel", "build_chat_model"]
