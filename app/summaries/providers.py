"""
Summarization providers.

Each supported model identifier maps to a provider exposing a single
``summarize(content, config)`` operation. Adding a model is a call to
``register_model``; nothing else branches on the model name.
"""
import logging
from dataclasses import dataclass
from typing import Protocol

from openai import OpenAI, OpenAIError
from app.config import settings
from app.errors import ProviderError, UnsupportedModelError

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 25000

SYSTEM_PROMPT = (
    "You are a professional article summarization assistant. "
    "Write a concise, clear summary of the article the user provides, "
    "no longer than 200 characters. "
    "Output only the summary, without any explanation or commentary."
)


@dataclass(frozen=True)
class ProviderConfig:
    model: str
    api_key: str | None
    base_url: str
    timeout: float = 60


class SummaryProvider(Protocol):
    def summarize(self, content: str, config: ProviderConfig) -> str: ...


class ChatCompletionProvider:
    """OpenAI-compatible chat completion endpoint (DeepSeek by default)."""

    def _client(self, config: ProviderConfig) -> OpenAI:
        return OpenAI(api_key=config.api_key, base_url=config.base_url, timeout=config.timeout, max_retries=0)

    def summarize(self, content: str, config: ProviderConfig) -> str:
        if not config.api_key:
            raise ProviderError("DEEPSEEK_API_KEY is not configured")

        text = (content or "")[:MAX_INPUT_CHARS]
        try:
            r = self._client(config).chat.completions.create(
                model=config.model,
                messages=[{"role": "system", "content": SYSTEM_PROMPT},
                          {"role": "user", "content": f"Summarize the following article:\n\n{text}"}],
                stream=False,
            )
        except OpenAIError as e:
            logger.warning("Summarization request to %s failed: %s", config.base_url, e)
            raise ProviderError(f"Summarization request failed: {e}") from e

        if not r.choices or r.choices[0].message is None:
            raise ProviderError("Could not extract a summary from the provider response")
        summary = (r.choices[0].message.content or "").strip()
        if not summary:
            raise ProviderError("Could not extract a summary from the provider response")
        return summary


@dataclass(frozen=True)
class SupportedModel:
    name: str
    description: str
    provider: SummaryProvider


MODELS: dict[str, SupportedModel] = {}


def register_model(model_id: str, name: str, description: str, provider: SummaryProvider) -> None:
    MODELS[model_id] = SupportedModel(name=name, description=description, provider=provider)


def get_model(model_id: str) -> SupportedModel:
    try:
        return MODELS[model_id]
    except KeyError:
        raise UnsupportedModelError(f"Unsupported model: {model_id}") from None


def provider_config(model_id: str) -> ProviderConfig:
    return ProviderConfig(
        model=model_id,
        api_key=settings.deepseek_api_key,
        base_url=settings.deepseek_base_url,
        timeout=settings.provider_timeout_seconds,
    )


def supported_models() -> dict[str, dict[str, str]]:
    return {mid: {"name": m.name, "description": m.description} for mid, m in MODELS.items()}


_chat_completions = ChatCompletionProvider()
register_model("deepseek-chat", "DeepSeek Chat", "General-purpose chat model served by DeepSeek", _chat_completions)
register_model("deepseek-reasoner", "DeepSeek Reasoner", "DeepSeek reasoning model, slower but more thorough", _chat_completions)
