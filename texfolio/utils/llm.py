"""
LLM provider abstraction and response parsing utilities.

Chat completions go through one LLMProvider interface regardless of vendor.
Transient failures (rate limits, dropped connections, 5xx) are retried with
exponential backoff; anything else surfaces immediately. The parsing helpers
pull JSON out of replies that arrive wrapped in code fences or prose.

Environment:
    LLM_PROVIDER      "openai" (default) or "anthropic"
    LLM_MODEL         Model name override
    OPENAI_API_KEY    / OPENAI_BASE_URL (OpenAI-compatible endpoints: Groq, NIM, ...)
    ANTHROPIC_API_KEY
"""

import json
import os
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

MAX_RETRIES = 5
BASE_DELAY = 1.0
MAX_TOKENS = 2048

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
}

T = TypeVar("T")

_CODE_FENCE = re.compile(r"```(?:json|markdown|md)?", re.IGNORECASE)


def _retry_with_backoff(
    operation: Callable[[], T],
    transient: Tuple[Type[Exception], ...],
    label: str,
    max_retries: int = MAX_RETRIES,
) -> T:
    """
    Call operation, retrying transient failures with exponential backoff.

    Args:
        operation: Zero-argument callable performing one API request
        transient: Exception types worth retrying
        label: Provider name used in retry log lines
        max_retries: Total attempts before the last error is re-raised
    """
    for attempt in range(1, max_retries + 1):
        try:
            return operation()
        except transient as e:
            if attempt == max_retries:
                raise
            delay = BASE_DELAY * 2 ** (attempt - 1)
            logger.warning(
                f"[llm] {label}: {type(e).__name__}, retry {attempt}/{max_retries - 1} in {delay:.1f}s"
            )
            time.sleep(delay)


@dataclass
class LLMResponse:
    """One completion and its token usage."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


class LLMProvider(ABC):
    """
    Vendor-neutral chat completion.

    Subclasses set `vendor` and `transient_errors`, create their SDK client, and
    implement _call_api() for a single request; generate() adds the retries.
    """

    vendor: str = ""
    transient_errors: Tuple[Type[Exception], ...] = ()

    def __init__(self, model: Optional[str] = None):
        self.model = model or DEFAULT_MODELS.get(self.vendor, "")

    @property
    def name(self) -> str:
        return f"{self.vendor}/{self.model}"

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str, temperature: float) -> LLMResponse:
        """Single API request, no retries."""

    def generate(self, system_prompt: str, user_prompt: str, temperature: float = 0.5) -> LLMResponse:
        return _retry_with_backoff(
            lambda: self._call_api(system_prompt, user_prompt, temperature),
            self.transient_errors,
            self.name,
        )


def _require_key(variable: str) -> str:
    value = os.getenv(variable)
    if not value:
        raise ValueError(f"{variable} environment variable not set")
    return value


class AnthropicProvider(LLMProvider):
    """Claude via the Anthropic Messages API."""

    vendor = "anthropic"

    def __init__(self, model: Optional[str] = None):
        # SDK import is deferred until this provider is actually chosen
        import anthropic

        super().__init__(model)
        self.client = anthropic.Anthropic(api_key=_require_key("ANTHROPIC_API_KEY"))
        self.transient_errors = (
            anthropic.RateLimitError,
            anthropic.APIConnectionError,
            anthropic.InternalServerError,
        )

    def _call_api(self, system_prompt: str, user_prompt: str, temperature: float) -> LLMResponse:
        message = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        text = "".join(block.text for block in message.content if block.type == "text")
        return LLMResponse(text, self.model, message.usage.input_tokens, message.usage.output_tokens)


class OpenAIProvider(LLMProvider):
    """
    Chat Completions API. Any OpenAI-compatible endpoint (Groq, NVIDIA NIM, a
    local server) works by setting base_url or OPENAI_BASE_URL.
    """

    vendor = "openai"

    def __init__(self, model: Optional[str] = None, base_url: Optional[str] = None):
        import openai

        super().__init__(model)
        self.client = openai.OpenAI(
            api_key=_require_key("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL"),
        )
        self.transient_errors = (
            openai.RateLimitError,
            openai.APIConnectionError,
            openai.InternalServerError,
        )

    def _call_api(self, system_prompt: str, user_prompt: str, temperature: float) -> LLMResponse:
        completion = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            temperature=temperature,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        usage = completion.usage
        return LLMResponse(
            completion.choices[0].message.content or "",
            self.model,
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
        )


PROVIDERS = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


def get_provider(provider_name: Optional[str] = None, model: Optional[str] = None) -> LLMProvider:
    """
    Build the configured provider.

    Args:
        provider_name: Key of PROVIDERS (default: LLM_PROVIDER, then "openai")
        model: Model name (default: LLM_MODEL, then the provider default)

    Raises:
        ValueError: Unknown provider, or its API key is not set
    """
    provider_name = (provider_name or os.getenv("LLM_PROVIDER") or "openai").lower()
    if provider_name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider_name}. Use one of {sorted(PROVIDERS)}")
    return PROVIDERS[provider_name](model=model or os.getenv("LLM_MODEL"))


# =============================================================================
# REPLY PARSING
# =============================================================================


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences that models like to wrap replies in."""
    return _CODE_FENCE.sub("", text).strip()


def _extract_json(text: str, kind: type, open_char: str, close_char: str) -> Optional[Any]:
    """Whole reply as JSON of `kind`, else the outermost open..close span, else None."""
    candidates = [text]
    start, end = text.find(open_char), text.rfind(close_char)
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, kind):
            return result
    return None


def parse_object_response(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object from an LLM reply.

    Returns:
        The parsed dict, or None if no JSON object could be recovered
    """
    return _extract_json(strip_code_fences(text), dict, "{", "}")


def parse_array_response(text: str, fallback_count: int = 5) -> List[str]:
    """
    Parse a JSON array of strings from an LLM reply.

    When no array can be recovered, falls back to treating each non-empty line
    (with list markers and quotes stripped) as an item.

    Args:
        text: Reply text
        fallback_count: Maximum number of lines kept by the fallback
    """
    text = strip_code_fences(text)
    result = _extract_json(text, list, "[", "]")
    if result is not None:
        return [str(item) for item in result]

    lines = []
    for line in text.splitlines():
        line = line.strip().lstrip("-•*").strip().strip('"').strip(",")
        if line and line[0] not in "[]":
            lines.append(line)
    return lines[:fallback_count]
