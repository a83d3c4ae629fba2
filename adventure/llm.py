"""LLM client — HTTP connection to the generative text service.

The turn runner is handed an LLM callable matching the protocol:

    async def __call__(self, stage: str, prompt: str) -> str: ...

`stage` names the caller (currently always "narrator"); implementations may
use it for logging.

Two implementations are provided:

    HttpLLM    — real HTTP client for OpenAI-style chat completions
                 (OpenRouter) or KoboldCpp text completion.
    CannedLLM  — returns one of a handful of fixed replies. Used when no API
                 key is configured so the game stays playable offline.

Every failure to obtain a reply surfaces as LLMError, which the HTTP layer
reports as a retryable error without touching the game state.
"""

from __future__ import annotations

import logging
import random
from typing import Protocol

import httpx

from adventure.config import ProviderFormat, Settings
from adventure.prompts import SYSTEM_PROMPT, SYSTEM_PROMPTS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol — every LLM implementation must match this signature
# ---------------------------------------------------------------------------

class LLM(Protocol):
    async def __call__(self, stage: str, prompt: str) -> str: ...


# ---------------------------------------------------------------------------
# HttpLLM — connects to a real backend
# ---------------------------------------------------------------------------

class HttpLLM:
    """Async HTTP client for the generative service.

    Supported formats:
      "openai"     — POST {base}/chat/completions
                     {"model", "messages", "max_tokens", "temperature"}
                     Response: {"choices": [{"message": {"content": "..."}}]}
      "koboldcpp"  — POST {base}/api/v1/generate  {"prompt": ...}
                     Response: {"results": [{"text": "..."}]}

    Args:
        provider_url:    Base URL, e.g. "https://openrouter.ai/api/v1".
        api_key:         Bearer token, or empty string if not required.
        provider_format: Wire format to use. Defaults to "openai".
        model:           Model identifier, used only by the openai format.
        timeout:         HTTP timeout in seconds.
        temperature:     Sampling temperature (openai format).
        max_tokens:      Completion limit (openai format).
        system_prompt:   System message sent ahead of the prompt (openai format).
        referer, title:  OpenRouter attribution headers, sent when non-empty.
    """

    def __init__(
        self,
        provider_url: str,
        api_key: str = "",
        provider_format: ProviderFormat = "openai",
        model: str = "",
        timeout: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 1500,
        system_prompt: str = SYSTEM_PROMPT,
        referer: str = "",
        title: str = "",
    ) -> None:
        self._base_url = provider_url.rstrip("/")
        self._api_key = api_key
        self._format = provider_format
        self._model = model
        self._timeout = timeout
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._system_prompt = system_prompt
        self._referer = referer
        self._title = title

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        if self._referer:
            headers["HTTP-Referer"] = self._referer
        if self._title:
            headers["X-Title"] = self._title
        return headers

    def _build_request(self, prompt: str) -> tuple[str, dict]:
        """Return (url, body) for the configured format."""
        if self._format == "koboldcpp":
            return f"{self._base_url}/api/v1/generate", {"prompt": prompt}

        # openai (default)
        messages = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": prompt})
        body: dict = {
            "messages": messages,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        if self._model:
            body["model"] = self._model
        return f"{self._base_url}/chat/completions", body

    def _parse_response(self, data: dict) -> str:
        """Extract the completion text from the response body."""
        if self._format == "koboldcpp":
            results = data.get("results")
            first = results[0] if isinstance(results, list) and results else None
            text = first.get("text") if isinstance(first, dict) else None
            if not isinstance(text, str):
                raise LLMError("Unexpected response format from KoboldCpp backend")
            return text

        choices = data.get("choices")
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise LLMError("Unexpected response format from chat completion backend")
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise LLMError("Chat completion content is not plain text")
        return content

    async def __call__(self, stage: str, prompt: str) -> str:
        url, body = self._build_request(prompt)
        logger.debug("llm call stage=%s url=%s prompt_len=%d", stage, url, len(prompt))

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to LLM backend at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"LLM backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"LLM backend timed out after {self._timeout}s") from e
        except httpx.RequestError as e:
            raise LLMError(f"Request to LLM backend failed: {e!r}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError("LLM backend returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise LLMError("LLM backend returned an unexpected body")

        text = self._parse_response(data).strip()
        logger.debug("llm response stage=%s len=%d", stage, len(text))
        return text


# ---------------------------------------------------------------------------
# CannedLLM — fixed replies, no network
# ---------------------------------------------------------------------------

FALLBACK_RESPONSES = [
    "The village square bustles with activity. Merchants hawk their wares from "
    "colorful stalls while children chase each other between the legs of browsing "
    "customers. You notice a weathered tavern with a creaking wooden sign to the "
    "north and a narrow path leading into dense forest to the east.",

    "You move to *forest path*. Sunlight filters through the dense canopy, creating "
    "dappled patterns on the forest floor. The air grows cooler as the trees press "
    "closer, and you hear rustling in the underbrush nearby. Something or someone "
    "is watching your progress.",

    "You find {rusty iron key} and {pouch of gold coins}. The ornate wooden chest "
    "was partially hidden beneath fallen leaves and moss. The key has strange "
    "markings etched into its surface, and the leather pouch jingles with the "
    "weight of its contents.",

    "As twilight descends, you spot a faint amber glow between the trees ahead. "
    "Drawing closer, you make out a small cabin with smoke curling from its "
    "chimney. The windows are shuttered, but you hear faint humming from within.",

    "The village elder approaches, leaning on a gnarled wooden staff. 'Welcome, "
    "traveler,' she says, her eyes reflecting wisdom beyond her years. 'Our village "
    "has been troubled by strange noises from the forest at night. Would you "
    "investigate for us? We fear something dangerous has awakened in the ancient "
    "ruins.'",
]


class CannedLLM:
    """Returns a random reply from a fixed list. No network calls.

    All canned replies use the marker dialect, so they exercise the
    location and item scans without a running model.
    """

    def __init__(
        self,
        responses: list[str] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._responses = responses or FALLBACK_RESPONSES
        self._rng = rng or random.Random()

    async def __call__(self, stage: str, prompt: str) -> str:
        logger.debug("CannedLLM stage=%s prompt_len=%d", stage, len(prompt))
        return self._rng.choice(self._responses)


def build_llm(settings: Settings) -> LLM:
    """HttpLLM when a key or a keyless local backend is configured, else CannedLLM."""
    if not settings.api_key and settings.provider_format == "openai":
        logger.warning("OPENROUTER_API_KEY is not set; serving canned replies")
        return CannedLLM()
    return HttpLLM(
        provider_url=settings.provider_url,
        api_key=settings.api_key,
        provider_format=settings.provider_format,
        model=settings.model,
        timeout=settings.timeout,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        system_prompt=SYSTEM_PROMPTS[settings.reply_dialect],
        referer=settings.referer,
        title=settings.title,
    )


# ---------------------------------------------------------------------------
# LLMError — raised for all connection and protocol failures
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Raised when the LLM backend cannot be reached or returns no usable reply."""
