# src/notesave/llm/client.py

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..core.models import SuggestedStep
from ..errors import SuggestionFailed

logger = logging.getLogger(__name__)

_BAD_MODELS: dict[str, float] = {}  # model -> retry_at (monotonic)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError)):
        return True
    return isinstance(exc, httpx.TimeoutException)


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def build_prompt(task_title: str, language: str) -> str:
    return (
        f'Break down the task "{task_title}" into 3 to 5 clear, actionable, short sub-steps. '
        f"Language: {language}."
    )


def response_format(language: str) -> dict[str, Any]:
    """JSON-schema structured output: {"steps": [{"title": str}, ...]}."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "subtasks",
            "strict": True,
            "schema": {
                "type": "object",
                "properties": {
                    "steps": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "title": {
                                    "type": "string",
                                    "description": f"The title of the subtask step (in {language}).",
                                }
                            },
                            "required": ["title"],
                            "additionalProperties": False,
                        },
                    }
                },
                "required": ["steps"],
                "additionalProperties": False,
            },
        },
    }


def parse_steps(text: str | None) -> list[SuggestedStep]:
    """
    Parse the model reply.

    Accepts a bare array or {"steps": [...]}; entries without a non-empty string
    title are dropped. Raises ValueError for anything else (including empty text).
    """
    raw = _FENCE_RE.sub("", (text or "").strip())
    if not raw:
        raise ValueError("empty response")

    data = json.loads(raw)
    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        raise ValueError(f"expected an array of steps, got {type(data).__name__}")

    out: list[SuggestedStep] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        title = item.get("title")
        if isinstance(title, str) and title.strip():
            out.append(SuggestedStep(title=title.strip()))
    if data and not out:
        raise ValueError("no usable step titles in response")
    return out


def friendly_suggestion_error_message(err: Exception) -> str:
    msg = str(err).strip() or "Suggestion error."
    if "API key is not set" in msg:
        return "AI suggestions are not configured (missing API key). Set NOTESAVE_OPENROUTER_API_KEY in .env."
    if "model list is empty" in msg:
        return "AI suggestions are not configured (no models). Set NOTESAVE_LLM_MODELS in .env."
    return msg


def _make_client(settings) -> AsyncOpenAI:
    api_key = getattr(settings, "openrouter_api_key", None)
    base_url = getattr(settings, "openrouter_base_url", "") or ""

    if not api_key or not str(api_key).strip():
        raise RuntimeError("LLM API key is not set. Set NOTESAVE_OPENROUTER_API_KEY in your .env.")
    if not base_url.strip():
        raise RuntimeError("LLM base URL is not set. Set NOTESAVE_OPENROUTER_BASE_URL in your .env.")

    connect_s = float(getattr(settings, "llm_connect_timeout_seconds", 5.0))
    read_s = float(getattr(settings, "llm_read_timeout_seconds", 30.0))

    # No SDK retries: we fall back across models instead.
    return AsyncOpenAI(
        base_url=str(base_url),
        api_key=str(api_key),
        timeout=httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s),
        max_retries=0,
    )


class OpenRouterSuggestionClient:
    """
    Sub-step suggestions over an OpenAI-compatible chat completion API.

    Behavior:
    - Tries models in the configured order (NOTESAVE_LLM_MODELS).
    - 404 (model not available) -> skip that model for an hour, try next.
    - Rate limit / network / bad reply -> try next.
    - Auth issues -> fail fast.
    Every failure surfaces as SuggestionFailed.
    """

    def __init__(self, settings, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        self._models: list[str] = [m.strip() for m in (getattr(settings, "llm_models", []) or []) if m.strip()]
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set NOTESAVE_LLM_MODELS in your .env.")
        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._language = str(getattr(settings, "suggestion_language", "Russian"))
        self._client = client if client is not None else _make_client(settings)

    async def suggest(self, task_title: str) -> list[SuggestedStep]:
        title = (task_title or "").strip()
        if not title:
            raise SuggestionFailed("Enter a task title first.")

        messages = [{"role": "user", "content": build_prompt(title, self._language)}]
        last_error: Exception | None = None
        now = time.monotonic()

        for model in self._models:
            retry_at = _BAD_MODELS.get(model)
            if retry_at is not None and retry_at > now:
                continue

            t0 = time.monotonic()
            logger.info("LLM: requesting sub-steps model=%s", model)
            try:
                resp = await self._client.chat.completions.create(
                    model=model,
                    messages=messages,
                    response_format=response_format(self._language),
                    extra_headers=self._headers or None,
                )
                text = resp.choices[0].message.content if resp.choices else None
                steps = parse_steps(text)
                logger.info("LLM: %d sub-steps from model=%s (%.2fs)", len(steps), model, time.monotonic() - t0)
                return steps

            except (ValueError, IndexError, AttributeError) as e:
                last_error = e
                logger.info("LLM: unusable reply from model=%s (%s), trying next", model, e)
                continue

            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise SuggestionFailed("AI service authentication failed. Check your API key.") from e

                if _is_not_found_error(e):
                    _BAD_MODELS[model] = time.monotonic() + 3600.0
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise SuggestionFailed("AI service is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise SuggestionFailed("AI service is unreachable. Try again later.") from last_error
            raise SuggestionFailed("Could not generate sub-steps.") from last_error

        raise SuggestionFailed("Could not generate sub-steps.")
