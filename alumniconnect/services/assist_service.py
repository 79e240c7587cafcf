"""Post drafting assist backed by an external text-generation model.

The assist is optional: without a configured credential, or when the model
call fails, callers get a canned draft so posting never depends on it.
"""
from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from ..config import get_settings
from ..constants import ASSIST_FALLBACK_TEXT
from ..schemas import User

logger = logging.getLogger(__name__)


class AssistServiceError(RuntimeError):
    """Raised when the text-generation backend cannot produce a draft."""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        """Return plain text generated for ``prompt``."""
        ...


class GeminiTextGenerator(TextGenerator):
    """HTTP client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 20.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._timeout = timeout
        self._client = client

    def generate(self, prompt: str) -> str:
        if self._client is not None:
            return self._generate(self._client, prompt)
        with httpx.Client(timeout=self._timeout) as client:
            return self._generate(client, prompt)

    def _generate(self, client: httpx.Client, prompt: str) -> str:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = client.post(self._endpoint, params={"key": self._api_key}, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise AssistServiceError(f"Text generation returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise AssistServiceError(f"Text generation request failed: {exc}") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise AssistServiceError("Text generation returned invalid JSON") from exc
        return _extract_text(body)


def _extract_text(body: Any) -> str:
    try:
        parts = body["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise AssistServiceError("Text generation response had no candidates") from exc
    return "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict))


_text_generator: TextGenerator | None = None


def set_text_generator(generator: TextGenerator | None) -> None:
    """Override the text generator (useful for tests)."""

    global _text_generator
    _text_generator = generator


def _get_text_generator() -> TextGenerator | None:
    global _text_generator
    if _text_generator is not None:
        return _text_generator
    settings = get_settings()
    if not settings.gemini_api_key:
        return None
    _text_generator = GeminiTextGenerator(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.gemini_timeout,
    )
    return _text_generator


def build_post_prompt(*, role: str, name: str) -> str:
    return (
        f"Write a professional, short LinkedIn-style post for a {role} named {name}. "
        'Topic: "Excited about connecting with peers and learning new things". '
        "Tone: Professional but enthusiastic. Max 2 sentences."
    )


def draft_post(user: User) -> tuple[str, bool]:
    """Return ``(text, generated)``; ``generated`` is False when the fallback was used."""

    generator = _get_text_generator()
    if generator is None:
        logger.info("No text generation credential configured; using fallback draft")
        return ASSIST_FALLBACK_TEXT, False

    prompt = build_post_prompt(role=str(user.role), name=user.name)
    try:
        text = generator.generate(prompt)
    except AssistServiceError:
        logger.exception("Post draft generation failed for user %s", user.id)
        return ASSIST_FALLBACK_TEXT, False
    except Exception:  # pragma: no cover
        logger.exception("Unexpected error while drafting a post")
        return ASSIST_FALLBACK_TEXT, False

    text = (text or "").strip()
    if not text:
        return ASSIST_FALLBACK_TEXT, False
    return text, True


__all__ = [
    "AssistServiceError",
    "TextGenerator",
    "GeminiTextGenerator",
    "set_text_generator",
    "build_post_prompt",
    "draft_post",
]
