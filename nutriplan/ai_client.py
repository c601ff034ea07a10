# -*- coding: utf-8 -*-
"""Groq chat-completion client (OpenAI-compatible API)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .config import settings

log = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional nutritionist and chef. You must respond with ONLY valid JSON. "
    "No markdown formatting, no explanations, no introductory text, "
    'no "Here is the recipe" - just the JSON object directly.'
)


class LLMConfigError(RuntimeError):
    pass


class RemoteGenerationError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: str = "",
        retry_after: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.retry_after = retry_after


def _extract_content(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = (choices[0] or {}).get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


class GroqChatClient:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        top_p: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.groq_api_key
        self.base_url = base_url or settings.groq_base_url
        self.model = model or settings.groq_model
        self.timeout = timeout if timeout is not None else settings.groq_timeout
        self.temperature = temperature if temperature is not None else settings.groq_temperature
        self.max_tokens = max_tokens if max_tokens is not None else settings.groq_max_tokens
        self.top_p = top_p if top_p is not None else settings.groq_top_p
        self._transport = transport

    @property
    def url(self) -> str:
        base = self.base_url.rstrip("/")
        if base.endswith("/chat/completions"):
            return base
        return f"{base}/chat/completions"

    async def complete(self, prompt: str, *, system: str = SYSTEM_PROMPT) -> str:
        if not self.api_key:
            raise LLMConfigError("GROQ_API_KEY not set")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        log.debug("Calling Groq model %s", self.model)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self._transport
            ) as client:
                resp = await client.post(self.url, headers=headers, json=payload)
        except httpx.RequestError as exc:
            raise RemoteGenerationError(f"Groq request failed: {exc}") from exc

        if resp.status_code >= 400:
            body = resp.text or ""
            snippet = body.replace("\n", " ").strip()[:500]
            raise RemoteGenerationError(
                f"Groq API error {resp.status_code}: {snippet}",
                status_code=resp.status_code,
                body=body,
                retry_after=resp.headers.get("retry-after"),
            )

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "").replace("\n", " ").strip()[:200]
            raise RemoteGenerationError(
                f"Groq returned non-JSON response: {snippet}", status_code=resp.status_code
            ) from exc

        content = _extract_content(data)
        if not content:
            raise RemoteGenerationError("Empty response from Groq", status_code=resp.status_code)
        return content
