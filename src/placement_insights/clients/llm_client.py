"""Claude API wrapper for structured extraction and free-text generation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TypeVar

import anthropic
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from placement_insights.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

# Only transport-level problems are retried; a malformed answer is final.
_TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client with exponential-backoff retries."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.max_retries = max_retries
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _call_api(
        self,
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call, retrying transient failures."""
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            reraise=True,
        ):
            with attempt:
                return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        logger.debug("LLM call: model=%s prompt=%d chars", model, len(prompt))
        try:
            message = await self._call_api(
                prompt=prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        text = "".join(block.text for block in message.content if hasattr(block, "text"))
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def extract_structured(
        self,
        prompt: str,
        schema: type[ModelT],
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> ModelT:
        """Request a JSON answer constrained to ``schema`` and validate it.

        The JSON schema of ``schema`` (by alias) is appended to the system
        prompt. Raises ValueError when no JSON object can be parsed and
        pydantic.ValidationError when the object does not match.
        """
        schema_text = json.dumps(schema.model_json_schema(by_alias=True), ensure_ascii=False)
        system = (
            f"{system}\n\n" if system else ""
        ) + f"Respond with a single JSON object matching this JSON schema:\n{schema_text}"
        response = await self.generate(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        data = extract_json(response.text)
        return schema.model_validate(data)

    async def generate_text(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """Send a prompt and return the stripped free-text answer."""
        response = await self.generate(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.text.strip()

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
