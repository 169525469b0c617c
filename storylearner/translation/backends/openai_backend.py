"""OpenAI completion backend."""

import os
import time
import logging
from typing import Optional

from openai import OpenAI, AsyncOpenAI

from ..base import CompletionBackend, CompletionRequest, CompletionResponse
from ..output_cleaner import clean_completion_output
from ...core.exceptions import BackendError

logger = logging.getLogger(__name__)


class OpenAIBackend(CompletionBackend):
    """OpenAI GPT-based completion backend."""

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        json_mode: bool = True,
    ):
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        base_url = base_url or os.getenv("OPENAI_BASE_URL")
        super().__init__(api_key, model)
        self.json_mode = json_mode

        if self.api_key:
            client_kwargs = {"api_key": self.api_key}
            if base_url:
                client_kwargs["base_url"] = base_url
                logger.info(f"Using custom OpenAI API endpoint: {base_url}")
            self.client = OpenAI(**client_kwargs)
            self.async_client = AsyncOpenAI(**client_kwargs)
        else:
            self.client = None
            self.async_client = None

    def _build_kwargs(self, request: CompletionRequest) -> dict:
        params = self.resolve_parameters(request)
        kwargs = {
            "model": params["model"],
            "messages": [{"role": "user", "content": request.prompt}],
            "max_tokens": params["max_tokens"],
            "temperature": params["temperature"],
        }
        # The API rejects JSON mode unless the prompt itself asks for JSON
        if self.json_mode and "json" in request.prompt.lower():
            kwargs["response_format"] = {"type": "json_object"}
        return kwargs

    def _to_response(self, response, model: str, start_time: float) -> CompletionResponse:
        choice = response.choices[0]
        content = clean_completion_output(choice.message.content or "")
        usage = response.usage
        return CompletionResponse(
            content=content,
            provider=self.provider,
            model=model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency=time.time() - start_time,
            finish_reason=choice.finish_reason,
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Complete asynchronously."""
        if not self.async_client:
            raise BackendError(self.provider, "OpenAI API key not configured")

        start_time = time.time()
        kwargs = self._build_kwargs(request)

        try:
            response = await self.async_client.chat.completions.create(**kwargs)
        except Exception as e:
            raise BackendError(self.provider, str(e), original_error=e) from e

        return self._to_response(response, kwargs["model"], start_time)

    def complete_sync(self, request: CompletionRequest) -> CompletionResponse:
        """Complete synchronously."""
        if not self.client:
            raise BackendError(self.provider, "OpenAI API key not configured")

        start_time = time.time()
        kwargs = self._build_kwargs(request)

        try:
            response = self.client.chat.completions.create(**kwargs)
        except Exception as e:
            raise BackendError(self.provider, str(e), original_error=e) from e

        return self._to_response(response, kwargs["model"], start_time)
