"""Anthropic Claude completion backend."""

import os
import time
import logging
from typing import Optional

from anthropic import Anthropic, AsyncAnthropic

from ..base import CompletionBackend, CompletionRequest, CompletionResponse
from ..output_cleaner import clean_completion_output
from ...core.exceptions import BackendError

logger = logging.getLogger(__name__)


class AnthropicBackend(CompletionBackend):
    """Anthropic Claude-based completion backend."""

    provider = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-3-5-haiku-20241022",
        base_url: Optional[str] = None,
    ):
        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        base_url = base_url or os.getenv("ANTHROPIC_API_BASE_URL")
        super().__init__(api_key, model)

        if self.api_key:
            client_kwargs = {"api_key": self.api_key}
            if base_url:
                # The SDK appends /v1 itself
                if base_url.endswith("/v1"):
                    base_url = base_url[:-3]
                elif base_url.endswith("/v1/"):
                    base_url = base_url[:-4]
                client_kwargs["base_url"] = base_url
                logger.info(f"Using custom Anthropic API endpoint: {base_url}")

            self.client = Anthropic(**client_kwargs)
            self.async_client = AsyncAnthropic(**client_kwargs)
        else:
            self.client = None
            self.async_client = None

    def is_available(self) -> bool:
        """Check if backend is available and configured."""
        return self.api_key is not None and self.client is not None

    def _build_kwargs(self, request: CompletionRequest) -> dict:
        params = self.resolve_parameters(request)
        return {
            "model": params["model"],
            "max_tokens": params["max_tokens"],
            "temperature": params["temperature"],
            "messages": [{"role": "user", "content": request.prompt}],
        }

    def _to_response(self, response, model: str, start_time: float) -> CompletionResponse:
        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        return CompletionResponse(
            content=clean_completion_output(text),
            provider=self.provider,
            model=model,
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            latency=time.time() - start_time,
            finish_reason=response.stop_reason,
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Complete asynchronously."""
        if not self.async_client:
            raise BackendError(self.provider, "Anthropic API key not configured")

        start_time = time.time()
        kwargs = self._build_kwargs(request)

        try:
            response = await self.async_client.messages.create(**kwargs)
        except Exception as e:
            raise BackendError(self.provider, str(e), original_error=e) from e

        return self._to_response(response, kwargs["model"], start_time)

    def complete_sync(self, request: CompletionRequest) -> CompletionResponse:
        """Complete synchronously."""
        if not self.client:
            raise BackendError(self.provider, "Anthropic API key not configured")

        start_time = time.time()
        kwargs = self._build_kwargs(request)

        try:
            response = self.client.messages.create(**kwargs)
        except Exception as e:
            raise BackendError(self.provider, str(e), original_error=e) from e

        return self._to_response(response, kwargs["model"], start_time)
