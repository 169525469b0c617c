"""Local backend: deterministic scripted or echo completions for offline runs and tests."""

import time
from typing import Iterable, List, Optional

from ..base import CompletionBackend, CompletionRequest, CompletionResponse


class LocalBackend(CompletionBackend):
    """Deterministic backend without network access.

    With ``responses`` it replays them in order, repeating the last one once
    exhausted. Without, it echoes the prompt back. ``error`` makes every call
    raise it, to exercise error propagation.
    """

    provider = "local"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "local-echo",
        responses: Optional[Iterable[str]] = None,
        error: Optional[Exception] = None,
    ):
        super().__init__(api_key, model)
        self.responses: List[str] = list(responses or [])
        self.error = error
        self.requests: List[CompletionRequest] = []

    def complete_sync(self, request: CompletionRequest) -> CompletionResponse:
        start = time.time()
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        if self.responses:
            index = min(len(self.requests), len(self.responses)) - 1
            content = self.responses[index]
        else:
            content = request.prompt

        return CompletionResponse(
            content=content,
            provider=self.provider,
            model=request.model or self.model,
            latency=time.time() - start,
            finish_reason="stop",
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        return self.complete_sync(request)

    def is_available(self) -> bool:
        return True
