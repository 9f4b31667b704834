"""Token counting backends.

Every backend shares the same outer contract: blank text costs nothing and is
never sent anywhere, and a failing measurement is logged and counted as zero
so a single bad unit cannot abort a run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .logging_utils import StructuredLogger, get_structured_logger, log_structured

if TYPE_CHECKING:
    from google.genai import Client

    from .config import CounterSettings


class TokenCounter(ABC):
    """Interface for counting tokens in text."""

    def __init__(self, *, logger: StructuredLogger | None = None) -> None:
        self._logger = get_structured_logger(logger)

    async def count(self, text: str) -> int:
        """Return the token count for ``text``, or 0 when it cannot be measured."""
        if not text or not text.strip():
            return 0
        try:
            return max(0, int(await self._count(text)))
        except Exception as exc:
            log_structured(
                self._logger,
                "warning",
                "Error counting tokens: {error}",
                error=str(exc),
                counter=type(self).__name__,
            )
            return 0

    @abstractmethod
    async def _count(self, text: str) -> int:
        """Measure non-blank ``text``. May raise; failures are handled by ``count``."""
        ...


class ApproximateTokenCounter(TokenCounter):
    """len(text) // 4, roughly 4 characters per token for English text.

    Useful offline or without credentials; not precise enough to compare
    against provider counts.
    """

    async def _count(self, text: str) -> int:
        return len(text) // 4


class GeminiTokenCounter(TokenCounter):
    """Counts tokens with the Gemini ``countTokens`` endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model_name: str,
        client: Client | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        super().__init__(logger=logger)
        if client is None:
            from pydantic_ai.providers.google import GoogleProvider

            client = GoogleProvider(api_key=api_key).client
        self.client = client
        self.model_name = model_name

    @classmethod
    def from_settings(
        cls,
        settings: CounterSettings,
        *,
        logger: StructuredLogger | None = None,
    ) -> GeminiTokenCounter:
        return cls(
            api_key=settings.require_api_key(),
            model_name=settings.model_name,
            logger=logger,
        )

    async def _count(self, text: str) -> int:
        response = await self.client.aio.models.count_tokens(
            model=self.model_name,
            contents=text,
        )
        return response.total_tokens or 0


__all__ = ["ApproximateTokenCounter", "GeminiTokenCounter", "TokenCounter"]
