import asyncio

from reservas.application.interfaces.feed_source import FeedSource
from reservas.domain.errors import IngestError


class StaticFeedSource(FeedSource):
    """Feed fijo para testing; puede demorar o fallar a pedido."""

    def __init__(
        self,
        body: str = "",
        delay_seconds: float = 0.0,
        error: IngestError | None = None,
    ) -> None:
        self.body = body
        self.delay_seconds = delay_seconds
        self.error = error
        self.calls = 0

    async def fetch_text(self) -> str:
        self.calls += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.body
