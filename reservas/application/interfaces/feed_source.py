from abc import ABC, abstractmethod


class FeedSource(ABC):
    @abstractmethod
    async def fetch_text(self) -> str:
        """
        Downloads the raw tabular export of the reservations feed.

        Raises:
            IngestError: when the feed is unreachable or answers non-2xx.
        """
        pass
