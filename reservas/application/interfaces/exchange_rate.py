from abc import ABC, abstractmethod
from decimal import Decimal


class ExchangeRateProvider(ABC):
    @abstractmethod
    async def brl_to_pyg(self) -> Decimal:
        """
        Returns how many guaraníes one real buys. Never raises: falls back to
        a reference rate when the source is unavailable.
        """
        pass
