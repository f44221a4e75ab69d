from decimal import Decimal

from reservas.application.interfaces.exchange_rate import ExchangeRateProvider


class FixedExchangeRate(ExchangeRateProvider):
    def __init__(self, rate: Decimal = Decimal("1550")) -> None:
        self._rate = Decimal(str(rate))

    async def brl_to_pyg(self) -> Decimal:
        return self._rate
