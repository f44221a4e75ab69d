import unittest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from reservas.infrastructure.circuit_breaker import build_breaker
from reservas.infrastructure.gateways.exchange_rate_http import HttpExchangeRateProvider


class TestHttpExchangeRateProvider(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.provider = HttpExchangeRateProvider(
            url="https://rates.example.com/BRL",
            fallback=Decimal("1550"),
            breaker=build_breaker("test_rates"),
        )

    def _client(self, mock_client_cls):
        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client_cls.return_value = mock_client
        return mock_client

    @patch("httpx.AsyncClient")
    async def test_rate_is_read_and_rounded(self, mock_client_cls):
        mock_resp = MagicMock()
        mock_resp.raise_for_status = MagicMock()
        mock_resp.json.return_value = {"result": "success", "rates": {"PYG": 1432.6}}
        self._client(mock_client_cls).get.return_value = mock_resp

        self.assertEqual(await self.provider.brl_to_pyg(), Decimal("1433"))

    @patch("httpx.AsyncClient")
    async def test_missing_rate_uses_fallback(self, mock_client_cls):
        mock_resp = MagicMock()
        mock_resp.raise_for_status = MagicMock()
        mock_resp.json.return_value = {"result": "error"}
        self._client(mock_client_cls).get.return_value = mock_resp

        self.assertEqual(await self.provider.brl_to_pyg(), Decimal("1550"))

    @patch("httpx.AsyncClient")
    async def test_transport_error_uses_fallback(self, mock_client_cls):
        self._client(mock_client_cls).get.side_effect = httpx.ConnectError("down")

        self.assertEqual(await self.provider.brl_to_pyg(), Decimal("1550"))
