import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from reservas.domain.errors import IngestError
from reservas.infrastructure.circuit_breaker import build_breaker
from reservas.infrastructure.gateways.http_feed_source import HttpFeedSource

CSV_BODY = "Cliente,Auto,Salida\nAna,Hyundai Creta,01/03/2026\n"


def _mock_client(mock_client_cls, response=None, error=None):
    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    if error is not None:
        mock_client.get.side_effect = error
    else:
        mock_client.get.return_value = response
    mock_client_cls.return_value = mock_client
    return mock_client


class TestHttpFeedSource(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.source = HttpFeedSource(
            url="https://sheets.example.com/export?format=csv",
            timeout_seconds=15,
            breaker=build_breaker("test_feed", fail_max=2),
        )

    @patch("httpx.AsyncClient")
    async def test_fetch_success_adds_cache_buster(self, mock_client_cls):
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.text = CSV_BODY
        mock_resp.content = CSV_BODY.encode()
        mock_resp.raise_for_status = MagicMock()
        mock_client = _mock_client(mock_client_cls, response=mock_resp)

        body = await self.source.fetch_text()

        self.assertEqual(body, CSV_BODY)
        call = mock_client.get.call_args
        self.assertEqual(call.args[0], "https://sheets.example.com/export?format=csv")
        self.assertIn("t", call.kwargs["params"])
        self.assertTrue(call.kwargs["params"]["t"].isdigit())
        self.assertEqual(mock_client_cls.call_args.kwargs["timeout"], 15)

    @patch("httpx.AsyncClient")
    async def test_non_2xx_raises_ingest_error(self, mock_client_cls):
        request = httpx.Request("GET", "https://sheets.example.com/export")
        response = httpx.Response(503, request=request)
        mock_resp = MagicMock()
        mock_resp.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Service Unavailable", request=request, response=response
        )
        _mock_client(mock_client_cls, response=mock_resp)

        with self.assertRaises(IngestError) as ctx:
            await self.source.fetch_text()

        self.assertEqual(ctx.exception.reason, "NON_2XX")

    @patch("httpx.AsyncClient")
    async def test_timeout_raises_ingest_error(self, mock_client_cls):
        _mock_client(mock_client_cls, error=httpx.ReadTimeout("timed out"))

        with self.assertRaises(IngestError) as ctx:
            await self.source.fetch_text()

        self.assertEqual(ctx.exception.reason, "TIMEOUT")

    @patch("httpx.AsyncClient")
    async def test_open_circuit_fails_fast(self, mock_client_cls):
        mock_client = _mock_client(mock_client_cls, error=httpx.ConnectError("down"))

        for _ in range(2):
            with self.assertRaises(IngestError):
                await self.source.fetch_text()

        with self.assertRaises(IngestError) as ctx:
            await self.source.fetch_text()

        self.assertEqual(ctx.exception.reason, "CIRCUIT_OPEN")
        self.assertEqual(mock_client.get.call_count, 2)
