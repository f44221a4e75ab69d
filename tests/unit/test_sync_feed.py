import asyncio

import pytest

from reservas.application.feed.ingestor import FeedIngestor
from reservas.application.use_cases.sync_feed import SyncFeedUseCase
from reservas.domain.entities.reservation import ReservationOrigin
from reservas.domain.errors import IngestError
from reservas.infrastructure.in_memory.feed_source import StaticFeedSource

FEED = (
    "Cliente,Auto,Salida,Retorno,T.R\n"
    "Ana,Hyundai Creta,01/03/2026,03/03/2026,600\n"
    "Leo,Toyota Vitz Blanco,05/03/2026,06/03/2026,195\n"
)


def _use_case(store, clock, source, timeout_seconds=15.0):
    return SyncFeedUseCase(
        feed_source=source,
        ingestor=FeedIngestor(),
        store=store,
        clock=clock,
        timeout_seconds=timeout_seconds,
    )


def _feed_ids(store):
    return {r.id for r in store.list_reservations(origin=ReservationOrigin.IMPORTED_FEED)}


@pytest.mark.asyncio
async def test_successful_sync_replaces_feed_records(store, clock):
    use_case = _use_case(store, clock, StaticFeedSource(FEED))

    result = await use_case.execute()

    assert result.ok
    assert result.merge.imported == 2
    assert len(_feed_ids(store)) == 2
    assert use_case.last_result is result


@pytest.mark.asyncio
async def test_repeated_sync_of_unchanged_feed_is_idempotent(store, clock):
    use_case = _use_case(store, clock, StaticFeedSource(FEED))

    await use_case.execute()
    first = _feed_ids(store)
    result = await use_case.execute()

    assert _feed_ids(store) == first
    assert result.merge.replaced == 2


@pytest.mark.asyncio
async def test_timeout_keeps_last_known_good_state(store, clock):
    await _use_case(store, clock, StaticFeedSource(FEED)).execute()
    before = _feed_ids(store)

    slow = StaticFeedSource("Cliente,Auto,Salida\nOtro,Fiat Strada,01/04/2026\n", delay_seconds=1)
    result = await _use_case(store, clock, slow, timeout_seconds=0.05).execute()

    assert not result.ok
    assert result.error.reason == "TIMEOUT"
    assert _feed_ids(store) == before


@pytest.mark.asyncio
async def test_html_response_fails_closed(store, clock):
    await _use_case(store, clock, StaticFeedSource(FEED)).execute()
    before = _feed_ids(store)

    result = await _use_case(store, clock, StaticFeedSource("<html><body>login</body></html>")).execute()

    assert not result.ok
    assert result.error.reason == "HTML_RESPONSE"
    assert _feed_ids(store) == before


@pytest.mark.asyncio
async def test_transport_error_is_reported_not_raised(store, clock):
    source = StaticFeedSource(error=IngestError("HTTP 503", "NON_2XX"))

    result = await _use_case(store, clock, source).execute()

    assert not result.ok
    assert result.error.reason == "NON_2XX"
    assert store.list_reservations() == []


@pytest.mark.asyncio
async def test_abort_cancels_inflight_fetch_without_merge(store, clock):
    use_case = _use_case(store, clock, StaticFeedSource(FEED, delay_seconds=5))

    task = asyncio.create_task(use_case.execute())
    await asyncio.sleep(0.01)
    assert use_case.is_syncing
    assert use_case.abort()
    result = await task

    assert not result.ok
    assert result.error.reason == "ABORTED"
    assert store.list_reservations() == []
    assert not use_case.abort()


@pytest.mark.asyncio
async def test_concurrent_callers_share_a_single_fetch(store, clock):
    source = StaticFeedSource(FEED, delay_seconds=0.05)
    use_case = _use_case(store, clock, source)

    first, second = await asyncio.gather(use_case.execute(), use_case.execute())

    assert source.calls == 1
    assert first is second
    assert first.ok
