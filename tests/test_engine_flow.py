from datetime import date
from decimal import Decimal

import pytest

from reservas.application.interfaces.persistence_port import Snapshot
from reservas.config import Settings
from reservas.domain.entities.reservation import ReservationStatus
from reservas.domain.services.availability import RangeSelection
from reservas.infrastructure.in_memory.feed_source import StaticFeedSource
from reservas.infrastructure.in_memory.notifier import RecordingNotifier
from reservas.infrastructure.in_memory.persistence import InMemoryPersistence
from reservas.infrastructure.persistence.json_file import JsonFilePersistence

FEED = (
    "Socio,Unidad,Inicio,Fin,Total R$\n"
    '"Pérez, Juan",TOYOTA VITZ BLANCO (JUAN),01/03/2026,03/03/2026,"R$ 390,00"\n'
)


@pytest.fixture
def engine(fleet, clock):
    from reservas.bootstrap import build_engine

    settings = Settings(use_in_memory=True, _env_file=None)
    return build_engine(
        settings=settings,
        clock=clock,
        persistence=InMemoryPersistence(Snapshot(vehicles=fleet)),
    )


def test_in_memory_settings_wire_in_memory_adapters(engine):
    assert isinstance(engine["feed_source"], StaticFeedSource)
    assert isinstance(engine["notifier"], RecordingNotifier)


def test_file_settings_wire_json_persistence(tmp_path, clock):
    from reservas.bootstrap import build_engine

    settings = Settings(use_in_memory=False, state_file=str(tmp_path / "estado.json"), _env_file=None)
    engine = build_engine(settings=settings, clock=clock)
    assert isinstance(engine["store"]._persistence, JsonFilePersistence)


@pytest.mark.asyncio
async def test_booking_lifecycle_end_to_end(engine):
    store = engine["store"]
    engine["feed_source"].body = FEED

    # 1. El feed bloquea los días del Vitz
    sync = await engine["sync_feed"].execute()
    assert sync.ok
    assert store.occupied_days("v-vitz") == {date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3)}

    # 2. El calendario no deja seleccionar a través de un día ocupado
    selection = RangeSelection("Toyota Vitz Blanco", store.availability)
    selection.click(date(2026, 2, 27), store.list_reservations())
    selected = selection.click(date(2026, 3, 5), store.list_reservations())
    assert selected.start == selected.end == date(2026, 2, 27)

    # 3. Reserva online sobre días libres, pago y cambio de unidad
    booking = store.book_online("v-vitz", "Carla Dias", date(2026, 3, 4), date(2026, 3, 6))
    assert booking.status == ReservationStatus.PENDING
    store.verify_payment(booking.id)
    store.apply_swap(booking.id, "v-creta")
    assert store.get(booking.id).total_amount == Decimal("600")

    # 4. Rescisión con la multa sugerida
    cancelled = store.apply_cancellation(booking.id)
    assert cancelled.status == ReservationStatus.CANCELLED
    assert "multa retenida R$ 90,00" in cancelled.notes

    # 5. Sólo la reserva local se publica, una vez
    assert await engine["publish_changes"].execute() == 1
    assert engine["notifier"].published_ids == [booking.id]

    # 6. El reporte sólo cuenta lo no cancelado
    report = await engine["fleet_report"].execute()
    assert report.summary.income == Decimal("390.00")
    assert report.summary.income_pyg == Decimal("604500")
