"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Flota de prueba y reloj fijo
- ReservationStore sobre persistencia in-memory
- Reset de circuit breakers entre tests
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from reservas.application.interfaces.clock import FakeClock
from reservas.application.interfaces.persistence_port import Snapshot
from reservas.application.reservation_store import ReservationStore
from reservas.domain.entities.reservation import (
    Reservation,
    ReservationOrigin,
    ReservationStatus,
)
from reservas.domain.entities.vehicle import Vehicle, VehicleStatus
from reservas.infrastructure.in_memory.persistence import InMemoryPersistence

# ============================================================================
# FIXTURES DE DATOS DE PRUEBA
# ============================================================================


@pytest.fixture
def clock():
    """Reloj fijo: 1 de marzo de 2026, mediodía UTC."""
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def fleet():
    return [
        Vehicle(
            id="v-vitz",
            name="Toyota Vitz Blanco",
            daily_rate=Decimal("195"),
            plate="ABC1234",
            maintenance_due=date(2026, 3, 8),
        ),
        Vehicle(id="v-creta", name="Hyundai Creta", daily_rate=Decimal("300")),
        Vehicle(
            id="v-strada",
            name="Fiat Strada",
            daily_rate=Decimal("250"),
            status=VehicleStatus.IN_WORKSHOP,
        ),
    ]


@pytest.fixture
def make_reservation():
    """Fábrica de reservaciones con valores por defecto razonables."""

    def _make(
        reservation_id: str = "MANUAL-000001",
        vehicle_label: str = "Toyota Vitz Blanco",
        start: date = date(2026, 3, 10),
        end: date = date(2026, 3, 12),
        total: str = "390",
        status: ReservationStatus = ReservationStatus.CONFIRMED,
        origin: ReservationOrigin = ReservationOrigin.MANUAL,
        client_name: str = "Juan Pérez",
    ) -> Reservation:
        return Reservation(
            id=reservation_id,
            client_name=client_name,
            vehicle_label=vehicle_label,
            start_date=start,
            end_date=end,
            total_amount=Decimal(total),
            status=status,
            origin=origin,
        )

    return _make


@pytest.fixture
def persistence(fleet):
    return InMemoryPersistence(
        Snapshot(
            vehicles=fleet,
            collections={
                "expenses": [{"concepto": "Lavado", "monto": "R$ 90,00"}],
                "thresholds": {"maintenance_alert_days": 10},
                "inspection_logs": [{"responsable": "Ana"}],
            },
        )
    )


@pytest.fixture
def store(persistence, clock):
    return ReservationStore(persistence=persistence, clock=clock)


# ============================================================================
# HOOKS DE PYTEST
# ============================================================================


@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """
    Reset circuit breakers antes de cada test.
    Evita que tests fallen por breakers abiertos de tests anteriores.
    """
    from reservas.infrastructure.circuit_breaker import (
        exchange_rate_breaker,
        feed_breaker,
        webhook_breaker,
    )

    breakers = (feed_breaker, webhook_breaker, exchange_rate_breaker)
    for breaker in breakers:
        breaker.close()

    yield

    for breaker in breakers:
        breaker.close()
