import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from reservas.application.interfaces.clock import Clock
from reservas.application.interfaces.exchange_rate import ExchangeRateProvider
from reservas.application.reservation_store import ReservationStore
from reservas.domain.entities.reservation import Reservation, ReservationStatus
from reservas.domain.entities.vehicle import Vehicle
from reservas.domain.services.dates import parse_amount
from reservas.domain.value_objects.money import CENTS, round_half_up

DEFAULT_MAINTENANCE_ALERT_DAYS = 10

# Índice de desgaste (0-100)
WEAR_PER_CONFIRMED = 3
WEAR_CONFIRMED_CAP = 45
WEAR_MAINTENANCE_OVERDUE = 40
WEAR_MAINTENANCE_SOON = 25
WEAR_MAINTENANCE_SOON_DAYS = 15
WEAR_PER_OPEN_BREAKDOWN = 15
WEAR_CAP = 100


@dataclass(frozen=True)
class VehicleReport:
    vehicle_id: str
    name: str
    revenue: Decimal
    confirmed_count: int
    open_breakdowns: int
    wear_index: int


@dataclass(frozen=True)
class MaintenanceAlert:
    vehicle_id: str
    name: str
    maintenance_due: date
    days_left: int


@dataclass(frozen=True)
class FinancialSummary:
    income: Decimal
    expenses: Decimal
    net: Decimal
    margin_percent: Decimal
    exchange_rate: Decimal | None = None
    income_pyg: Decimal | None = None


@dataclass(frozen=True)
class FleetReport:
    summary: FinancialSummary
    vehicles: list[VehicleReport]
    alerts: list[MaintenanceAlert]


def _field(record: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return default


class FleetReportUseCase:
    """
    Tablero del administrador: ingresos por unidad, gastos, desgaste y
    vencimientos de mantenimiento.
    """

    def __init__(
        self,
        store: ReservationStore,
        clock: Clock,
        exchange_rate: ExchangeRateProvider | None = None,
        maintenance_alert_days: int = DEFAULT_MAINTENANCE_ALERT_DAYS,
    ) -> None:
        self._store = store
        self._clock = clock
        self._exchange_rate = exchange_rate
        self._maintenance_alert_days = maintenance_alert_days
        self._logger = logging.getLogger(__name__)

    async def execute(self) -> FleetReport:
        today = self._clock.today()
        reservations = self._store.list_reservations()
        billable = [r for r in reservations if r.status != ReservationStatus.CANCELLED]

        vehicles = [self._vehicle_report(v, billable, today) for v in self._store.vehicles()]
        vehicles.sort(key=lambda report: report.revenue, reverse=True)

        summary = await self._summary(billable)
        alerts = self._maintenance_alerts(today)
        self._logger.info(
            "Reporte de flota generado",
            extra={"vehicles": len(vehicles), "alerts": len(alerts)},
        )
        return FleetReport(summary=summary, vehicles=vehicles, alerts=alerts)

    def _matches(self, vehicle: Vehicle, reservation: Reservation) -> bool:
        return self._store.availability.matcher.matches(vehicle.name, reservation.vehicle_label)

    def _vehicle_report(
        self, vehicle: Vehicle, billable: list[Reservation], today: date
    ) -> VehicleReport:
        own = [r for r in billable if self._matches(vehicle, r)]
        revenue = sum((r.total_amount for r in own), Decimal("0"))
        confirmed = sum(1 for r in own if r.status == ReservationStatus.CONFIRMED)
        breakdowns = self._open_breakdowns(vehicle)

        wear = min(confirmed * WEAR_PER_CONFIRMED, WEAR_CONFIRMED_CAP)
        if vehicle.maintenance_due is not None:
            days_left = (vehicle.maintenance_due - today).days
            if days_left < 0:
                wear += WEAR_MAINTENANCE_OVERDUE
            elif days_left < WEAR_MAINTENANCE_SOON_DAYS:
                wear += WEAR_MAINTENANCE_SOON
        wear += breakdowns * WEAR_PER_OPEN_BREAKDOWN

        return VehicleReport(
            vehicle_id=vehicle.id,
            name=vehicle.name,
            revenue=revenue,
            confirmed_count=confirmed,
            open_breakdowns=breakdowns,
            wear_index=min(wear, WEAR_CAP),
        )

    def _open_breakdowns(self, vehicle: Vehicle) -> int:
        records = self._store.collections.get("maintenance_records") or []
        return sum(
            1
            for record in records
            if isinstance(record, dict)
            and str(_field(record, "vehicle_id", "vehicleId", default="")) == vehicle.id
            and not _field(record, "resolved", "resuelta", default=False)
        )

    def _maintenance_alerts(self, today: date) -> list[MaintenanceAlert]:
        thresholds = self._store.collections.get("thresholds") or {}
        limit = int(thresholds.get("maintenance_alert_days", self._maintenance_alert_days))
        alerts = []
        for vehicle in self._store.vehicles():
            if vehicle.maintenance_due is None:
                continue
            days_left = (vehicle.maintenance_due - today).days
            if days_left <= limit:
                alerts.append(
                    MaintenanceAlert(
                        vehicle_id=vehicle.id,
                        name=vehicle.name,
                        maintenance_due=vehicle.maintenance_due,
                        days_left=days_left,
                    )
                )
        alerts.sort(key=lambda alert: alert.days_left)
        return alerts

    async def _summary(self, billable: list[Reservation]) -> FinancialSummary:
        income = sum((r.total_amount for r in billable), Decimal("0"))
        expenses = sum(
            (
                parse_amount(str(_field(record, "amount", "monto", default="0")))
                for record in self._store.collections.get("expenses") or []
                if isinstance(record, dict)
            ),
            Decimal("0"),
        )
        net = income - expenses
        margin = round_half_up(net / income * 100, CENTS) if income > 0 else Decimal("0")

        rate = income_pyg = None
        if self._exchange_rate is not None:
            rate = await self._exchange_rate.brl_to_pyg()
            income_pyg = round_half_up(income * rate)

        return FinancialSummary(
            income=income,
            expenses=expenses,
            net=net,
            margin_percent=margin,
            exchange_rate=rate,
            income_pyg=income_pyg,
        )
