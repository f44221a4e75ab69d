"""
ReservationStore - colección autoritativa en memoria.

Es el único componente que muta reservaciones. Cada operación valida antes
de mutar (si falla, el estado queda intacto), y después de cada mutación
exitosa guarda el snapshot completo por el PersistencePort y registra un
evento de cambio para la sincronización saliente.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable

from reservas.application.interfaces.clock import Clock, SystemClock
from reservas.application.interfaces.persistence_port import PersistencePort, Snapshot
from reservas.domain.constants import MANUAL_ID_PREFIX, ONLINE_ID_PREFIX
from reservas.domain.entities.reservation import (
    Reservation,
    ReservationOrigin,
    ReservationStatus,
)
from reservas.domain.entities.vehicle import Vehicle
from reservas.domain.errors import (
    InvalidMoneyError,
    InvalidReservationStatusError,
    ReservationAlreadyExistsError,
    ReservationNotFoundError,
    VehicleNotFoundError,
    VehicleUnavailableError,
)
from reservas.domain.services.availability import AvailabilityIndex
from reservas.domain.services.pricing import (
    CancellationAdjustment,
    PricingEngine,
    SwapAdjustment,
    rental_days,
)
from reservas.domain.value_objects.date_range import DateRange
from reservas.domain.value_objects.money import format_brl
from reservas.domain.value_objects.reservation_code import ReservationCode

logger = logging.getLogger(__name__)

EVENT_CREATED = "RESERVATION_CREATED"
EVENT_PAYMENT_VERIFIED = "PAYMENT_VERIFIED"
EVENT_VEHICLE_SWAPPED = "VEHICLE_SWAPPED"
EVENT_CANCELLED = "RESERVATION_CANCELLED"


@dataclass(frozen=True)
class ChangeEvent:
    event_type: str
    reservation_id: str


@dataclass(frozen=True)
class FeedMergeResult:
    imported: int
    replaced: int
    skipped: int


def _as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _as_datetime(value: date | datetime) -> datetime:
    return value if isinstance(value, datetime) else datetime.combine(value, time.min)


def _time_of(value: date | datetime) -> time | None:
    return value.time() if isinstance(value, datetime) else None


def _as_decimal(value: Decimal | int | float | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class ReservationStore:
    def __init__(
        self,
        persistence: PersistencePort,
        clock: Clock | None = None,
        availability: AvailabilityIndex | None = None,
        pricing: PricingEngine | None = None,
    ) -> None:
        self._persistence = persistence
        self._clock = clock or SystemClock()
        self._availability = availability or AvailabilityIndex()
        self._pricing = pricing or PricingEngine()
        self._changes: list[ChangeEvent] = []

        snapshot = persistence.load()
        self._vehicles: dict[str, Vehicle] = {vehicle.id: vehicle for vehicle in snapshot.vehicles}
        self._collections: dict[str, Any] = dict(snapshot.collections)
        self._reservations: dict[str, Reservation] = {}
        for reservation in snapshot.reservations:
            if reservation.id in self._reservations:
                logger.warning(
                    "Id duplicado en el estado persistido, se conserva el primero",
                    extra={"reservation_id": reservation.id},
                )
                continue
            self._reservations[reservation.id] = reservation

        logger.info(
            "ReservationStore cargado",
            extra={"vehicles": len(self._vehicles), "reservations": len(self._reservations)},
        )

    # === Consultas ===

    @property
    def availability(self) -> AvailabilityIndex:
        return self._availability

    @property
    def pricing(self) -> PricingEngine:
        return self._pricing

    @property
    def collections(self) -> dict[str, Any]:
        return self._collections

    def get(self, reservation_id: str) -> Reservation:
        reservation = self._reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def list_reservations(
        self,
        status: ReservationStatus | None = None,
        origin: ReservationOrigin | None = None,
    ) -> list[Reservation]:
        return [
            reservation
            for reservation in self._reservations.values()
            if (status is None or reservation.status == status)
            and (origin is None or reservation.origin == origin)
        ]

    def search(self, term: str) -> list[Reservation]:
        """Busca por cliente, unidad o id (sin distinguir mayúsculas)."""
        needle = term.strip().casefold()
        return [
            reservation
            for reservation in self._reservations.values()
            if needle in reservation.client_name.casefold()
            or needle in reservation.vehicle_label.casefold()
            or needle in reservation.id.casefold()
        ]

    def vehicles(self) -> list[Vehicle]:
        return list(self._vehicles.values())

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    def occupied_days(self, vehicle_id: str) -> set[date]:
        vehicle = self.get_vehicle(vehicle_id)
        return self._availability.occupied_days(vehicle.name, self._reservations.values())

    def is_range_free(self, vehicle_id: str, start: date, end: date) -> bool:
        vehicle = self.get_vehicle(vehicle_id)
        return self._availability.is_range_free(
            vehicle.name, _as_day(start), _as_day(end), self._reservations.values()
        )

    def quote_cancellation(self, reservation_id: str) -> CancellationAdjustment:
        return self._pricing.compute_cancellation_adjustment(self.get(reservation_id))

    def quote_swap(self, reservation_id: str, vehicle_id: str) -> SwapAdjustment:
        reservation = self.get(reservation_id)
        vehicle = self.get_vehicle(vehicle_id)
        return self._pricing.compute_swap_adjustment(
            reservation.total_amount,
            vehicle.daily_rate,
            reservation.starts_at,
            reservation.ends_at,
        )

    def snapshot(self) -> Snapshot:
        return Snapshot(
            vehicles=list(self._vehicles.values()),
            reservations=list(self._reservations.values()),
            collections=dict(self._collections),
        )

    def drain_changes(self) -> list[ChangeEvent]:
        """Entrega y vacía los eventos de cambio pendientes de sincronizar."""
        changes, self._changes = self._changes, []
        return changes

    # === Mutaciones ===

    def add(self, reservation: Reservation) -> Reservation:
        if reservation.id in self._reservations:
            raise ReservationAlreadyExistsError(reservation.id)
        self._reservations[reservation.id] = reservation
        self._commit(EVENT_CREATED, reservation)
        logger.info(
            "Reservación agregada",
            extra={"reservation_id": reservation.id, "origin": reservation.origin.value},
        )
        return reservation

    def book_online(
        self,
        vehicle_id: str,
        client_name: str,
        start: date | datetime,
        end: date | datetime,
        email: str | None = None,
        document_id: str | None = None,
        phone: str | None = None,
    ) -> Reservation:
        """
        Solicitud de reserva desde la web: queda Pending hasta verificar el pago.

        El total sale de la tarifa diaria; start/end pueden traer hora, y cada
        fracción de 24 horas cuenta como un día. La hora de retiro y devolución
        queda en la reservación para que rescisión y cambio de unidad cuenten
        los mismos días que se facturaron.
        """
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle.in_workshop:
            raise VehicleUnavailableError(vehicle.name, "la unidad está en taller")

        starts_at, ends_at = _as_datetime(start), _as_datetime(end)
        pickup_time, return_time = _time_of(start), _time_of(end)
        if starts_at > ends_at:
            starts_at, ends_at = ends_at, starts_at
            pickup_time, return_time = return_time, pickup_time

        days = DateRange(start=starts_at.date(), end=ends_at.date())
        self._ensure_free(vehicle.name, days)

        billed_days = rental_days(starts_at, ends_at)
        total = self._pricing.total_for_range(vehicle.daily_rate, starts_at, ends_at)
        reservation = Reservation(
            id=str(ReservationCode.generate(ONLINE_ID_PREFIX)),
            client_name=client_name,
            vehicle_label=vehicle.name,
            start_date=days.start,
            end_date=days.end,
            total_amount=total,
            status=ReservationStatus.PENDING,
            origin=ReservationOrigin.ONLINE_BOOKING,
            email=email,
            document_id=document_id,
            phone=phone,
            pickup_time=pickup_time,
            return_time=return_time,
        )
        reservation.append_note(
            f"[{self._today()}] SOLICITUD ONLINE: {billed_days} día(s) x "
            f"{format_brl(vehicle.daily_rate)} = {format_brl(total)}"
        )
        return self.add(reservation)

    def add_manual(
        self,
        vehicle_label: str,
        client_name: str,
        start: date,
        end: date,
        total_amount: Decimal | int | float | str,
        document_id: str | None = None,
        phone: str | None = None,
    ) -> Reservation:
        """Carga manual del administrador: entra Confirmed si no choca con otra."""
        days = DateRange.ordered(_as_day(start), _as_day(end))
        self._ensure_free(vehicle_label, days)
        reservation = Reservation(
            id=str(ReservationCode.generate(MANUAL_ID_PREFIX)),
            client_name=client_name,
            vehicle_label=vehicle_label,
            start_date=days.start,
            end_date=days.end,
            total_amount=_as_decimal(total_amount),
            status=ReservationStatus.CONFIRMED,
            origin=ReservationOrigin.MANUAL,
            document_id=document_id,
            phone=phone,
        )
        return self.add(reservation)

    def verify_payment(self, reservation_id: str) -> Reservation:
        reservation = self.get(reservation_id)
        reservation.verify_payment()
        reservation.append_note(f"[{self._today()}] PAGO VERIFICADO")
        self._commit(EVENT_PAYMENT_VERIFIED, reservation)
        logger.info("Pago verificado", extra={"reservation_id": reservation_id})
        return reservation

    def swap(
        self,
        reservation_id: str,
        new_vehicle_label: str,
        new_total: Decimal | int | float | str,
        diff: Decimal | int | float | str,
        note: str = "",
    ) -> Reservation:
        reservation = self.get(reservation_id)
        self._ensure_active(reservation, "cambiar la unidad")

        new_total = _as_decimal(new_total)
        diff = _as_decimal(diff)
        old_total = reservation.total_amount
        if new_total < 0:
            raise InvalidMoneyError(f"El nuevo total no puede ser negativo: {new_total}")
        if new_total - old_total != diff:
            raise InvalidMoneyError(
                f"Diferencia descuadrada: {new_total} - {old_total} != {diff}"
            )
        self._ensure_free(new_vehicle_label, reservation.date_range, exclude_id=reservation.id)

        old_label = reservation.vehicle_label
        if diff > 0:
            balance = f"+{format_brl(diff)} a cobrar al cliente"
        elif diff < 0:
            balance = f"{format_brl(-diff)} a favor del cliente"
        else:
            balance = "sin diferencia"
        audit = (
            f"[{self._today()}] CAMBIO DE UNIDAD: {old_label} -> {new_vehicle_label} | "
            f"Total: {format_brl(old_total)} -> {format_brl(new_total)} | {balance}"
        )
        if note.strip():
            audit = f"{audit} | {note.strip()}"

        reservation.swap_vehicle(new_vehicle_label, new_total, audit)
        self._commit(EVENT_VEHICLE_SWAPPED, reservation)
        logger.info(
            "Unidad cambiada",
            extra={
                "reservation_id": reservation_id,
                "old_vehicle": old_label,
                "new_vehicle": new_vehicle_label,
                "diff": str(diff),
            },
        )
        return reservation

    def apply_swap(
        self,
        reservation_id: str,
        vehicle_id: str,
        adjustment: SwapAdjustment | None = None,
        note: str = "",
    ) -> Reservation:
        """Cambia a una unidad de la flota usando el ajuste sugerido o uno editado."""
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle.in_workshop:
            raise VehicleUnavailableError(vehicle.name, "la unidad está en taller")
        adjustment = adjustment or self.quote_swap(reservation_id, vehicle_id)
        return self.swap(reservation_id, vehicle.name, adjustment.new_total, adjustment.diff, note)

    def cancel(
        self,
        reservation_id: str,
        penalty: Decimal | int | float | str,
        refund: Decimal | int | float | str,
        note: str = "",
    ) -> Reservation:
        reservation = self.get(reservation_id)
        self._ensure_active(reservation, "cancelar")

        penalty = _as_decimal(penalty)
        refund = _as_decimal(refund)
        if penalty < 0 or refund < 0:
            raise InvalidMoneyError(
                f"Multa y reembolso no pueden ser negativos: {penalty}, {refund}"
            )
        if penalty + refund != reservation.total_amount:
            raise InvalidMoneyError(
                f"Multa ({penalty}) + reembolso ({refund}) != total ({reservation.total_amount})"
            )

        audit = (
            f"[{self._today()}] RESCISIÓN: multa retenida {format_brl(penalty)} | "
            f"reembolso {format_brl(refund)}"
        )
        if note.strip():
            audit = f"{audit} | {note.strip()}"

        reservation.cancel(audit)
        self._commit(EVENT_CANCELLED, reservation)
        logger.info(
            "Reservación cancelada",
            extra={
                "reservation_id": reservation_id,
                "penalty": str(penalty),
                "refund": str(refund),
            },
        )
        return reservation

    def apply_cancellation(
        self,
        reservation_id: str,
        adjustment: CancellationAdjustment | None = None,
        note: str = "",
    ) -> Reservation:
        """Cancela usando la multa sugerida o la editada por el operador."""
        adjustment = adjustment or self.quote_cancellation(reservation_id)
        return self.cancel(reservation_id, adjustment.penalty, adjustment.refund, note)

    def remove(self, reservation_id: str) -> None:
        """Borrado físico; sin más invariantes que la existencia."""
        self.get(reservation_id)
        del self._reservations[reservation_id]
        self._persist()
        logger.info("Reservación eliminada", extra={"reservation_id": reservation_id})

    def replace_feed_records(self, records: Iterable[Reservation]) -> FeedMergeResult:
        """
        Reemplaza todas las reservaciones de origen feed por las recibidas.

        Las reservaciones Manual/OnlineBooking nunca se tocan; un registro del
        feed cuyo id choca con uno local se descarta.
        """
        merged = {
            reservation_id: reservation
            for reservation_id, reservation in self._reservations.items()
            if not reservation.is_imported
        }
        replaced = len(self._reservations) - len(merged)
        imported = skipped = 0

        for record in records:
            if not record.is_imported:
                record.origin = ReservationOrigin.IMPORTED_FEED
            if record.id in merged:
                skipped += 1
                logger.warning(
                    "Registro del feed omitido: id ya usado localmente",
                    extra={"reservation_id": record.id},
                )
                continue
            merged[record.id] = record
            imported += 1

        self._reservations = merged
        self._persist()
        result = FeedMergeResult(imported=imported, replaced=replaced, skipped=skipped)
        logger.info(
            "Registros del feed reemplazados",
            extra={"imported": imported, "replaced": replaced, "skipped": skipped},
        )
        return result

    # === Internos ===

    def _ensure_active(self, reservation: Reservation, operation: str) -> None:
        if not reservation.is_active:
            raise InvalidReservationStatusError(
                reservation.status.value,
                [ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value],
                operation,
            )

    def _ensure_free(
        self, vehicle_label: str, days: DateRange, exclude_id: str | None = None
    ) -> None:
        blocking = self._availability.conflicts(
            vehicle_label, days.start, days.end, self._reservations.values(), exclude_id
        )
        if blocking:
            first = blocking[0]
            raise VehicleUnavailableError(
                vehicle_label,
                f"choca con {first.id} ({first.client_name}, {first.date_range})",
            )

    def _today(self) -> str:
        return self._clock.today().strftime("%d/%m/%Y")

    def _commit(self, event_type: str, reservation: Reservation) -> None:
        self._changes.append(ChangeEvent(event_type=event_type, reservation_id=reservation.id))
        self._persist()

    def _persist(self) -> None:
        # Fire-and-forget: un fallo al guardar no deshace la mutación en memoria.
        try:
            self._persistence.save(self.snapshot())
        except Exception:
            logger.exception("No se pudo persistir el snapshot")
