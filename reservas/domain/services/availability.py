"""Índice de disponibilidad: qué días ocupa cada unidad de la flota."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from reservas.domain.entities.reservation import Reservation
from reservas.domain.services.identity import IdentityMatcher, SubstringIdentityMatcher
from reservas.domain.value_objects.date_range import DateRange


class AvailabilityIndex:
    """
    Calcula días ocupados por unidad a partir del conjunto de reservaciones.

    Sólo las reservaciones Confirmed/Completed ocupan días. La expansión es
    día por día (inclusiva en ambos extremos).
    """

    def __init__(self, matcher: IdentityMatcher | None = None) -> None:
        self._matcher = matcher or SubstringIdentityMatcher()

    @property
    def matcher(self) -> IdentityMatcher:
        return self._matcher

    def matching(
        self,
        vehicle_identity: str,
        reservations: Iterable[Reservation],
        exclude_id: str | None = None,
    ) -> list[Reservation]:
        """Reservaciones que ocupan calendario y apuntan a la unidad."""
        return [
            reservation
            for reservation in reservations
            if reservation.occupies_calendar
            and reservation.id != exclude_id
            and self._matcher.matches(vehicle_identity, reservation.vehicle_label)
        ]

    def occupied_days(
        self,
        vehicle_identity: str,
        reservations: Iterable[Reservation],
        exclude_id: str | None = None,
    ) -> set[date]:
        occupied: set[date] = set()
        for reservation in self.matching(vehicle_identity, reservations, exclude_id):
            occupied.update(reservation.date_range.days())
        return occupied

    def conflicts(
        self,
        vehicle_identity: str,
        start: date,
        end: date,
        reservations: Iterable[Reservation],
        exclude_id: str | None = None,
    ) -> list[Reservation]:
        """Reservaciones que bloquean al menos un día de [start, end]."""
        requested = DateRange.ordered(start, end)
        return [
            reservation
            for reservation in self.matching(vehicle_identity, reservations, exclude_id)
            if reservation.date_range.overlaps_with(requested)
        ]

    def is_range_free(
        self,
        vehicle_identity: str,
        start: date,
        end: date,
        reservations: Iterable[Reservation],
        exclude_id: str | None = None,
    ) -> bool:
        """True sólo si ningún día de [start, end] está ocupado; no hay aceptación parcial."""
        occupied = self.occupied_days(vehicle_identity, reservations, exclude_id)
        requested = DateRange.ordered(start, end)
        return not any(day in occupied for day in requested.days())


@dataclass
class RangeSelection:
    """
    Selección de rango en dos clics sobre el calendario de una unidad.

    El primer clic fija el ancla. El segundo propone [ancla, clic]; si ese
    rango atraviesa un día ocupado, la selección vuelve a empezar desde el
    primer día clicado (sólo el ancla queda seleccionada).
    """

    vehicle_identity: str
    index: AvailabilityIndex
    anchor: date | None = None
    selected: DateRange | None = None
    blocked: bool = field(default=False, init=False)

    def click(self, day: date, reservations: Iterable[Reservation]) -> DateRange | None:
        reservations = list(reservations)
        self.blocked = False
        occupied = self.index.occupied_days(self.vehicle_identity, reservations)
        if day in occupied:
            self.blocked = True
            return self.selected

        if self.anchor is None:
            self.anchor = day
            self.selected = DateRange(start=day, end=day)
            return self.selected

        candidate = DateRange.ordered(self.anchor, day)
        if any(d in occupied for d in candidate.days()):
            self.blocked = True
            self.selected = DateRange(start=self.anchor, end=self.anchor)
            return self.selected

        self.selected = candidate
        self.anchor = None
        return self.selected

    def reset(self) -> None:
        self.anchor = None
        self.selected = None
        self.blocked = False
