"""
Modelos pydantic del documento persistido.

Se escriben siempre con claves snake_case; al leer también se aceptan las
claves en español del formato heredado (cliente, auto, inicio, fin, ...).
"""

import re
from datetime import date, time
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from reservas.domain.entities.reservation import (
    Reservation,
    ReservationOrigin,
    ReservationStatus,
)
from reservas.domain.entities.vehicle import Vehicle, VehicleStatus
from reservas.domain.errors import ParseError
from reservas.domain.services.dates import normalize, parse_amount

_LEGACY_VEHICLE_STATUS = {
    "Disponible": VehicleStatus.AVAILABLE,
    "En Taller": VehicleStatus.IN_WORKSHOP,
    "En Alquiler": VehicleStatus.RENTED,
}

_EMBEDDED_TIME = re.compile(r"[\sT](\d{1,2}):(\d{2})")


def _to_date(value: Any) -> Any:
    if value is None or isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return normalize(text)
    except ParseError as exc:
        raise ValueError(exc.message) from exc


def _embedded_time(value: Any) -> time | None:
    if not isinstance(value, str):
        return None
    match = _EMBEDDED_TIME.search(value.strip())
    if match is None:
        return None
    try:
        return time(int(match.group(1)), int(match.group(2)))
    except ValueError:
        return None


def _to_amount(value: Any) -> Any:
    # Decimal serializado por nosotros primero; texto con formato local después
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return parse_amount(value)
    return value


class VehicleRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = Field(validation_alias=AliasChoices("name", "nombre"))
    daily_rate: Decimal = Field(default=Decimal("0"), validation_alias=AliasChoices("daily_rate", "precio"))
    status: VehicleStatus = Field(
        default=VehicleStatus.AVAILABLE, validation_alias=AliasChoices("status", "estado")
    )
    plate: str | None = Field(default=None, validation_alias=AliasChoices("plate", "placa"))
    color: str | None = None
    maintenance_due: date | None = Field(
        default=None, validation_alias=AliasChoices("maintenance_due", "mantenimientoVence")
    )
    insurance_due: date | None = Field(
        default=None, validation_alias=AliasChoices("insurance_due", "seguroVence")
    )

    @field_validator("status", mode="before")
    @classmethod
    def _legacy_status(cls, value: Any) -> Any:
        return _LEGACY_VEHICLE_STATUS.get(value, value)

    @field_validator("maintenance_due", "insurance_due", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> Any:
        return _to_date(value)

    @field_validator("daily_rate", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Any:
        return _to_amount(value)

    def to_domain(self) -> Vehicle:
        return Vehicle(
            id=self.id,
            name=self.name,
            daily_rate=self.daily_rate,
            status=self.status,
            plate=self.plate,
            color=self.color,
            maintenance_due=self.maintenance_due,
            insurance_due=self.insurance_due,
        )

    @classmethod
    def from_domain(cls, vehicle: Vehicle) -> "VehicleRecord":
        return cls(
            id=vehicle.id,
            name=vehicle.name,
            daily_rate=vehicle.daily_rate,
            status=vehicle.status,
            plate=vehicle.plate,
            color=vehicle.color,
            maintenance_due=vehicle.maintenance_due,
            insurance_due=vehicle.insurance_due,
        )


class ReservationRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    client_name: str = Field(validation_alias=AliasChoices("client_name", "cliente"))
    vehicle_label: str = Field(validation_alias=AliasChoices("vehicle_label", "auto"))
    start_date: date = Field(validation_alias=AliasChoices("start_date", "inicio"))
    end_date: date = Field(validation_alias=AliasChoices("end_date", "fin"))
    total_amount: Decimal = Field(
        default=Decimal("0"), ge=0, validation_alias=AliasChoices("total_amount", "total")
    )
    status: ReservationStatus = ReservationStatus.PENDING
    origin: ReservationOrigin = ReservationOrigin.MANUAL
    notes: str = Field(default="", validation_alias=AliasChoices("notes", "notas"))
    email: str | None = None
    document_id: str | None = Field(default=None, validation_alias=AliasChoices("document_id", "ci"))
    phone: str | None = Field(default=None, validation_alias=AliasChoices("phone", "celular"))
    pickup_time: time | None = None
    return_time: time | None = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_times(cls, data: Any) -> Any:
        # formato heredado: la hora viene dentro de inicio/fin ("2026-03-10 08:00")
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for keys, target in (
            (("start_date", "inicio"), "pickup_time"),
            (("end_date", "fin"), "return_time"),
        ):
            if data.get(target) is not None:
                continue
            for key in keys:
                found = _embedded_time(data.get(key))
                if found is not None:
                    data[target] = found
                    break
        return data

    @field_validator("status", mode="before")
    @classmethod
    def _legacy_status(cls, value: Any) -> Any:
        return ReservationStatus.parse(value) if isinstance(value, str) else value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> Any:
        return _to_date(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Any:
        return _to_amount(value)

    def to_domain(self) -> Reservation:
        return Reservation(
            id=self.id,
            client_name=self.client_name,
            vehicle_label=self.vehicle_label,
            start_date=self.start_date,
            end_date=self.end_date,
            total_amount=self.total_amount,
            status=self.status,
            origin=self.origin,
            notes=self.notes,
            email=self.email,
            document_id=self.document_id,
            phone=self.phone,
            pickup_time=self.pickup_time,
            return_time=self.return_time,
        )

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationRecord":
        return cls(
            id=reservation.id,
            client_name=reservation.client_name,
            vehicle_label=reservation.vehicle_label,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            total_amount=reservation.total_amount,
            status=reservation.status,
            origin=reservation.origin,
            notes=reservation.notes,
            email=reservation.email,
            document_id=reservation.document_id,
            phone=reservation.phone,
            pickup_time=reservation.pickup_time,
            return_time=reservation.return_time,
        )


class SnapshotDocument(BaseModel):
    """Documento completo: flota, reservaciones y colecciones auxiliares opacas."""

    model_config = ConfigDict(extra="allow")

    vehicles: list[VehicleRecord] = Field(default_factory=list)
    reservations: list[ReservationRecord] = Field(default_factory=list)
