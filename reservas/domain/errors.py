"""Excepciones de dominio para el motor de reservas y disponibilidad."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores recuperables (se absorben en el borde) ===


class ParseError(DomainError):
    """Texto de fecha o monto que no se puede interpretar."""

    def __init__(self, raw: str, expected: str):
        super().__init__(
            message=f"No se pudo interpretar '{raw}' como {expected}",
            code="PARSE_ERROR",
        )
        self.raw = raw
        self.expected = expected


class IngestError(DomainError):
    """El feed externo no respondió, expiró o devolvió contenido no tabular."""

    def __init__(self, message: str, reason: str = "INGEST_FAILED"):
        super().__init__(message=message, code="INGEST_ERROR")
        self.reason = reason


# === Violaciones de invariantes ===


class InvariantViolationError(DomainError):
    """La operación rompería un invariante; se rechaza antes de mutar."""

    def __init__(self, message: str, code: str = "INVARIANT_VIOLATION"):
        super().__init__(message=message, code=code)


class InvalidReservationStatusError(InvariantViolationError):
    """El estado de la reservación no permite la operación."""

    def __init__(self, current_status: str, expected_status: str | list[str], operation: str):
        expected = expected_status if isinstance(expected_status, str) else ", ".join(expected_status)
        super().__init__(
            message=f"No se puede {operation}: estado actual '{current_status}', esperado '{expected}'",
            code="INVALID_RESERVATION_STATUS",
        )
        self.current_status = current_status
        self.expected_status = expected_status
        self.operation = operation


class ReservationAlreadyExistsError(InvariantViolationError):
    """Ya existe una reservación con ese id."""

    def __init__(self, reservation_id: str):
        super().__init__(
            message=f"Ya existe una reservación con id: {reservation_id}",
            code="RESERVATION_ALREADY_EXISTS",
        )
        self.reservation_id = reservation_id


class VehicleUnavailableError(InvariantViolationError):
    """El vehículo ya está ocupado (o en taller) para el rango pedido."""

    def __init__(self, vehicle_label: str, detail: str):
        super().__init__(
            message=f"Unidad '{vehicle_label}' no disponible: {detail}",
            code="VEHICLE_UNAVAILABLE",
        )
        self.vehicle_label = vehicle_label


class InvalidDateRangeError(InvariantViolationError):
    """Rango de fechas inválido."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_DATE_RANGE")


class InvalidMoneyError(InvariantViolationError):
    """Monto monetario inválido o ajuste financiero descuadrado."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_MONEY")


# === No encontrados ===


class NotFoundError(DomainError):
    """La operación referencia algo que no existe."""


class ReservationNotFoundError(NotFoundError):
    """La reservación no existe."""

    def __init__(self, reservation_id: str):
        super().__init__(
            message=f"Reservación no encontrada: {reservation_id}",
            code="RESERVATION_NOT_FOUND",
        )
        self.reservation_id = reservation_id


class VehicleNotFoundError(NotFoundError):
    """El vehículo no existe en la flota."""

    def __init__(self, vehicle_id: str):
        super().__init__(
            message=f"Vehículo no encontrado: {vehicle_id}",
            code="VEHICLE_NOT_FOUND",
        )
        self.vehicle_id = vehicle_id
