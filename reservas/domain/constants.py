"""Constantes del dominio de reservas."""

from decimal import Decimal

RESERVATION_STATUS_PENDING = "Pending"
RESERVATION_STATUS_CONFIRMED = "Confirmed"
RESERVATION_STATUS_COMPLETED = "Completed"
RESERVATION_STATUS_CANCELLED = "Cancelled"

# Estado heredado de versiones anteriores del almacenamiento
LEGACY_STATUS_REQUESTED = "Requested"

ORIGIN_MANUAL = "Manual"
ORIGIN_ONLINE_BOOKING = "OnlineBooking"
ORIGIN_IMPORTED_FEED = "ImportedFeed"

CURRENCY_SYMBOL = "R$"

# Rescisión: hasta SHORT_RENTAL_MAX_DAYS días se retiene el 15%, luego el 50%
SHORT_RENTAL_MAX_DAYS = 5
SHORT_RENTAL_PENALTY_RATE = Decimal("0.15")
LONG_RENTAL_PENALTY_RATE = Decimal("0.50")

FEED_ID_PREFIX = "FEED"
MANUAL_ID_PREFIX = "MANUAL"
ONLINE_ID_PREFIX = "JM"

# Alias normalizados de encabezados del feed (ver normalize_header)
FEED_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "client_name": ("cliente", "nombre", "socio"),
    "start_date": ("salida", "inicio", "retiro"),
    "end_date": ("retorno", "llegada", "fin"),
    "vehicle_label": ("vehiculo", "vehículo", "auto", "unidad"),
    "total_amount": ("t.r", "total reales", "total r$"),
    "document_id": ("ci", "documento", "cédula", "cedula"),
    "phone": ("celular", "tel", "teléfono", "telefono"),
}
