"""FeedIngestor - convierte el export tabular del feed en reservaciones canónicas."""

import logging
from collections import Counter
from decimal import Decimal
from typing import Sequence

from reservas.application.feed.csv_reader import read_rows
from reservas.application.feed.field_resolver import Ambiguous, FieldResolver, Found, Missing
from reservas.domain.constants import FEED_FIELD_ALIASES
from reservas.domain.entities.reservation import (
    Reservation,
    ReservationOrigin,
    ReservationStatus,
)
from reservas.domain.errors import IngestError, ParseError
from reservas.domain.services.dates import normalize, parse_amount
from reservas.domain.value_objects.reservation_code import ReservationCode

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("client_name", "vehicle_label", "start_date")
# Datos de contacto: si la columna es ambigua se ignora en vez de rechazar el feed
CONTACT_FIELDS = ("document_id", "phone")


class FeedIngestor:
    """
    Dueño sólo del parseo y la normalización; el transporte es externo.

    Las filas sin cliente, unidad o fecha de salida se descartan. Las
    reservaciones resultantes quedan Confirmed con origen ImportedFeed.
    """

    def __init__(
        self,
        resolver: FieldResolver | None = None,
        delimiter: str = ",",
    ) -> None:
        self._resolver = resolver or FieldResolver(FEED_FIELD_ALIASES)
        self._delimiter = delimiter

    def parse(self, body: str) -> list[Reservation]:
        """
        Raises:
            IngestError: cuerpo vacío, HTML, sin filas de datos, o encabezados
                que no permiten resolver los campos obligatorios.
        """
        if not body or not body.strip():
            raise IngestError("El feed devolvió un cuerpo vacío", "EMPTY_BODY")

        rows = read_rows(body, self._delimiter)
        if len(rows) < 2:
            raise IngestError("El feed no tiene filas de datos", "NO_DATA")

        columns = self._resolve_columns(rows[0])
        occurrences: Counter[str] = Counter()
        reservations: list[Reservation] = []
        dropped = 0

        for line_number, row in enumerate(rows[1:], start=2):
            reservation = self._parse_row(row, columns, line_number, occurrences)
            if reservation is None:
                dropped += 1
                continue
            reservations.append(reservation)

        logger.info(
            "Feed interpretado",
            extra={"imported": len(reservations), "dropped": dropped},
        )
        return reservations

    def _resolve_columns(self, header_row: Sequence[str]) -> dict[str, int | None]:
        columns: dict[str, int | None] = {}
        for field, resolution in self._resolver.resolve(header_row).items():
            if isinstance(resolution, Found):
                columns[field] = resolution.column
            elif isinstance(resolution, Ambiguous) and field in CONTACT_FIELDS:
                logger.warning(
                    "Columna de contacto ambigua, se ignora",
                    extra={"field": field, "headers": list(resolution.headers)},
                )
                columns[field] = None
            elif isinstance(resolution, Ambiguous):
                raise IngestError(
                    f"Encabezado ambiguo para '{field}': {', '.join(resolution.headers)}",
                    "AMBIGUOUS_HEADER",
                )
            elif isinstance(resolution, Missing):
                if field in REQUIRED_FIELDS:
                    raise IngestError(
                        f"El feed no tiene columna para '{field}'", "MISSING_HEADER"
                    )
                columns[field] = None
        return columns

    def _parse_row(
        self,
        row: Sequence[str],
        columns: dict[str, int | None],
        line_number: int,
        occurrences: Counter[str],
    ) -> Reservation | None:
        def cell(field: str) -> str:
            index = columns.get(field)
            if index is None or index >= len(row):
                return ""
            return row[index]

        client_name = cell("client_name")
        vehicle_label = cell("vehicle_label")
        start_raw = cell("start_date")
        if not client_name or not vehicle_label or not start_raw:
            return None

        try:
            start_date = normalize(start_raw)
        except ParseError as exc:
            logger.warning(
                "Fila del feed descartada: fecha de salida inválida",
                extra={"line": line_number, "raw": exc.raw},
            )
            return None

        end_date = start_date
        end_raw = cell("end_date")
        if end_raw:
            try:
                end_date = normalize(end_raw)
            except ParseError as exc:
                logger.warning(
                    "Fecha de retorno inválida, se usa la de salida",
                    extra={"line": line_number, "raw": exc.raw},
                )

        amount_raw = cell("total_amount")
        total_amount = parse_amount(amount_raw) if amount_raw else Decimal("0")
        document_id = cell("document_id") or None
        phone = cell("phone") or None

        key = f"{client_name.lower()}|{vehicle_label.lower()}|{start_date.isoformat()}"
        occurrences[key] += 1
        reservation_id = ReservationCode.for_feed_row(
            client_name, vehicle_label, start_date.isoformat(), occurrences[key]
        )

        return Reservation(
            id=str(reservation_id),
            client_name=client_name,
            vehicle_label=vehicle_label,
            start_date=start_date,
            end_date=end_date,
            total_amount=total_amount,
            status=ReservationStatus.CONFIRMED,
            origin=ReservationOrigin.IMPORTED_FEED,
            document_id=document_id,
            phone=phone,
        )
