"""
Normalización de fechas y montos.

Las fechas llegan en tres representaciones (YYYY-MM-DD, DD/MM/YYYY y las
variantes con año de 2 dígitos) y a veces con una hora al final. Todo se
reduce a un ``datetime.date``.
"""

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

from reservas.domain.errors import ParseError

logger = logging.getLogger(__name__)

_TIME_SEPARATOR = re.compile(r"[\sT]")
_DATE_SEPARATOR = re.compile(r"[/-]")
_NON_AMOUNT_CHARS = re.compile(r"[^0-9,.]")


class DateFormat(str, Enum):
    """Formatos canónicos de salida."""

    ISO = "YYYY-MM-DD"
    DMY = "DD/MM/YYYY"


def normalize(raw: str) -> date:
    """
    Convierte texto a día calendario.

    Acepta ``YYYY-MM-DD``, ``DD/MM/YYYY`` y ``DD-MM-YYYY``; un año de 2
    dígitos se expande con el prefijo ``20``. Cualquier hora al final
    (``"05/03/2026 10:30"``, ``"2026-03-05T10:30"``) se descarta.

    Raises:
        ParseError: si el texto no representa una fecha válida.
    """
    if raw is None:
        raise ParseError("", "fecha")
    text = str(raw).strip()
    if not text:
        raise ParseError(text, "fecha")

    date_part = _TIME_SEPARATOR.split(text, maxsplit=1)[0]
    parts = _DATE_SEPARATOR.split(date_part)
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise ParseError(text, "fecha")

    if len(parts[0]) == 4:
        year, month, day = parts
    else:
        day, month, year = parts

    if len(year) == 2:
        year = f"20{year}"
    if len(year) != 4:
        raise ParseError(text, "fecha")

    try:
        return date(int(year), int(month), int(day))
    except ValueError as exc:
        raise ParseError(text, "fecha") from exc


def format_day(day: date, target: DateFormat = DateFormat.ISO) -> str:
    """Renderiza un día en uno de los dos formatos canónicos."""
    if target == DateFormat.DMY:
        return day.strftime("%d/%m/%Y")
    return day.isoformat()


def try_parse_amount(raw: str) -> Decimal:
    """
    Convierte un monto con símbolo de moneda y separadores a Decimal.

    Reglas de separadores:
    - ``,`` y ``.`` presentes: el que aparece último es el decimal
      (``1.234,56`` y ``1,234.56`` valen 1234.56).
    - sólo ``,``: decimal (``390,5``).
    - sólo ``.``: miles si le siguen exactamente 3 dígitos (``1.234``),
      decimal en otro caso (``390.50``).

    Raises:
        ParseError: si no queda un número válido.
    """
    text = "" if raw is None else str(raw)
    cleaned = _NON_AMOUNT_CHARS.sub("", text)
    if not any(ch.isdigit() for ch in cleaned):
        raise ParseError(text, "monto")

    has_comma = "," in cleaned
    has_dot = "." in cleaned
    if has_comma and has_dot:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        cleaned = cleaned.replace(",", ".")
    elif has_dot and len(cleaned.rsplit(".", 1)[1]) == 3:
        cleaned = cleaned.replace(".", "")

    try:
        value = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ParseError(text, "monto") from exc
    if not value.is_finite():
        raise ParseError(text, "monto")
    return value


def parse_amount(raw: str) -> Decimal:
    """
    Igual que try_parse_amount pero devuelve 0 si no se puede interpretar.

    El 0 es un centinela de "no interpretado": quien llama no debe tratarlo
    como un monto real sin más.
    """
    try:
        return try_parse_amount(raw)
    except ParseError:
        logger.debug("Monto no interpretable, se usa 0", extra={"raw": raw})
        return Decimal("0")
