"""Montos en reales: redondeo comercial y formato 'R$ 1.234,56'."""

from decimal import ROUND_HALF_UP, Decimal

from reservas.domain.constants import CURRENCY_SYMBOL

CENTS = Decimal("0.01")
UNITS = Decimal("1")


def round_half_up(value: Decimal, exponent: Decimal = UNITS) -> Decimal:
    """Redondeo comercial (0.5 sube), no el redondeo bancario de round()."""
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def format_brl(amount: Decimal) -> str:
    """
    Formatea un monto (con signo) como 'R$ 1.234,56' o '-R$ 10,00'.

    Punto como separador de miles y coma como separador decimal.
    """
    quantized = round_half_up(Decimal(amount), CENTS)
    sign = "-" if quantized < 0 else ""
    text = f"{abs(quantized):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{CURRENCY_SYMBOL} {text}"
