"""Servicios de dominio puros: fechas, identidad, disponibilidad y precios."""

from reservas.domain.services.availability import AvailabilityIndex, RangeSelection
from reservas.domain.services.dates import (
    DateFormat,
    format_day,
    normalize,
    parse_amount,
    try_parse_amount,
)
from reservas.domain.services.identity import (
    ExactIdentityMatcher,
    IdentityMatcher,
    SubstringIdentityMatcher,
)
from reservas.domain.services.pricing import (
    CancellationAdjustment,
    CancellationField,
    PricingEngine,
    SwapAdjustment,
    SwapField,
    rental_days,
)

__all__ = [
    "AvailabilityIndex",
    "RangeSelection",
    "DateFormat",
    "format_day",
    "normalize",
    "parse_amount",
    "try_parse_amount",
    "IdentityMatcher",
    "SubstringIdentityMatcher",
    "ExactIdentityMatcher",
    "PricingEngine",
    "CancellationAdjustment",
    "CancellationField",
    "SwapAdjustment",
    "SwapField",
    "rental_days",
]
