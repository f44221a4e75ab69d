from datetime import date
from decimal import Decimal

import pytest

from reservas.domain.errors import ParseError
from reservas.domain.services.dates import (
    DateFormat,
    format_day,
    normalize,
    parse_amount,
    try_parse_amount,
)
from reservas.domain.value_objects.money import format_brl


@pytest.mark.parametrize(
    "raw",
    [
        "2026-03-05",
        "05/03/2026",
        "05-03-2026",
        "05/03/26",
        "5/3/2026",
        "05/03/2026 10:30",
        "2026-03-05T10:30:00",
        "  05/03/2026  ",
    ],
)
def test_normalize_accepts_supported_formats(raw):
    assert normalize(raw) == date(2026, 3, 5)


@pytest.mark.parametrize("raw", ["", "   ", "mañana", "2026/13/01", "31/02/2026", "05.03.2026", "5/3"])
def test_normalize_rejects_unparseable_text(raw):
    with pytest.raises(ParseError) as exc_info:
        normalize(raw)
    assert exc_info.value.code == "PARSE_ERROR"


def test_format_renders_both_canonical_forms():
    day = date(2026, 3, 5)
    assert format_day(day) == "2026-03-05"
    assert format_day(day, DateFormat.DMY) == "05/03/2026"


@pytest.mark.parametrize("raw", ["2026-03-05", "05/03/2026"])
def test_format_of_normalize_gives_same_day_for_either_input(raw):
    assert normalize(format_day(normalize(raw), DateFormat.DMY)) == date(2026, 3, 5)
    assert normalize(format_day(normalize(raw), DateFormat.ISO)) == date(2026, 3, 5)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56", Decimal("1234.56")),
        ("R$ 1.234,56", Decimal("1234.56")),
        ("390,5", Decimal("390.5")),
        ("1.234", Decimal("1234")),
        ("390.50", Decimal("390.50")),
        ("R$390", Decimal("390")),
        ("1,234.56", Decimal("1234.56")),
    ],
)
def test_parse_amount_separator_rules(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_amount_falls_back_to_zero():
    assert parse_amount("a convenir") == Decimal("0")
    assert parse_amount("") == Decimal("0")


def test_try_parse_amount_raises_instead_of_zero():
    with pytest.raises(ParseError):
        try_parse_amount("R$ -")


def test_format_brl_uses_local_separators():
    assert format_brl(Decimal("1234.56")) == "R$ 1.234,56"
    assert format_brl(Decimal("390")) == "R$ 390,00"
    assert format_brl(Decimal("-10")) == "-R$ 10,00"
