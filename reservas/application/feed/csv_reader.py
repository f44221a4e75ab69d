"""Lectura del texto tabular del feed (CSV con comillas estilo RFC 4180)."""

import csv
import io

from reservas.domain.errors import IngestError

_HTML_MARKERS = ("<!doctype html", "<html", "<head", "<body")
_SNIFF_LENGTH = 512


def looks_like_html(body: str) -> bool:
    """Detecta páginas de error HTML servidas en lugar del export tabular."""
    head = body.lstrip("\ufeff \t\r\n")[:_SNIFF_LENGTH].lower()
    return any(marker in head for marker in _HTML_MARKERS)


def read_rows(body: str, delimiter: str = ",") -> list[list[str]]:
    """
    Parte el cuerpo en filas y celdas.

    Las celdas entre comillas pueden contener el delimitador y saltos de
    línea; una comilla doble dentro de una celda citada es una comilla
    literal. Las celdas se devuelven sin espacios alrededor y las filas
    vacías se descartan.

    Raises:
        IngestError: si el cuerpo parece HTML o el CSV está mal formado.
    """
    if looks_like_html(body):
        raise IngestError("El feed devolvió un documento HTML, no datos tabulares", "HTML_RESPONSE")

    reader = csv.reader(io.StringIO(body.lstrip("\ufeff"), newline=""), delimiter=delimiter)
    try:
        rows = [[cell.strip() for cell in row] for row in reader]
    except csv.Error as exc:
        raise IngestError(f"CSV mal formado: {exc}", "MALFORMED_CSV") from exc
    return [row for row in rows if any(row)]
