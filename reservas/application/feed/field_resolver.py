"""
Resolución de encabezados del feed a campos lógicos.

Cada campo lógico tiene una lista de alias. Primero se busca igualdad con el
encabezado normalizado; si no hay, se busca el alias contenido en el
encabezado. Los alias de menos de tres caracteres ("t.r" queda en "tr")
sólo valen por igualdad, porque como subcadena aparecen en Matrícula,
Contrato o Entrega.

El resultado es explícito: Found, Missing o Ambiguous (dos o más columnas
empatan en el mismo nivel), en vez de quedarse en silencio con la primera
coincidencia.
"""

from dataclasses import dataclass
from typing import Mapping, Sequence, Union

MIN_SUBSTRING_ALIAS_LENGTH = 3


def normalize_header(text: str) -> str:
    """Minúsculas y sólo letras/dígitos (se conservan letras acentuadas)."""
    return "".join(ch for ch in text.lower() if ch.isalnum())


@dataclass(frozen=True)
class Found:
    column: int
    header: str


@dataclass(frozen=True)
class Missing:
    pass


@dataclass(frozen=True)
class Ambiguous:
    columns: tuple[int, ...]
    headers: tuple[str, ...]


Resolution = Union[Found, Missing, Ambiguous]


class FieldResolver:
    """Mapea los encabezados de un feed a índices de columna por campo lógico."""

    def __init__(self, aliases: Mapping[str, Sequence[str]]) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            field: tuple(dict.fromkeys(normalize_header(alias) for alias in field_aliases))
            for field, field_aliases in aliases.items()
        }

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._aliases)

    def resolve(self, header_row: Sequence[str]) -> dict[str, Resolution]:
        normalized = [normalize_header(header) for header in header_row]
        return {
            field: self._resolve_field(aliases, header_row, normalized)
            for field, aliases in self._aliases.items()
        }

    def _resolve_field(
        self,
        aliases: tuple[str, ...],
        header_row: Sequence[str],
        normalized: Sequence[str],
    ) -> Resolution:
        exact = [i for i, header in enumerate(normalized) if header and header in aliases]
        if exact:
            return self._pick(exact, header_row)

        partial = [
            i
            for i, header in enumerate(normalized)
            if header
            and any(
                len(alias) >= MIN_SUBSTRING_ALIAS_LENGTH and alias in header for alias in aliases
            )
        ]
        if partial:
            return self._pick(partial, header_row)
        return Missing()

    @staticmethod
    def _pick(columns: list[int], header_row: Sequence[str]) -> Resolution:
        if len(columns) == 1:
            return Found(column=columns[0], header=header_row[columns[0]])
        return Ambiguous(
            columns=tuple(columns),
            headers=tuple(header_row[i] for i in columns),
        )
