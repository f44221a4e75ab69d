"""Estrategias para resolver la etiqueta libre de una reservación contra la flota."""

from abc import ABC, abstractmethod


def _fold(text: str | None) -> str:
    return (text or "").strip().casefold()


class IdentityMatcher(ABC):
    """
    Puerto para decidir si una etiqueta de reservación apunta a un vehículo.

    Permite cambiar la heurística por coincidencia exacta sin tocar la
    expansión de días del índice de disponibilidad.
    """

    @abstractmethod
    def matches(self, vehicle_identity: str, reservation_label: str) -> bool:
        raise NotImplementedError


class SubstringIdentityMatcher(IdentityMatcher):
    """
    Coincidencia exacta sin mayúsculas; si no, subcadena en ambos sentidos.

    Limitación conocida: "Toyota Vitz" coincide con cualquier reservación que
    mencione un "Toyota Vitz", aunque sea otra unidad del mismo modelo.
    """

    def matches(self, vehicle_identity: str, reservation_label: str) -> bool:
        target = _fold(vehicle_identity)
        label = _fold(reservation_label)
        if not target or not label:
            return False
        if target == label:
            return True
        return label in target or target in label


class ExactIdentityMatcher(IdentityMatcher):
    """Sólo coincidencia exacta (sin distinguir mayúsculas)."""

    def matches(self, vehicle_identity: str, reservation_label: str) -> bool:
        target = _fold(vehicle_identity)
        return bool(target) and target == _fold(reservation_label)
