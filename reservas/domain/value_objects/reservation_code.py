"""Value Object ReservationCode - id único de reservación."""

import hashlib
import secrets
import string
from dataclasses import dataclass

from reservas.domain.constants import FEED_ID_PREFIX


@dataclass(frozen=True)
class ReservationCode:
    """
    Value Object inmutable que representa el id de una reservación.

    Formatos:
    - Manual / online: PREFIJO-XXXXXX (aleatorio).
    - Feed: FEED-<hash> derivado del contenido de la fila.
    """

    value: str

    RANDOM_LENGTH = 6
    ALLOWED_CHARS = string.ascii_uppercase + string.digits
    HASH_LENGTH = 10

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("reservation id no puede estar vacío")

        if len(self.value) > 64:
            raise ValueError(f"reservation id excede 64 caracteres: {len(self.value)}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls, prefix: str) -> "ReservationCode":
        """Genera un id aleatorio con el prefijo indicado (ej: MANUAL-4K2P9Q)."""
        suffix = "".join(secrets.choice(cls.ALLOWED_CHARS) for _ in range(cls.RANDOM_LENGTH))
        return cls(value=f"{prefix}-{suffix}")

    @classmethod
    def for_feed_row(
        cls,
        client_name: str,
        vehicle_label: str,
        start_iso: str,
        occurrence: int = 1,
    ) -> "ReservationCode":
        """
        Id estable para una fila del feed.

        Depende sólo del contenido (cliente + unidad + fecha de salida), de modo
        que reordenar las filas del feed no cambia los ids. Filas repetidas con
        la misma clave se distinguen por su número de aparición.
        """
        key = "|".join(
            part.strip().lower() for part in (client_name, vehicle_label, start_iso)
        )
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[: cls.HASH_LENGTH].upper()
        value = f"{FEED_ID_PREFIX}-{digest}"
        if occurrence > 1:
            value = f"{value}-{occurrence}"
        return cls(value=value)
