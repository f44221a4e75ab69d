import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from reservas.application.interfaces.persistence_port import PersistencePort, Snapshot
from reservas.infrastructure.persistence.records import (
    ReservationRecord,
    SnapshotDocument,
    VehicleRecord,
)

logger = logging.getLogger(__name__)


class JsonFilePersistence(PersistencePort):
    """
    Guarda el snapshot completo en un único documento JSON.

    - Archivo inexistente: se carga un snapshot vacío.
    - Registros inválidos se descartan con un warning; el resto carga.
    - La escritura es atómica (archivo temporal + os.replace), un corte a
      mitad de escritura nunca deja un documento a medias.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Snapshot:
        if not self._path.exists():
            logger.info("Sin estado persistido, se inicia vacío", extra={"path": str(self._path)})
            return Snapshot()

        with self._path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
        if not isinstance(raw, dict):
            raise ValueError(f"Documento de estado inválido en {self._path}")

        vehicles = []
        for item in raw.pop("vehicles", None) or []:
            try:
                vehicles.append(VehicleRecord.model_validate(item).to_domain())
            except ValidationError as exc:
                logger.warning(
                    "Vehículo persistido inválido, se descarta",
                    extra={"record": item, "error": str(exc)},
                )

        reservations = []
        for item in raw.pop("reservations", None) or []:
            try:
                reservations.append(ReservationRecord.model_validate(item).to_domain())
            except ValidationError as exc:
                logger.warning(
                    "Reservación persistida inválida, se descarta",
                    extra={"record": item, "error": str(exc)},
                )

        return Snapshot(vehicles=vehicles, reservations=reservations, collections=raw)

    def save(self, snapshot: Snapshot) -> None:
        document = SnapshotDocument(
            vehicles=[VehicleRecord.from_domain(v) for v in snapshot.vehicles],
            reservations=[ReservationRecord.from_domain(r) for r in snapshot.reservations],
            **snapshot.collections,
        )
        payload = document.model_dump_json(indent=2)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(
            "Snapshot guardado",
            extra={"path": str(self._path), "reservations": len(snapshot.reservations)},
        )
