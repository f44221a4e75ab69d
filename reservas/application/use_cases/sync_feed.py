import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from reservas.application.feed.ingestor import FeedIngestor
from reservas.application.interfaces.clock import Clock
from reservas.application.interfaces.feed_source import FeedSource
from reservas.application.reservation_store import FeedMergeResult, ReservationStore
from reservas.domain.errors import IngestError

DEFAULT_FEED_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class SyncResult:
    ok: bool
    finished_at: datetime
    merge: FeedMergeResult | None = None
    error: IngestError | None = None


class SyncFeedUseCase:
    """
    Trae el feed externo y reemplaza los registros de origen feed del store.

    - Una sola descarga en vuelo: llamadas concurrentes se unen a la actual,
      así una respuesta vieja nunca pisa a una más nueva.
    - Timeout acotado y abortable; ante timeout, error de transporte,
      aborto o contenido no tabular el store queda intacto.
    """

    def __init__(
        self,
        feed_source: FeedSource,
        ingestor: FeedIngestor,
        store: ReservationStore,
        clock: Clock,
        timeout_seconds: float = DEFAULT_FEED_TIMEOUT_SECONDS,
    ) -> None:
        self._feed_source = feed_source
        self._ingestor = ingestor
        self._store = store
        self._clock = clock
        self._timeout = timeout_seconds
        self._inflight: asyncio.Task | None = None
        self._fetch: asyncio.Future | None = None
        self._last_result: SyncResult | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_syncing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def last_result(self) -> SyncResult | None:
        return self._last_result

    async def execute(self) -> SyncResult:
        if not self.is_syncing:
            self._inflight = asyncio.ensure_future(self._run())
        else:
            self._logger.info("Sincronización en curso, se reutiliza la descarga actual")
        return await asyncio.shield(self._inflight)

    def abort(self) -> bool:
        """Cancela la descarga en vuelo. Retorna False si no había ninguna."""
        if self._fetch is None or self._fetch.done():
            return False
        self._fetch.cancel()
        return True

    async def _run(self) -> SyncResult:
        fetch = asyncio.ensure_future(
            asyncio.wait_for(self._feed_source.fetch_text(), timeout=self._timeout)
        )
        self._fetch = fetch
        try:
            body = await fetch
            records = self._ingestor.parse(body)
        except asyncio.TimeoutError:
            return self._failed(
                IngestError(f"El feed no respondió en {self._timeout}s", "TIMEOUT")
            )
        except asyncio.CancelledError:
            if not fetch.cancelled():
                raise
            return self._failed(IngestError("Sincronización abortada", "ABORTED"))
        except IngestError as exc:
            return self._failed(exc)
        finally:
            self._fetch = None

        merge = self._store.replace_feed_records(records)
        result = SyncResult(ok=True, finished_at=self._clock.now(), merge=merge)
        self._last_result = result
        self._logger.info(
            "Sincronización del feed exitosa",
            extra={"imported": merge.imported, "replaced": merge.replaced, "skipped": merge.skipped},
        )
        return result

    def _failed(self, error: IngestError) -> SyncResult:
        self._logger.warning(
            "Sincronización del feed fallida; se conserva el último estado válido",
            extra={"reason": error.reason, "error": error.message},
        )
        result = SyncResult(ok=False, finished_at=self._clock.now(), error=error)
        self._last_result = result
        return result
