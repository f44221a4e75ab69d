from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Feed externo (export CSV publicado de la planilla)
    feed_url: str | None = None
    feed_timeout_seconds: float = 15.0
    feed_delimiter: str = ","

    # Sincronización saliente
    webhook_url: str | None = None
    webhook_timeout_seconds: float = 10.0

    # Persistencia
    use_in_memory: bool = True
    state_file: str = "data/reservas.json"

    # Coincidencia de unidades: "substring" (heredado) o "exact"
    identity_matching: str = "substring"

    # Reportes
    maintenance_alert_days: int = 10
    exchange_rate_url: str = "https://open.er-api.com/v6/latest/BRL"
    exchange_rate_fallback: Decimal = Decimal("1550")
    exchange_rate_timeout_seconds: float = 5.0

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
