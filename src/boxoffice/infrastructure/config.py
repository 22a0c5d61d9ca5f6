"""Terminal configuration, read from ``BOXOFFICE_*`` environment variables
or a ``.env`` file in the working directory."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOXOFFICE_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Backend of record
    backend_url: str = "http://localhost:8069"
    session_id: SecretStr | None = None
    rpc_timeout: float = 10.0  # seconds, per request
    reconciliation_timeout: float = 5.0  # seconds, whole availability check

    # Catalog
    event_sale_enabled: bool = True
    company_id: int | None = None
    event_type_ids: Annotated[list[int], NoDecode] = []
    load_past_events: bool = False

    currency_decimals: int = 2
    data_dir: Path = Path("data")
    log_level: str = "INFO"

    @field_validator("event_type_ids", mode="before")
    @classmethod
    def split_event_type_ids(cls, v: str | list[int]) -> list[int]:
        if isinstance(v, str) and not v.startswith("["):
            return [int(i) for i in v.split(",") if i.strip()]
        return v
