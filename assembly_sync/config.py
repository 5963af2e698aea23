from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .client import AssemblySuiteClient, credentials_refresh
from .constants import TOKEN_VALIDITY_MILLIS
from .metrics import build_metrics_from_env
from .transport import DEFAULT_TIMEOUT


def env_bool(key: str, fallback: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return fallback
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(key: str, fallback: Optional[int] = None) -> Optional[int]:
    value = os.getenv(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def env_float(key: str, fallback: float) -> float:
    value = os.getenv(key)
    if value is None:
        return fallback
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True)
class Settings:
    base_url: Optional[str]
    username: Optional[str]
    password: Optional[str]
    production_line: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    token_validity_millis: int = TOKEN_VALIDITY_MILLIS
    auto_reauthenticate: bool = True
    metrics_enabled: bool = True


def load_settings() -> Settings:
    return Settings(
        base_url=os.getenv("ASSEMBLY_SUITE_URL"),
        username=os.getenv("ASSEMBLY_SUITE_USERNAME"),
        password=os.getenv("ASSEMBLY_SUITE_PASSWORD"),
        production_line=env_int("ASSEMBLY_SUITE_LINE"),
        timeout=env_float("ASSEMBLY_SUITE_TIMEOUT", DEFAULT_TIMEOUT),
        token_validity_millis=env_int(
            "ASSEMBLY_SUITE_TOKEN_VALIDITY_MS", TOKEN_VALIDITY_MILLIS
        )
        or TOKEN_VALIDITY_MILLIS,
        auto_reauthenticate=env_bool("ASSEMBLY_SUITE_AUTO_REAUTH", True),
        metrics_enabled=os.getenv("ENABLE_SYNC_METRICS", "1") != "0",
    )


def build_client(settings: Settings) -> AssemblySuiteClient:
    """Create a client from ``settings`` and authenticate it."""
    refresh_handler = None
    if settings.auto_reauthenticate and settings.username and settings.password:
        refresh_handler = credentials_refresh(settings.username, settings.password)

    client = AssemblySuiteClient(
        settings.base_url,
        refresh_handler=refresh_handler,
        timeout=settings.timeout,
        metrics=build_metrics_from_env() if settings.metrics_enabled else None,
        token_validity_millis=settings.token_validity_millis,
    )
    client.authenticate(settings.username, settings.password)
    if settings.production_line is not None:
        client.set_production_line(settings.production_line)
    return client
