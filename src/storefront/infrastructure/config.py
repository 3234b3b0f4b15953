"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# Resolve the default data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

PAYMENT_MODES = ("inline", "redirect")
GATEWAYS = ("fake", "http")


class ConfigurationError(ValueError):
    """An environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    environment: str = "development"
    log_level: str | None = None
    payment_mode: str = "inline"
    settlement_delay: float = 0.5
    gateway: str = "fake"
    gateway_url: str | None = None
    gateway_api_key: str | None = None
    gateway_timeout: float = 10.0
    success_url: str = "http://localhost:8080/payment-success"
    cancel_url: str = "http://localhost:8080/cart"

    def __post_init__(self) -> None:
        if self.payment_mode not in PAYMENT_MODES:
            raise ConfigurationError(
                f"STOREFRONT_PAYMENT_MODE must be one of {PAYMENT_MODES}, "
                f"got {self.payment_mode!r}"
            )
        if self.gateway not in GATEWAYS:
            raise ConfigurationError(
                f"STOREFRONT_GATEWAY must be one of {GATEWAYS}, got {self.gateway!r}"
            )
        if self.gateway == "http" and not self.gateway_url:
            raise ConfigurationError(
                "STOREFRONT_GATEWAY_URL is required when STOREFRONT_GATEWAY=http"
            )
        if self.settlement_delay < 0:
            raise ConfigurationError("STOREFRONT_SETTLEMENT_DELAY cannot be negative")
        if self.gateway_timeout <= 0:
            raise ConfigurationError("STOREFRONT_GATEWAY_TIMEOUT must be positive")

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"

    @property
    def carts_dir(self) -> Path:
        return self.data_dir / "carts"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            data_dir=Path(env.get("STOREFRONT_DATA_DIR", str(defaults.data_dir))),
            environment=env.get("STOREFRONT_ENV", defaults.environment).lower(),
            log_level=env.get("LOG_LEVEL") or None,
            payment_mode=env.get("STOREFRONT_PAYMENT_MODE", defaults.payment_mode).lower(),
            settlement_delay=_float(env, "STOREFRONT_SETTLEMENT_DELAY", defaults.settlement_delay),
            gateway=env.get("STOREFRONT_GATEWAY", defaults.gateway).lower(),
            gateway_url=env.get("STOREFRONT_GATEWAY_URL") or None,
            gateway_api_key=env.get("STOREFRONT_GATEWAY_API_KEY") or None,
            gateway_timeout=_float(env, "STOREFRONT_GATEWAY_TIMEOUT", defaults.gateway_timeout),
            success_url=env.get("STOREFRONT_SUCCESS_URL", defaults.success_url),
            cancel_url=env.get("STOREFRONT_CANCEL_URL", defaults.cancel_url),
        )


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
