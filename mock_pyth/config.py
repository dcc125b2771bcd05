"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OracleConfig:
    valid_time_period: int = 60
    single_update_fee_in_wei: int = 1


@dataclass(frozen=True)
class WebhookConfig:
    enabled: bool = False
    url: str = ""
    timeout: int = 10


@dataclass(frozen=True)
class AppConfig:
    oracle: OracleConfig = field(default_factory=OracleConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_oracle(raw: dict[str, Any]) -> OracleConfig:
    return OracleConfig(
        valid_time_period=int(raw.get("valid_time_period", 60)),
        single_update_fee_in_wei=int(raw.get("single_update_fee_in_wei", 1)),
    )


def _build_webhook(raw: dict[str, Any]) -> WebhookConfig:
    return WebhookConfig(
        enabled=bool(raw.get("enabled", False)),
        url=raw.get("url", ""),
        timeout=int(raw.get("timeout", 10)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        oracle=_build_oracle(raw.get("oracle") or {}),
        webhook=_build_webhook(raw.get("webhook") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if cfg.oracle.valid_time_period < 0:
        raise ValueError("valid_time_period must not be negative")
    if cfg.oracle.single_update_fee_in_wei < 0:
        raise ValueError("single_update_fee_in_wei must not be negative")
    if cfg.webhook.enabled and not cfg.webhook.url:
        raise ValueError("Webhook is enabled but has no url")
