"""Server settings read from the environment."""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from ynab_client import DEFAULT_BASE_URL, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT

SERVER_NAME = "ynab-mcp"
SERVER_VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    api_token: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    default_budget_id: str = "last-used"
    log_level: str = "INFO"


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw!r}")
    return value


def _log_level(env: Mapping[str, str]) -> str:
    raw = (env.get("YNAB_LOG_LEVEL") or "").strip() or ("DEBUG" if env.get("DEBUG") else "INFO")
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"YNAB_LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``env`` (defaults to ``os.environ``)."""
    if env is None:
        env = os.environ

    return Settings(
        api_token=env.get("YNAB_API_TOKEN") or None,
        base_url=(env.get("YNAB_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        timeout=_number(env, "YNAB_TIMEOUT", DEFAULT_TIMEOUT, float),
        max_retries=_number(env, "YNAB_MAX_RETRIES", DEFAULT_MAX_RETRIES, int),
        default_budget_id=env.get("YNAB_DEFAULT_BUDGET_ID") or "last-used",
        log_level=_log_level(env),
    )


def configure_logging(level: str = "INFO") -> None:
    # stdout carries the MCP stdio protocol, so logs go to stderr.
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
