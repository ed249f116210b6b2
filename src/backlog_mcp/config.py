"""Runtime settings for the Backlog MCP server.

Settings come from the process environment, after ``load_dotenv()`` has
pulled in a local ``.env`` file.  Explicit overrides (CLI options) win.
Credentials are deliberately not validated here: a missing API key
surfaces as an authentication failure on the first backend call.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

ENV_API_KEY = "BACKLOG_API_KEY"
ENV_SPACE_ID = "BACKLOG_SPACE_ID"
ENV_DOMAIN = "BACKLOG_DOMAIN"
ENV_RESOURCES = "BACKLOG_MCP_RESOURCES"
ENV_LOG_DIR = "BACKLOG_MCP_LOG_DIR"

DEFAULT_DOMAIN = "backlog.com"
VALID_DOMAINS: frozenset[str] = frozenset({"backlog.com", "backlog.jp", "backlogtool.com"})

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class BacklogSettings:
    api_key: str = ""
    space_id: str = ""
    domain: str = DEFAULT_DOMAIN
    expose_resources: bool = True
    log_dir: Path | None = None

    @property
    def base_url(self) -> str:
        return f"https://{self.space_id}.{self.domain}/api/v2"


def _env_flag(value: str | None, *, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in _FALSE_VALUES


def load_settings(*, dotenv: bool = True, **overrides: Any) -> BacklogSettings:
    """Build settings from the environment, then apply non-``None`` overrides."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    domain = os.environ.get(ENV_DOMAIN, "").strip() or DEFAULT_DOMAIN
    if domain not in VALID_DOMAINS:
        logger.warning("Unrecognised Backlog domain '%s'; using it anyway", domain)

    log_dir_raw = os.environ.get(ENV_LOG_DIR, "").strip()
    settings = BacklogSettings(
        api_key=os.environ.get(ENV_API_KEY, ""),
        space_id=os.environ.get(ENV_SPACE_ID, ""),
        domain=domain,
        expose_resources=_env_flag(os.environ.get(ENV_RESOURCES), default=True),
        log_dir=Path(log_dir_raw) if log_dir_raw else None,
    )
    applied = {k: v for k, v in overrides.items() if v is not None}
    return replace(settings, **applied) if applied else settings


def missing_settings(settings: BacklogSettings) -> list[str]:
    """Return the environment variable names of required settings left empty."""
    missing: list[str] = []
    if not settings.api_key:
        missing.append(ENV_API_KEY)
    if not settings.space_id:
        missing.append(ENV_SPACE_ID)
    return missing
