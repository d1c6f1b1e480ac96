"""
Configuration for the Military Essentials site.

Server values are read from the environment at call time so tests can
monkeypatch them; the client constants are fixed by the page design.
"""
import os
import logging
from dataclasses import dataclass
from pathlib import Path

from mes_shared import Environment

from .utils import env_bool

logger = logging.getLogger(__name__)

# --- Client (navigation / sidebar) ---
SCROLL_THRESHOLD = 50
ANIMATION_DELAY_MS = 300
DEBOUNCE_DELAY_MS = 150
FOCUS_DELAY_MS = 100
ANNOUNCEMENT_TTL_MS = 1000
STORAGE_KEY = "currentSection"
CLIENT_VERSION = "2.0.0"

# --- Server defaults ---
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_SHUTDOWN_TIMEOUT_S = 10.0
REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_STATIC_ROOT = REPO_ROOT / "site"
INDEX_DOCUMENT = "index.html"
PAGE_ROUTES = ("/", "/tos", "/privacy")
API_PREFIX = "/api/"


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _resolve_environment() -> str:
    raw = (_env_raw("MES_ENV", "NODE_ENV", default=Environment.DEVELOPMENT.value) or "").lower()
    known = {e.value for e in Environment}
    if raw not in known:
        logger.warning("Unknown environment %r, keeping it verbatim", raw)
    return raw


def _resolve_static_root() -> Path:
    env_path = _env_raw("MES_STATIC_ROOT")
    if env_path:
        try:
            return Path(env_path).expanduser().resolve()
        except (OSError, RuntimeError):
            logger.warning("Failed to resolve MES_STATIC_ROOT: %s, using %s", env_path, DEFAULT_STATIC_ROOT)
    return DEFAULT_STATIC_ROOT


@dataclass(frozen=True)
class ServerSettings:
    """Runtime settings for the static server."""

    host: str
    port: int
    environment: str
    static_root: Path
    shutdown_timeout_s: float
    log_health: bool

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT.value


def load_settings(**overrides) -> ServerSettings:
    """
    Build settings from the environment, then apply non-None keyword overrides
    (typically CLI flags).
    """
    values = {
        "host": _env_raw("MES_HOST", default=DEFAULT_HOST),
        "port": _env_int(DEFAULT_PORT, "MES_PORT", "PORT", min_value=0, max_value=65535),
        "environment": _resolve_environment(),
        "static_root": _resolve_static_root(),
        "shutdown_timeout_s": _env_float(
            DEFAULT_SHUTDOWN_TIMEOUT_S, "MES_SHUTDOWN_TIMEOUT_S", min_value=0.0, max_value=300.0
        ),
        "log_health": env_bool("MES_OBS_LOG_HEALTH", False),
    }
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in values:
            raise TypeError(f"Unknown setting: {key}")
        values[key] = Path(value).expanduser().resolve() if key == "static_root" else value
    return ServerSettings(**values)
