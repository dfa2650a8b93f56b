"""Dashboard configuration.

Settings are read from ``~/.bill-dashboard/config.json`` and can be
overridden with environment variables, which is how the deployment sets
the VPS address and the login password.
"""

import json
import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Environment variable -> (config key, type)
ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "VPS_API_URL": ("stats_url", str),
    "BILL_DASHBOARD_AUTH_URL": ("auth_url", str),
    "BILL_DASHBOARD_PASSWORD": ("password", str),
    "BILL_DASHBOARD_SECRET_KEY": ("secret_key", str),
    "BILL_DASHBOARD_POLL_INTERVAL": ("poll_interval", float),
    "BILL_DASHBOARD_DATA_DIR": ("data_dir", str),
    "BILL_DASHBOARD_OUTBOX_KEY": ("outbox_api_key", str),
}


def get_config_dir() -> Path:
    """Get the dashboard config directory."""
    return Path.home() / ".bill-dashboard"


def get_config_file() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.json"


@dataclass
class DashboardConfig:
    """Configuration for the dashboard server."""

    stats_url: str = "http://localhost:3001"  # VPS base URL
    auth_url: str | None = None  # External password check endpoint
    password: str | None = None  # Local password when no auth_url is set
    secret_key: str = field(default_factory=lambda: secrets.token_hex(32))
    session_max_age: int = 12 * 60 * 60  # seconds a login stays valid
    poll_interval: float = 5.0
    request_timeout: float = 10.0
    stale_after_ms: int = 60_000
    data_dir: str = "data"
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    outbox_api_key: str | None = None  # Required header for agent outbox writes

    @property
    def stats_endpoint(self) -> str:
        """Full URL of the VPS stats endpoint."""
        return f"{self.stats_url.rstrip('/')}/api/stats"

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Path | None = None, environ: dict[str, str] | None = None) -> DashboardConfig:
    """Load config from file, then apply environment overrides."""
    data = _read_config_file(path or get_config_file())
    env = os.environ if environ is None else environ
    for var, (key, cast) in ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        try:
            data[key] = cast(value)
        except ValueError:
            logger.warning(f"Ignoring invalid {var}={value!r}")
    return DashboardConfig.from_dict(data)


def persist_secret_key(config: DashboardConfig, path: Path | None = None) -> bool:
    """Store the session signing key in the config file if it has none.

    Without this every restart would generate a new key and log everyone
    out. Other settings in the file are preserved and environment
    overrides are never written back.

    Returns True if the file was updated.
    """
    path = path or get_config_file()
    data = _read_config_file(path)
    if data.get("secret_key"):
        return False
    data["secret_key"] = config.secret_key
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return True
