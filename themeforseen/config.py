"""Configuration management for ThemeForseen.

Optional per-project config lives in ``<root>/.themeforseen.yaml``::

    port: 3847
    host: 127.0.0.1
    log_level: info
    target:
      kind: file          # or "inline"
      path: src/theme.css

Environment variables (``THEMEFORSEEN_PORT``, ``THEMEFORSEEN_HOST``,
``THEMEFORSEEN_LOG_LEVEL``) override the file; CLI options override both.
A missing or malformed file means defaults; it never stops the server.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from themeforseen.models import CssTarget
from themeforseen.paths import config_path

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3847
DEFAULT_HOST = "127.0.0.1"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    log_level: str = DEFAULT_LOG_LEVEL
    target: CssTarget | None = None


def _read(root: Path) -> dict:
    """Read the project config file, returning empty dict if missing or invalid."""
    cp = config_path(root)
    if not cp.exists():
        return {}
    try:
        data = yaml.safe_load(cp.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", cp, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", cp)
        return {}
    return data


def _write(root: Path, data: dict) -> None:
    cp = config_path(root)
    cp.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False), encoding="utf-8")


def _as_port(value, source: str) -> int | None:
    try:
        port = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid port %r from %s", value, source)
        return None
    if not 0 < port < 65536:
        logger.warning("Ignoring out-of-range port %d from %s", port, source)
        return None
    return port


def load_settings(root: Path) -> Settings:
    """Merge defaults, the config file and environment variables."""
    settings = Settings()
    data = _read(root)

    if "port" in data:
        settings.port = _as_port(data["port"], str(config_path(root))) or settings.port
    if isinstance(data.get("host"), str):
        settings.host = data["host"]
    if isinstance(data.get("log_level"), str):
        settings.log_level = data["log_level"].upper()
    if isinstance(data.get("target"), dict):
        try:
            settings.target = CssTarget.from_dict(data["target"])
        except ValueError as exc:
            logger.warning("Ignoring target override: %s", exc)

    env_port = os.environ.get("THEMEFORSEEN_PORT")
    if env_port:
        settings.port = _as_port(env_port, "THEMEFORSEEN_PORT") or settings.port
    env_host = os.environ.get("THEMEFORSEEN_HOST")
    if env_host:
        settings.host = env_host
    env_level = os.environ.get("THEMEFORSEEN_LOG_LEVEL")
    if env_level:
        settings.log_level = env_level.upper()

    return settings


def set_target(root: Path, target: CssTarget | None) -> None:
    """Pin (or with None, unpin) the CSS target in the project config file."""
    data = _read(root)
    if target is None:
        data.pop("target", None)
    else:
        data["target"] = target.to_dict()
    _write(root, data)
