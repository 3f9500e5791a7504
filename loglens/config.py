"""Client configuration: frozen dataclass loaded from YAML and env vars."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ClientConfig:
    host: str = "localhost"
    port: int = 1463
    category: str = "loglens"
    timeout: float = 5.0    # connect/socket timeout, seconds
    echo: bool = True       # print "[timestamp severity] message" per send


def load_yaml_config(path: str | None) -> dict:
    """Read host/port/category/timeout/echo overrides from a YAML mapping.

    No path or a missing file yields {}; a file whose top level is not a
    mapping raises ValueError.
    """
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    logger.debug("Loaded loglens settings %s from %s", sorted(data), path)
    return data


def load_config(path: str | None = None, env: dict | None = None) -> ClientConfig:
    """Build ClientConfig from defaults <- YAML file <- env vars (highest priority)."""
    if env is None:
        env = os.environ
    data = load_yaml_config(path or env.get("LOGLENS_CONFIG"))

    host = data.get("host", ClientConfig.host)
    port = data.get("port", ClientConfig.port)
    category = data.get("category", ClientConfig.category)
    timeout = data.get("timeout", ClientConfig.timeout)
    echo = data.get("echo", ClientConfig.echo)

    return ClientConfig(
        host=env.get("LOGLENS_HOST", host),
        port=int(env.get("LOGLENS_PORT", port)),
        category=env.get("LOGLENS_CATEGORY", category),
        timeout=float(env.get("LOGLENS_TIMEOUT", timeout)),
        echo=_parse_bool(env.get("LOGLENS_ECHO", echo)),
    )
