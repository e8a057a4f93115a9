"""
YAML configuration loader.

Values are layered, later sources overriding earlier ones:

1. The packaged default ``dicomlocal/resources/default_config.yaml``.
2. An explicit YAML file (``--config`` on the CLI).
3. Environment variables (``URL_API``, ``URL_DICOM``,
   ``DICOMLOCAL_TIMEOUT``, ``DICOMLOCAL_MAX_WORKERS``).
4. Keyword overrides passed by the caller (CLI flags).

The merged mapping is validated once through
:class:`~dicomlocal.config.schema.IngestConfig`.
"""

from __future__ import annotations

import logging
import os
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from dicomlocal.errors import ConfigError

from .schema import IngestConfig

log = logging.getLogger(__name__)

_DEFAULT_CONFIG = files("dicomlocal.resources") / "default_config.yaml"

# config key → environment variable
ENV_MAP: Dict[str, str] = {
    "api_url": "URL_API",
    "dicom_url": "URL_DICOM",
    "timeout": "DICOMLOCAL_TIMEOUT",
    "max_workers": "DICOMLOCAL_MAX_WORKERS",
}


def _load_yaml(text: str, origin: str) -> Dict[str, Any]:
    """Parse *text* and ensure the document is a mapping."""
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {origin}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{origin} must contain a mapping at the top level")
    return data


def _env_overrides() -> Dict[str, str]:
    """Return config values supplied through the environment."""
    out: Dict[str, str] = {}
    for key, env in ENV_MAP.items():
        val = os.getenv(env)
        if val:
            out[key] = val
    return out


def load_config(
    config_path: Optional[str | Path] = None,
    **overrides: Any,
) -> IngestConfig:
    """Return a fully validated :class:`IngestConfig`.

    Args:
        config_path: Optional YAML file layered over the packaged defaults.
        **overrides: Highest-priority values; ``None`` entries are ignored so
            unset CLI flags do not mask lower layers.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If *config_path* does not exist, cannot be parsed, or
            the merged values fail validation.
    """
    merged = _load_yaml(_DEFAULT_CONFIG.read_text(encoding="utf-8"), "default config")

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"Configuration file not found at {path}")
        merged.update(_load_yaml(path.read_text(encoding="utf-8"), str(path)))
        log.debug("Loaded configuration from %s", path)

    merged.update(_env_overrides())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return IngestConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration – {exc}") from exc
