"""
Configuration package façade.

* :func:`load_config` – merge packaged defaults, an optional YAML file,
  environment variables and explicit overrides.
* :class:`IngestConfig` – the validated Pydantic model.
"""

from .loader import load_config  # noqa: F401
from .schema import IngestConfig  # noqa: F401

__all__: list[str] = ["load_config", "IngestConfig"]
