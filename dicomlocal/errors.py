"""Custom exceptions raised by the ingestion pipeline stages."""

from __future__ import annotations


class DicomLocalError(RuntimeError):
    """Base class for every failure surfaced by *dicomlocal*."""


class AcquisitionError(DicomLocalError):
    """Raised when the file listing or any individual content fetch fails."""


class BuildError(DicomLocalError):
    """Raised when the study builder fails structurally for a whole batch."""


class ClassificationError(DicomLocalError):
    """Raised when a registered study lacks the series/instance structure."""


class ConfigError(DicomLocalError):
    """Raised when a configuration file is missing or does not validate."""
