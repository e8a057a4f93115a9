"""
Pydantic model that mirrors the YAML configuration consumed by *dicomlocal*.

The rest of the codebase works with a validated :class:`IngestConfig`
instead of ad-hoc dictionaries.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from dicomlocal.models import LOCAL_DATA_SOURCE


class IngestConfig(BaseModel):
    """Root configuration object.

    Attributes:
        api_url: Listing endpoint prefix; the encoded relative path is
            appended verbatim.
        dicom_url: Content server base URL.
        default_mode_path: View path used for ordinary studies.
        microscopy_mode_path: View path used when slide-microscopy studies
            are present.
        data_source: Value of the ``datasources`` routing parameter.
        microscopy_available: Whether a microscopy-capable view exists.
            Classification is skipped when ``False``.
        deduplicate_study_ids: Drop repeated ``StudyInstanceUIDs`` entries
            from the composed route.
        max_workers: Upper bound on concurrent content downloads.
        timeout: Per-request timeout in seconds; ``None`` disables it.
    """

    api_url: str = ""
    dicom_url: str = ""

    default_mode_path: str = "viewer"
    microscopy_mode_path: str = "microscopy"
    data_source: str = LOCAL_DATA_SOURCE

    microscopy_available: bool = False
    deduplicate_study_ids: bool = False

    max_workers: int = Field(8, ge=1)
    timeout: Optional[float] = Field(None, gt=0)

    @field_validator("default_mode_path", "microscopy_mode_path")
    @classmethod
    def _strip_slashes(cls, v: str) -> str:
        """Store view paths without surrounding slashes."""
        v = v.strip("/")
        if not v:
            raise ValueError("view path must not be empty")
        return v
