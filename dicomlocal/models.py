"""
Typed, immutable value objects that circulate between pipeline stages.

The module provides:

* **`Blob`** – one named byte sequence produced by either acquisition path.
* **`Instance` / `Series` / `Study`** – read-only snapshots of the DICOM
  hierarchy as registered in :class:`dicomlocal.store.DicomMetadataStore`.
* **`RouteDirective`** – the terminal output handed to a dispatcher.

Every class inherits from :class:`pydantic.BaseModel` with ``frozen=True``
so that stages can pass objects around without defensive copies.
"""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import unquote, urlencode

from pydantic import BaseModel

# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #
MICROSCOPY_MODALITY = "SM"
"""DICOM modality code for slide microscopy."""

LOCAL_DATA_SOURCE = "dicomlocal"
"""Data-source tag carried to the viewer for locally ingested studies."""

STUDY_PARAM = "StudyInstanceUIDs"
DATASOURCE_PARAM = "datasources"


# --------------------------------------------------------------------------- #
# 1 – Acquired files                                                          #
# --------------------------------------------------------------------------- #
class Blob(BaseModel, frozen=True):
    """A named byte sequence awaiting parsing.

    Attributes
    ----------
    name
        File name without directories (``"IM0001.dcm"``).
    data
        Raw file content.
    content_type
        MIME type as declared by the source. Empty when unknown.
    """

    name: str
    data: bytes
    content_type: str = ""

    def __repr__(self) -> str:
        return f"Blob(name={self.name!r}, size={len(self.data)}, content_type={self.content_type!r})"


# --------------------------------------------------------------------------- #
# 2 – DICOM hierarchy                                                         #
# --------------------------------------------------------------------------- #
class Instance(BaseModel, frozen=True):
    """Single DICOM object (one image or frame set)."""

    sop_instance_uid: str
    modality: Optional[str] = None


class Series(BaseModel, frozen=True):
    """One imaging run inside a study.

    ``instances`` keeps registration order; the classifier only ever looks
    at the first entry.
    """

    series_instance_uid: str
    modality: Optional[str] = None
    instances: Tuple[Instance, ...] = ()


class Study(BaseModel, frozen=True):
    """A study and its series, in registration order."""

    study_instance_uid: str
    series: Tuple[Series, ...] = ()


# --------------------------------------------------------------------------- #
# 3 – Routing output                                                          #
# --------------------------------------------------------------------------- #
class RouteDirective(BaseModel, frozen=True):
    """Navigation target for the downstream viewer.

    Attributes
    ----------
    target_path
        View path without leading slash (``"viewer"`` or ``"microscopy"``).
    study_ids
        Every study identifier produced by the build step, in build order.
    data_source
        Ingestion backend tag (``"dicomlocal"``).
    params
        Ordered query parameters exactly as they will be dispatched.
    """

    target_path: str
    study_ids: Tuple[str, ...]
    data_source: str
    params: Tuple[Tuple[str, str], ...]

    @property
    def query_string(self) -> str:
        """Return the query string with values decoded, not re-escaped."""
        return unquote(urlencode(self.params))

    @property
    def url(self) -> str:
        """Return ``/<target_path>?<query_string>``."""
        return f"/{self.target_path}?{self.query_string}"
