"""Shared fixtures: in-memory DICOM files and a fake HTTP server."""

from __future__ import annotations

import itertools
import json
import threading
from io import BytesIO
from typing import Callable, Dict, List, Optional, Tuple

import pytest
from pydicom.dataset import Dataset, FileMetaDataset
from pydicom.uid import ExplicitVRLittleEndian

from dicomlocal.acquire import client as client_mod
from dicomlocal.models import Blob

API_URL = "https://api.test/list?path="
DICOM_URL = "https://files.test/dicom"

SECONDARY_CAPTURE = "1.2.840.10008.5.1.4.1.1.7"
_SOP_COUNTER = itertools.count(1)


def dicom_bytes(
    study_uid: str,
    series_uid: str,
    sop_uid: str,
    modality: Optional[str] = "CT",
) -> bytes:
    """Return a minimal Part-10 DICOM file as bytes."""
    meta = FileMetaDataset()
    meta.MediaStorageSOPClassUID = SECONDARY_CAPTURE
    meta.MediaStorageSOPInstanceUID = sop_uid
    meta.TransferSyntaxUID = ExplicitVRLittleEndian

    ds = Dataset()
    ds.file_meta = meta
    ds.SOPClassUID = SECONDARY_CAPTURE
    ds.SOPInstanceUID = sop_uid
    ds.StudyInstanceUID = study_uid
    ds.SeriesInstanceUID = series_uid
    if modality is not None:
        ds.Modality = modality

    buf = BytesIO()
    ds.save_as(buf, enforce_file_format=True)
    return buf.getvalue()


@pytest.fixture
def make_blob() -> Callable[..., Blob]:
    """Factory returning a DICOM :class:`Blob`."""

    def _make(
        name: str,
        study_uid: str,
        series_uid: str = "",
        sop_uid: str = "",
        modality: Optional[str] = "CT",
    ) -> Blob:
        series_uid = series_uid or f"{study_uid}.1"
        sop_uid = sop_uid or f"{series_uid}.{next(_SOP_COUNTER)}"
        return Blob(
            name=name,
            data=dicom_bytes(study_uid, series_uid, sop_uid, modality),
            content_type="application/dicom",
        )

    return _make


# --------------------------------------------------------------------------- #
# Fake HTTP                                                                   #
# --------------------------------------------------------------------------- #
class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", content_type: str = ""):
        self.status_code = status_code
        self.content = content
        self.headers = {"Content-Type": content_type} if content_type else {}

    def json(self):
        return json.loads(self.content.decode("utf-8"))


class FakeServer:
    """URL → response table that records every request."""

    def __init__(self) -> None:
        self.routes: Dict[str, FakeResponse] = {}
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def add_listing(self, url: str, names, status: int = 200) -> None:
        self.routes[url] = FakeResponse(status, json.dumps(names).encode(), "application/json")

    def add_file(self, url: str, data: bytes, status: int = 200, content_type: str = "application/dicom") -> None:
        self.routes[url] = FakeResponse(status, data, content_type)

    def get(self, url, headers=None, timeout=None):
        with self._lock:
            self.calls.append(url)
        return self.routes.get(url, FakeResponse(404))


@pytest.fixture
def server(monkeypatch) -> FakeServer:
    fake = FakeServer()
    monkeypatch.setattr(client_mod.requests, "get", fake.get)
    return fake


class RecordingBuilder:
    """Study builder double that records its calls."""

    def __init__(self, inner=None, *, error: Exception | None = None):
        self.inner = inner
        self.error = error
        self.calls: List[Tuple[Blob, ...]] = []

    def build(self, blobs, store):
        self.calls.append(tuple(blobs))
        if self.error is not None:
            raise self.error
        return self.inner.build(blobs, store) if self.inner else []
