"""
Study building: blobs → registered studies.

Two layers live here:

* :class:`StudyBuilder` – the protocol every parsing backend implements.
  A backend receives the whole blob batch plus the metadata store, parses
  what it can, registers it, and returns the created study identifiers.
* :func:`build_studies` – the adapter the pipeline calls. It forwards the
  batch verbatim, exactly once, and turns any escaping exception into a
  :class:`~dicomlocal.errors.BuildError`.

:class:`PydicomStudyBuilder` is the default backend, reading headers only
via *pydicom*.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import List, Optional, Protocol, Sequence

import pydicom

from dicomlocal.errors import BuildError
from dicomlocal.models import Blob
from dicomlocal.store import DicomMetadataStore, InstanceRecord

log = logging.getLogger(__name__)


class StudyBuilder(Protocol):
    """Parsing backend contract."""

    def build(self, blobs: Sequence[Blob], store: DicomMetadataStore) -> List[str]:
        """Parse *blobs*, register them in *store*, return the study UIDs."""
        ...


# --------------------------------------------------------------------------- #
# Default backend                                                             #
# --------------------------------------------------------------------------- #
def _text(ds: pydicom.Dataset, keyword: str) -> Optional[str]:
    """Return ``ds.<keyword>`` as a stripped string or ``None`` when empty."""
    value = getattr(ds, keyword, None)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def read_instance_record(blob: Blob) -> Optional[InstanceRecord]:
    """Parse the header of *blob*.

    Args:
        blob: Candidate DICOM file.

    Returns:
        An :class:`InstanceRecord`, or ``None`` when the content is not
        DICOM or lacks a ``StudyInstanceUID``.
    """
    try:
        ds = pydicom.dcmread(BytesIO(blob.data), stop_before_pixels=True, force=True)
        study_uid = _text(ds, "StudyInstanceUID")
        series_uid = _text(ds, "SeriesInstanceUID")
        sop_uid = _text(ds, "SOPInstanceUID")
        modality = _text(ds, "Modality")
    except Exception as exc:  # noqa: BLE001 – per-file failures never abort the batch
        log.warning("Skipping %s: unreadable DICOM (%s)", blob.name, exc)
        return None

    if not study_uid:
        log.warning("Skipping %s: no StudyInstanceUID", blob.name)
        return None

    return InstanceRecord(
        study_uid=study_uid,
        # Files without series/SOP UIDs still belong to their study.
        series_uid=series_uid or f"{study_uid}.series",
        sop_uid=sop_uid or f"{study_uid}.{blob.name}",
        modality=modality,
    )


class PydicomStudyBuilder:
    """Header-only builder backed by :func:`pydicom.dcmread`.

    Individual unparsable files are skipped; a batch with no parsable
    content yields an empty list.
    """

    def build(self, blobs: Sequence[Blob], store: DicomMetadataStore) -> List[str]:
        records = [rec for rec in map(read_instance_record, blobs) if rec is not None]
        log.info("Parsed %d of %d file(s)", len(records), len(blobs))
        if not records:
            return []
        return store.add_instances(records)


# --------------------------------------------------------------------------- #
# Adapter used by the pipeline                                                #
# --------------------------------------------------------------------------- #
def build_studies(
    builder: StudyBuilder,
    blobs: Sequence[Blob],
    store: DicomMetadataStore,
) -> List[str]:
    """Run *builder* once over the full batch.

    Args:
        builder: Parsing backend.
        blobs: Acquired batch, forwarded unchanged.
        store: Shared metadata store the backend registers into.

    Returns:
        Study UIDs returned by the backend, each resolvable in *store*.

    Raises:
        BuildError: If the backend raises, or returns an id the store cannot
            resolve.
    """
    try:
        study_ids = list(builder.build(blobs, store))
    except BuildError:
        raise
    except Exception as exc:  # noqa: BLE001 – any backend failure is structural
        raise BuildError(f"Study builder failed: {exc}") from exc

    missing = [uid for uid in study_ids if uid not in store]
    if missing:
        raise BuildError(f"Builder returned unregistered study id(s): {', '.join(missing)}")
    return study_ids
