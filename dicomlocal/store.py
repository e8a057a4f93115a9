"""
Process-wide in-memory DICOM metadata store.

Builders register parsed instances through :meth:`DicomMetadataStore.add_instances`;
the classifier reads studies back with :meth:`DicomMetadataStore.get_study`.
The store is append-only and serialises access with a single lock so that
concurrent pipeline invocations may share one instance.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from dicomlocal.models import Instance, Series, Study

log = logging.getLogger(__name__)


@dataclass(slots=True)
class InstanceRecord:
    """Flat header extract for one parsed DICOM object.

    Attributes:
        study_uid: ``StudyInstanceUID`` (0020,000D).
        series_uid: ``SeriesInstanceUID`` (0020,000E).
        sop_uid: ``SOPInstanceUID`` (0008,0018).
        modality: ``Modality`` (0008,0060), ``None`` when absent.
    """

    study_uid: str
    series_uid: str
    sop_uid: str
    modality: Optional[str] = None


@dataclass(slots=True)
class _SeriesEntry:
    uid: str
    modality: Optional[str]
    instances: Dict[str, Instance] = field(default_factory=dict)


class DicomMetadataStore:
    """Append-only study → series → instance index."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._studies: Dict[str, Dict[str, _SeriesEntry]] = {}

    # ------------------------------------------------------------------ #
    # Writes                                                             #
    # ------------------------------------------------------------------ #
    def add_instances(self, records: Iterable[InstanceRecord]) -> List[str]:
        """Register *records* and return the touched study UIDs.

        The series modality is taken from the first instance registered for
        that series. Re-registering a known ``SOPInstanceUID`` is a no-op.

        Args:
            records: Parsed header extracts, usually one batch.

        Returns:
            Unique study UIDs in first-seen order.
        """
        touched: Dict[str, None] = {}
        with self._lock:
            for rec in records:
                series_map = self._studies.setdefault(rec.study_uid, {})
                entry = series_map.get(rec.series_uid)
                if entry is None:
                    entry = _SeriesEntry(uid=rec.series_uid, modality=rec.modality)
                    series_map[rec.series_uid] = entry
                if rec.sop_uid not in entry.instances:
                    entry.instances[rec.sop_uid] = Instance(
                        sop_instance_uid=rec.sop_uid, modality=rec.modality
                    )
                touched[rec.study_uid] = None
        log.debug("Registered %d study(ies)", len(touched))
        return list(touched)

    # ------------------------------------------------------------------ #
    # Reads                                                              #
    # ------------------------------------------------------------------ #
    def get_study(self, study_uid: str) -> Optional[Study]:
        """Return an immutable snapshot of *study_uid* or ``None``."""
        with self._lock:
            series_map = self._studies.get(study_uid)
            if series_map is None:
                return None
            return Study(
                study_instance_uid=study_uid,
                series=tuple(
                    Series(
                        series_instance_uid=entry.uid,
                        modality=entry.modality,
                        instances=tuple(entry.instances.values()),
                    )
                    for entry in series_map.values()
                ),
            )

    def study_uids(self) -> List[str]:
        """Return every registered study UID in registration order."""
        with self._lock:
            return list(self._studies)

    def __contains__(self, study_uid: object) -> bool:
        with self._lock:
            return study_uid in self._studies

    def __len__(self) -> int:
        with self._lock:
            return len(self._studies)
