"""
Modality classification of freshly built studies.

A study counts as *slide microscopy* when any of its series carries the
``SM`` modality, or when that series' **first** instance does. Only the
first instance is inspected; deeper instance scans are deliberately not
performed.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from dicomlocal.errors import ClassificationError
from dicomlocal.models import MICROSCOPY_MODALITY, Series, Study
from dicomlocal.store import DicomMetadataStore

log = logging.getLogger(__name__)


def _series_is_microscopy(series: Series) -> bool:
    """Return ``True`` when *series* or its first instance is ``SM``.

    Raises:
        ClassificationError: If the series is not ``SM`` itself and has no
            instance to inspect.
    """
    if series.modality == MICROSCOPY_MODALITY:
        return True
    if not series.instances:
        raise ClassificationError(
            f"Series {series.series_instance_uid} has no instances"
        )
    return series.instances[0].modality == MICROSCOPY_MODALITY


def is_microscopy_study(study: Study) -> bool:
    """Return ``True`` when any series of *study* is slide microscopy.

    Series are checked in order and the scan stops at the first match, so a
    malformed series after a matching one is never reached.

    Raises:
        ClassificationError: If a series is reached that lacks instances.
    """
    return any(_series_is_microscopy(s) for s in study.series)


def classify_microscopy(
    study_ids: Sequence[str],
    store: DicomMetadataStore,
) -> List[str]:
    """Return the subset of *study_ids* that are slide microscopy.

    Studies that cannot be resolved or are structurally incomplete are
    treated as *not* microscopy.

    Args:
        study_ids: Identifiers returned by the build step.
        store: Metadata store the studies were registered in.

    Returns:
        Matching identifiers, in the order of *study_ids*.
    """
    matches: List[str] = []
    for uid in study_ids:
        try:
            study = store.get_study(uid)
            if study is None:
                raise ClassificationError(f"Study {uid} is not registered")
            if is_microscopy_study(study):
                matches.append(uid)
        except ClassificationError as exc:
            log.warning("Treating %s as non-microscopy: %s", uid, exc)

    log.debug("Microscopy studies: %d of %d", len(matches), len(study_ids))
    return matches
