"""Compose the viewer route for a set of built studies."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from dicomlocal.models import (
    DATASOURCE_PARAM,
    LOCAL_DATA_SOURCE,
    STUDY_PARAM,
    RouteDirective,
)


def _dedupe(params: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """Drop repeated ``(key, value)`` pairs, keeping first occurrences."""
    seen: set[Tuple[str, str]] = set()
    out: List[Tuple[str, str]] = []
    for pair in params:
        if pair in seen:
            continue
        seen.add(pair)
        out.append(pair)
    return out


def compose_route(
    study_ids: Sequence[str],
    *,
    default_path: str,
    microscopy_path: str = "microscopy",
    microscopy_ids: Sequence[str] = (),
    data_source: str = LOCAL_DATA_SOURCE,
    deduplicate: bool = False,
) -> RouteDirective:
    """Build the :class:`RouteDirective` for *study_ids*.

    Parameter layout (insertion order, never sorted):

    1. each id in *microscopy_ids*, when non-empty;
    2. every id in *study_ids*;
    3. ``datasources=<data_source>``.

    Microscopy studies therefore appear twice unless *deduplicate* is set.

    Args:
        study_ids: All identifiers produced by the build step.
        default_path: View path used when no microscopy study is present.
        microscopy_path: View path used when *microscopy_ids* is non-empty.
        microscopy_ids: Classified subset of *study_ids*. Empty when
            classification did not run.
        data_source: Value of the ``datasources`` parameter.
        deduplicate: Drop repeated ``StudyInstanceUIDs`` entries.

    Returns:
        The composed directive.
    """
    target = default_path
    params: List[Tuple[str, str]] = []

    if microscopy_ids:
        target = microscopy_path
        params.extend((STUDY_PARAM, uid) for uid in microscopy_ids)

    params.extend((STUDY_PARAM, uid) for uid in study_ids)
    if deduplicate:
        params = _dedupe(params)
    params.append((DATASOURCE_PARAM, data_source))

    return RouteDirective(
        target_path=target.strip("/"),
        study_ids=tuple(study_ids),
        data_source=data_source,
        params=tuple(params),
    )
