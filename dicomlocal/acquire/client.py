"""
Light-weight HTTP helpers for the file-listing and content endpoints.

Only the low-level mechanics of *sending* a request belong here; status
checks and body decoding are left to :mod:`dicomlocal.acquire.remote`.

All helpers return the raw ``requests.Response`` object.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import requests


def encode_component(value: str) -> str:
    """Percent-encode *value* as one URL component (``/`` included)."""
    return quote(value, safe="-_.!~*'()")


def listing_url(api_url: str, relative_path: str) -> str:
    """Return ``<api_url><encoded relative_path>``.

    The API base is expected to end with the query or path fragment the
    listing endpoint needs (for example ``https://host/api/files?path=``).
    """
    return f"{api_url}{encode_component(relative_path)}"


def content_url(dicom_url: str, relative_path: str, name: str) -> str:
    """Return ``<dicom_url>/<relative_path>/<name>``.

    An empty *relative_path* collapses to ``<dicom_url>/<name>``.
    """
    parts = [dicom_url.rstrip("/")]
    rel = relative_path.strip("/")
    if rel:
        parts.append(rel)
    parts.append(name)
    return "/".join(parts)


def http_get(
    url: str,
    *,
    accept: str = "*/*",
    timeout: Optional[float] = None,
) -> requests.Response:
    """Send a plain GET request.

    Args:
        url: Fully-qualified URL.
        accept: Value of the ``Accept`` header.
        timeout: Seconds before giving up; ``None`` waits indefinitely.

    Returns:
        The raw :class:`requests.Response` object.
    """
    # No exception handling here; let callers decide how to react.
    return requests.get(url, headers={"Accept": accept}, timeout=timeout)
