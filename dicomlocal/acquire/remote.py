"""
Remote acquisition: list a folder over HTTP, then fetch every file.

:func:`fetch_remote_blobs` performs the two-step protocol:

1. ``GET <api_url><relative_path>`` must return a JSON array of file names.
2. Each name is fetched from ``<dicom_url>/<relative_path>/<name>`` in a
   thread pool. All fetches are joined before returning, and a single
   failure fails the whole batch.

Nothing is cached between calls.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urlsplit

import requests

from dicomlocal.errors import AcquisitionError
from dicomlocal.models import Blob

from .client import content_url, http_get, listing_url

log = logging.getLogger(__name__)

RELATIVE_PATH_PARAM = "relativePath"


def relative_path_from_location(location: str) -> str:
    """Return the ``relativePath`` query value of *location* or ``""``.

    Args:
        location: Full URL, ``path?query`` or bare ``?query`` string.
    """
    query = urlsplit(location).query
    values = parse_qs(query, keep_blank_values=True).get(RELATIVE_PATH_PARAM)
    return values[0] if values else ""


def _ok(resp: requests.Response) -> bool:
    return 200 <= resp.status_code < 300


# --------------------------------------------------------------------------- #
# Step 1 – listing                                                            #
# --------------------------------------------------------------------------- #
def list_remote_files(
    relative_path: str,
    *,
    api_url: str,
    timeout: Optional[float] = None,
) -> List[str]:
    """Return the file names the listing endpoint reports for *relative_path*.

    Raises:
        AcquisitionError: On network errors, non-2xx statuses, or a body
            that is not a JSON array of strings.
    """
    url = listing_url(api_url, relative_path)
    log.debug("Listing %s", url)
    try:
        resp = http_get(url, accept="application/json", timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise AcquisitionError(f"Listing request to {url} failed: {exc}") from exc

    if not _ok(resp):
        raise AcquisitionError(f"Listing request to {url} returned HTTP {resp.status_code}")

    try:
        names = resp.json()
    except ValueError as exc:
        raise AcquisitionError(f"Listing response from {url} is not JSON") from exc

    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise AcquisitionError(f"Listing response from {url} is not an array of file names")
    return names


# --------------------------------------------------------------------------- #
# Step 2 – content fan-out                                                    #
# --------------------------------------------------------------------------- #
def fetch_blob(url: str, *, timeout: Optional[float] = None) -> Blob:
    """Download *url* into a :class:`Blob` named after its last path segment.

    Raises:
        AcquisitionError: On network errors or non-2xx statuses.
    """
    try:
        resp = http_get(url, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise AcquisitionError(f"Failed to fetch file from {url}: {exc}") from exc

    if not _ok(resp):
        raise AcquisitionError(f"Failed to fetch file from {url}: HTTP {resp.status_code}")

    return Blob(
        name=url.rsplit("/", 1)[-1],
        data=resp.content,
        content_type=resp.headers.get("Content-Type", ""),
    )


def fetch_remote_blobs(
    relative_path: str,
    *,
    api_url: str,
    dicom_url: str,
    max_workers: int = 8,
    timeout: Optional[float] = None,
) -> List[Blob]:
    """List *relative_path* and download every file it contains.

    Args:
        relative_path: Folder below both endpoints; may be empty.
        api_url: Listing endpoint prefix.
        dicom_url: Content server base URL.
        max_workers: Upper bound on concurrent downloads.
        timeout: Per-request timeout; ``None`` waits indefinitely.

    Returns:
        One :class:`Blob` per listed name, in listing order.

    Raises:
        AcquisitionError: If the listing or any single download fails. The
            error is raised only after every download has settled.
    """
    names = list_remote_files(relative_path, api_url=api_url, timeout=timeout)
    urls = [content_url(dicom_url, relative_path, name) for name in names]
    log.info("Fetching %d file(s) under '%s'", len(urls), relative_path)
    if not urls:
        return []

    blobs: Dict[int, Blob] = {}
    failures: List[str] = []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(urls)))) as pool:
        fut2idx = {pool.submit(fetch_blob, url, timeout=timeout): i for i, url in enumerate(urls)}
        for fut in as_completed(fut2idx):
            idx = fut2idx[fut]
            try:
                blobs[idx] = fut.result()
            except AcquisitionError as exc:
                log.debug("%s", exc)
                failures.append(urls[idx])

    if failures:
        raise AcquisitionError(
            f"{len(failures)} of {len(urls)} file(s) could not be fetched: "
            + ", ".join(sorted(failures))
        )

    return [blobs[i] for i in range(len(urls))]
