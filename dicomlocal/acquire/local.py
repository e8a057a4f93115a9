"""
Direct acquisition from user-supplied files.

Files arrive either as paths (CLI arguments, a picked folder) or as
already-read ``(name, data[, content_type])`` tuples handed over by a host
application. No content validation happens here; anything that is not
DICOM is left for the builder to skip.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from dicomlocal.models import Blob

log = logging.getLogger(__name__)

FileLike = Union[Blob, Path, str, Tuple[str, bytes], Tuple[str, bytes, str]]


def _guess_type(name: str) -> str:
    """Return the MIME type guessed from *name*, empty when unknown."""
    return mimetypes.guess_type(name)[0] or ""


def collect_paths(paths: Iterable[Union[Path, str]]) -> List[Path]:
    """Expand *paths* into a flat, sorted-per-directory list of files.

    Directories are walked recursively; hidden files (dot-prefixed) found
    during the walk are ignored. Explicit file arguments are kept as-is.

    Args:
        paths: Files and/or directories.

    Returns:
        File paths in argument order, each directory's content sorted.
    """
    out: List[Path] = []
    for p in map(Path, paths):
        p = p.expanduser()
        if p.is_dir():
            found = sorted(
                f for f in p.rglob("*")
                if f.is_file() and not any(part.startswith(".") for part in f.relative_to(p).parts)
            )
            log.debug("%s → %d file(s)", p, len(found))
            out.extend(found)
        else:
            out.append(p)
    return out


def _to_blob(item: FileLike) -> Blob:
    if isinstance(item, Blob):
        return item
    if isinstance(item, tuple):
        name, data, *rest = item
        return Blob(name=name, data=data, content_type=rest[0] if rest else _guess_type(name))
    path = Path(item)
    return Blob(name=path.name, data=path.read_bytes(), content_type=_guess_type(path.name))


def blobs_from_files(files: Iterable[FileLike]) -> List[Blob]:
    """Convert dropped files into blobs, preserving their order.

    Raises:
        OSError: If a path cannot be read.
    """
    blobs = [_to_blob(item) for item in files]
    log.info("Received %d local file(s)", len(blobs))
    return blobs
