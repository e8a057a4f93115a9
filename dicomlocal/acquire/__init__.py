"""File acquisition front-ends (direct drop and remote listing)."""

from .local import blobs_from_files, collect_paths
from .remote import fetch_remote_blobs, list_remote_files, relative_path_from_location

__all__ = [
    "blobs_from_files",
    "collect_paths",
    "fetch_remote_blobs",
    "list_remote_files",
    "relative_path_from_location",
]
