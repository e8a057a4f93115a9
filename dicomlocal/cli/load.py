"""Load local DICOM files or folders and print the viewer route.

Exposed as ``dicomlocal-cli load``. Directories are walked recursively, the
way a picked folder is handled by a drop target. Non-DICOM files are
skipped by the builder rather than rejected here.
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from dicomlocal.acquire.local import collect_paths

log = structlog.get_logger()


@click.command(
    name="load",
    help="Ingest local files/folders and print the viewer route.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument(
    "paths",
    type=click.Path(path_type=Path, exists=True),
    nargs=-1,
    required=True,
)
@click.pass_obj
def cli(ctx_obj, paths: tuple[Path, ...]) -> None:  # noqa: D401 – Click callback
    """Entry-point for ``dicomlocal-cli load``.

    Args:
        ctx_obj: Context dict populated by the root group.
        paths: Files or directories supplied on the command line.
    """
    files = collect_paths(paths)
    log.info("load", files=len(files))
    if not files:
        raise click.ClickException("No files found under the given path(s).")

    inv = ctx_obj["pipeline"].run_local(files)
    if not inv.ok:
        raise click.ClickException(f"Ingestion failed: {inv.error}")
