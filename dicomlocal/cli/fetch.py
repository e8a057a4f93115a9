"""Fetch a remote DICOM folder and print the viewer route.

Exposed as ``dicomlocal-cli fetch``. The folder is given either directly
(``--relative-path``) or as a viewer location whose ``relativePath`` query
parameter names it (``--location``).
"""

from __future__ import annotations

import click
import structlog

log = structlog.get_logger()


@click.command(
    name="fetch",
    help="List and download a remote folder, then print the viewer route.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.option("-p", "--relative-path", help="Folder below the listing/content endpoints.")
@click.option("-l", "--location", help="Viewer URL carrying a relativePath query parameter.")
@click.pass_obj
def cli(ctx_obj, relative_path: str | None, location: str | None) -> None:  # noqa: D401
    """Entry-point for ``dicomlocal-cli fetch``.

    Args:
        ctx_obj: Context dict populated by the root group.
        relative_path: Folder to fetch; mutually exclusive with *location*.
        location: URL whose ``relativePath`` parameter names the folder.
    """
    if relative_path is not None and location is not None:
        raise click.UsageError("Use either --relative-path or --location, not both.")

    pipeline = ctx_obj["pipeline"]
    if location is not None:
        log.info("fetch", location=location)
        inv = pipeline.run_location(location)
    else:
        log.info("fetch", relative_path=relative_path or "")
        inv = pipeline.run_remote(relative_path or "")

    if not inv.ok:
        raise click.ClickException(f"Ingestion failed: {inv.error}")
