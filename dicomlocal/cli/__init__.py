"""Expose the project-wide Click group for the ``dicomlocal-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires common global flags (config file, verbosity, capability flag);
* sets up logging via :pyfunc:`dicomlocal.utils.logging.setup_logging`;
* loads and validates the configuration;
* registers the ``load`` and ``fetch`` sub-commands.

Sub-commands share one :class:`~dicomlocal.store.DicomMetadataStore` and
one pipeline through ``ctx.obj``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import click

from dicomlocal import __version__
from dicomlocal.builder import PydicomStudyBuilder
from dicomlocal.config import load_config
from dicomlocal.errors import ConfigError
from dicomlocal.models import RouteDirective
from dicomlocal.pipeline import IngestPipeline
from dicomlocal.store import DicomMetadataStore
from dicomlocal.utils.logging import setup_logging

_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


def echo_dispatcher(viewer_url: str | None):
    """Return a dispatcher that prints the route, prefixed by *viewer_url*."""
    prefix = (viewer_url or "").rstrip("/")

    def _dispatch(directive: RouteDirective) -> None:
        click.echo(f"{prefix}{directive.url}")

    return _dispatch


@click.group(
    context_settings=_CTX,
    help="""\b
dicomlocal-cli – load DICOM files and print the viewer route.
""",
)
@click.version_option(__version__)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="YAML file layered over the packaged defaults.",
)
@click.option(
    "--microscopy/--no-microscopy",
    default=None,
    help="Whether a slide-microscopy view is available (overrides config).",
)
@click.option("--viewer-url", help="Prefix printed before the route (e.g. https://viewer.example).")
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG-level console output.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror log output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    config_path: Path | None,
    microscopy: bool | None,
    viewer_url: str | None,
    verbose: bool,
    debug: bool,
    log_file: Path | None,
) -> None:
    """Root command executed by *dicomlocal-cli*.

    Args:
        ctx: Click runtime context that carries objects across sub-commands.
        config_path: Optional YAML configuration file.
        microscopy: Capability flag override; ``None`` keeps the config value.
        viewer_url: Optional prefix for the printed route.
        verbose: Emit INFO-level messages.
        debug: Emit DEBUG-level messages.
        log_file: Optional plain-text log mirror.
    """
    setup_logging(verbose=verbose, debug=debug, log_file=log_file)

    try:
        cfg = load_config(config_path, microscopy_available=microscopy)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    store = DicomMetadataStore()
    ctx.obj = {
        "cfg": cfg,
        "store": store,
        "pipeline": IngestPipeline(
            PydicomStudyBuilder(),
            store,
            echo_dispatcher(viewer_url),
            config=cfg,
        ),
        "verbose": verbose,
        "debug": debug,
    }


from dicomlocal.cli.fetch import cli as _fetch_cmd  # noqa: E402
from dicomlocal.cli.load import cli as _load_cmd  # noqa: E402

main.add_command(_load_cmd, name="load")
main.add_command(_fetch_cmd, name="fetch")

cli = main
__all__: list[str] = ["main"]
