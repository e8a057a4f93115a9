"""
Ingestion → classification → routing pipeline.

:class:`IngestPipeline` wires the stages together. Every trigger (a drop, a
``relativePath`` change) runs as its own :class:`Invocation`:

``IDLE → ACQUIRING → BUILDING → CLASSIFYING → ROUTED``

Any stage failure moves the invocation straight to ``FAILED`` with the
cause attached; a directive is dispatched only from ``ROUTED``.

Collaborators are injected explicitly: the study builder, the shared
metadata store, the dispatcher, and the microscopy capability flag.
Invocations share nothing except the store. Concurrent invocations are
not cancelled when a newer one starts; whichever finishes last dispatches
last.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from dicomlocal.acquire.local import FileLike, blobs_from_files
from dicomlocal.acquire.remote import fetch_remote_blobs, relative_path_from_location
from dicomlocal.builder import StudyBuilder, build_studies
from dicomlocal.classify import classify_microscopy
from dicomlocal.config.schema import IngestConfig
from dicomlocal.errors import AcquisitionError, DicomLocalError
from dicomlocal.models import Blob, RouteDirective
from dicomlocal.route import compose_route
from dicomlocal.store import DicomMetadataStore

log = logging.getLogger(__name__)

Dispatcher = Callable[[RouteDirective], None]


class PipelineState(str, enum.Enum):
    """Lifecycle of a single invocation."""

    IDLE = "idle"
    ACQUIRING = "acquiring"
    BUILDING = "building"
    CLASSIFYING = "classifying"
    ROUTED = "routed"
    FAILED = "failed"


@dataclass
class Invocation:
    """Outcome record of one pipeline run.

    Attributes:
        source: ``"local"`` or ``"remote:<relative path>"`` for log context.
        state: Current lifecycle state.
        history: Every state entered, in order.
        study_ids: Identifiers produced by the build step.
        microscopy_ids: Classified subset; empty when classification was
            skipped.
        directive: Dispatched route, set only in ``ROUTED``.
        error: Cause of failure, set only in ``FAILED``.
    """

    source: str
    state: PipelineState = PipelineState.IDLE
    history: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    study_ids: List[str] = field(default_factory=list)
    microscopy_ids: List[str] = field(default_factory=list)
    directive: Optional[RouteDirective] = None
    error: Optional[DicomLocalError] = None

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.ROUTED

    def advance(self, state: PipelineState) -> None:
        log.debug("[%s] %s → %s", self.source, self.state.value, state.value)
        self.state = state
        self.history.append(state)


class IngestPipeline:
    """Turn acquired DICOM files into a dispatched viewer route.

    Args:
        builder: Parsing backend, see :class:`~dicomlocal.builder.StudyBuilder`.
        store: Shared metadata store the builder registers into.
        dispatcher: Callable receiving the composed :class:`RouteDirective`.
        config: Endpoint, view-path and concurrency settings.
        microscopy_available: Capability flag; defaults to
            ``config.microscopy_available``.
    """

    def __init__(
        self,
        builder: StudyBuilder,
        store: DicomMetadataStore,
        dispatcher: Dispatcher,
        *,
        config: IngestConfig | None = None,
        microscopy_available: bool | None = None,
    ) -> None:
        self.builder = builder
        self.store = store
        self.dispatcher = dispatcher
        self.config = config or IngestConfig()
        self.microscopy_available = (
            self.config.microscopy_available
            if microscopy_available is None
            else microscopy_available
        )

    # ------------------------------------------------------------------ #
    # Entry points                                                       #
    # ------------------------------------------------------------------ #
    def run_local(self, files: Iterable[FileLike]) -> Invocation:
        """Process files dropped or picked by the user."""

        def acquire() -> List[Blob]:
            try:
                return blobs_from_files(files)
            except OSError as exc:
                raise AcquisitionError(f"Could not read local file: {exc}") from exc

        return self._run("local", acquire)

    def run_remote(self, relative_path: str) -> Invocation:
        """Process every file listed under *relative_path* on the server."""

        def acquire() -> List[Blob]:
            return fetch_remote_blobs(
                relative_path,
                api_url=self.config.api_url,
                dicom_url=self.config.dicom_url,
                max_workers=self.config.max_workers,
                timeout=self.config.timeout,
            )

        return self._run(f"remote:{relative_path}", acquire)

    def run_location(self, location: str) -> Invocation:
        """Read ``relativePath`` from *location* and run the remote path."""
        return self.run_remote(relative_path_from_location(location))

    # ------------------------------------------------------------------ #
    # Stages                                                             #
    # ------------------------------------------------------------------ #
    def _classify(self, study_ids: Sequence[str]) -> List[str]:
        if not self.microscopy_available:
            return []
        return classify_microscopy(study_ids, self.store)

    def _run(self, source: str, acquire: Callable[[], List[Blob]]) -> Invocation:
        inv = Invocation(source=source)
        try:
            inv.advance(PipelineState.ACQUIRING)
            blobs = acquire()

            inv.advance(PipelineState.BUILDING)
            inv.study_ids = build_studies(self.builder, blobs, self.store)

            inv.advance(PipelineState.CLASSIFYING)
            inv.microscopy_ids = self._classify(inv.study_ids)

            directive = compose_route(
                inv.study_ids,
                default_path=self.config.default_mode_path,
                microscopy_path=self.config.microscopy_mode_path,
                microscopy_ids=inv.microscopy_ids,
                data_source=self.config.data_source,
                deduplicate=self.config.deduplicate_study_ids,
            )
        except DicomLocalError as exc:
            inv.error = exc
            inv.advance(PipelineState.FAILED)
            log.error("[%s] ingestion failed: %s", source, exc)
            return inv

        inv.directive = directive
        inv.advance(PipelineState.ROUTED)
        log.info(
            "[%s] %d study(ies), %d microscopy → %s",
            source,
            len(inv.study_ids),
            len(inv.microscopy_ids),
            directive.url,
        )
        self.dispatcher(directive)
        return inv
