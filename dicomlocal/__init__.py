"""
Public interface for *dicomlocal*.

Re-exports the objects a host application needs to run the ingestion
pipeline::

    from dicomlocal import IngestPipeline, DicomMetadataStore, PydicomStudyBuilder

    store = DicomMetadataStore()
    pipeline = IngestPipeline(PydicomStudyBuilder(), store, navigate)
    pipeline.run_location("/local?relativePath=case-01")
"""

from importlib.metadata import PackageNotFoundError, version

from .builder import PydicomStudyBuilder, StudyBuilder
from .config import IngestConfig, load_config
from .models import Blob, Instance, RouteDirective, Series, Study
from .pipeline import IngestPipeline, Invocation, PipelineState
from .store import DicomMetadataStore

try:
    __version__: str = version("dicomlocal")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__: list[str] = [
    "Blob",
    "DicomMetadataStore",
    "IngestConfig",
    "IngestPipeline",
    "Instance",
    "Invocation",
    "PipelineState",
    "PydicomStudyBuilder",
    "RouteDirective",
    "Series",
    "Study",
    "StudyBuilder",
    "load_config",
    "__version__",
]
