"""Public API surface for hosts and their collaborators."""

from rb_host.aggregator import ResultsAggregator
from rb_host.browser_host import ResourceBrowserHost
from rb_host.documents import (
    DocumentOpener,
    EditorDocumentOpener,
    RecordingDocumentOpener,
    open_best_effort,
)
from rb_host.instances_host import InstanceResultsHost
from rb_host.providers import (
    CatalogProvider,
    DirectoryCatalogProvider,
    DirectoryInstanceProvider,
    InstanceProvider,
    ResourceDefinition,
)

__all__ = [
    "CatalogProvider",
    "DirectoryCatalogProvider",
    "DirectoryInstanceProvider",
    "DocumentOpener",
    "EditorDocumentOpener",
    "InstanceProvider",
    "InstanceResultsHost",
    "RecordingDocumentOpener",
    "ResourceBrowserHost",
    "ResourceDefinition",
    "ResultsAggregator",
    "open_best_effort",
]
