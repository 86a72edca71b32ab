"""Resource descriptors built from rendered manifest streams."""

import copy
import logging
from collections.abc import Iterator, Mapping
from typing import Any, Optional, TextIO, Union

import yaml
from kubernetes.client.exceptions import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import ResourceNotFoundError, ResourceNotUniqueError

from .exceptions import ManifestError
from .models import ResourceDescriptor

logger = logging.getLogger(__name__)

Manifest = Union[str, bytes, TextIO]

# Server-populated metadata dropped from exported objects
EXPORT_METADATA_FIELDS = (
    "uid",
    "resourceVersion",
    "creationTimestamp",
    "generation",
    "selfLink",
    "managedFields",
)


def export_object(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of an object without cluster-specific state."""
    exported = copy.deepcopy(dict(data))
    exported.pop("status", None)
    metadata = exported.get("metadata") or {}
    for field_name in EXPORT_METADATA_FIELDS:
        metadata.pop(field_name, None)
    return exported


class DynamicLiveClient:
    """Fetches objects of one resource type through the dynamic client."""

    def __init__(self, dynamic: DynamicClient, resource: Any):
        """
        Initialize live client.

        Args:
            dynamic: Dynamic client
            resource: Resolved dynamic resource (from ``dynamic.resources.get``)
        """
        self.dynamic = dynamic
        self.resource = resource

    def get(self, namespace: Optional[str], name: str, export: bool = False) -> dict[str, Any]:
        """
        Get a live object.

        Args:
            namespace: Namespace, ignored for cluster-scoped resources
            name: Object name
            export: Strip server-populated fields

        Returns:
            Object as a dict

        Raises:
            ApiException: If the object cannot be fetched
        """
        if not self.resource.namespaced:
            namespace = None
        obj = self.dynamic.get(self.resource, name=name, namespace=namespace).to_dict()
        return export_object(obj) if export else obj


def read_manifest(manifest: Manifest) -> str:
    """
    Read a manifest from a string, bytes or a readable stream.

    Raises:
        ManifestError: If the stream cannot be read
    """
    try:
        content = manifest.read() if hasattr(manifest, "read") else manifest
        if isinstance(content, bytes):
            content = content.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"failed to read manifest: {e}") from e
    return content


def iter_documents(content: str) -> Iterator[Mapping[str, Any]]:
    """
    Yield resource documents, expanding ``kind: List`` and skipping empty documents.

    Raises:
        ManifestError: If the YAML is invalid or a document is not a mapping
    """
    try:
        documents = list(yaml.safe_load_all(content))
    except yaml.YAMLError as e:
        raise ManifestError(f"failed to parse manifest: {e}") from e

    for document in documents:
        if document is None:
            continue
        if not isinstance(document, Mapping):
            raise ManifestError(f"manifest document is not a mapping: {document!r}")
        if str(document.get("kind", "")).endswith("List") and "items" in document:
            for item in document.get("items") or []:
                if not isinstance(item, Mapping):
                    raise ManifestError(f"list item is not a mapping: {item!r}")
                yield item
        else:
            yield document


class ManifestResourceBuilder:
    """Builds resource descriptors from a manifest stream."""

    def __init__(self, dynamic: DynamicClient, export: bool = False):
        """
        Initialize builder.

        Args:
            dynamic: Dynamic client used to resolve kinds to resources
            export: Fetch objects in export form
        """
        self.dynamic = dynamic
        self.export = export

    def _resolve(self, api_version: str, kind: str) -> Any:
        try:
            return self.dynamic.resources.get(api_version=api_version, kind=kind)
        except (ResourceNotFoundError, ResourceNotUniqueError, ApiException) as e:
            raise ManifestError(f"unable to resolve {api_version}/{kind}: {e}") from e

    def build(self, namespace: str, manifest: Manifest) -> list[ResourceDescriptor]:
        """
        Build descriptors for every resource declared in the manifest.

        Args:
            namespace: Default namespace for namespaced resources
            manifest: Rendered manifest (multi-document YAML)

        Returns:
            Descriptors in manifest order

        Raises:
            ManifestError: If the manifest is unreadable or declares an unknown kind
        """
        descriptors: list[ResourceDescriptor] = []
        for document in iter_documents(read_manifest(manifest)):
            api_version = document.get("apiVersion")
            kind = document.get("kind")
            metadata = document.get("metadata") or {}
            name = metadata.get("name")
            if not api_version or not kind or not name:
                raise ManifestError(
                    f"manifest document requires apiVersion, kind and metadata.name: {document!r}"
                )

            resource = self._resolve(api_version, kind)
            descriptors.append(
                ResourceDescriptor(
                    namespace=(metadata.get("namespace") or namespace) if resource.namespaced else None,
                    name=name,
                    kind=kind,
                    api_version=api_version,
                    resource=resource.name,
                    client=DynamicLiveClient(self.dynamic, resource),
                    export=self.export,
                )
            )

        logger.debug(f"Built {len(descriptors)} resource descriptors for namespace {namespace}")
        return descriptors
