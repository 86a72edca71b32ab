"""Live object fetching and grouping."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from .exceptions import NoObjectsError, ObjectReferenceError
from .models import FetchFailure, MissingResource, ObjectReference, ResourceDescriptor
from .objects import as_dict, lookup

logger = logging.getLogger(__name__)


def get_reference(obj: Any) -> ObjectReference:
    """
    Derive the object reference of a live object.

    Args:
        obj: Live object returned by a successful fetch

    Returns:
        ObjectReference built from the object's own metadata

    Raises:
        ObjectReferenceError: If apiVersion, kind or name is missing
    """
    try:
        data = as_dict(obj)
    except TypeError as e:
        raise ObjectReferenceError(str(e)) from e

    api_version = lookup(data, "apiVersion")
    kind = lookup(data, "kind")
    name = lookup(data, "metadata.name")
    if not api_version or not kind or not name:
        raise ObjectReferenceError(
            f"object is missing apiVersion, kind or metadata.name "
            f"(apiVersion={api_version!r}, kind={kind!r}, name={name!r})"
        )

    return ObjectReference(
        api_version=api_version,
        kind=kind,
        name=name,
        namespace=lookup(data, "metadata.namespace"),
        uid=lookup(data, "metadata.uid"),
    )


def classify_failure(error: Exception) -> FetchFailure:
    """Map a fetch exception to a FetchFailure."""
    if isinstance(error, ApiException):
        status = error.status or 0
        if status == 404:
            return FetchFailure.NOT_FOUND
        if status == 403:
            return FetchFailure.FORBIDDEN
        if status == 401:
            return FetchFailure.UNAUTHORIZED
        if status == 0 or status >= 500:
            return FetchFailure.UNAVAILABLE
        return FetchFailure.UNKNOWN
    if isinstance(error, (HTTPError, ConnectionError, TimeoutError)):
        return FetchFailure.UNAVAILABLE
    return FetchFailure.UNKNOWN


class ObjectGroups:
    """Live objects grouped by their ``apiVersion/Kind`` type key."""

    def __init__(self):
        self._groups: dict[str, list[Any]] = {}

    def add(self, type_key: str, obj: Any) -> None:
        """Append an object to the group for its type key."""
        self._groups.setdefault(type_key, []).append(obj)

    def get(self, type_key: str) -> list[Any]:
        return list(self._groups.get(type_key, []))

    def keys(self) -> list[str]:
        """Type keys in lexicographic order."""
        return sorted(self._groups)

    def __iter__(self) -> Iterator[tuple[str, list[Any]]]:
        for type_key in self.keys():
            yield type_key, self._groups[type_key]

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, type_key: object) -> bool:
        return type_key in self._groups


@dataclass
class FetchResult:
    """Outcome of fetching every declared resource."""

    groups: ObjectGroups = field(default_factory=ObjectGroups)
    missing: list[MissingResource] = field(default_factory=list)


class LiveFetcher:
    """
    Fetches declared resources from the cluster.

    A failed fetch is recorded as a missing resource and the run continues.
    Only malformed live objects abort the run.
    """

    def fetch(self, descriptors: Sequence[ResourceDescriptor]) -> FetchResult:
        """
        Fetch every descriptor, in order.

        Args:
            descriptors: Declared resources

        Returns:
            FetchResult with grouped live objects and missing resources

        Raises:
            NoObjectsError: If no descriptors were given
            ObjectReferenceError: If a fetched object cannot be referenced
        """
        if not descriptors:
            raise NoObjectsError()

        result = FetchResult()
        for descriptor in descriptors:
            logger.debug(f"Doing get for {descriptor.kind}: {descriptor.name!r}")
            try:
                obj = descriptor.get()
            except Exception as e:
                reason = classify_failure(e)
                logger.warning(
                    f"Failed get for resource {descriptor.name!r} ({reason.value}): {e}"
                )
                result.missing.append(
                    MissingResource(
                        name=descriptor.name,
                        kind=descriptor.kind,
                        resource=descriptor.resource,
                        reason=reason,
                        message=str(e),
                    )
                )
                continue

            try:
                reference = get_reference(obj)
            except ObjectReferenceError as e:
                logger.error(f"Failed to get reference for {descriptor.name!r}: {e}")
                raise

            # Group on the live object's type, not the declared one.
            result.groups.add(reference.type_key, obj)

        return result
