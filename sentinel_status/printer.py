"""Human-readable table printing of live objects."""

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from .exceptions import PrintError
from .objects import as_dict, lookup

Row = list[str]
ColumnHandler = Callable[[Mapping[str, Any]], Row]


def _count(value: Any) -> str:
    return str(value or 0)


def _pod_columns(data: Mapping[str, Any]) -> Row:
    statuses = lookup(data, "status.containerStatuses", [])
    ready = sum(1 for s in statuses if lookup(s, "ready", False))
    total = len(statuses) or len(lookup(data, "spec.containers", []))
    restarts = sum(lookup(s, "restartCount", 0) for s in statuses)

    status = lookup(data, "status.reason") or lookup(data, "status.phase", "Unknown")
    for container_status in statuses:
        waiting = lookup(container_status, "state.waiting.reason")
        if waiting:
            status = waiting
            break
    if lookup(data, "metadata.deletionTimestamp"):
        status = "Terminating"

    return [f"{ready}/{total}", status, str(restarts)]


def _service_columns(data: Mapping[str, Any]) -> Row:
    cluster_ip = lookup(data, "spec.clusterIP", "<none>")
    ingress = lookup(data, "status.loadBalancer.ingress", [])
    external = [
        lookup(entry, "ip") or lookup(entry, "hostname")
        for entry in ingress
        if lookup(entry, "ip") or lookup(entry, "hostname")
    ]
    external.extend(lookup(data, "spec.externalIPs", []))
    ports = [
        f"{lookup(port, 'port')}/{lookup(port, 'protocol', 'TCP')}"
        for port in lookup(data, "spec.ports", [])
    ]
    return [
        cluster_ip,
        ",".join(external) or "<none>",
        ",".join(ports) or "<none>",
    ]


def _deployment_columns(data: Mapping[str, Any]) -> Row:
    return [
        _count(lookup(data, "spec.replicas")),
        _count(lookup(data, "status.replicas")),
        _count(lookup(data, "status.updatedReplicas")),
        _count(lookup(data, "status.availableReplicas")),
    ]


def _job_columns(data: Mapping[str, Any]) -> Row:
    return [
        _count(lookup(data, "spec.completions", 1)),
        _count(lookup(data, "status.succeeded")),
    ]


def _configmap_columns(data: Mapping[str, Any]) -> Row:
    entries = len(lookup(data, "data", {})) + len(lookup(data, "binaryData", {}))
    return [str(entries)]


def _secret_columns(data: Mapping[str, Any]) -> Row:
    return [lookup(data, "type", "Opaque"), str(len(lookup(data, "data", {})))]


# kind -> (extra column headers, handler producing those columns)
COLUMNS: dict[str, tuple[Row, ColumnHandler]] = {
    "Pod": (["READY", "STATUS", "RESTARTS"], _pod_columns),
    "Service": (["CLUSTER-IP", "EXTERNAL-IP", "PORT(S)"], _service_columns),
    "Deployment": (["DESIRED", "CURRENT", "UP-TO-DATE", "AVAILABLE"], _deployment_columns),
    "Job": (["DESIRED", "SUCCESSFUL"], _job_columns),
    "ConfigMap": (["DATA"], _configmap_columns),
    "Secret": (["TYPE", "DATA"], _secret_columns),
}


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        timestamp = value
    elif isinstance(value, str) and value:
        try:
            timestamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def format_age(created: Any, now: datetime) -> str:
    """
    Format the age of an object the way kubectl does.

    Args:
        created: creationTimestamp as string or datetime
        now: Reference time

    Returns:
        Short duration such as ``45s``, ``12m``, ``3h`` or ``7d``
    """
    timestamp = _parse_timestamp(created)
    if timestamp is None:
        return "<unknown>"

    seconds = max(int((now - timestamp).total_seconds()), 0)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HumanReadablePrinter:
    """
    Prints live objects as tab-separated table rows.

    A column header is written whenever the object type changes, so a
    sequence of objects of the same type forms one table.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        """
        Initialize printer.

        Args:
            clock: Returns the current time, used for the AGE column
        """
        self._clock = clock
        self._last_type: Optional[str] = None

    def print_obj(self, obj: Any, out: TextIO) -> None:
        """
        Write one row for an object.

        Args:
            obj: Live object (dict or kubernetes model)
            out: Writer to print to

        Raises:
            PrintError: If the object cannot be rendered
        """
        try:
            data = as_dict(obj)
        except TypeError as e:
            raise PrintError(str(e)) from e

        kind = lookup(data, "kind")
        name = lookup(data, "metadata.name")
        if not kind or not name:
            raise PrintError("object has no kind or metadata.name")

        headers, handler = COLUMNS.get(kind, ([], None))
        type_key = f"{lookup(data, 'apiVersion', '')}/{kind}"
        if type_key != self._last_type:
            out.write("\t".join(["NAME", *headers, "AGE"]) + "\n")
            self._last_type = type_key

        try:
            columns = handler(data) if handler else []
        except (TypeError, ValueError, AttributeError) as e:
            raise PrintError(f"cannot render {kind} {name!r}: {e}") from e

        age = format_age(lookup(data, "metadata.creationTimestamp"), self._clock())
        out.write("\t".join([name, *columns, age]) + "\n")
