"""Sectioned rendering of grouped live objects."""

import logging
from typing import Any, Protocol, TextIO

from .exceptions import PrintError, ReportWriteError
from .fetcher import ObjectGroups

logger = logging.getLogger(__name__)


class ObjectPrinter(Protocol):
    """Renders an arbitrary live object as a table row."""

    def print_obj(self, obj: Any, out: TextIO) -> None:
        ...


def write(out: TextIO, text: str) -> None:
    """
    Write to the report buffer.

    Raises:
        ReportWriteError: If the writer fails
    """
    try:
        out.write(text)
    except (OSError, ValueError) as e:
        raise ReportWriteError(f"failed to write status report: {e}") from e


def render_groups(groups: ObjectGroups, printer: ObjectPrinter, out: TextIO) -> None:
    """
    Render one section per object type.

    Each section is a ``==> <apiVersion/Kind>`` header, one row per object
    and a blank line. With no groups at all a single blank line is written.

    Args:
        groups: Live objects grouped by type key
        printer: Row printer
        out: Report buffer

    Raises:
        ReportWriteError: If writing or printing fails
    """
    for type_key, objects in groups:
        write(out, f"==> {type_key}\n")
        for obj in objects:
            try:
                printer.print_obj(obj, out)
            except PrintError as e:
                logger.error(f"Failed to print object of type {type_key}: {e}")
                raise ReportWriteError(f"failed to print {type_key}: {e}") from e
            except (OSError, ValueError) as e:
                raise ReportWriteError(f"failed to write status report: {e}") from e
        write(out, "\n")

    if not len(groups):
        write(out, "\n")
