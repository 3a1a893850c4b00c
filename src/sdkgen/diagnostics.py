"""Structured diagnostics collected while compiling a document.

The compiler never decides on its own how loud a skipped construct should
be. Each extraction call receives a :class:`Diagnostics` sink already tagged
with where it is working (operation id, schema name, field name, ...) and
reports skips and anomalies into it. The sink keeps every record so callers
can summarise them, and forwards each one to the ``sdkgen.compiler`` logger
so they show up on stderr through :class:`~sdkgen.output.OutputLogHandler`.

Example::

    diagnostics = Diagnostics()
    op_diag = diagnostics.scoped(operation_id="v1.app.list")
    op_diag.warning("$ref parameters are not currently supported")

    diagnostics.records[0].context  # {"operation_id": "v1.app.list"}
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional


logger = logging.getLogger("sdkgen.compiler")


class Severity(str, enum.Enum):
    """Severity of a diagnostic record, ordered from least to most severe."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic: severity, message, and where it happened.

    ``skip`` marks the records that explain why an operation was left out
    of the :class:`~sdkgen.models.Api`.
    """

    severity: Severity
    message: str
    context: dict[str, str] = field(default_factory=dict)
    skip: bool = False

    def __str__(self) -> str:
        return format_message(self.message, self.context)


def format_message(message: str, context: dict[str, str]) -> str:
    """Render *message* followed by its context as ``key=value`` pairs."""
    if not context:
        return message
    pairs = " ".join(f"{key}={value}" for key, value in context.items())
    return f"{message} [{pairs}]"


class Diagnostics:
    """Accumulating sink for compiler diagnostics.

    Args:
        records: Shared record list. Scoped children append to their
            parent's list, so the root sink sees everything.
        context: Context attached to every record emitted by this sink.
        log: Logger the records are forwarded to. ``None`` disables
            forwarding (records are still kept).
    """

    def __init__(
        self,
        records: Optional[list[Diagnostic]] = None,
        context: Optional[dict[str, str]] = None,
        log: Optional[logging.Logger] = logger,
    ) -> None:
        self.records: list[Diagnostic] = records if records is not None else []
        self.context: dict[str, str] = dict(context or {})
        self._log = log

    def scoped(self, **context: Any) -> Diagnostics:
        """Return a child sink sharing this sink's records with extra context.

        ``None`` values are dropped so callers can pass optional attributes
        straight through.
        """
        merged = dict(self.context)
        merged.update({key: str(value) for key, value in context.items() if value is not None})
        return Diagnostics(records=self.records, context=merged, log=self._log)

    def emit(self, severity: Severity, message: str, skip: bool = False) -> Diagnostic:
        record = Diagnostic(severity=severity, message=message, context=dict(self.context), skip=skip)
        self.records.append(record)
        if self._log is not None:
            self._log.log(severity.level, "%s", record)
        return record

    def debug(self, message: str) -> Diagnostic:
        return self.emit(Severity.DEBUG, message)

    def info(self, message: str) -> Diagnostic:
        return self.emit(Severity.INFO, message)

    def warning(self, message: str) -> Diagnostic:
        return self.emit(Severity.WARNING, message)

    def error(self, message: str) -> Diagnostic:
        return self.emit(Severity.ERROR, message)

    def skip(self, message: str, severity: Severity = Severity.WARNING) -> Diagnostic:
        """Record that the operation in scope is dropped, and why."""
        return self.emit(severity, message, skip=True)

    def skipped(self) -> list[Diagnostic]:
        """Records of dropped operations, one per operation."""
        return [r for r in self.records if r.skip]

    def count(self, severity: Severity) -> int:
        """Number of records at exactly *severity*."""
        return sum(1 for record in self.records if record.severity == severity)

    def at_least(self, severity: Severity) -> list[Diagnostic]:
        """Records at *severity* or above."""
        return [r for r in self.records if r.severity.level >= severity.level]

    def location(self) -> str:
        """The sink's context rendered for embedding in an exception message."""
        return " ".join(f"{key}={value}" for key, value in self.context.items())
