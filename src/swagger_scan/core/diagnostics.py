import logging
from typing import Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Severity = Literal["warning", "notice"]


class Diagnostic(BaseModel):
    severity: Severity
    message: str
    location: str

    def __str__(self) -> str:
        return f"{self.message} in {self.location}"


class DiagnosticLog:
    """Collects scan diagnostics and mirrors them to the module logger.

    The location label is passed with every call, so one log can be shared
    by work running on several files without a process-wide "current file".
    """

    def __init__(self) -> None:
        self.records: list[Diagnostic] = []

    def warning(self, message: str, location: str) -> None:
        self._record("warning", message, location)
        logger.warning("%s in %s", message, location)

    def notice(self, message: str, location: str) -> None:
        self._record("notice", message, location)
        logger.info("%s in %s", message, location)

    def _record(self, severity: Severity, message: str, location: str) -> None:
        self.records.append(Diagnostic(severity=severity, message=message, location=location))

    def extend(self, other: "DiagnosticLog") -> None:
        self.records.extend(other.records)

    def __len__(self) -> int:
        return len(self.records)
