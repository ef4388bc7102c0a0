"""
Conversion Errors and Diagnostics

Exception hierarchy for per-element conversion failures and the report that
collects diagnostics when conversion degrades an element instead of aborting.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class ConverterError(Exception):
    """Base class for conversion failures of a single element."""

    def __init__(self, message: str, element_id: Optional[str] = None):
        super().__init__(message)
        self.element_id = element_id


class UnknownStencilError(ConverterError):
    """No converter is registered for a stencil or domain type."""


class UnresolvedReferenceError(ConverterError):
    """A referenced element (edge endpoint, host activity, model) is missing."""


class MalformedPropertyError(ConverterError):
    """A property value could not be interpreted."""


class Severity(str, Enum):
    """Diagnostic severity levels."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Diagnostic:
    """Single non-fatal problem found during conversion."""

    severity: Severity
    element_id: Optional[str]
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ConversionReport:
    """Diagnostics collected over one document conversion."""

    diagnostics: List[Diagnostic] = field(default_factory=list)
    converted: int = 0
    skipped: int = 0

    def add(self, severity: Severity, element_id: Optional[str], message: str) -> None:
        self.diagnostics.append(Diagnostic(severity, element_id, message))

    def info(self, element_id: Optional[str], message: str) -> None:
        logger.info(message)
        self.add(Severity.INFO, element_id, message)

    def warning(self, element_id: Optional[str], message: str) -> None:
        logger.warning(message)
        self.add(Severity.WARNING, element_id, message)

    def error(self, element_id: Optional[str], message: str, exc: Optional[BaseException] = None) -> None:
        logger.error(message, exc_info=exc)
        self.add(Severity.ERROR, element_id, message)

    def by_severity(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == severity]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def summary(self) -> str:
        return (
            f"{self.converted} converted, {self.skipped} skipped, "
            f"{len(self.by_severity(Severity.WARNING))} warnings, "
            f"{len(self.by_severity(Severity.ERROR))} errors"
        )
