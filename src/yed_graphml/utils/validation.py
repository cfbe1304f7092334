"""
Collection of integrity issues found in a document before it is built.

Building a document fails on the first broken reference. To see every problem
at once, Document.check_integrity() records issues here instead. How an issue
is handled depends on the validation level:
- STRICT: raises immediately for any ERROR or CRITICAL issue
- NORMAL: raises for CRITICAL issues, only collects ERROR and WARNING issues
- LENIENT: collects all issues without raising (for debugging purposes)

Severity levels:
- CRITICAL: the document can't be built at all (e.g. relative cycles)
- ERROR: the build will fail on this element (e.g. dangling references)
- WARNING: the document builds but probably not as intended
"""
from enum import Enum
from typing import List, Optional, TextIO
import logging
from pathlib import Path
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from yed_graphml.exceptions.document import DocumentIntegrityError
from yed_graphml.models.properties import ElementId

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Severity of an integrity issue."""
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"


class ValidationLevel(Enum):
    """How strictly issues are turned into exceptions."""
    STRICT = "STRICT"
    NORMAL = "NORMAL"
    LENIENT = "LENIENT"


class ValidationResult(BaseModel):
    """A single integrity issue."""
    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity
    message: str
    element_id: Optional[ElementId] = None
    element_type: Optional[str] = None
    field_name: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ValidationCollector:
    """Collects integrity issues and handles them according to the validation level."""

    def __init__(self, validation_level: ValidationLevel = ValidationLevel.NORMAL):
        self.validation_level = validation_level
        self.results: List[ValidationResult] = []

    def add_result(self,
                   severity: ValidationSeverity,
                   message: str,
                   element_id: Optional[ElementId] = None,
                   element_type: Optional[str] = None,
                   field_name: Optional[str] = None) -> None:
        """Record an issue, log it and raise if the validation level demands it.

        Args:
            severity: The severity level of the issue
            message: Description of the issue
            element_id: ID of the affected node or edge (if applicable)
            element_type: "Node" or "Edge" (if applicable)
            field_name: Name of the affected property (if applicable)

        Raises:
            DocumentIntegrityError: If validation level and severity require it
        """
        result = ValidationResult(
            severity=severity,
            message=message,
            element_id=element_id,
            element_type=element_type,
            field_name=field_name,
        )
        self.results.append(result)

        self._log_result(result)
        self._handle_result(result)

    def _log_result(self, result: ValidationResult) -> None:
        log_message = self._format_log_message(result)
        if result.severity == ValidationSeverity.WARNING:
            logger.warning(log_message)
        else:
            logger.error(log_message)

    def _handle_result(self, result: ValidationResult) -> None:
        if self.validation_level == ValidationLevel.STRICT:
            if result.severity in (ValidationSeverity.CRITICAL, ValidationSeverity.ERROR):
                raise DocumentIntegrityError(result.message, result.element_id)
        elif self.validation_level == ValidationLevel.NORMAL:
            if result.severity == ValidationSeverity.CRITICAL:
                raise DocumentIntegrityError(result.message, result.element_id)

    def save_report(self, output_path: Path) -> None:
        """Write all collected issues to a text report.

        Args:
            output_path: Path where to save the report
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            self._write_report_header(f)
            self._write_results_by_severity(f)
            self._write_report_summary(f)

    def _write_report_header(self, file: TextIO) -> None:
        file.write("Document Integrity Report\n")
        file.write("=" * 50 + "\n")
        file.write(f"Validation Level: {self.validation_level.value}\n")
        file.write(f"Total Issues: {len(self.results)}\n")
        file.write("-" * 50 + "\n\n")

    def _write_results_by_severity(self, file: TextIO) -> None:
        for severity in ValidationSeverity:
            results = self.get_results_by_severity(severity)
            if not results:
                continue
            file.write(f"\n{severity.value} Issues ({len(results)}):\n")
            file.write("-" * 30 + "\n")
            for result in results:
                file.write(f"- {result.message}\n")
                if result.element_id is not None:
                    file.write(f"  Element ID: {result.element_id}\n")
                if result.element_type:
                    file.write(f"  Element Type: {result.element_type}\n")
                if result.field_name:
                    file.write(f"  Field: {result.field_name}\n")
                file.write(f"  Time: {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n")
                file.write("\n")

    def _write_report_summary(self, file: TextIO) -> None:
        file.write("\nSummary:\n")
        file.write("-" * 30 + "\n")
        for severity in ValidationSeverity:
            file.write(f"{severity.value}: {len(self.get_results_by_severity(severity))} issues\n")

        if self.has_critical_issues:
            file.write("\nWARNING: Critical issues were found!\n")

    @staticmethod
    def _format_log_message(result: ValidationResult) -> str:
        message = f"{result.severity.value}: {result.message}"
        if result.element_id is not None:
            message += f" (Element ID: {result.element_id})"
        if result.element_type:
            message += f" (Type: {result.element_type})"
        return message

    def get_results_by_severity(self, severity: ValidationSeverity) -> List[ValidationResult]:
        return [r for r in self.results if r.severity == severity]

    @property
    def has_critical_issues(self) -> bool:
        return any(r.severity == ValidationSeverity.CRITICAL for r in self.results)

    @property
    def is_valid(self) -> bool:
        """True if nothing would make the build fail."""
        return not any(
            r.severity in (ValidationSeverity.CRITICAL, ValidationSeverity.ERROR)
            for r in self.results
        )
