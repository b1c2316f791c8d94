"""Base interface for payment and invoice importers.

Defines the contract that all importers must implement using the Adapter pattern.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from ....exceptions import FileFormatError, RecordImportError, ValidationError
from ....utils.logging import get_logger
from ...domain.models import Invoice, Payment
from ...metrics import record_import

logger = get_logger(__name__)

Record = Union[Payment, Invoice]


class FileFormat(str, Enum):
    """Supported input file formats."""

    CSV = "csv"
    JSON = "json"
    MPESA_C2B = "mpesa"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class RecordKind(str, Enum):
    """Kind of record held by an input file."""

    PAYMENT = "payment"
    INVOICE = "invoice"

    def __str__(self) -> str:
        return self.value

    @property
    def model(self) -> type[Record]:
        return Payment if self == RecordKind.PAYMENT else Invoice


@dataclass
class ImportResult:
    """Result of an import operation.

    Contains statistics and details about the import process. Row numbers in
    ``errors`` are 1-based data rows (the CSV header is not counted).
    """

    success_count: int = 0
    error_count: int = 0
    records: list[Record] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    import_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_count(self) -> int:
        """Total number of rows processed."""
        return self.success_count + self.error_count

    @property
    def success_rate(self) -> float:
        """Percentage of successful imports (0.0-1.0)."""
        if self.total_count == 0:
            return 0.0
        return self.success_count / self.total_count

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success_count": self.success_count,
            "error_count": self.error_count,
            "total_count": self.total_count,
            "success_rate": float(self.success_rate),
            "errors": self.errors,
            "import_date": self.import_date.isoformat(),
        }

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"ImportResult(success={self.success_count}/{self.total_count}, errors={self.error_count})"


class BaseImporter(ABC):
    """Abstract base class for payment and invoice importers.

    Implements the Template Method pattern with hooks for customization.
    Each concrete importer (CSV, JSON, M-Pesa C2B) implements read_rows().

    Subclassing:
        1. Implement read_rows() to yield raw row mappings from the file
        2. Optionally override build_record() to map provider fields
        3. Optionally override validate_file() for format-specific validation
    """

    file_format: FileFormat = FileFormat.UNKNOWN

    def __init__(self, file_path: Path, record_kind: RecordKind = RecordKind.PAYMENT) -> None:
        """Initialize importer with file path.

        Args:
            file_path: Path to the input file
            record_kind: Whether the file holds payments or invoices
        """
        self.file_path = Path(file_path)
        self.record_kind = record_kind

    @abstractmethod
    def read_rows(self) -> Iterable[Mapping[str, Any]]:
        """Read raw rows from the file.

        Raises:
            FileFormatError: If the file content cannot be parsed at all
        """
        pass

    def build_record(self, row: Mapping[str, Any]) -> Record:
        """Turn one raw row into a validated record.

        Raises:
            pydantic.ValidationError: If the row does not describe a valid record
            TypeError: If the row is not a mapping
        """
        if not isinstance(row, Mapping):
            raise TypeError(f"expected an object, got {type(row).__name__}")
        return self.record_kind.model.model_validate(dict(row))

    def import_records(self) -> ImportResult:
        """Import records from file.

        Template Method that orchestrates the import process:
        1. Validate file
        2. Read raw rows
        3. Validate each row into a record; invalid rows are reported, not fatal
        4. Return result with statistics

        Returns:
            ImportResult with statistics and imported records

        Raises:
            RecordImportError: If the file is missing, empty or unreadable
        """
        result = ImportResult()
        source = str(self.file_format)

        try:
            self.validate_file()
            rows = list(self.read_rows())
        except RecordImportError:
            record_import(source, "error")
            raise
        except (OSError, ValueError) as e:
            record_import(source, "error")
            raise RecordImportError(
                f"Cannot read {self.record_kind} file: {e}",
                source=str(self.file_path),
                original_error=e,
            ) from e

        for row_number, row in enumerate(rows, start=1):
            try:
                result.records.append(self.build_record(row))
                result.success_count += 1
            except (PydanticValidationError, ValidationError, ValueError, KeyError, TypeError) as e:
                result.error_count += 1
                result.errors.append(f"Row {row_number}: {self._describe_error(e)}")

        record_import(source, "success", result.success_count)
        record_import(source, "error", result.error_count)

        logger.info(
            "records_imported",
            file=self.file_path.name,
            record_kind=str(self.record_kind),
            format=source,
            success=result.success_count,
            errors=result.error_count,
        )

        return result

    def validate_file(self) -> None:
        """Validate that file exists and is readable.

        Can be overridden by subclasses for format-specific validation.

        Raises:
            RecordImportError: If file doesn't exist or is empty
        """
        if not self.file_path.exists():
            raise RecordImportError(f"File not found: {self.file_path}", source=str(self.file_path))

        if self.file_path.stat().st_size == 0:
            raise FileFormatError(f"File is empty: {self.file_path}", source=str(self.file_path))

    def detect_encoding(self) -> str:
        """Detect file encoding.

        Default implementation tries common encodings. Can be overridden
        by subclasses for more sophisticated detection.

        Returns:
            Encoding name (e.g., "utf-8-sig", "iso-8859-1")
        """
        encodings = ["utf-8-sig", "cp1252", "iso-8859-1"]

        for encoding in encodings:
            try:
                with open(self.file_path, encoding=encoding) as f:
                    f.read()
                return encoding
            except UnicodeDecodeError:
                continue

        return "utf-8"

    @staticmethod
    def _describe_error(error: Exception) -> str:
        if isinstance(error, PydanticValidationError):
            return "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
                for err in error.errors()
            )
        return str(error)

    def __repr__(self) -> str:
        """Human-readable string representation."""
        return f"<{self.__class__.__name__}(file='{self.file_path.name}', kind={self.record_kind})>"
