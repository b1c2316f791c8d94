"""Importer factory: pick an importer by file format."""

from pathlib import Path

from ....exceptions import FileFormatError
from .base import BaseImporter, FileFormat, RecordKind
from .csv_importer import CSVImporter
from .json_importer import JSONImporter
from .mpesa import MpesaC2BImporter

C2B_MARKER = '"TransID"'


class ImporterFactory:
    """Create the importer matching a file.

    Example:
        >>> importer = ImporterFactory.create(Path("payments.csv"))
        >>> result = importer.import_records()
    """

    _importers: dict[FileFormat, type[BaseImporter]] = {
        FileFormat.CSV: CSVImporter,
        FileFormat.JSON: JSONImporter,
        FileFormat.MPESA_C2B: MpesaC2BImporter,
    }

    @classmethod
    def detect_format(cls, file_path: Path) -> FileFormat:
        """Guess the format from the suffix; JSON holding C2B callbacks is M-Pesa."""
        suffix = Path(file_path).suffix.lower()

        if suffix in (".csv", ".tsv", ".txt"):
            return FileFormat.CSV

        if suffix == ".json":
            try:
                with open(file_path, encoding="utf-8", errors="replace") as f:
                    head = f.read(4096)
            except OSError:
                return FileFormat.JSON
            return FileFormat.MPESA_C2B if C2B_MARKER in head else FileFormat.JSON

        return FileFormat.UNKNOWN

    @classmethod
    def create(
        cls,
        file_path: Path,
        record_kind: RecordKind = RecordKind.PAYMENT,
        file_format: FileFormat | None = None,
    ) -> BaseImporter:
        """Build an importer for ``file_path``.

        Raises:
            FileFormatError: If the format is unknown or does not fit the record kind
        """
        file_path = Path(file_path)
        file_format = file_format or cls.detect_format(file_path)

        importer_cls = cls._importers.get(file_format)
        if importer_cls is None:
            raise FileFormatError(
                f"Unsupported file format: {file_path.suffix or file_path.name}",
                source=str(file_path),
            )

        if file_format == FileFormat.MPESA_C2B and record_kind != RecordKind.PAYMENT:
            raise FileFormatError(
                "M-Pesa C2B files only contain payments", source=str(file_path)
            )

        if file_format == FileFormat.CSV and file_path.suffix.lower() == ".tsv":
            return CSVImporter(file_path, record_kind, delimiter="\t")

        return importer_cls(file_path, record_kind)
