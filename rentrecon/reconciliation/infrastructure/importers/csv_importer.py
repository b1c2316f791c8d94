"""CSV importer for payment and invoice exports.

Expects a header row with the record's field names, e.g. for payments:

    id,transaction_id,amount,phone_number,account_reference,customer_name,transaction_date
    p1,QK12ABC,45000,+254712345678,A12,Jane Wanjiru,2024-03-01T10:15:00
"""

import csv
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ....exceptions import FileFormatError
from .base import BaseImporter, FileFormat, RecordKind


class CSVImporter(BaseImporter):
    """Import records from a delimited text file.

    Blank cells are dropped before validation so optional fields fall back
    to their defaults instead of failing on an empty string.
    """

    file_format = FileFormat.CSV

    def __init__(
        self,
        file_path: Path,
        record_kind: RecordKind = RecordKind.PAYMENT,
        delimiter: str = ",",
    ) -> None:
        super().__init__(file_path, record_kind)
        self.delimiter = delimiter

    def read_rows(self) -> Iterable[Mapping[str, Any]]:
        encoding = self.detect_encoding()

        with open(self.file_path, encoding=encoding, newline="") as f:
            reader = csv.DictReader(f, delimiter=self.delimiter)
            if not reader.fieldnames:
                raise FileFormatError(
                    f"CSV file has no header row: {self.file_path}", source=str(self.file_path)
                )

            rows = []
            for row in reader:
                cleaned = {
                    key.strip(): value.strip()
                    for key, value in row.items()
                    if key and isinstance(value, str) and value.strip()
                }
                if cleaned:
                    rows.append(cleaned)
            return rows
