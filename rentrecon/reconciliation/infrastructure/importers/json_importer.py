"""JSON importer for payment and invoice exports.

Accepts either a top-level list of objects or an object wrapping the list
under ``payments`` / ``invoices`` (or ``records``).
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from ....exceptions import FileFormatError
from .base import BaseImporter, FileFormat


class JSONImporter(BaseImporter):
    """Import records from a JSON document."""

    file_format = FileFormat.JSON

    def read_rows(self) -> Iterable[Mapping[str, Any]]:
        data = self.load_document()

        if isinstance(data, dict):
            for key in (f"{self.record_kind}s", "records"):
                if key in data:
                    data = data[key]
                    break
            else:
                data = [data]

        if not isinstance(data, list):
            raise FileFormatError(
                f"Expected a list of {self.record_kind} objects in {self.file_path.name}",
                source=str(self.file_path),
            )

        return data

    def load_document(self) -> Any:
        """Parse the whole file as JSON.

        Raises:
            FileFormatError: If the file is not valid JSON
        """
        try:
            with open(self.file_path, encoding=self.detect_encoding()) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise FileFormatError(
                f"Invalid JSON in {self.file_path.name}: {e.msg} (line {e.lineno})",
                source=str(self.file_path),
                original_error=e,
            ) from e
