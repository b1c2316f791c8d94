"""Payment and invoice importers.

Supported formats:
- CSV (comma or tab separated, header row with field names)
- JSON (list of objects, or wrapped under ``payments`` / ``invoices``)
- M-Pesa C2B confirmation callbacks (JSON list)
"""

__all__ = [
    "BaseImporter",
    "CSVImporter",
    "FileFormat",
    "ImportResult",
    "ImporterFactory",
    "JSONImporter",
    "MpesaC2BImporter",
    "RecordKind",
    "parse_c2b_confirmation",
]

from .base import BaseImporter, FileFormat, ImportResult, RecordKind
from .csv_importer import CSVImporter
from .factory import ImporterFactory
from .json_importer import JSONImporter
from .mpesa import MpesaC2BImporter, parse_c2b_confirmation
