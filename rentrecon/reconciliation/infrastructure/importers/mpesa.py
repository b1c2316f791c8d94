"""M-Pesa C2B confirmation importer.

Safaricom posts a confirmation callback for every customer-to-business
payment. A day's callbacks, dumped as a JSON list, form a payment batch.

Callback fields used:
- TransID: receipt number (payment id and transaction id)
- TransTime: ``YYYYMMDDHHmmss`` in East Africa Time
- TransAmount: amount as a decimal string
- MSISDN: payer phone number
- BillRefNumber: account reference typed by the payer
- FirstName / MiddleName / LastName: registered payer name
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from ....exceptions import ValidationError
from ...domain.models import Payment
from .base import FileFormat, Record, RecordKind
from .json_importer import JSONImporter

C2B_TIME_FORMAT = "%Y%m%d%H%M%S"

EAST_AFRICA_TIME = timezone(timedelta(hours=3), "EAT")

REQUIRED_FIELDS = ("TransID", "TransTime", "TransAmount")


def parse_c2b_time(value: str) -> datetime:
    """Parse an M-Pesa ``YYYYMMDDHHmmss`` timestamp as East Africa Time.

    Raises:
        ValidationError: If the timestamp is malformed
    """
    try:
        parsed = datetime.strptime(str(value).strip(), C2B_TIME_FORMAT)
    except ValueError as e:
        raise ValidationError(
            f"Invalid M-Pesa transaction time: {value!r}",
            field="TransTime",
            value=value,
            constraint="YYYYMMDDHHmmss",
            original_error=e,
        ) from e
    return parsed.replace(tzinfo=EAST_AFRICA_TIME)


def parse_c2b_confirmation(body: Mapping[str, Any]) -> Payment:
    """Map a C2B confirmation callback body onto a Payment.

    Example:
        >>> payment = parse_c2b_confirmation({
        ...     "TransID": "QK12ABC", "TransTime": "20240301101500",
        ...     "TransAmount": "45000.00", "MSISDN": "254712345678",
        ...     "BillRefNumber": "A12", "FirstName": "Jane", "LastName": "Wanjiru",
        ... })
        >>> payment.customer_name
        'Jane Wanjiru'

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    for name in REQUIRED_FIELDS:
        if not str(body.get(name) or "").strip():
            raise ValidationError(f"Missing C2B field: {name}", field=name)

    name_parts = [
        str(body.get(part) or "").strip() for part in ("FirstName", "MiddleName", "LastName")
    ]
    customer_name = " ".join(part for part in name_parts if part)

    return Payment(
        id=body["TransID"],
        transaction_id=body["TransID"],
        amount=body["TransAmount"],
        phone_number=str(body.get("MSISDN") or ""),
        account_reference=body.get("BillRefNumber") or None,
        customer_name=customer_name or None,
        transaction_date=parse_c2b_time(body["TransTime"]),
    )


class MpesaC2BImporter(JSONImporter):
    """Import payments from a JSON dump of C2B confirmation callbacks."""

    file_format = FileFormat.MPESA_C2B

    def __init__(self, file_path: Path, record_kind: RecordKind = RecordKind.PAYMENT) -> None:
        if record_kind != RecordKind.PAYMENT:
            raise ValueError("M-Pesa C2B files only contain payments")
        super().__init__(file_path, record_kind)

    def build_record(self, row: Mapping[str, Any]) -> Record:
        if not isinstance(row, Mapping):
            raise TypeError(f"expected an object, got {type(row).__name__}")
        return parse_c2b_confirmation(row)
