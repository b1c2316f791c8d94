"""Tests for payment/invoice importers and the M-Pesa C2B parser."""

import json
from datetime import datetime, timezone

import pytest

from rentrecon.exceptions import FileFormatError, RecordImportError, ValidationError
from rentrecon.reconciliation.domain.models import Invoice, Payment
from rentrecon.reconciliation.infrastructure.importers import (
    CSVImporter,
    FileFormat,
    ImporterFactory,
    JSONImporter,
    MpesaC2BImporter,
    RecordKind,
    parse_c2b_confirmation,
)

pytestmark = pytest.mark.unit

PAYMENTS_CSV = """id,transaction_id,amount,phone_number,account_reference,customer_name,transaction_date
p1,QK12ABC001,45000,+254712345678,A-204,Jane Wanjiru,2024-03-01T10:15:00
p2,QK12ABC002,"20,000.00",0722000111,,,2024-03-01T11:00:00
"""

INVOICES_CSV = """id,tenant_id,tenant_name,tenant_phone,unit_id,unit_number,property_id,amount,balance,due_date,status
inv-1,t1,Jane Wanjiru,0712345678,u1,A-204,prop-1,45000,45000,2024-03-05,pending
inv-2,t2,,,u2,B-7,prop-1,30000,0,2024-03-05,paid
"""


def _c2b(**overrides):
    body = {
        "TransactionType": "Pay Bill",
        "TransID": "QK12ABC001",
        "TransTime": "20240301101500",
        "TransAmount": "45000.00",
        "BusinessShortCode": "600638",
        "BillRefNumber": "A-204",
        "InvoiceNumber": "",
        "OrgAccountBalance": "150000.00",
        "ThirdPartyTransID": "",
        "MSISDN": "254712345678",
        "FirstName": "Jane",
        "MiddleName": "",
        "LastName": "Wanjiru",
    }
    body.update(overrides)
    return body


class TestCSVImporter:
    """Tests for CSVImporter."""

    def test_import_payments(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text(PAYMENTS_CSV)

        result = CSVImporter(path).import_records()

        assert result.success_count == 2
        assert result.error_count == 0
        first, second = result.records
        assert isinstance(first, Payment)
        assert first.transaction_date == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)
        assert second.amount == 20000
        assert second.account_reference is None
        assert second.customer_name is None

    def test_import_invoices(self, tmp_path):
        path = tmp_path / "invoices.csv"
        path.write_text(INVOICES_CSV)

        result = CSVImporter(path, RecordKind.INVOICE).import_records()

        assert result.success_count == 2
        assert all(isinstance(r, Invoice) for r in result.records)
        assert result.records[0].is_eligible
        assert not result.records[1].is_eligible

    def test_invalid_rows_reported_not_fatal(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text(
            "id,transaction_id,amount,transaction_date\n"
            "p1,T1,100.50,2024-03-01T10:00:00\n"
            "p2,T2,500,2024-03-01T10:00:00\n"
            "p3,T3,abc,not-a-date\n"
        )

        result = CSVImporter(path).import_records()

        assert result.success_count == 1
        assert result.error_count == 2
        assert result.errors[0].startswith("Row 1: amount:")
        assert result.errors[1].startswith("Row 3:")
        assert result.success_rate == pytest.approx(1 / 3)

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text(PAYMENTS_CSV + ",,,,,,\n")

        assert CSVImporter(path).import_records().total_count == 2

    def test_semicolon_delimiter(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text(
            "id;transaction_id;amount;transaction_date\n" "p1;T1;100;2024-03-01T09:00:00\n"
        )

        result = CSVImporter(path, delimiter=";").import_records()

        assert result.success_count == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordImportError, match="File not found"):
            CSVImporter(tmp_path / "missing.csv").import_records()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text("")

        with pytest.raises(FileFormatError, match="empty"):
            CSVImporter(path).import_records()


class TestJSONImporter:
    """Tests for JSONImporter."""

    def test_top_level_list(self, tmp_path):
        path = tmp_path / "payments.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "id": "p1",
                        "transaction_id": "T1",
                        "amount": 45000,
                        "transaction_date": "2024-03-01T10:15:00",
                    }
                ]
            )
        )

        result = JSONImporter(path).import_records()

        assert result.success_count == 1
        assert result.records[0].id == "p1"

    def test_wrapped_under_kind_key(self, tmp_path):
        path = tmp_path / "invoices.json"
        path.write_text(
            json.dumps(
                {
                    "invoices": [
                        {
                            "id": "inv-1",
                            "tenant_id": "t1",
                            "unit_id": "u1",
                            "property_id": "prop-1",
                            "amount": 45000,
                            "balance": 45000,
                            "due_date": "2024-03-05",
                        }
                    ]
                }
            )
        )

        result = JSONImporter(path, RecordKind.INVOICE).import_records()

        assert result.success_count == 1
        assert isinstance(result.records[0], Invoice)

    def test_non_object_rows_are_errors(self, tmp_path):
        path = tmp_path / "payments.json"
        path.write_text("[1, 2]")

        result = JSONImporter(path).import_records()

        assert result.error_count == 2
        assert "expected an object" in result.errors[0]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "payments.json"
        path.write_text("{not json")

        with pytest.raises(FileFormatError, match="Invalid JSON"):
            JSONImporter(path).import_records()

    def test_scalar_document_rejected(self, tmp_path):
        path = tmp_path / "payments.json"
        path.write_text('"hello"')

        with pytest.raises(FileFormatError, match="Expected a list"):
            JSONImporter(path).import_records()


class TestParseC2BConfirmation:
    """Tests for the M-Pesa C2B callback mapping."""

    def test_full_body(self):
        payment = parse_c2b_confirmation(_c2b())

        assert payment.id == "QK12ABC001"
        assert payment.transaction_id == "QK12ABC001"
        assert payment.amount == 45000
        assert payment.phone_number == "254712345678"
        assert payment.account_reference == "A-204"
        assert payment.customer_name == "Jane Wanjiru"
        # TransTime is East Africa Time (UTC+3)
        assert payment.transaction_date == datetime(2024, 3, 1, 7, 15, tzinfo=timezone.utc)

    def test_middle_name_joined(self):
        payment = parse_c2b_confirmation(_c2b(MiddleName="Njeri"))
        assert payment.customer_name == "Jane Njeri Wanjiru"

    def test_missing_names_and_reference(self):
        payment = parse_c2b_confirmation(
            _c2b(FirstName="", LastName="", BillRefNumber="")
        )

        assert payment.customer_name is None
        assert payment.account_reference is None

    def test_missing_transaction_id(self):
        with pytest.raises(ValidationError, match="TransID"):
            parse_c2b_confirmation(_c2b(TransID=""))

    def test_malformed_time(self):
        with pytest.raises(ValidationError, match="transaction time") as exc_info:
            parse_c2b_confirmation(_c2b(TransTime="2024-03-01"))
        assert exc_info.value.context["field"] == "TransTime"


class TestMpesaC2BImporter:
    """Tests for MpesaC2BImporter."""

    def test_import_callbacks(self, tmp_path):
        path = tmp_path / "c2b.json"
        path.write_text(json.dumps([_c2b(), _c2b(TransID="QK12ABC002", TransTime="bad")]))

        result = MpesaC2BImporter(path).import_records()

        assert result.success_count == 1
        assert result.error_count == 1
        assert result.errors[0].startswith("Row 2:")

    def test_invoices_not_supported(self, tmp_path):
        with pytest.raises(ValueError):
            MpesaC2BImporter(tmp_path / "c2b.json", RecordKind.INVOICE)


class TestImporterFactory:
    """Tests for ImporterFactory."""

    def test_csv_by_suffix(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text(PAYMENTS_CSV)

        assert isinstance(ImporterFactory.create(path), CSVImporter)

    def test_tsv_uses_tab_delimiter(self, tmp_path):
        importer = ImporterFactory.create(tmp_path / "payments.tsv")

        assert isinstance(importer, CSVImporter)
        assert importer.delimiter == "\t"

    def test_c2b_detected_from_content(self, tmp_path):
        path = tmp_path / "payments.json"
        path.write_text(json.dumps([_c2b()]))

        assert ImporterFactory.detect_format(path) == FileFormat.MPESA_C2B
        assert isinstance(ImporterFactory.create(path), MpesaC2BImporter)

    def test_plain_json(self, tmp_path):
        path = tmp_path / "invoices.json"
        path.write_text("[]")

        importer = ImporterFactory.create(path, RecordKind.INVOICE)

        assert type(importer) is JSONImporter

    def test_c2b_file_for_invoices_rejected(self, tmp_path):
        path = tmp_path / "invoices.json"
        path.write_text(json.dumps([_c2b()]))

        with pytest.raises(FileFormatError, match="only contain payments"):
            ImporterFactory.create(path, RecordKind.INVOICE)

    def test_unknown_suffix(self, tmp_path):
        with pytest.raises(FileFormatError, match="Unsupported"):
            ImporterFactory.create(tmp_path / "payments.xlsx")
