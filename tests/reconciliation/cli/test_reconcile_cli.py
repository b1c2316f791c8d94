"""Tests for the reconciliation CLI - Typer commands with CliRunner."""

import json

import pytest
from typer.testing import CliRunner

from rentrecon import __version__
from rentrecon.cli.main import app

pytestmark = pytest.mark.unit

runner = CliRunner()

PAYMENTS_CSV = """id,transaction_id,amount,phone_number,account_reference,customer_name,transaction_date
p1,QK12ABC001,45000,+254712345678,A-204,Jane Wanjiru,2024-03-01T10:15:00
p2,QK12ABC002,20000,0722000111,,,2024-03-01T11:00:00
"""

INVOICES_CSV = """id,tenant_id,tenant_name,tenant_phone,unit_id,unit_number,property_id,amount,balance,due_date,status
inv-1,t1,Jane Wanjiru,0712345678,u1,A-204,prop-1,45000,45000,2024-03-05,pending
inv-2,t2,,,u2,B-7,prop-1,30000,0,2024-03-05,paid
"""


@pytest.fixture
def payments_file(tmp_path):
    path = tmp_path / "payments.csv"
    path.write_text(PAYMENTS_CSV)
    return path


@pytest.fixture
def invoices_file(tmp_path):
    path = tmp_path / "invoices.csv"
    path.write_text(INVOICES_CSV)
    return path


class TestReconcileCommand:
    """Tests for 'recon reconcile'."""

    def test_json_summary(self, payments_file, invoices_file):
        result = runner.invoke(
            app, ["recon", "reconcile", str(payments_file), str(invoices_file), "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["total_payments"] == 2
        assert data["matched_payments"] == 1
        assert data["unmatched_payments"] == 1
        assert data["total_amount_received"] == 65000
        assert data["total_amount_matched"] == 45000
        assert data["results"][0]["invoice_id"] == "inv-1"
        assert data["results"][0]["match_type"] == "exact"
        assert data["results"][1]["invoice_id"] is None

    def test_rich_tables(self, payments_file, invoices_file):
        result = runner.invoke(app, ["recon", "reconcile", str(payments_file), str(invoices_file)])

        assert result.exit_code == 0, result.output
        assert "Reconciliation Summary" in result.stdout
        assert "Match Results" in result.stdout
        assert "need manual review" in result.stdout

    def test_threshold_override(self, payments_file, invoices_file):
        result = runner.invoke(
            app,
            [
                "recon",
                "reconcile",
                str(payments_file),
                str(invoices_file),
                "--fuzzy-threshold",
                "0.99",
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        # 0.98 falls below a 0.99 floor
        assert data["results"][0]["match_type"] == "partial"

    def test_invalid_threshold_exits_with_error(self, payments_file, invoices_file):
        result = runner.invoke(
            app,
            ["recon", "reconcile", str(payments_file), str(invoices_file), "-t", "1.5"],
        )

        assert result.exit_code == 1
        assert "Invalid matcher configuration" in result.stdout

    def test_missing_file_exits_with_error(self, tmp_path, invoices_file):
        result = runner.invoke(
            app, ["recon", "reconcile", str(tmp_path / "nope.csv"), str(invoices_file)]
        )

        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_invalid_rows_exit_unless_skipped(self, tmp_path, invoices_file):
        path = tmp_path / "payments.csv"
        path.write_text(PAYMENTS_CSV + "p3,QK12ABC003,12.5,,,,2024-03-01T12:00:00\n")

        failed = runner.invoke(app, ["recon", "reconcile", str(path), str(invoices_file)])
        skipped = runner.invoke(
            app,
            ["recon", "reconcile", str(path), str(invoices_file), "--skip-invalid", "--json"],
        )

        assert failed.exit_code == 1
        assert "Row 3" in failed.stdout
        assert skipped.exit_code == 0
        assert "Row 3" in skipped.stdout


class TestMatchCommand:
    """Tests for 'recon match'."""

    def test_single_payment_json(self, payments_file, invoices_file):
        result = runner.invoke(
            app,
            ["recon", "match", str(payments_file), str(invoices_file), "--payment", "p1", "--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["invoice_id"] == "inv-1"
        assert data["reasons"] == [
            "Phone match (100%)",
            "Amount exact (100%)",
            "Reference match (90%)",
            "Name match (100%)",
        ]

    def test_field_scores_table(self, payments_file, invoices_file):
        result = runner.invoke(
            app, ["recon", "match", str(payments_file), str(invoices_file), "-p", "p1"]
        )

        assert result.exit_code == 0, result.output
        assert "Field Scores" in result.stdout

    def test_unknown_payment(self, payments_file, invoices_file):
        result = runner.invoke(
            app, ["recon", "match", str(payments_file), str(invoices_file), "-p", "p404"]
        )

        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestDuplicatesCommand:
    """Tests for 'recon duplicates'."""

    def test_c2b_duplicates(self, tmp_path):
        body = {
            "TransID": "QK1",
            "TransTime": "20240301101500",
            "TransAmount": "45000.00",
            "MSISDN": "254712345678",
            "BillRefNumber": "A-204",
            "FirstName": "Jane",
            "LastName": "Wanjiru",
        }
        retry = {**body, "TransID": "QK2", "TransTime": "20240301111500", "MSISDN": "0712345678"}
        path = tmp_path / "c2b.json"
        path.write_text(json.dumps([body, retry]))

        result = runner.invoke(app, ["recon", "duplicates", str(path), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [["QK1", "QK2"]]

    def test_no_duplicates(self, payments_file):
        result = runner.invoke(app, ["recon", "duplicates", str(payments_file)])

        assert result.exit_code == 0, result.output
        assert "No suspected duplicates" in result.stdout


class TestRootApp:
    """Tests for the top-level app."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout
