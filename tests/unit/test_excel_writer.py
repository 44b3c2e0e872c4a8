"""
Unit tests for Excel Writer service.
"""

import pytest
import pandas as pd

from domain.exceptions import ReportGenerationError
from services.excel_writer import _column_letter, write_table


def test_write_table_selects_and_renames_columns(tmp_path):
    output = tmp_path / "out" / "shipments.xlsx"
    rows = [
        {"job_number": "EXP-2024-0001", "total_charges": 1200.0, "internal": "x"},
        {"job_number": "EXP-2024-0002"},
    ]

    result = write_table(rows, output, sheet_name="Shipments",
                         columns={"job_number": "Job #", "total_charges": "Total Charges"})

    assert result == output
    df = pd.read_excel(output, sheet_name="Shipments")
    assert list(df.columns) == ["Job #", "Total Charges"]
    assert df["Job #"].tolist() == ["EXP-2024-0001", "EXP-2024-0002"]
    assert df["Total Charges"].iloc[0] == 1200.0
    assert pd.isna(df["Total Charges"].iloc[1])


def test_write_table_truncates_sheet_name(tmp_path):
    output = tmp_path / "ledger.xlsx"
    write_table([{"a": 1}], output, sheet_name="A" * 40)

    assert pd.ExcelFile(output).sheet_names == ["A" * 31]


def test_write_table_failure_raises(tmp_path):
    with pytest.raises(ReportGenerationError):
        write_table([{"a": 1}], tmp_path)


def test_column_letter():
    assert _column_letter(1) == "A"
    assert _column_letter(26) == "Z"
    assert _column_letter(27) == "AA"
    assert _column_letter(53) == "BA"
