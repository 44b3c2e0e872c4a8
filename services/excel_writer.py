"""
Excel Writer Service.

Writes report tables (shipment reports, ledgers, expense lists) to .xlsx
using pandas with the openpyxl engine.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from domain.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 50


def write_table(
    rows: List[Dict[str, Any]],
    output_path: Path,
    sheet_name: str = "Report",
    columns: Optional[Dict[str, str]] = None,
) -> Path:
    """
    Write rows to an Excel sheet.

    Args:
        rows: Records as dicts
        output_path: Target .xlsx file
        sheet_name: Worksheet name (max 31 chars in Excel)
        columns: Optional mapping field -> header; also selects and orders columns

    Returns:
        Path to written file

    Raises:
        ReportGenerationError: If the file cannot be written

    Example:
        >>> write_table(
        ...     [{"job_number": "EXP-2024-0001", "total_charges": 1200.0}],
        ...     Path("shipments.xlsx"),
        ...     columns={"job_number": "Job #", "total_charges": "Charges"},
        ... )
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(rows)
    if columns:
        df = df.reindex(columns=list(columns.keys())).rename(columns=columns)

    try:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name[:31], index=False)
            worksheet = writer.sheets[sheet_name[:31]]
            for index, column in enumerate(df.columns, 1):
                values = [str(column)] + [str(v) for v in df[column].tolist() if v is not None]
                width = min(max(len(v) for v in values) + 2, MAX_COLUMN_WIDTH)
                worksheet.column_dimensions[_column_letter(index)].width = width

    except Exception as e:
        logger.exception(f"Failed to write Excel report: {output_path}")
        raise ReportGenerationError(
            f"Excel export failed: {e}",
            details={"output_path": str(output_path), "error": str(e)},
        )

    logger.info(f"Wrote {len(df)} rows to {output_path}")
    return output_path


def _column_letter(index: int) -> str:
    """1 -> A, 27 -> AA."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters
