"""
UI Styles for FreightDesk.

Qt stylesheet for the desktop window and CSS for HTML invoices,
statements and reports (rendered to PDF through Chrome).
"""

import logging

logger = logging.getLogger(__name__)


# ==================== Qt Stylesheet ====================

MAIN_STYLESHEET = """
QMainWindow, QDialog {
    background-color: #f4f6f8;
    font-family: 'Segoe UI', Arial, sans-serif;
    font-size: 10pt;
}

QPushButton {
    background-color: #1f5f99;
    color: white;
    border: none;
    padding: 7px 14px;
    border-radius: 4px;
    font-weight: bold;
}

QPushButton:hover {
    background-color: #2a74b8;
}

QPushButton:disabled {
    background-color: #c8ccd0;
    color: #6b7075;
}

QPushButton.danger {
    background-color: #c0392b;
}

QLineEdit, QTextEdit, QComboBox, QDateEdit, QDoubleSpinBox {
    border: 1px solid #c5cbd1;
    border-radius: 4px;
    padding: 5px;
    background-color: white;
}

QLineEdit:focus, QTextEdit:focus, QComboBox:focus {
    border: 2px solid #1f5f99;
}

QTableWidget {
    border: 1px solid #c5cbd1;
    background-color: white;
    gridline-color: #e3e6e9;
    alternate-background-color: #f8f9fa;
}

QTableWidget::item:selected {
    background-color: #1f5f99;
    color: white;
}

QHeaderView::section {
    background-color: #e9ecef;
    padding: 5px;
    border: 1px solid #c5cbd1;
    font-weight: bold;
}

QGroupBox {
    font-weight: bold;
    border: 1px solid #c5cbd1;
    border-radius: 6px;
    margin-top: 12px;
    padding-top: 8px;
}

QGroupBox::title {
    subcontrol-origin: margin;
    left: 10px;
    padding: 0 5px;
}

QTabBar::tab {
    padding: 8px 14px;
}

QTabBar::tab:selected {
    font-weight: bold;
    color: #1f5f99;
}

QLabel.header {
    font-size: 14pt;
    font-weight: bold;
    color: #1f5f99;
}

QLabel.error {
    color: #c0392b;
}

QLabel.success {
    color: #1e8449;
    font-weight: bold;
}
"""

# Badge colours for invoice / payment status cells
STATUS_COLORS = {
    "draft": "#e9ecef",
    "sent": "#d6eaf8",
    "paid": "#d5f5e3",
    "partially_paid": "#fdebd0",
    "overdue": "#fadbd8",
    "cancelled": "#d5d8dc",
    "pending": "#fcf3cf",
}

BALANCED_STYLE = "color: #1e8449; font-weight: bold;"
UNBALANCED_STYLE = "color: #c0392b; font-weight: bold;"


def get_status_color(status: str) -> str:
    """Background colour for a status badge; white for unknown statuses."""
    return STATUS_COLORS.get(status, "#ffffff")


# ==================== HTML Report CSS ====================

REPORT_CSS = """
<style>
:root {
    --color-primary: #1f5f99;
    --color-text: #1b1f23;
    --color-muted: #6b7075;
    --color-border: #d0d5da;
    --color-alt: #f4f6f8;
    --font-family: 'Helvetica', Arial, sans-serif;
}

* { box-sizing: border-box; }

body {
    font-family: var(--font-family);
    font-size: 11px;
    color: var(--color-text);
    margin: 0;
}

.container { width: 100%; }

.page-header {
    display: flex;
    justify-content: space-between;
    align-items: flex-start;
    border-bottom: 2px solid var(--color-primary);
    padding-bottom: 10px;
    margin-bottom: 16px;
}

.page-header__title {
    color: var(--color-primary);
    font-size: 22px;
    margin: 0;
    text-transform: uppercase;
    letter-spacing: 1px;
}

.page-header__meta {
    text-align: right;
    color: var(--color-muted);
    line-height: 1.5;
}

.info-block {
    display: flex;
    justify-content: space-between;
    gap: 24px;
    margin-bottom: 16px;
}

.info-block h3 {
    font-size: 11px;
    text-transform: uppercase;
    color: var(--color-muted);
    margin: 0 0 4px 0;
}

.data-table {
    width: 100%;
    border-collapse: collapse;
    margin-bottom: 16px;
}

.data-table th {
    background: var(--color-primary);
    color: #fff;
    text-align: left;
    padding: 6px;
    font-size: 10px;
    text-transform: uppercase;
}

.data-table td {
    border-bottom: 1px solid var(--color-border);
    padding: 5px 6px;
    vertical-align: top;
}

.data-table tr:nth-child(even) td { background: var(--color-alt); }

.data-table thead { display: table-header-group; }
.data-table tr { page-break-inside: avoid; }

.num { text-align: right; white-space: nowrap; }

.totals {
    margin-left: auto;
    width: 45%;
    border-collapse: collapse;
}

.totals td { padding: 4px 6px; }
.totals .grand td {
    border-top: 2px solid var(--color-primary);
    font-weight: bold;
    font-size: 13px;
}

.section-title {
    color: var(--color-primary);
    font-size: 13px;
    margin: 18px 0 6px 0;
    border-bottom: 1px solid var(--color-border);
}

.subtotal td { font-weight: bold; border-top: 1px solid var(--color-text); }

.badge {
    display: inline-block;
    padding: 2px 6px;
    border-radius: 3px;
    font-size: 9px;
    text-transform: uppercase;
    background: var(--color-alt);
}

.badge--ok { background: #d5f5e3; color: #1e8449; }
.badge--error { background: #fadbd8; color: #c0392b; }

.notes {
    margin-top: 16px;
    padding: 8px;
    border: 1px solid var(--color-border);
    white-space: pre-wrap;
}

.page-footer {
    margin-top: 24px;
    color: var(--color-muted);
    font-size: 9px;
    text-align: center;
}

@media print {
    body { -webkit-print-color-adjust: exact; print-color-adjust: exact; }
}
</style>
"""
