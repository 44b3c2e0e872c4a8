"""UI Widgets for FreightDesk."""

from .record_table import RecordTable
from .form_helpers import (
    ErrorLabel,
    amount_spin,
    choice_combo,
    currency_combo,
    date_edit,
    iso_date,
    list_combo,
    set_combo_data,
    set_iso_date,
)

__all__ = [
    "RecordTable",
    "ErrorLabel",
    "amount_spin",
    "choice_combo",
    "currency_combo",
    "date_edit",
    "iso_date",
    "list_combo",
    "set_combo_data",
    "set_iso_date",
]
