"""UI Dialogs for FreightDesk."""

from .login_dialog import LoginDialog
from .line_item_dialog import LineItemDialog
from .profile_list_dialog import ProfileListDialog, ACTION_OPEN, ACTION_EDIT, ACTION_DELETE
from .report_progress_dialog import ReportProgressDialog

__all__ = [
    "LoginDialog",
    "LineItemDialog",
    "ProfileListDialog",
    "ReportProgressDialog",
    "ACTION_OPEN",
    "ACTION_EDIT",
    "ACTION_DELETE",
]
