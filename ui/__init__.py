"""
UI package for FreightDesk.

PySide6-based Qt application. Import the main window from ui.main_window;
the package itself stays import-free because operations.report_ops reads
ui.styles.
"""
