"""Dialog helpers for the settings window.

Defines DialogService, a thin wrapper around the QMessageBox patterns the
controller needs, so Qt-specific dialog code stays in one place.

Message style guide:

- Sentence case dialog titles with no trailing period
  (for example, "Generation failed", "Invalid settings").
- Short, neutral sentences ending with a period for body text and
  status messages (for example, "Settings saved.").
"""

from typing import Optional

from mvc.qt_compat import QtWidgets


class DialogService:
    """Show standard, blocking message dialogs."""

    def warn(self, parent: Optional[QtWidgets.QWidget], title: str, text: str) -> None:
        QtWidgets.QMessageBox.warning(parent, title, text)

    def error(self, parent: Optional[QtWidgets.QWidget], title: str, text: str) -> None:
        QtWidgets.QMessageBox.critical(parent, title, text)
