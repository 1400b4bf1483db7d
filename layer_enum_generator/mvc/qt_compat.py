"""Compatibility layer for PySide2/PySide6 (Qt5/Qt6)."""

from __future__ import annotations


try:
    from PySide6 import QtCore, QtGui, QtWidgets  # type: ignore
except Exception:  # pragma: no cover - depends on installed binding
    from PySide2 import QtCore, QtGui, QtWidgets  # type: ignore


# ItemDataRole.UserRole (Qt6) vs Qt.UserRole (Qt5)
try:
    USER_ROLE = QtCore.Qt.ItemDataRole.UserRole  # type: ignore[attr-defined]
except Exception:  # pragma: no cover
    USER_ROLE = QtCore.Qt.UserRole  # type: ignore[attr-defined]

# ItemFlag.ItemIsEnabled (Qt6) vs Qt.ItemIsEnabled (Qt5)
try:
    ITEM_IS_ENABLED = QtCore.Qt.ItemFlag.ItemIsEnabled  # type: ignore[attr-defined]
except Exception:  # pragma: no cover
    ITEM_IS_ENABLED = QtCore.Qt.ItemIsEnabled  # type: ignore[attr-defined]

# TextFormat.PlainText (Qt6) vs Qt.PlainText (Qt5)
try:
    PLAIN_TEXT = QtCore.Qt.TextFormat.PlainText  # type: ignore[attr-defined]
except Exception:  # pragma: no cover
    PLAIN_TEXT = QtCore.Qt.PlainText  # type: ignore[attr-defined]

# Fixed-pitch font hint for the layer preview.
try:
    FIXED_FONT = QtGui.QFontDatabase.SystemFont.FixedFont  # type: ignore[attr-defined]
except Exception:  # pragma: no cover
    FIXED_FONT = QtGui.QFontDatabase.FixedFont  # type: ignore[attr-defined]


__all__ = [
    "QtCore",
    "QtGui",
    "QtWidgets",
    "USER_ROLE",
    "ITEM_IS_ENABLED",
    "PLAIN_TEXT",
    "FIXED_FONT",
]
