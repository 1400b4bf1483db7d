"""Qt-based view for the layer generator settings window.

Contains the passive widgets, layouts, and small helpers used to edit
the output path, namespace name and enum name, and to preview the layer
slots that will end up in the generated enum.

All business logic (persistence, monitoring and generation) lives in
the controller and model; the view exposes a small API that the
controller drives via signals and slots.
"""

from typing import Iterable, Optional

from mvc.qt_compat import (
    FIXED_FONT,
    ITEM_IS_ENABLED,
    PLAIN_TEXT,
    USER_ROLE,
    QtCore,
    QtGui,
    QtWidgets,
)


class View(QtWidgets.QWidget):
    """Passive view for the settings window.

    The controller is responsible for:

    - Wiring signals to actions.
    - Updating the model and storage.
    - Calling the public methods exposed below.
    """

    # Emitted when the window is closed, so the controller can stop polling.
    closed = QtCore.Signal()

    def __init__(self):
        """Initialize the view, building widgets, layout, and base styling."""
        super().__init__()
        self.setup_ui()
        self.create_widgets()
        self.create_layout()
        self.set_style()

    # --------------------------------------------------------------------- #
    # Public API (controller calls)                                         #
    # --------------------------------------------------------------------- #

    def set_settings(self, output_path: str, namespace_name: str, enum_name: str) -> None:
        """Fill the three settings fields without emitting edit signals."""
        for edit, value in (
            (self.output_edit, output_path),
            (self.namespace_edit, namespace_name),
            (self.enum_edit, enum_name),
        ):
            blocker = QtCore.QSignalBlocker(edit)
            try:
                edit.setText(value)
            finally:
                del blocker

    def set_project(self, project_root: str) -> None:
        self.project_label.setText(project_root)
        self.project_label.setToolTip(project_root)

    def set_layers(self, rows: Iterable[tuple[int, str, str]]) -> None:
        """Replace the preview with ``(index, name, identifier)`` rows."""
        self.list_widget.clear()
        count = 0
        for index, name, identifier in rows:
            text = f"{index:>2}  {name}"
            if identifier != name:
                text += f"  →  {identifier}"
            item = QtWidgets.QListWidgetItem(text)
            item.setData(USER_ROLE, index)
            item.setFlags(ITEM_IS_ENABLED)
            item.setToolTip(f"{identifier} = {index},")
            self.list_widget.addItem(item)
            count += 1
        self.layers_label.setText(f"Named layers ({count})")

    def set_dirty(self, dirty: bool) -> None:
        """Mark the Save button when the fields differ from saved settings."""
        self.btn_save.setText("Save Settings *" if dirty else "Save Settings")

    def mark_invalid(self, field: Optional[str]) -> None:
        """Highlight the field named ``field``; None clears all highlights."""
        for name, edit in self._edits().items():
            edit.setStyleSheet("border: 1px solid #b00020;" if name == field else "")

    def show_status(
        self,
        text: str,
        kind: str = "info",
        timeout_ms: int = 2500,
    ) -> None:
        """Show a brief, non-modal status message in the window.

        Args:
            text: Message to display.
            kind: One of ``"info"``, ``"success"``, ``"warn"``, or
                ``"error"``; only affects text color.
            timeout_ms: How long to show the message before clearing it.
        """
        palette = {
            "info": "color: #6b6b6b;",
            "success": "color: #2e7d32;",
            "warn": "color: #b26a00;",
            "error": "color: #b00020;",
        }.get(kind, "color: #6b6b6b;")

        self.status_label.setStyleSheet(palette)
        self.status_label.setText(text)
        self._status_timer.start(max(0, int(timeout_ms)))

    def ask_output_path(self, start_dir: str) -> str:
        """Open a save dialog for the output file; return "" on cancel."""
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Choose output file",
            start_dir,
            "C# source (*.cs);;All files (*)",
        )
        return path

    # --------------------------------------------------------------------- #
    # UI construction (widgets + layout + light styling)                    #
    # --------------------------------------------------------------------- #

    def setup_ui(self) -> None:
        self.setWindowTitle("Layer Generator Settings")
        self.setObjectName("LayerGeneratorView")

    def create_widgets(self) -> None:
        """Instantiate child widgets and configure their basic properties."""
        self.title_label = QtWidgets.QLabel("Layer Auto Generator Settings")

        self.project_label = QtWidgets.QLabel("")
        self.project_label.setTextFormat(PLAIN_TEXT)

        self.output_edit = QtWidgets.QLineEdit()
        self.output_edit.setToolTip(
            "Where the enum file is written; relative paths start at the project root."
        )
        self.btn_browse = QtWidgets.QToolButton()
        self.btn_browse.setText("…")
        self.btn_browse.setToolTip("Choose the output file.")

        self.namespace_edit = QtWidgets.QLineEdit()
        self.namespace_edit.setToolTip("Namespace wrapping the enum, e.g. Game.Core.")

        self.enum_edit = QtWidgets.QLineEdit()
        self.enum_edit.setToolTip("Name of the generated enum type.")

        self.layers_label = QtWidgets.QLabel("Named layers")
        self.list_widget = QtWidgets.QListWidget()
        self.list_widget.setAlternatingRowColors(True)
        self.list_widget.setFont(QtGui.QFontDatabase.systemFont(FIXED_FONT))
        self.list_widget.setToolTip(
            "Layers currently named in the project, as they will appear in the enum."
        )

        self.btn_save = QtWidgets.QPushButton("Save Settings")
        self.btn_save.setToolTip("Store these settings for future sessions.")

        self.btn_generate = QtWidgets.QPushButton("Generate Layers Enum")
        self.btn_generate.setToolTip("Write the enum file now using the fields above.")

        self.help_button = QtWidgets.QToolButton()
        self.help_button.setText("Help")
        self.help_button.clicked.connect(self._show_inline_help)

        self.status_label = QtWidgets.QLabel("")
        self.status_label.setObjectName("status_label")
        self.status_label.setTextFormat(PLAIN_TEXT)
        self.status_label.setAccessibleName("Status")

        self._status_timer = QtCore.QTimer(self)
        self._status_timer.setSingleShot(True)
        self._status_timer.timeout.connect(lambda: self.status_label.setText(""))

    def create_layout(self) -> None:
        """Assemble child widgets into the final layout."""
        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(6)

        header = QtWidgets.QHBoxLayout()
        header.addWidget(self.title_label)
        header.addStretch()
        header.addWidget(self.help_button)
        root.addLayout(header)

        form = QtWidgets.QFormLayout()
        form.addRow("Project", self.project_label)
        row_output = QtWidgets.QHBoxLayout()
        row_output.addWidget(self.output_edit)
        row_output.addWidget(self.btn_browse)
        form.addRow("Output Path", row_output)
        form.addRow("Namespace Name", self.namespace_edit)
        form.addRow("Enum Name", self.enum_edit)
        root.addLayout(form)

        root.addWidget(self.layers_label)
        root.addWidget(self.list_widget)

        row_actions = QtWidgets.QHBoxLayout()
        row_actions.addWidget(self.btn_save)
        row_actions.addStretch()
        row_actions.addWidget(self.btn_generate)
        root.addLayout(row_actions)

        root.addWidget(self.status_label)
        self.setLayout(root)

    def set_style(self) -> None:
        self.setMinimumSize(400, 200)
        self.resize(420, 460)

        font = self.title_label.font()
        font.setBold(True)
        self.title_label.setFont(font)

    # --------------------------------------------------------------------- #
    # Helpers (internal)                                                    #
    # --------------------------------------------------------------------- #

    def _edits(self) -> dict:
        return {
            "output_path": self.output_edit,
            "namespace_name": self.namespace_edit,
            "enum_name": self.enum_edit,
        }

    def _show_inline_help(self) -> None:
        QtWidgets.QMessageBox.information(
            self,
            "Layer Generator Help",
            (
                "While this window is open, the project's layer names are "
                "watched and the enum file is rewritten whenever they change.\n\n"
                "- Save Settings stores the output path, namespace and enum "
                "name for future sessions.\n"
                "- Generate Layers Enum writes the file immediately.\n\n"
                "Characters other than letters, digits and underscores in "
                "layer names become underscores."
            ),
        )

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        """Emit ``closed`` so the controller can stop its timers."""
        super().closeEvent(event)
        self.closed.emit()
