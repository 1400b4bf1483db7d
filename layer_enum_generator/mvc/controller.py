"""Controller for the layer generator settings window.

Wires the passive Qt view to the settings model, persists settings on
request, and drives a LayerMonitor while the window is open.

Two things trigger a monitor tick: a QFileSystemWatcher on the project's
TagManager.asset, which fires as soon as Unity saves layer changes, and
a QTimer poll as the fallback for changes the watcher misses (some
editors replace the file, which drops the watch).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from mvc.qt_compat import QtCore
from mvc.dialogs import DialogService

from layergen import defaults, storage, unity_services
from layergen.emitter import EmitError, resolve_output_path
from layergen.monitor import LayerMonitor
from layergen.snapshot import SlotSourceError, read_snapshot
from layergen.text_utils import sanitize_identifier


logger = logging.getLogger(__name__)


class Controller:
    """Application controller.

    Responsibilities:
        - Bootstrap the settings from storage (or defaults).
        - Wire View signals to controller handlers.
        - Keep the layer preview current and regenerate on change.
        - Persist settings when the user saves.
    """

    def __init__(self, view, model, project_root: Union[Path, str]):
        """Initialize the controller and wire the view and model together.

        Args:
            view: Passive View instance.
            model: SettingsModel holding draft and saved settings.
            project_root: Unity project whose layers are watched.
        """
        self.view = view
        self.model = model
        self.dialogs = DialogService()
        self.project_root = Path(project_root)

        self.source = unity_services.TagManagerSource(self.project_root)
        self.monitor = LayerMonitor(
            self.source,
            self.model.saved,
            root=self.project_root,
            notify=self._on_emitted,
        )

        self._poll_timer = QtCore.QTimer(self.view)
        self._poll_timer.setInterval(int(defaults.DEFAULT_POLL_INTERVAL * 1000))
        self._poll_timer.timeout.connect(self._on_poll_tick)

        self._watcher = QtCore.QFileSystemWatcher(self.view)
        self._watcher.fileChanged.connect(lambda path: self._on_tag_manager_changed(path))

        self._bootstrap()
        self._connect_view_signals()

        if hasattr(self.view, "closed"):
            self.view.closed.connect(self._on_closed)

    def _handle_ui_error(self, context: str, exc: Exception) -> None:
        """Log an unexpected UI error and show a user-facing dialog."""
        logger.exception("Unexpected error in UI context '%s': %s", context, exc)
        self.dialogs.error(
            self.view,
            "Unexpected error",
            (
                f"An unexpected error occurred while {context}.\n\n"
                f"Details: {exc}\n\n"
                "You can check layergen.log for more information."
            ),
        )

    # --------------------------------------------------------------------- #
    # Boot / wiring                                                         #
    # --------------------------------------------------------------------- #

    def _bootstrap(self) -> None:
        """Load settings, paint the UI, take the baseline and start polling."""
        cfg = storage.safe_load_or_default()
        self.model.replace_all(cfg)
        self.monitor.update_config(cfg)

        self.view.set_project(str(self.project_root))
        self.view.set_settings(cfg.output_path, cfg.namespace_name, cfg.enum_name)
        self.view.set_dirty(False)

        self.monitor.start()
        self._refresh_preview()
        self._watch_tag_manager()
        self._poll_timer.start()

    def _connect_view_signals(self) -> None:
        self.view.output_edit.textChanged.connect(
            lambda text: self._on_field_edited("output_path", text)
        )
        self.view.namespace_edit.textChanged.connect(
            lambda text: self._on_field_edited("namespace_name", text)
        )
        self.view.enum_edit.textChanged.connect(
            lambda text: self._on_field_edited("enum_name", text)
        )
        self.view.btn_browse.clicked.connect(lambda: self._on_browse_clicked())
        self.view.btn_save.clicked.connect(lambda: self._on_save_clicked())
        self.view.btn_generate.clicked.connect(lambda: self._on_generate_clicked())

    def _watch_tag_manager(self) -> None:
        path = str(self.source.path)
        if path not in self._watcher.files() and self.source.path.exists():
            self._watcher.addPath(path)

    # --------------------------------------------------------------------- #
    # Monitoring                                                            #
    # --------------------------------------------------------------------- #

    def _on_poll_tick(self) -> None:
        try:
            if self.monitor.tick():
                self._refresh_preview()
            self._watch_tag_manager()
        except Exception as exc:
            self._poll_timer.stop()
            self._handle_ui_error("checking the project layers", exc)

    def _on_tag_manager_changed(self, path: str) -> None:
        logger.debug("File change notification for %s", path)
        self._on_poll_tick()

    def _on_emitted(self, path: Path) -> None:
        """Host notification after every successful write."""
        unity_services.notify_artifact_written(path)
        self.view.show_status(f"Layers enum updated: {path.name}", kind="success")

    def _refresh_preview(self) -> None:
        try:
            snapshot = read_snapshot(self.source)
        except SlotSourceError as exc:
            self.view.set_layers([])
            self.view.show_status(f"Cannot read layers: {exc}", kind="warn", timeout_ms=5000)
            return
        self.view.set_layers(
            (index, name, sanitize_identifier(name)) for index, name in snapshot.named_slots()
        )

    # --------------------------------------------------------------------- #
    # Handlers: view → controller                                           #
    # --------------------------------------------------------------------- #

    def _on_field_edited(self, field: str, text: str) -> None:
        self.model.set_field(field, text)
        self.view.mark_invalid(None)
        self.view.set_dirty(self.model.is_dirty())

    def _on_browse_clicked(self) -> None:
        current = resolve_output_path(self.model.draft(), self.project_root)
        path = self.view.ask_output_path(str(current.parent))
        if not path:
            return
        chosen = Path(path)
        try:
            chosen = chosen.relative_to(self.project_root)
        except ValueError:
            pass
        # Triggers _on_field_edited through textChanged.
        self.view.output_edit.setText(chosen.as_posix())

    def _on_save_clicked(self) -> None:
        """Validate the draft, persist it and hand it to the monitor."""
        ok, error = self.model.validate()
        if not ok:
            self.view.mark_invalid(error)
            self.dialogs.warn(self.view, "Invalid settings", _INVALID_TEXT[error])
            return

        cfg = self.model.mark_saved()
        try:
            storage.save(cfg)
        except OSError as e:
            self.dialogs.error(self.view, "Save error", f"Could not write settings:\n{e}")
            return

        self.monitor.update_config(cfg)
        self.view.set_dirty(False)
        self.view.show_status("Settings saved.", kind="success")

    def _on_generate_clicked(self) -> None:
        """Generate with the fields as shown, saved or not."""
        ok, error = self.model.validate()
        if not ok:
            self.view.mark_invalid(error)
            self.dialogs.warn(self.view, "Invalid settings", _INVALID_TEXT[error])
            return

        self.monitor.update_config(self.model.draft())
        try:
            path = self.monitor.generate_now()
        except (EmitError, SlotSourceError) as e:
            logger.error("Layers enum generation failed: %s", e)
            self.dialogs.error(self.view, "Generation failed", str(e))
            return
        finally:
            self.monitor.update_config(self.model.saved)

        logger.info("Layers enum generated at %s", path)
        self._refresh_preview()

    def _on_closed(self) -> None:
        self._poll_timer.stop()
        for path in self._watcher.files():
            self._watcher.removePath(path)
        if self.model.is_dirty():
            logger.info("Settings window closed with unsaved changes.")


_INVALID_TEXT = {
    "output_path": "Enter an output path.",
    "namespace_name": "The namespace must be an identifier, optionally dotted (Game.Core).",
    "enum_name": "The enum name must be a single identifier.",
}
