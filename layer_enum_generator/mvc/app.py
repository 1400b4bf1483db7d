"""Application bootstrap and logging configuration for the layer generator.

Provides the show() and run() entrypoints used by ``layergen settings``
to create and display the settings window. This module is responsible
for:

- Configuring a rotating log file under ``~/.layergen``.
- Ensuring logging is only configured once per session.
- Enforcing a single top-level settings window per process.

All UI behavior is delegated to the MVC stack under the mvc package.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


VIEW = None  # type: ignore[assignment]
# ^ module-level handles to the current View and its Controller (if any).
#   The View is reused by `show()`; the Controller is held so its timers
#   and file watcher are not garbage collected while the window is open.
CONTROLLER = None  # type: ignore[assignment]
LOG_DIR = Path.home() / ".layergen"
LOG_FILE = LOG_DIR / "layergen.log"
LOG_LEVEL = logging.INFO


def _configure_logging() -> None:
    """Configure file logging for the ``layergen`` package.

    Attaches a rotating file handler writing to ``~/.layergen/layergen.log``
    (1 MB per file, up to 5 backups). The handler is attached only once,
    so repeated calls do not add duplicate handlers.

    If the log directory or file cannot be created, a warning is logged
    on this module's logger and file logging is skipped. ``OSError`` is
    not propagated.
    """
    package_logger = logging.getLogger("layergen")
    package_logger.setLevel(LOG_LEVEL)

    already_configured = any(
        isinstance(h, RotatingFileHandler)
        and getattr(h, "baseFilename", None) == str(LOG_FILE)
        for h in package_logger.handlers
    )
    if already_configured:
        return

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as exc:
        logging.getLogger(__name__).warning(
            "Unable to configure layer generator file logging at %s: %s",
            LOG_FILE,
            exc,
        )
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s:%(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    package_logger.addHandler(handler)
    package_logger.propagate = True


def show(project_root: Union[Path, str]) -> None:
    """Show (or raise) the settings window for ``project_root``.

    If a window already exists and is visible, it is raised and focused.
    Otherwise the MVC stack (Model, View, Controller) is built, the view
    is cached at module scope, and shown. A QApplication must already
    exist; use `run()` from a plain Python process.

    Raises:
        ImportError: If the Qt bindings cannot be imported.
    """
    _configure_logging()
    global VIEW, CONTROLLER

    if VIEW is not None and VIEW.isVisible():
        VIEW.show()
        VIEW.raise_()
        VIEW.activateWindow()
        return

    # Local imports keep this module importable without Qt installed.
    from mvc import view, model, controller  # type: ignore

    m = model.SettingsModel()
    v = view.View()
    CONTROLLER = controller.Controller(v, m, project_root)

    VIEW = v
    v.show()
    v.raise_()


def run(project_root: Union[Path, str], argv: Optional[list] = None) -> int:
    """Create a QApplication if needed, show the window and run the event loop.

    Returns:
        int: The Qt event loop's exit code.
    """
    from mvc.qt_compat import QtWidgets

    qt_app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(argv or [])
    show(project_root)
    return qt_app.exec_() if hasattr(qt_app, "exec_") else qt_app.exec()


def ensure_logging() -> None:
    """Ensure file logging is configured for the ``layergen`` package.

    Convenience helper for entry points (such as the CLI) that need
    logging without showing the UI. Safe to call multiple times.
    """
    _configure_logging()
