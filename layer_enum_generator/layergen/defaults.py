"""Factory defaults for the layer enum generator.

Defines the settings used when no preferences file exists yet or when
the stored one is unusable, plus the polling interval and the location
of the layer table inside a Unity project.

This module is intentionally data-only: it performs no I/O.
"""

from __future__ import annotations

from typing import Final

DEFAULT_OUTPUT_PATH: Final[str] = "Assets/Scripts/Layers.cs"
DEFAULT_NAMESPACE_NAME: Final[str] = "GameNamespace"
DEFAULT_ENUM_NAME: Final[str] = "Layers"

# Seconds between two polls of the slot table in `layergen watch`.
DEFAULT_POLL_INTERVAL: Final[float] = 1.0

# Where Unity keeps tag and layer names, relative to the project root.
TAG_MANAGER_RELPATH: Final[str] = "ProjectSettings/TagManager.asset"
