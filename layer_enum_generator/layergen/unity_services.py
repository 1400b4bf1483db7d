"""Unity-facing services for the layer enum generator.

Reads layer names from a Unity project's ``TagManager.asset`` and
provides the default post-write notification. Unity serialises project
settings as YAML with its own ``!u!`` tags; the loader below accepts
those tags and keeps every scalar a string, so names like ``true`` or
``123`` come through verbatim.

Everything the core needs from Unity goes through `TagManagerSource`,
which implements the ``get_slot_name(index)`` capability.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from layergen import config, defaults
from layergen.snapshot import SlotSourceError


logger = logging.getLogger(__name__)

UNITY_TAG_PREFIX = "tag:unity3d.com,2011:"

# Unity 4 and earlier stored layers as individual keys.
_LEGACY_LAYER_KEY = re.compile(r"^(?:Builtin|User) Layer (\d+)$")


class _UnityLoader(yaml.BaseLoader):
    """YAML loader for Unity assets: no implicit typing, Unity tags allowed."""


def _construct_unity_object(loader, tag_suffix, node):
    # The class id in the tag (e.g. 78 for TagManager) is irrelevant here.
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node, deep=True)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_scalar(node)


yaml.add_multi_constructor(UNITY_TAG_PREFIX, _construct_unity_object, Loader=_UnityLoader)


def parse_layer_names(text: str) -> list[Optional[str]]:
    """Extract the slot names from the text of a ``TagManager.asset``.

    Supports the modern ``layers`` list as well as the legacy
    ``Builtin Layer N`` / ``User Layer N`` keys. Missing slots are padded
    with None; surplus entries are ignored.

    Args:
        text: YAML document as written by Unity.

    Returns:
        list[str | None]: Exactly ``config.SLOT_COUNT`` names.

    Raises:
        SlotSourceError: If the text is not valid YAML or has no
            TagManager section.
    """
    try:
        data = yaml.load(text, Loader=_UnityLoader)
    except yaml.YAMLError as e:
        raise SlotSourceError(f"TagManager is not valid YAML: {e}") from e

    manager = data.get("TagManager") if isinstance(data, dict) else None
    if not isinstance(manager, dict):
        raise SlotSourceError("TagManager section not found")

    names: list[Optional[str]] = [None] * config.SLOT_COUNT

    layers = manager.get("layers")
    if isinstance(layers, list):
        for index, name in enumerate(layers[: config.SLOT_COUNT]):
            names[index] = _clean(name)
        return names

    for key, value in manager.items():
        match = _LEGACY_LAYER_KEY.match(str(key))
        if not match:
            continue
        index = int(match.group(1))
        if 0 <= index < config.SLOT_COUNT:
            names[index] = _clean(value)
    return names


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value:
        return None
    return value


class TagManagerSource:
    """Slot source backed by ``ProjectSettings/TagManager.asset``.

    The file is parsed at most once per modification: the parsed names
    are cached against the file's ``(mtime_ns, size)`` and reused until
    either changes, so sampling all slots costs one ``stat`` each.
    """

    def __init__(self, project_root: Union[Path, str]) -> None:
        self.project_root = Path(project_root)
        self.path = self.project_root / defaults.TAG_MANAGER_RELPATH
        self._stamp: Optional[tuple[int, int]] = None
        self._names: list[Optional[str]] = []

    def get_slot_name(self, index: int) -> Optional[str]:
        """Return the name bound to slot ``index``, or None if unnamed.

        Raises:
            IndexError: If ``index`` is outside the slot table.
            SlotSourceError: If the asset file is missing or unreadable.
        """
        if not 0 <= index < config.SLOT_COUNT:
            raise IndexError(f"Slot index out of range: {index}")
        return self._load()[index]

    def _load(self) -> list[Optional[str]]:
        try:
            st = self.path.stat()
        except OSError as e:
            raise SlotSourceError(f"Cannot stat {self.path}: {e}") from e

        stamp = (st.st_mtime_ns, st.st_size)
        if stamp == self._stamp:
            return self._names

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise SlotSourceError(f"Cannot read {self.path}: {e}") from e

        self._names = parse_layer_names(text)
        self._stamp = stamp
        logger.debug("Parsed layer names from %s", self.path)
        return self._names


def is_unity_project(path: Union[Path, str]) -> bool:
    """Return True if ``path`` looks like a Unity project root."""
    root = Path(path)
    return (root / defaults.TAG_MANAGER_RELPATH).is_file() and (root / "Assets").is_dir()


def find_project_root(start: Union[Path, str, None] = None) -> Optional[Path]:
    """Walk up from ``start`` (cwd when None) to the nearest Unity project.

    Returns:
        Path | None: The project root, or None if none is found.
    """
    current = Path(start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if is_unity_project(candidate):
            return candidate
    return None


def notify_artifact_written(path: Path) -> None:
    """Default host notification after a successful write.

    Unity re-imports changed files under ``Assets`` on its next refresh
    (focus change or Ctrl+R); this hook only records the event.
    """
    logger.info("Generated %s; Unity will import it on its next asset refresh.", path)
