"""Global configuration constants and the generator settings value.

Centralises the values shared across the package: the preferences file
version, the application directory name, the JSON file name used for
persistence, the size of the layer slot table, and the header written
at the top of every generated file.

Also defines GeneratorConfig, the immutable settings value handed to the
emitter and the monitor. Concrete preference paths are computed by
layergen.storage; code outside that module should rely on its helpers
rather than constructing paths manually.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from layergen import defaults

# Preferences file version.
#
# Bump this integer whenever the shape or meaning of the JSON file
# changes in a non–backwards-compatible way. The storage layer treats an
# older version on disk as outdated and resets it to defaults.
CONFIG_VERSION: int = 1

# Directory name for all generator data under the user's home.
#
# The storage module constructs the full path as:
#   Path.home() / f".{APP_DIR_NAME}" / FILE_NAME
APP_DIR_NAME: str = "layergen"

# File name for the JSON preferences stored on disk.
FILE_NAME: str = "config.json"

# Number of layer slots exposed by the engine. Indices are dense in
# [0, SLOT_COUNT).
SLOT_COUNT: int = 32

# First line of every generated file.
GENERATED_HEADER: str = "// This file is auto-generated. Changes will be overwritten."


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings that parameterise one emission.

    Instances are immutable, so a config captured at the start of a poll
    cannot change underneath a running emission. Use `with_changes()` to
    derive an updated copy.
    """

    output_path: str = defaults.DEFAULT_OUTPUT_PATH
    namespace_name: str = defaults.DEFAULT_NAMESPACE_NAME
    enum_name: str = defaults.DEFAULT_ENUM_NAME

    def with_changes(
        self,
        output_path: Optional[str] = None,
        namespace_name: Optional[str] = None,
        enum_name: Optional[str] = None,
    ) -> "GeneratorConfig":
        """Return a copy with every non-None argument applied."""
        changes = {
            key: value
            for key, value in (
                ("output_path", output_path),
                ("namespace_name", namespace_name),
                ("enum_name", enum_name),
            )
            if value is not None
        }
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping persisted by layergen.storage."""
        return {
            "version": CONFIG_VERSION,
            "output_path": self.output_path,
            "namespace_name": self.namespace_name,
            "enum_name": self.enum_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratorConfig":
        """Build a config from a stored mapping, defaulting missing keys."""
        return cls(
            output_path=data.get("output_path", defaults.DEFAULT_OUTPUT_PATH),
            namespace_name=data.get("namespace_name", defaults.DEFAULT_NAMESPACE_NAME),
            enum_name=data.get("enum_name", defaults.DEFAULT_ENUM_NAME),
        )
