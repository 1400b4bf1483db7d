"""In-memory model for the settings window.

Implements the “M” in the MVC stack: the settings being edited in the
window, separate from the last saved GeneratorConfig. The controller
owns a single SettingsModel and is responsible for persisting it via
the storage helpers once it validates.

The model performs no file I/O and knows nothing about Qt.
"""

from __future__ import annotations

from typing import Optional

from layergen.config import GeneratorConfig
from layergen.text_utils import is_dotted_identifier, is_identifier


class SettingsModel:
    """Draft settings plus the last saved value.

    The draft holds raw user text; `validate()` decides whether it can
    become a GeneratorConfig.
    """

    def __init__(self) -> None:
        """Initialize with factory defaults as both draft and saved state."""
        self._saved = GeneratorConfig()
        self.output_path = self._saved.output_path
        self.namespace_name = self._saved.namespace_name
        self.enum_name = self._saved.enum_name

    @property
    def saved(self) -> GeneratorConfig:
        """The last value passed to `mark_saved()` or `replace_all()`."""
        return self._saved

    def replace_all(self, cfg: GeneratorConfig) -> None:
        """Load ``cfg`` as both the draft and the saved state."""
        self._saved = cfg
        self.output_path = cfg.output_path
        self.namespace_name = cfg.namespace_name
        self.enum_name = cfg.enum_name

    def set_field(self, field: str, value: str) -> None:
        """Update one draft field from user input.

        Args:
            field: One of ``output_path``, ``namespace_name``, ``enum_name``.
            value: Raw text; surrounding whitespace is stripped.

        Raises:
            KeyError: If ``field`` is not a settings field.
        """
        if field not in ("output_path", "namespace_name", "enum_name"):
            raise KeyError(field)
        setattr(self, field, value.strip() if isinstance(value, str) else "")

    def is_dirty(self) -> bool:
        """Return True if the draft differs from the saved settings."""
        return self.draft() != self._saved

    def draft(self) -> GeneratorConfig:
        """Return the draft as a GeneratorConfig, valid or not."""
        return GeneratorConfig(
            output_path=self.output_path,
            namespace_name=self.namespace_name,
            enum_name=self.enum_name,
        )

    def validate(self) -> tuple[bool, Optional[str]]:
        """Check the draft.

        Returns:
            tuple[bool, str | None]: ``(ok, err_code)`` where
            ``err_code`` is ``None`` on success or the name of the first
            invalid field:

                * ``"output_path"`` - empty path.
                * ``"namespace_name"`` - not a (dotted) identifier.
                * ``"enum_name"`` - not an identifier.
        """
        if not self.output_path:
            return False, "output_path"
        if not is_dotted_identifier(self.namespace_name):
            return False, "namespace_name"
        if not is_identifier(self.enum_name):
            return False, "enum_name"
        return True, None

    def mark_saved(self) -> GeneratorConfig:
        """Adopt the draft as the saved value and return it.

        Raises:
            ValueError: If the draft does not validate.
        """
        ok, error = self.validate()
        if not ok:
            raise ValueError(f"Invalid setting: {error}")
        self._saved = self.draft()
        return self._saved
