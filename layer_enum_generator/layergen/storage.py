"""Persistence helpers for the generator settings.

Implements loading, saving, and validating the JSON preferences file
that holds the output path, namespace name and enum name. The file
lives under the user's home directory in a subdirectory derived from
layergen.config.APP_DIR_NAME.

Higher-level code typically calls safe_load_or_default() to obtain a
GeneratorConfig; that helper will create or reset the on-disk file as
required and always return usable settings.
"""

import json
import logging
from pathlib import Path
from typing import Any

from layergen import config
from layergen.config import GeneratorConfig


logger = logging.getLogger(__name__)

_STRING_KEYS = ("output_path", "namespace_name", "enum_name")


class StorageError(Exception):
    """Exception raised when reading the preferences file fails.

    Used for a missing file, unparsable JSON, an invalid schema, or an
    outdated version. Callers can catch this and fall back to defaults.
    """


def safe_load_or_default() -> GeneratorConfig:
    """Return the stored settings, creating default ones if needed.

    Attempts `load()`. On `StorageError` or `OSError` the failure is
    logged at warning level, factory defaults are written back to disk
    (best effort) and returned.

    Returns:
        GeneratorConfig: Settings suitable for the emitter and monitor.
    """
    try:
        return load()
    except (StorageError, OSError) as e:
        logger.warning(
            "Preferences load failed or are outdated, falling back to defaults "
            "(reason: %s).",
            e,
        )
        cfg = GeneratorConfig()
        try:
            save(cfg)
        except OSError as save_err:
            logger.warning("Could not write default preferences to disk: %s", save_err)
        return cfg


def load() -> GeneratorConfig:
    """Load the settings from disk.

    Returns:
        GeneratorConfig: The stored settings if the file exists, parses
        as JSON and passes `validate()`.

    Raises:
        StorageError: If the file does not exist, is not valid JSON, or has
            an invalid or outdated schema.
        OSError: If the underlying file I/O fails unexpectedly.
    """
    p = _config_path()
    if not p.exists():
        raise StorageError(f"Preferences not found: {p}")

    try:
        with p.open("r", encoding="utf-8") as fh:
            data: dict[str, Any] = json.load(fh)
    except json.JSONDecodeError as e:
        raise StorageError(f"Preferences are not valid JSON: {p}") from e

    if not validate(data):
        raise StorageError(f"Invalid preferences schema: {p}")

    return GeneratorConfig.from_dict(data)


def save(cfg: GeneratorConfig) -> Path:
    """Persist ``cfg`` to disk, creating parent directories as needed.

    Args:
        cfg: Settings to write.

    Returns:
        Path: The preferences file that was written.

    Raises:
        ValueError: If ``cfg`` is not a GeneratorConfig.
        OSError: If the file cannot be written.
    """
    if not isinstance(cfg, GeneratorConfig):
        raise ValueError("storage.save(cfg): expected a GeneratorConfig")

    p = _config_path()
    p.parent.mkdir(parents=True, exist_ok=True)

    with p.open("w", encoding="utf-8") as fh:
        json.dump(cfg.to_dict(), fh, indent=2, ensure_ascii=False)

    logger.info("Layer generator settings saved to %s", p)
    return p


def validate(data: dict[str, Any]) -> bool:
    """Validate a preferences mapping read from disk.

    The following must hold:

    - `data` is a `dict` with an `int` `version` of at least
      `config.CONFIG_VERSION`.
    - `output_path`, `namespace_name` and `enum_name` are present and are
      non-empty strings.

    Identifier syntax is not checked here; that is the settings window's
    job before saving.

    Args:
        data: Mapping to validate.

    Returns:
        bool: `True` if the mapping looks valid and up to date.
    """
    if not isinstance(data, dict):
        return False

    version = data.get("version")
    if not isinstance(version, int) or isinstance(version, bool):
        return False

    if version < config.CONFIG_VERSION:
        logger.info(
            "Preferences version %s is older than current CONFIG_VERSION=%s",
            version,
            config.CONFIG_VERSION,
        )
        return False

    return all(
        isinstance(data.get(key), str) and data[key].strip() for key in _STRING_KEYS
    )


# --------------------------- path helpers (package) ----------------------------


def _config_path() -> Path:
    """Compute the on-disk path for the JSON preferences file.

        ~/.{app_dir}/{file_name}

    This function does not create any directories or files; directory
    creation happens in `save()`.
    """
    return Path.home() / f".{config.APP_DIR_NAME}" / config.FILE_NAME
