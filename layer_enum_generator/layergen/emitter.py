"""Render a layer snapshot as a C# enum and write it to disk.

The emitted file is always regenerated from scratch: a header comment, a
namespace block and one enum member per named slot, in ascending slot
order. Writing goes through a temporary file in the target directory
that is then moved over the target, so readers never see a half-written
file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from layergen import config
from layergen.config import GeneratorConfig
from layergen.snapshot import Snapshot
from layergen.text_utils import sanitize_identifier


logger = logging.getLogger(__name__)

Notifier = Callable[[Path], None]


class EmitError(Exception):
    """Base class for failures while emitting the enum file.

    Attributes:
        path: The output path the emission was targeting.
    """

    def __init__(self, message: str, path: Union[Path, str, None] = None):
        super().__init__(message)
        self.path = path


class DirectoryCreateFailed(EmitError):
    """The parent directory of the output file could not be created."""


class WriteFailed(EmitError):
    """The output file could not be written or moved into place."""


class SanitizationCollision(EmitError):
    """Two different slots sanitize to the same enum member name.

    Attributes:
        identifier: The duplicated member name.
        indices: Slot indices that produced it, ascending.
    """

    def __init__(self, identifier: str, indices: tuple[int, ...], path=None):
        slots = ", ".join(str(i) for i in indices)
        super().__init__(
            f"Layer slots {slots} all map to enum member '{identifier}'", path
        )
        self.identifier = identifier
        self.indices = indices


def render(snapshot: Snapshot, cfg: GeneratorConfig) -> str:
    """Return the enum source text for ``snapshot``.

    Args:
        snapshot: Slot names to render; empty slots are skipped.
        cfg: Supplies the namespace and enum names.

    Returns:
        str: The complete file contents, ``\\n`` terminated.

    Raises:
        SanitizationCollision: If two slots produce the same member name.
    """
    members: list[tuple[str, int]] = []
    seen: dict[str, int] = {}
    for index, name in snapshot.named_slots():
        identifier = sanitize_identifier(name)
        if identifier in seen:
            raise SanitizationCollision(identifier, (seen[identifier], index))
        seen[identifier] = index
        members.append((identifier, index))

    lines = [
        config.GENERATED_HEADER,
        f"namespace {cfg.namespace_name}",
        "{",
        f"    public enum {cfg.enum_name}",
        "    {",
    ]
    lines.extend(f"        {identifier} = {index}," for identifier, index in members)
    lines.extend(["    }", "}"])
    return "\n".join(lines) + "\n"


def resolve_output_path(cfg: GeneratorConfig, root: Union[Path, str, None] = None) -> Path:
    """Resolve ``cfg.output_path`` against ``root`` (cwd when None)."""
    path = Path(cfg.output_path).expanduser()
    if path.is_absolute():
        return path
    return Path(root or Path.cwd()) / path


def emit(
    snapshot: Snapshot,
    cfg: GeneratorConfig,
    root: Union[Path, str, None] = None,
    notify: Optional[Notifier] = None,
) -> Path:
    """Write the enum file for ``snapshot`` and notify the host.

    Calling this twice with the same snapshot and config produces a
    byte-identical file.

    Args:
        snapshot: Slot names to emit.
        cfg: Output path, namespace and enum name.
        root: Directory that relative output paths are resolved against.
        notify: Called with the written path after a successful write.
            Exceptions raised by it are logged, not propagated.

    Returns:
        Path: The file that was written.

    Raises:
        SanitizationCollision: If two slots produce the same member name.
        DirectoryCreateFailed: If the parent directory cannot be created,
            including paths the OS rejects outright (embedded NUL).
        WriteFailed: If the file cannot be written or moved into place.
    """
    target = resolve_output_path(cfg, root)

    try:
        text = render(snapshot, cfg)
    except SanitizationCollision as exc:
        exc.path = target
        raise

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as exc:
        raise DirectoryCreateFailed(
            f"Could not create directory {target.parent}: {exc}", target
        ) from exc

    _write_replace(target, text)
    logger.debug("Wrote %d bytes to %s", len(text.encode("utf-8")), target)

    if notify is not None:
        try:
            notify(target)
        except Exception:
            logger.exception("Post-write notification failed for %s", target)

    return target


def _write_replace(target: Path, text: str) -> None:
    """Write ``text`` to a sibling temp file, then move it over ``target``.

    Raises:
        WriteFailed: On any I/O error or unusable file name; the temp file is removed.
    """
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="\n",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(text)
        # NamedTemporaryFile creates owner-only files.
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except (OSError, ValueError) as exc:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
        raise WriteFailed(f"Could not write {target}: {exc}", target) from exc
