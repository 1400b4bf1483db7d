"""Layer slot snapshots and their fingerprints.

A snapshot is an immutable capture of all slot names at one instant. The
monitor takes a fresh snapshot on every poll, reduces it to a
fingerprint and compares that against the last known one; the snapshot
itself is only kept long enough to hand it to the emitter.

The core never talks to an engine directly. Anything with a
``get_slot_name(index)`` method can be sampled, which lets tests feed a
plain in-memory table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

from layergen import config

Fingerprint = tuple[str, ...]


class SlotSourceError(Exception):
    """Raised when the host slot table cannot be read.

    Sources raise this for missing or unparsable backing data. The
    monitor treats it as a skipped poll rather than a change.
    """


class SlotSource(Protocol):
    """Capability the core needs from the host: one name per slot index."""

    def get_slot_name(self, index: int) -> Optional[str]:
        ...


@dataclass(frozen=True)
class Snapshot:
    """Immutable, ordered capture of every slot name.

    Empty names are normalised to ``None`` so that "absent" has a single
    representation.
    """

    names: tuple[Optional[str], ...]

    def __post_init__(self) -> None:
        names = tuple(name if name else None for name in self.names)
        if len(names) != config.SLOT_COUNT:
            raise ValueError(
                f"Snapshot needs exactly {config.SLOT_COUNT} slots, got {len(names)}"
            )
        object.__setattr__(self, "names", names)

    @classmethod
    def from_mapping(cls, named_slots: dict[int, str]) -> "Snapshot":
        """Build a snapshot from ``{index: name}``; other slots are empty."""
        names: list[Optional[str]] = [None] * config.SLOT_COUNT
        for index, name in named_slots.items():
            if not 0 <= index < config.SLOT_COUNT:
                raise IndexError(f"Slot index out of range: {index}")
            names[index] = name
        return cls(tuple(names))

    def named_slots(self) -> Iterator[tuple[int, str]]:
        """Yield ``(index, name)`` for non-empty slots in ascending order."""
        for index, name in enumerate(self.names):
            if name:
                yield index, name

    def __len__(self) -> int:
        return len(self.names)

    def __getitem__(self, index: int) -> Optional[str]:
        return self.names[index]


def read_snapshot(source: SlotSource) -> Snapshot:
    """Query ``source`` for every slot, in ascending index order.

    Args:
        source: Host capability providing ``get_slot_name(index)``.

    Returns:
        Snapshot: A fresh capture with exactly ``config.SLOT_COUNT`` entries.

    Raises:
        SlotSourceError: If the source cannot be read.
    """
    return Snapshot(tuple(source.get_slot_name(i) for i in range(config.SLOT_COUNT)))


def fingerprint(snapshot: Snapshot) -> Fingerprint:
    """Reduce a snapshot to a comparable value.

    The fingerprint keeps every name at its index (``""`` for empty
    slots), so two fingerprints compare equal exactly when the per-slot
    names are identical. No hashing is involved, which rules out
    collisions.
    """
    return tuple(name or "" for name in snapshot.names)
