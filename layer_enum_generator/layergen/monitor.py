"""Change monitor for the layer slot table.

Keeps the last known fingerprint as a baseline and, on every poll,
re-samples the slot table. When the fingerprint differs, the emitter is
run with the new snapshot and the new fingerprint becomes the baseline,
whether the emission succeeded or not. That way a persistently failing
output path is reported once per change instead of on every tick.

The poll itself is the plain function `poll_once()`; `LayerMonitor`
wraps it with the mutable bits (current state and settings), and
`PollingTicker` is the headless scheduler used by ``layergen watch``.
The Qt settings window drives `LayerMonitor.tick()` from a QTimer.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional, Union

from layergen.config import GeneratorConfig
from layergen.emitter import EmitError, Notifier, emit
from layergen.snapshot import (
    Fingerprint,
    Snapshot,
    SlotSource,
    SlotSourceError,
    fingerprint,
    read_snapshot,
)


logger = logging.getLogger(__name__)

EmitFn = Callable[[Snapshot, GeneratorConfig], object]


@dataclass(frozen=True)
class MonitorState:
    """Monitor state between polls.

    Attributes:
        baseline: Fingerprint of the last snapshot that was acted on.
        emissions: Number of successful emissions so far.
        failures: Number of emissions that raised EmitError.
    """

    baseline: Fingerprint
    emissions: int = 0
    failures: int = 0


def poll_once(
    state: MonitorState,
    source: SlotSource,
    cfg: GeneratorConfig,
    emit_fn: EmitFn,
) -> MonitorState:
    """Run one sample-compare-emit cycle and return the next state.

    Args:
        state: Current state; never mutated.
        source: Slot table to sample.
        cfg: Settings passed to ``emit_fn`` if an emission happens.
        emit_fn: Called as ``emit_fn(snapshot, cfg)`` on change.

    Returns:
        MonitorState: ``state`` itself when nothing changed (or the source
        could not be read), otherwise a new state carrying the new
        baseline.
    """
    try:
        snapshot = read_snapshot(source)
    except SlotSourceError as e:
        logger.warning("Skipping layer poll, slot table unreadable: %s", e)
        return state

    current = fingerprint(snapshot)
    if current == state.baseline:
        return state

    try:
        emit_fn(snapshot, cfg)
    except EmitError as e:
        logger.error("Layers enum generation failed: %s", e)
        return replace(state, baseline=current, failures=state.failures + 1)

    logger.info("Layers enum updated due to layer changes.")
    return replace(state, baseline=current, emissions=state.emissions + 1)


class LayerMonitor:
    """Stateful wrapper that owns the baseline and current settings.

    Not thread-safe; ticks are expected to run one after another on a
    single thread (a loop or a Qt timer).
    """

    def __init__(
        self,
        source: SlotSource,
        cfg: GeneratorConfig,
        root: Union[Path, str, None] = None,
        notify: Optional[Notifier] = None,
        emit_fn: Optional[EmitFn] = None,
    ) -> None:
        """Create a monitor; call `start()` before the first `tick()`.

        Args:
            source: Slot table to watch.
            cfg: Initial settings.
            root: Project root used to resolve relative output paths.
            notify: Host notification passed through to `emit()`.
            emit_fn: Replacement for the default emitter, mostly for tests.
        """
        self.source = source
        self.root = root
        self.notify = notify
        self._cfg = cfg
        self._emit_fn = emit_fn or self._emit
        self.state: Optional[MonitorState] = None

    @property
    def config(self) -> GeneratorConfig:
        return self._cfg

    def update_config(self, cfg: GeneratorConfig) -> None:
        """Use ``cfg`` for every emission from the next one on."""
        self._cfg = cfg

    def start(self) -> MonitorState:
        """Take the initial baseline from a fresh read of the slot table.

        An unreadable table yields an empty baseline, so the first
        successful read afterwards counts as a change.
        """
        try:
            baseline = fingerprint(read_snapshot(self.source))
        except SlotSourceError as e:
            logger.warning("Slot table unreadable at start-up: %s", e)
            baseline = ()
        self.state = MonitorState(baseline=baseline)
        logger.debug("Layer monitor started.")
        return self.state

    def tick(self) -> bool:
        """Poll once; return True if an emission was attempted."""
        if self.state is None:
            self.start()
        before = self.state
        self.state = poll_once(before, self.source, self._cfg, self._emit_fn)
        return self.state is not before

    def generate_now(self) -> Path:
        """Emit unconditionally from a fresh snapshot and re-baseline.

        Errors propagate to the caller, which is an explicit user action
        rather than the background loop.

        Raises:
            SlotSourceError: If the slot table cannot be read.
            EmitError: If the emission fails.
        """
        snapshot = read_snapshot(self.source)
        path = self._emit(snapshot, self._cfg)
        self.state = MonitorState(
            baseline=fingerprint(snapshot),
            emissions=(self.state.emissions if self.state else 0) + 1,
            failures=self.state.failures if self.state else 0,
        )
        return path

    def _emit(self, snapshot: Snapshot, cfg: GeneratorConfig) -> Path:
        return emit(snapshot, cfg, root=self.root, notify=self.notify)


class PollingTicker:
    """Call a function at a fixed interval on the current thread."""

    def __init__(
        self,
        interval: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._sleep = sleep

    def run(self, callback: Callable[[], object], max_ticks: Optional[int] = None) -> int:
        """Invoke ``callback`` every ``interval`` seconds.

        Runs until ``max_ticks`` callbacks have been made, or forever when
        it is None. KeyboardInterrupt propagates to the caller.

        Returns:
            int: Number of callbacks made.
        """
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            self._sleep(self.interval)
            callback()
            ticks += 1
        return ticks
