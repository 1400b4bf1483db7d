"""Tests for the change monitor loop."""

import logging

import pytest

from conftest import FakeSlotTable
from layergen import storage
from layergen.config import GeneratorConfig
from layergen.emitter import WriteFailed
from layergen.monitor import LayerMonitor, MonitorState, PollingTicker, poll_once
from layergen.snapshot import Snapshot, SlotSourceError, fingerprint, read_snapshot


class RecordingEmitter:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, snapshot, cfg):
        self.calls.append((snapshot, cfg))
        if self.error is not None:
            raise self.error


class BrokenTable:
    def get_slot_name(self, index):
        raise SlotSourceError("TagManager.asset is being written")


def _state_for(table):
    return MonitorState(baseline=fingerprint(read_snapshot(table)))


class TestPollOnce:
    def test_change_triggers_one_emission(self):
        table = FakeSlotTable({0: "Default"})
        state = _state_for(table)
        emitter = RecordingEmitter()

        table.names[5] = "Water"
        new_state = poll_once(state, table, GeneratorConfig(), emitter)

        assert len(emitter.calls) == 1
        snapshot, cfg = emitter.calls[0]
        assert snapshot == Snapshot.from_mapping({0: "Default", 5: "Water"})
        assert cfg == GeneratorConfig()
        assert new_state.baseline == fingerprint(snapshot)
        assert new_state.emissions == 1

    def test_no_change_no_emission(self):
        table = FakeSlotTable({0: "Default"})
        state = _state_for(table)
        emitter = RecordingEmitter()

        first = poll_once(state, table, GeneratorConfig(), emitter)
        second = poll_once(first, table, GeneratorConfig(), emitter)

        assert emitter.calls == []
        assert second is state

    def test_failed_emit_advances_baseline(self, caplog):
        table = FakeSlotTable({0: "Default"})
        state = _state_for(table)
        emitter = RecordingEmitter(error=WriteFailed("locked file"))

        table.names[5] = "Water"
        with caplog.at_level(logging.ERROR, logger="layergen.monitor"):
            after_failure = poll_once(state, table, GeneratorConfig(), emitter)
        assert after_failure.failures == 1
        assert "locked file" in caplog.text

        after_retry = poll_once(after_failure, table, GeneratorConfig(), emitter)
        assert len(emitter.calls) == 1
        assert after_retry is after_failure

    def test_non_emit_errors_propagate(self):
        table = FakeSlotTable({0: "Default"})
        state = _state_for(table)
        table.names[1] = "UI"
        with pytest.raises(RuntimeError):
            poll_once(state, table, GeneratorConfig(), RecordingEmitter(error=RuntimeError("bug")))

    def test_unreadable_source_keeps_baseline(self, caplog):
        state = MonitorState(baseline=("Default",) + ("",) * 31)
        emitter = RecordingEmitter()
        with caplog.at_level(logging.WARNING, logger="layergen.monitor"):
            assert poll_once(state, BrokenTable(), GeneratorConfig(), emitter) is state
        assert emitter.calls == []
        assert "being written" in caplog.text


class TestLayerMonitor:
    def test_tick_reports_emission(self):
        table = FakeSlotTable({0: "Default"})
        emitter = RecordingEmitter()
        monitor = LayerMonitor(table, GeneratorConfig(), emit_fn=emitter)
        monitor.start()

        assert monitor.tick() is False
        table.names[8] = "Water"
        assert monitor.tick() is True
        assert monitor.tick() is False
        assert len(emitter.calls) == 1

    def test_tick_starts_lazily(self):
        emitter = RecordingEmitter()
        monitor = LayerMonitor(FakeSlotTable({0: "Default"}), GeneratorConfig(), emit_fn=emitter)
        assert monitor.tick() is False
        assert monitor.state is not None
        assert emitter.calls == []

    def test_update_config_used_by_next_emission(self):
        table = FakeSlotTable({0: "Default"})
        emitter = RecordingEmitter()
        monitor = LayerMonitor(table, GeneratorConfig(), emit_fn=emitter)
        monitor.start()

        new_cfg = GeneratorConfig(enum_name="GameLayers")
        monitor.update_config(new_cfg)
        table.names[3] = "Water"
        monitor.tick()
        assert emitter.calls[0][1] == new_cfg

    def test_unreadable_at_start_then_readable_emits(self):
        table = FakeSlotTable({0: "Default"})
        emitter = RecordingEmitter()
        monitor = LayerMonitor(BrokenTable(), GeneratorConfig(), emit_fn=emitter)
        monitor.start()
        monitor.source = table
        assert monitor.tick() is True

    def test_generate_now_writes_and_rebaselines(self, tmp_path):
        table = FakeSlotTable({0: "Default", 4: "Water"})
        notified = []
        monitor = LayerMonitor(table, GeneratorConfig(), root=tmp_path, notify=notified.append)
        monitor.start()

        path = monitor.generate_now()

        assert path.read_text(encoding="utf-8").count(" = ") == 2
        assert notified == [path]
        assert monitor.state.emissions == 1
        assert monitor.tick() is False

    def test_default_emitter_writes_on_change(self, tmp_path):
        table = FakeSlotTable({0: "Default"})
        monitor = LayerMonitor(table, GeneratorConfig(), root=tmp_path)
        monitor.start()
        table.names[9] = "Post Processing"
        monitor.tick()
        text = (tmp_path / "Assets" / "Scripts" / "Layers.cs").read_text(encoding="utf-8")
        assert "Post_Processing = 9," in text

    def test_unusable_stored_output_path_keeps_loop_alive(self, tmp_path, caplog):
        storage.save(GeneratorConfig(output_path="Assets/\x00bad/L.cs"))
        cfg = storage.safe_load_or_default()
        table = FakeSlotTable({0: "Default"})
        monitor = LayerMonitor(table, cfg, root=tmp_path)
        monitor.start()

        table.names[5] = "Water"
        with caplog.at_level(logging.ERROR, logger="layergen.monitor"):
            assert monitor.tick() is True
        assert monitor.state.failures == 1
        assert monitor.state.emissions == 0
        assert monitor.tick() is False


class TestPollingTicker:
    def test_runs_max_ticks(self):
        events = []
        ticker = PollingTicker(0.5, sleep=lambda s: events.append(("sleep", s)))
        assert ticker.run(lambda: events.append("tick"), max_ticks=3) == 3
        assert events == [("sleep", 0.5), "tick"] * 3

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            PollingTicker(-1)

    def test_interrupt_propagates(self):
        def interrupt(_seconds):
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            PollingTicker(1, sleep=interrupt).run(lambda: None)
