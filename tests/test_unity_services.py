"""Tests for reading layer names out of a Unity project."""

import logging
import os

import pytest

from conftest import tag_manager_text
from layergen.config import SLOT_COUNT
from layergen.snapshot import SlotSourceError, read_snapshot
from layergen.unity_services import (
    TagManagerSource,
    find_project_root,
    is_unity_project,
    notify_artifact_written,
    parse_layer_names,
)

LEGACY_TAG_MANAGER = """%YAML 1.1
%TAG !u! tag:unity3d.com,2011:
--- !u!78 &1
TagManager:
  Builtin Layer 0: Default
  Builtin Layer 1: TransparentFX
  Builtin Layer 2: Ignore Raycast
  Builtin Layer 3:
  User Layer 8: Water
  User Layer 31:
"""


class TestParseLayerNames:
    def test_modern_layout(self):
        names = parse_layer_names(tag_manager_text({0: "Default", 4: "Water", 31: "Top"}))
        assert len(names) == SLOT_COUNT
        assert names[0] == "Default"
        assert names[4] == "Water"
        assert names[31] == "Top"
        assert names[1] is None

    def test_legacy_layout(self):
        names = parse_layer_names(LEGACY_TAG_MANAGER)
        assert names[0] == "Default"
        assert names[2] == "Ignore Raycast"
        assert names[3] is None
        assert names[8] == "Water"
        assert names[31] is None

    def test_scalars_stay_strings(self):
        names = parse_layer_names(tag_manager_text({8: "true", 9: "123", 10: "null"}))
        assert names[8:11] == ["true", "123", "null"]

    def test_short_list_is_padded(self):
        names = parse_layer_names("TagManager:\n  layers:\n  - Default\n  - UI\n")
        assert names[:3] == ["Default", "UI", None]
        assert len(names) == SLOT_COUNT

    def test_invalid_yaml(self):
        with pytest.raises(SlotSourceError):
            parse_layer_names("TagManager: [unclosed")

    def test_missing_section(self):
        with pytest.raises(SlotSourceError):
            parse_layer_names("Other: {}\n")


class TestTagManagerSource:
    def test_reads_project(self, unity_project):
        snap = read_snapshot(TagManagerSource(unity_project))
        assert dict(snap.named_slots()) == {
            0: "Default",
            1: "TransparentFX",
            2: "Ignore Raycast",
            4: "Water",
        }

    def test_picks_up_file_changes(self, unity_project):
        source = TagManagerSource(unity_project)
        assert source.get_slot_name(5) is None

        asset = unity_project / "ProjectSettings" / "TagManager.asset"
        asset.write_text(tag_manager_text({0: "Default", 5: "UI Overlay"}), encoding="utf-8")
        st = asset.stat()
        os.utime(asset, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))

        assert source.get_slot_name(5) == "UI Overlay"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SlotSourceError):
            TagManagerSource(tmp_path).get_slot_name(0)

    def test_index_out_of_range(self, unity_project):
        with pytest.raises(IndexError):
            TagManagerSource(unity_project).get_slot_name(SLOT_COUNT)


class TestProjectDiscovery:
    def test_is_unity_project(self, unity_project, tmp_path):
        assert is_unity_project(unity_project)
        assert not is_unity_project(tmp_path)

    def test_find_from_subdirectory(self, unity_project):
        nested = unity_project / "Assets" / "Scripts"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == unity_project.resolve()

    def test_find_returns_none_outside_project(self, tmp_path):
        assert find_project_root(tmp_path) is None


def test_notify_logs(tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger="layergen.unity_services"):
        notify_artifact_written(tmp_path / "Layers.cs")
    assert "Layers.cs" in caplog.text
