"""Shared test fixtures for the layer enum generator."""

from pathlib import Path

import pytest

from layergen import storage
from layergen.config import SLOT_COUNT
from mvc import app

TAG_MANAGER_TEMPLATE = """%YAML 1.1
%TAG !u! tag:unity3d.com,2011:
--- !u!78 &1
TagManager:
  serializedVersion: 2
  tags:
  - Enemy
  layers:
{layers}
  m_SortingLayers:
  - name: Default
    uniqueID: 0
    locked: 0
"""


def tag_manager_text(named_slots: dict) -> str:
    """Render a TagManager.asset the way Unity writes it."""
    lines = []
    for index in range(SLOT_COUNT):
        name = named_slots.get(index)
        lines.append(f"  - {name}" if name else "  - ")
    return TAG_MANAGER_TEMPLATE.format(layers="\n".join(lines))


class FakeSlotTable:
    """In-memory stand-in for the host's layer table."""

    def __init__(self, named_slots=None):
        self.names = dict(named_slots or {})
        self.reads = 0

    def get_slot_name(self, index):
        self.reads += 1
        return self.names.get(index, "")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep preferences and log files out of the real home directory."""
    home = tmp_path / "home"
    monkeypatch.setattr(storage, "_config_path", lambda: home / ".layergen" / "config.json")
    monkeypatch.setattr(app, "LOG_DIR", home / ".layergen")
    monkeypatch.setattr(app, "LOG_FILE", home / ".layergen" / "layergen.log")
    return home


@pytest.fixture
def unity_project(tmp_path) -> Path:
    """A minimal Unity project with Default, TransparentFX and Water layers."""
    root = tmp_path / "project"
    (root / "Assets").mkdir(parents=True)
    (root / "ProjectSettings").mkdir()
    (root / "ProjectSettings" / "TagManager.asset").write_text(
        tag_manager_text({0: "Default", 1: "TransparentFX", 2: "Ignore Raycast", 4: "Water"}),
        encoding="utf-8",
    )
    return root
