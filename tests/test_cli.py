"""Tests for the layergen command line."""

import argparse

import pytest

from layergen import storage
from layergen.cli import build_parser, main
from layergen.config import GeneratorConfig


class TestParser:
    def test_build_parser_returns_parser(self):
        assert isinstance(build_parser(), argparse.ArgumentParser)

    def test_no_args_prints_help(self, capsys):
        assert main([]) == 0
        assert "layergen" in capsys.readouterr().out

    @pytest.mark.parametrize("cmd", ["generate", "watch", "settings", "show-config", "save-config"])
    def test_help(self, cmd):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args([cmd, "--help"])
        assert excinfo.value.code == 0

    def test_watch_defaults(self):
        args = build_parser().parse_args(["watch"])
        assert args.interval == 1.0
        assert args.generate_on_start is False
        assert args.max_ticks is None


class TestGenerate:
    def test_writes_enum(self, unity_project, capsys):
        assert main(["generate", "--project", str(unity_project)]) == 0
        text = (unity_project / "Assets" / "Scripts" / "Layers.cs").read_text(encoding="utf-8")
        assert "        Ignore_Raycast = 2,\n" in text
        assert "        Water = 4,\n" in text
        assert "Layers enum generated" in capsys.readouterr().out

    def test_overrides(self, unity_project):
        rc = main([
            "generate", "--project", str(unity_project),
            "--output", "Gen/GameLayers.cs", "--namespace", "Game.Core", "--enum", "GameLayers",
        ])
        assert rc == 0
        text = (unity_project / "Gen" / "GameLayers.cs").read_text(encoding="utf-8")
        assert "namespace Game.Core\n" in text
        assert "public enum GameLayers\n" in text

    def test_invalid_enum_override_writes_nothing(self, unity_project, capsys):
        assert main(["generate", "--project", str(unity_project), "--enum", "Game Layers"]) == 1
        assert "enum name" in capsys.readouterr().err
        assert not (unity_project / "Assets" / "Scripts" / "Layers.cs").exists()

    def test_invalid_namespace_override(self, unity_project, capsys):
        assert main(["generate", "--project", str(unity_project), "--namespace", "Game..Core"]) == 1
        assert "namespace name" in capsys.readouterr().err

    def test_missing_tag_manager(self, tmp_path, capsys):
        assert main(["generate", "--project", str(tmp_path)]) == 1
        assert "failed" in capsys.readouterr().err

    def test_no_project_found(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main(["generate"]) == 1
        assert "No Unity project" in capsys.readouterr().err


class TestWatch:
    def test_generate_on_start_then_stops(self, unity_project, capsys):
        rc = main([
            "watch", "--project", str(unity_project),
            "--interval", "0", "--max-ticks", "2", "--generate-on-start",
        ])
        assert rc == 0
        assert (unity_project / "Assets" / "Scripts" / "Layers.cs").exists()
        assert "Emissions: 1" in capsys.readouterr().out

    def test_invalid_override_does_not_watch(self, unity_project, capsys):
        rc = main([
            "watch", "--project", str(unity_project),
            "--interval", "0", "--max-ticks", "1", "--enum", "1Layers",
        ])
        assert rc == 1
        captured = capsys.readouterr()
        assert "enum name" in captured.err
        assert "Emissions" not in captured.out


class TestConfigCommands:
    def test_save_and_show(self, capsys):
        assert main(["save-config", "--enum", "GameLayers"]) == 0
        assert storage.load() == GeneratorConfig(enum_name="GameLayers")
        assert main(["show-config"]) == 0
        assert "GameLayers" in capsys.readouterr().out

    def test_save_rejects_invalid(self, capsys):
        assert main(["save-config", "--enum", "Game Layers"]) == 1
        assert "enum name" in capsys.readouterr().err
