"""Command line entry points for the layer enum generator.

Usage:
    layergen generate [--project P] [--output PATH] [--namespace NS] [--enum NAME]
    layergen watch [--project P] [--interval S] [--generate-on-start] [--max-ticks N]
    layergen settings [--project P]
    layergen show-config
    layergen save-config [--output PATH] [--namespace NS] [--enum NAME]

``generate`` and ``settings`` mirror the editor's Tools menu entries;
``watch`` runs the change monitor headless until interrupted.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from layergen import defaults, storage, unity_services
from layergen.config import GeneratorConfig
from layergen.emitter import EmitError
from layergen.monitor import LayerMonitor, PollingTicker
from layergen.snapshot import SlotSourceError


logger = logging.getLogger(__name__)


def _add_override_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output", help="Output path (relative to the project root)")
    parser.add_argument("--namespace", help="Namespace wrapping the enum")
    parser.add_argument("--enum", dest="enum_name", help="Name of the enum type")


def _add_project_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project",
        help="Unity project root (default: nearest project above the current directory)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layergen",
        description="Generate a C# enum from a Unity project's layer names",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="Write the layers enum once")
    _add_project_arg(gen)
    _add_override_args(gen)

    watch = sub.add_parser("watch", help="Regenerate whenever layer names change")
    _add_project_arg(watch)
    _add_override_args(watch)
    watch.add_argument(
        "--interval",
        type=float,
        default=defaults.DEFAULT_POLL_INTERVAL,
        help="Seconds between polls",
    )
    watch.add_argument(
        "--generate-on-start",
        action="store_true",
        help="Write the enum once before watching",
    )
    watch.add_argument("--max-ticks", type=int, help="Stop after N polls")

    settings = sub.add_parser("settings", help="Open the settings window")
    _add_project_arg(settings)

    sub.add_parser("show-config", help="Print the stored settings")

    save = sub.add_parser("save-config", help="Validate and store settings")
    _add_override_args(save)

    return parser


def _configure_console_logging(verbose: bool) -> None:
    from mvc import app

    app.ensure_logging()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    if verbose:
        logging.getLogger("layergen").setLevel(logging.DEBUG)


def _resolve_project(args: argparse.Namespace) -> Optional[Path]:
    if getattr(args, "project", None):
        return Path(args.project).expanduser().resolve()
    return unity_services.find_project_root()


def _effective_config(args: argparse.Namespace) -> GeneratorConfig:
    cfg = storage.safe_load_or_default()
    return cfg.with_changes(
        output_path=getattr(args, "output", None),
        namespace_name=getattr(args, "namespace", None),
        enum_name=getattr(args, "enum_name", None),
    )


def _validated_config(args: argparse.Namespace) -> Optional[GeneratorConfig]:
    """Return the effective settings, or None after reporting an invalid field."""
    from mvc.model import SettingsModel

    model = SettingsModel()
    model.replace_all(_effective_config(args))
    ok, error = model.validate()
    if not ok:
        print(f"Invalid {error.replace('_', ' ')}.", file=sys.stderr)
        return None
    return model.mark_saved()


def _build_monitor(args: argparse.Namespace) -> Optional[LayerMonitor]:
    project = _resolve_project(args)
    if project is None:
        print("No Unity project found; pass --project.", file=sys.stderr)
        return None
    cfg = _validated_config(args)
    if cfg is None:
        return None
    return LayerMonitor(
        unity_services.TagManagerSource(project),
        cfg,
        root=project,
        notify=unity_services.notify_artifact_written,
    )


def cmd_generate(args: argparse.Namespace) -> int:
    monitor = _build_monitor(args)
    if monitor is None:
        return 1
    try:
        path = monitor.generate_now()
    except (EmitError, SlotSourceError) as e:
        print(f"Layers enum generation failed: {e}", file=sys.stderr)
        return 1
    print(f"Layers enum generated: {path}")
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    monitor = _build_monitor(args)
    if monitor is None:
        return 1

    monitor.start()
    if args.generate_on_start:
        try:
            monitor.generate_now()
        except (EmitError, SlotSourceError) as e:
            logger.error("Initial generation failed: %s", e)

    logger.info("Watching %s for layer changes (every %ss)", monitor.source.path, args.interval)
    try:
        PollingTicker(args.interval).run(monitor.tick, max_ticks=args.max_ticks)
    except KeyboardInterrupt:
        logger.info("Layer watcher stopped by user.")
    state = monitor.state
    print(f"Emissions: {state.emissions}  Failures: {state.failures}")
    return 0


def cmd_settings(args: argparse.Namespace) -> int:
    project = _resolve_project(args)
    if project is None:
        print("No Unity project found; pass --project.", file=sys.stderr)
        return 1
    from mvc import app

    return app.run(project)


def cmd_show_config(args: argparse.Namespace) -> int:
    cfg = storage.safe_load_or_default()
    print(f"Output Path:    {cfg.output_path}")
    print(f"Namespace Name: {cfg.namespace_name}")
    print(f"Enum Name:      {cfg.enum_name}")
    return 0


def cmd_save_config(args: argparse.Namespace) -> int:
    cfg = _validated_config(args)
    if cfg is None:
        return 1
    path = storage.save(cfg)
    print(f"Settings saved to {path}")
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "watch": cmd_watch,
    "settings": cmd_settings,
    "show-config": cmd_show_config,
    "save-config": cmd_save_config,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_console_logging(args.verbose)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
