#!/usr/bin/env python3
"""Command-line interface entry points for mpd-trigger."""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from .capture_replay import EventCapture, EventReplay
from .config import AppConfig
from .config_loader import load_config
from .executor import CommandExecutor
from .expression import RenderOverflowError
from .fact_dictionary import PLAYBACK_FACT_NAMES, FactSnapshot
from .log_setup import configure_logging
from .module_registry import module_registry
from .mpd_monitor import MPDMonitor
from .renderer import TemplateRenderer
from .trigger import CommandTrigger

log = logging.getLogger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpd-trigger",
        description="Run a templated shell command whenever the MPD player changes",
        epilog="Template facts: " + ", ".join(PLAYBACK_FACT_NAMES),
    )
    parser.add_argument("--config", help="YAML configuration file (default: mpd-trigger.yaml)")
    parser.add_argument("--host", help="MPD host (default: localhost)")
    parser.add_argument("--port", type=int, help="MPD port (default: 6600)")
    parser.add_argument("--command", help="Command template to render on every player event")
    parser.add_argument("--shell", help="Interpreter the rendered command is piped into (default: bash)")
    parser.add_argument("--dry-run", action="store_true", help="Log rendered commands without running them")

    render_group = parser.add_argument_group("one-off rendering")
    render_group.add_argument("--render", action="store_true", help="Render the template once and print it")
    render_group.add_argument(
        "--fact",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Fact value used with --render (repeatable)",
    )

    capture_group = parser.add_argument_group("capture/replay")
    capture_group.add_argument("--capture", metavar="FILE", help="Record fact snapshots to FILE (JSON Lines)")
    capture_group.add_argument("--replay", metavar="FILE", help="Replay fact snapshots from FILE instead of MPD")
    capture_group.add_argument("--fast-forward", action="store_true", help="Skip long gaps during replay")

    debug_group = parser.add_argument_group("debug output")
    debug_group.add_argument("--no-debug", action="store_true", help="Hide all debug messages")
    for flag, name in sorted(module_registry.get_debug_flags().items()):
        info = module_registry.get_module_info(name)
        debug_group.add_argument(
            flag, dest=f"debug_{name}", action="store_true", help=f"Show debug messages for: {info['description']}"
        )
    return parser


def parse_facts(pairs: List[str]) -> dict:
    """Parse NAME=VALUE pairs; a pair without '=' registers an empty value."""
    facts = {}
    for pair in pairs:
        name, _, value = pair.partition("=")
        facts[name] = value
    return facts


def resolve_config(args: argparse.Namespace) -> AppConfig:
    """Load file and environment config, then apply command-line overrides."""
    config = load_config(args.config)
    if args.host:
        config.mpd.host = args.host
    if args.port:
        config.mpd.port = args.port
    if args.command:
        config.trigger.command = args.command
    if args.shell:
        config.trigger.shell = args.shell
    if args.dry_run:
        config.trigger.dry_run = True
    return config


def debug_subsystems_from_args(args: argparse.Namespace) -> Optional[set]:
    """None shows every debug message, an empty set hides them all."""
    if args.no_debug:
        return set()
    selected = [name for name in module_registry.get_all_modules() if getattr(args, f"debug_{name}", False)]
    if not selected:
        return None
    return module_registry.logger_names_for(selected)


def create_trigger(config: AppConfig, capture: Optional[EventCapture] = None) -> CommandTrigger:
    renderer = TemplateRenderer(
        max_output_length=config.trigger.max_output_length,
        max_expression_length=config.trigger.max_expression_length,
    )
    executor = CommandExecutor(
        shell=config.trigger.shell,
        timeout=config.trigger.command_timeout,
        dry_run=config.trigger.dry_run,
    )
    return CommandTrigger(config.trigger.command, renderer=renderer, executor=executor, capture=capture)


def render_once(config: AppConfig, facts: dict) -> int:
    renderer = TemplateRenderer(
        max_output_length=config.trigger.max_output_length,
        max_expression_length=config.trigger.max_expression_length,
    )
    try:
        print(renderer.render(config.trigger.command, FactSnapshot(facts)))
    except RenderOverflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def replay(config: AppConfig, replay_file: str, fast_forward: bool) -> int:
    trigger = create_trigger(config)
    try:
        player = EventReplay(replay_file, fast_forward_gaps=fast_forward)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    def on_event(event_type: str, description: str, timestamp: float) -> None:
        log.info("Replay event at %.2fs: %s - %s", timestamp, event_type, description)

    player.replay(trigger.apply_facts, on_event)
    return 0 if trigger.render_failures == 0 else 1


def run_monitor(config: AppConfig, capture_file: Optional[str]) -> int:
    capture = EventCapture(capture_file) if capture_file else None
    trigger = create_trigger(config, capture)
    monitor = MPDMonitor(trigger.handle_player_event, config=config.mpd, capture=capture)

    def signal_handler(signum, frame):
        del frame  # Signal API requires this parameter
        log.info("Received signal %d, shutting down...", signum)
        monitor.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    monitor.start()
    try:
        while not monitor.wait(1.0):
            pass
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    finally:
        monitor.stop()
    return 1 if monitor.error else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the mpd-trigger command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.capture and args.replay:
        parser.error("cannot specify both --capture and --replay")
    if args.fast_forward and not args.replay:
        parser.error("--fast-forward can only be used with --replay")

    config = resolve_config(args)
    log_level = "DEBUG" if config.debug else config.log_level
    configure_logging(log_level, debug_subsystems_from_args(args))

    if args.render:
        return render_once(config, parse_facts(args.fact))
    if args.replay:
        return replay(config, args.replay, args.fast_forward)
    return run_monitor(config, args.capture)


def mcp_main():
    """Entry point for mpd-trigger-mcp command."""
    import asyncio

    from .mcp_server import serve_mcp

    return asyncio.run(serve_mcp())


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "mcp":
        mcp_main()
    else:
        sys.exit(main())
