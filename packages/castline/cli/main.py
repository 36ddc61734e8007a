"""Command-line interface for Castline.

Subcommands work on snapshot tokens, the same opaque strings the web
editor puts in its ``?s=`` share links.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from castline.core.config.loader import configure_logging, load_app_config
from castline.core.config.models import AppConfig, LoggingConfig
from castline.core.timeline.editing import place_skill, set_event_target
from castline.core.timeline.engine import EffectResolutionEngine
from castline.core.timeline.models import ResolutionResult, TimelineState
from castline.core.timeline.presets import default_state
from castline.core.timeline.snapshot import encode_snapshot, load_snapshot
from castline.core.timeline.vocabulary import SkillKind, Stat, TargetMode

console = Console()
logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_demo_state(config: AppConfig) -> TimelineState:
    """Default roster with a few overlapping casts."""
    fallback = config.timeline.default_cast_duration_s
    state = default_state(config)
    state = place_skill(
        state, "s.student_a", SkillKind.INSTANT, "ex_student_a_1", 2.0, "evt_a1", fallback
    )
    state = place_skill(
        state, "s.student_b", SkillKind.INSTANT, "ex_student_b_1", 5.0, "evt_b1", fallback
    )
    state = place_skill(
        state, "s.student_a", SkillKind.PERSISTENT, "ns_student_a", 0.0, "evt_a_ns", fallback
    )
    return set_event_target(state, "evt_b1", TargetMode.ALL)


def _load_state(token: str, config: AppConfig) -> TimelineState | None:
    result = load_snapshot(token, config=config)
    if not result.ok:
        console.print(f"[red]ERROR: could not load snapshot: {result.error}[/red]")
        return None
    return result.state


def cmd_demo(args: argparse.Namespace, config: AppConfig) -> int:
    """Print a snapshot token for the demo timeline."""
    state = build_demo_state(config)
    console.print(encode_snapshot(state), soft_wrap=True)
    return 0


def cmd_inspect(args: argparse.Namespace, config: AppConfig) -> int:
    """Print one actor's stats at a point in time."""
    state = _load_state(args.snapshot, config)
    if state is None:
        return 1

    target = state.get_actor(args.target)
    if target is None:
        console.print(f"[red]ERROR: unknown target '{args.target}'[/red]")
        return 1

    snapshot = EffectResolutionEngine().inspect(state, target.id, args.time)

    stats = Table(title=f"{target.name or target.id} @ {args.time:g}s")
    stats.add_column("Stat")
    stats.add_column("Base", justify="right")
    stats.add_column("Modifier", justify="right")
    stats.add_column("Computed", justify="right")
    for stat in Stat:
        stats.add_row(
            stat.value,
            f"{target.stats.get(stat):g}",
            f"{snapshot.totals[stat]:+.2%}",
            f"{snapshot.computed[stat]:.1f}",
        )
    console.print(stats)

    applied = {i.id for i in snapshot.applied}
    active = Table(title="Active effects")
    active.add_column("Instance")
    active.add_column("Kind")
    active.add_column("Stat")
    active.add_column("Group")
    active.add_column("Value", justify="right")
    active.add_column("Window")
    active.add_column("Applied")
    for instance in snapshot.active:
        active.add_row(
            instance.id,
            instance.kind.value,
            instance.stat.value,
            instance.stack_group,
            f"{instance.magnitude:g}",
            f"{instance.start:g}-{instance.end:g}s",
            "yes" if instance.id in applied else "no",
        )
    console.print(active)
    return 0


def cmd_lanes(args: argparse.Namespace, config: AppConfig) -> int:
    """Print resolved instances per target with their display lanes."""
    state = _load_state(args.snapshot, config)
    if state is None:
        return 1

    result: ResolutionResult = EffectResolutionEngine().resolve(state)
    for target in state.all_targets:
        assignment = result.lanes[target.id]
        table = Table(title=f"{target.name or target.id} ({assignment.lane_count} lanes)")
        table.add_column("Lane", justify="right")
        table.add_column("Instance")
        table.add_column("Window")
        for instance in result.instances_for_target(target.id):
            table.add_row(
                str(assignment.lanes[instance.id]),
                instance.id,
                f"{instance.start:g}-{instance.end:g}s",
            )
        console.print(table)

    for diagnostic in result.warnings:
        console.print(f"[yellow]WARNING: {diagnostic.message}[/yellow]")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    p = argparse.ArgumentParser(
        prog="castline",
        description="Castline - skill-cast timeline resolution",
    )
    p.add_argument("--config", type=Path, default=None, help="Path to app config (.yaml/.json)")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=_LOG_LEVELS,
        default=None,
        help="Override configured log level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("demo", help="Print a demo snapshot token")

    inspect = sub.add_parser("inspect", help="Show an actor's stats at a point in time")
    inspect.add_argument("--snapshot", required=True, help="Snapshot token")
    inspect.add_argument("--target", required=True, help="Actor id (or 'enemy')")
    inspect.add_argument("--time", type=float, required=True, help="Query time in seconds")

    lanes = sub.add_parser("lanes", help="Show resolved effects and display lanes")
    lanes.add_argument("--snapshot", required=True, help="Snapshot token")

    return p


_COMMANDS = {
    "demo": cmd_demo,
    "inspect": cmd_inspect,
    "lanes": cmd_lanes,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args(argv)

    config = load_app_config(args.config)
    if args.log_level:
        logging_config = LoggingConfig.model_validate(
            {**config.logging.model_dump(), "level": args.log_level}
        )
        config = config.model_copy(update={"logging": logging_config})
    configure_logging(config)

    return _COMMANDS[args.cmd](args, config)


if __name__ == "__main__":
    sys.exit(main())
