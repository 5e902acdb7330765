#!/usr/bin/env python3
"""Standings inspector - run the standings engine on a snapshot file.

Debugging harness for organizers and developers: loads a snapshot exported from
the judging store, computes standings, and prints them.

Usage:
    standings snapshot.json                      # Overall + every round
    standings snapshot.yaml --round final        # One round only
    standings snapshot.json --json out.json      # Also write the standings
    standings snapshot.json --audit              # Show coerced/clamped values
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from scoreboard.config import get_log_level
from scoreboard.schemas.standings import CompetitionStandings, GenderBuckets, StandingEntry
from scoreboard.scorers.competition import compute_competition_standings, summarize_round_progression
from scoreboard.utils.logger import configure_global_logging, log_duration
from scoreboard.utils.scoring_audit import StandingsAuditLog
from scoreboard.utils.snapshot_loader import SnapshotLoadError, load_snapshot

console = Console()
logger = logging.getLogger(__name__)


def _contestant_label(entry: StandingEntry) -> str:
    contestant = entry.contestant
    return contestant.name or f"Contestant {contestant.id}"


def build_gender_table(title: str, by_gender: GenderBuckets) -> Table:
    """One table per ranking, grouped by gender."""
    table = Table(title=title)
    table.add_column("Gender", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Overall", justify="right")
    table.add_column("No.", justify="right")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Completion", justify="right")

    for gender, entries in by_gender.items():
        for entry in entries:
            name = _contestant_label(entry)
            if entry.is_highlighted:
                name = f"[bold green]{name}[/bold green]"
            table.add_row(
                gender.value,
                str(entry.gender_rank or ""),
                str(entry.overall_rank),
                str(entry.contestant.number) if entry.contestant.number is not None else "",
                name,
                f"{entry.total_weighted_score:.2f}",
                f"{entry.completion_rate}%",
            )
    return table


def display_standings(
    standings: CompetitionStandings,
    round_id: Optional[str] = None,
    audit_log: Optional[StandingsAuditLog] = None,
) -> None:
    """Display standings in a nice format."""
    console.print()

    progression = summarize_round_progression(standings.rounds)
    summary_lines = [
        f"Ranked contestants: {len(standings.overall.rankings)}",
        f"Overall judge count: {standings.overall.judge_count}",
        f"Rounds: {len(standings.rounds)}",
    ]
    for step in progression:
        summary_lines.append(
            f"  {step.name or step.round_id}: "
            f"{step.male_count} male / {step.female_count} female / {step.other_count} other"
        )
    if audit_log is not None:
        summary_lines.append(f"Audit entries: {len(audit_log)}")
    console.print(Panel("\n".join(summary_lines), title="Standings Summary", border_style="blue"))

    if round_id is None:
        console.print(build_gender_table("Overall", standings.overall.by_gender))

    for result in standings.rounds:
        if round_id is not None and result.round.id != round_id:
            continue
        title = f"Round {result.round.name or result.round.id} (judges: {result.judge_count})"
        if not result.rankings:
            console.print(f"[yellow]{title}: no scored contestants[/yellow]")
            continue
        console.print(build_gender_table(title, result.by_gender))

    if audit_log is not None and len(audit_log):
        console.print()
        console.print("[bold]Audit[/bold]")
        for entry in audit_log.entries:
            console.print(f"  [yellow]{entry.kind.value.upper()}[/yellow] {escape(entry.message)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute and display competition standings from a snapshot")
    parser.add_argument("snapshot", help="Snapshot file (JSON or YAML)")
    parser.add_argument("--round", dest="round_id", type=str, help="Only show this round id")
    parser.add_argument("--json", dest="json_out", type=str, help="Write standings JSON to this path")
    parser.add_argument("--audit", action="store_true", help="Show coerced and clamped values")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_global_logging(args.log_level or get_log_level(), phase="standings")

    try:
        snapshot = load_snapshot(args.snapshot)
    except SnapshotLoadError as e:
        logger.error(str(e))
        console.print(f"[red]{e}[/red]")
        return 1

    audit_log = StandingsAuditLog()
    with log_duration(logger, "standings computation", contestants=len(snapshot.contestants)):
        standings = compute_competition_standings(snapshot, audit_log=audit_log)

    display_standings(standings, round_id=args.round_id, audit_log=audit_log if args.audit else None)

    if args.json_out:
        out_path = Path(args.json_out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(standings.to_json(indent=2))
        console.print(f"Standings written to {out_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
