from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from savetrack_core.domain.errors import PlanLoadError
from savetrack_core.domain.models import DashboardSnapshot, Plan, Projection, Timeline
from savetrack_core.domain.yearmonth import add_months, current_year_month, is_valid_year_month
from savetrack_core.io import config as config_io
from savetrack_core.io import plan as plan_io
from savetrack_core.io.state_store import FileStateStore, HttpStateStore
from savetrack_core.services import projector
from savetrack_core.services.dashboard import DashboardSession
from savetrack_core.services.scheduler import Scheduler
from savetrack_core.services.validator import validate_plan
from savetrack_core.services.view_model import format_countdown, scale_amount

app = typer.Typer(help="Stage-based savings tracker: monthly picture, balances and goal projections.")
console = Console()

VARIANT_STYLES = {"good": "green", "warn": "yellow", "bad": "red"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _resolve_config(
    config: Optional[Path],
    plan: Optional[Path],
    state_url: Optional[str],
    state_file: Optional[Path],
) -> config_io.AppConfig:
    cfg = config_io.load_app_config(config)
    overrides = {}
    if plan:
        overrides["plan_path"] = str(plan)
    if state_url:
        overrides["state_url"] = state_url
    if state_file:
        overrides["state_file"] = str(state_file)
    return dataclasses.replace(cfg, **overrides)


def _make_store(cfg: config_io.AppConfig):
    if cfg.state_url:
        return HttpStateStore(cfg.state_url)
    return FileStateStore(cfg.state_file)


def _print_issues(issues: List[str]) -> None:
    body = "\n".join(f"• {issue}" for issue in issues)
    console.print(Panel(body, title="Plan validation errors", border_style="red"))


def _load_plan_or_exit(path: str) -> Plan:
    try:
        raw = plan_io.read_plan(path)
    except PlanLoadError as exc:
        console.print(f"[red]Error loading plan: {exc}[/red]")
        raise typer.Exit(code=2)
    issues = validate_plan(raw)
    if issues:
        _print_issues(issues)
        raise typer.Exit(code=1)
    return plan_io.plan_from_dict(raw)


def _open_session(cfg: config_io.AppConfig) -> DashboardSession:
    plan = _load_plan_or_exit(cfg.plan_path)
    return DashboardSession(
        plan,
        _make_store(cfg),
        annual_rate=cfg.annual_growth_rate,
        max_months=cfg.max_projection_months,
        comfortable_leftover=cfg.comfortable_leftover,
    )


# -------------------------------
# Formatting
# -------------------------------


def _amount(value: Optional[float], mode: str = "monthly") -> str:
    scaled = scale_amount(value, mode)
    if scaled is None:
        return "N/A"
    return f"{scaled:,.0f}".replace(",", " ")


def _bar(pct: float, width: int = 30) -> str:
    filled = int(round(pct / 100 * width))
    return "█" * filled + "░" * (width - filled)


def _projection_line(label: str, projection: Projection, now: dt.datetime) -> str:
    if projection.reached and projection.date:
        return f"{label}: {projection.date:%Y-%m-%d} • {format_countdown(projection.date - now)}"
    if projection.status == "not_reached":
        return f"{label}: Not reached within horizon"
    return f"{label}: Not enough data"


def _timeline_text(timeline: Timeline) -> Text:
    text = Text("Stages: ")
    if timeline.more_before:
        text.append("… ")
    for i, entry in enumerate(timeline.entries):
        if i:
            text.append("  →  ")
        span = entry.stage.start + (f"–{entry.stage.end}" if entry.stage.end else "")
        style = "bold cyan" if entry.active else "dim"
        text.append(f"{entry.stage.name} ({span})", style=style)
    if timeline.more_after:
        text.append(" …")
    return text


def _render_snapshot(
    snapshot: DashboardSnapshot, mode: str, now: dt.datetime, annual_rate: float = projector.DEFAULT_ANNUAL_RATE
) -> Group:
    vm = snapshot.view
    progress = snapshot.progress

    header = Text(f"{snapshot.year_month}  ", style="bold")
    header.append(vm.stage_name, style="cyan")
    if snapshot.warning:
        header.append(f"   [{snapshot.warning}]", style="bold yellow")

    if progress.configured:
        meta = f"LT: {progress.pct_longterm:.1f}%  •  Buf: {progress.pct_buffer:.1f}%"
        if progress.target_year:
            meta += f"  •  {progress.target_year}"
    else:
        meta = "Add goal.target_longterm/target_buffer + current_longterm/current_buffer in the plan"
    goal_lines = [
        meta,
        f"Long-term {_bar(progress.pct_longterm)} {_amount(progress.current_longterm)} / "
        f"{_amount(progress.target_longterm)}",
        f"Buffer    {_bar(progress.pct_buffer)} {_amount(progress.current_buffer)} / "
        f"{_amount(progress.target_buffer)}",
        _projection_line("Buffer", snapshot.buffer, now),
        _projection_line("LT goal", snapshot.longterm, now),
    ]
    goal_panel = Panel("\n".join(goal_lines), title="Goal progress", border_style="yellow")

    cards = Table(title=f"This month ({mode})", show_header=True, header_style="bold")
    cards.add_column("Card")
    cards.add_column("Amount", justify="right")
    cards.add_column("Details")
    cards.add_row(
        "Net income",
        _amount(vm.net_income, mode),
        f"Pre-tax: {_amount(vm.income_pre_tax, mode)} • Tax: {_amount(vm.tax, mode)}",
    )
    cards.add_row(
        "Money out",
        _amount(vm.total_out, mode),
        f"Fixed: {_amount(vm.fixed_costs, mode)} • Household: {_amount(vm.household, mode)} • "
        f"Available before savings: {_amount(vm.available_before_savings, mode)}",
    )
    cards.add_row(
        "Savings",
        _amount(vm.savings_total, mode),
        f"Long-term: {_amount(vm.savings_longterm, mode)} • Buffer: {_amount(vm.savings_buffer, mode)}",
    )
    style = VARIANT_STYLES.get(vm.leftover_variant or "", "")
    cards.add_row(
        "Left in pocket",
        Text(_amount(vm.leftover, mode), style=style),
        "After money out and savings",
    )
    if snapshot.next_stage:
        cards.add_row("Next stage", snapshot.next_stage.name, f"Starts {snapshot.next_stage.start}")

    note = Text(
        f"Assumptions: Long-term grows at {annual_rate * 100:g}% annually (monthly compounding). "
        "Savings apply at month start.",
        style="dim",
    )
    return Group(header, goal_panel, cards, _timeline_text(snapshot.timeline), note)


# -------------------------------
# Commands
# -------------------------------


@app.command()
def validate(
    plan: Path = typer.Option(Path("plan.json"), help="Plan JSON with stages and goal"),
):
    """Check a plan for structural problems."""
    try:
        raw = plan_io.read_plan(plan)
    except PlanLoadError as exc:
        console.print(f"[red]Error loading plan: {exc}[/red]")
        raise typer.Exit(code=2)
    issues = validate_plan(raw)
    if issues:
        _print_issues(issues)
        raise typer.Exit(code=1)
    console.print(f"[green]Plan OK[/green] ({len(raw['stages'])} stages)")


@app.command()
def dashboard(
    plan: Optional[Path] = typer.Option(None, help="Plan JSON (defaults to config plan_path)"),
    config: Optional[Path] = typer.Option(None, help="App config JSON"),
    state_url: Optional[str] = typer.Option(None, help="Base URL of the state server"),
    state_file: Optional[Path] = typer.Option(None, help="Local state file when no server is used"),
    month: Optional[str] = typer.Option(None, help="Show a different month (YYYY-MM)"),
    mode: str = typer.Option("monthly", help="Amounts as monthly|yearly"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Catch up balances and show this month's picture with goal projections."""
    _setup_logging(verbose)
    if month and not is_valid_year_month(month):
        raise typer.BadParameter("month must be YYYY-MM")
    if mode not in ("monthly", "yearly"):
        raise typer.BadParameter("mode must be monthly or yearly")
    cfg = _resolve_config(config, plan, state_url, state_file)
    session = _open_session(cfg)
    session.start()
    now = dt.datetime.now()
    console.print(_render_snapshot(session.snapshot(now, month), mode, now, session.annual_rate))


@app.command()
def rollover(
    plan: Optional[Path] = typer.Option(None, help="Plan JSON (defaults to config plan_path)"),
    config: Optional[Path] = typer.Option(None, help="App config JSON"),
    state_url: Optional[str] = typer.Option(None, help="Base URL of the state server"),
    state_file: Optional[Path] = typer.Option(None, help="Local state file when no server is used"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Apply every elapsed month's deposits and persist the balances."""
    _setup_logging(verbose)
    cfg = _resolve_config(config, plan, state_url, state_file)
    session = _open_session(cfg)
    state = session.start()
    console.print(
        f"Long-term: [bold]{_amount(state.current_longterm)}[/bold] | "
        f"Buffer: [bold]{_amount(state.current_buffer)}[/bold] | "
        f"Applied through: [bold]{state.last_rollover_ym}[/bold]"
    )
    if session.warning:
        console.print(f"[yellow]{session.warning}[/yellow]")


@app.command("init-state")
def init_state(
    plan: Optional[Path] = typer.Option(None, help="Plan JSON (defaults to config plan_path)"),
    config: Optional[Path] = typer.Option(None, help="App config JSON"),
    state_url: Optional[str] = typer.Option(None, help="Base URL of the state server"),
    state_file: Optional[Path] = typer.Option(None, help="Local state file when no server is used"),
    force: bool = typer.Option(False, help="Overwrite existing balances"),
):
    """Seed stored balances from the plan's goal."""
    cfg = _resolve_config(config, plan, state_url, state_file)
    session = _open_session(cfg)
    if session.store.load() is not None and not force:
        console.print("[yellow]State already exists; pass --force to reseed.[/yellow]")
        raise typer.Exit(code=1)
    state = session.reseed()
    if session.warning:
        console.print(f"[yellow]{session.warning}[/yellow]")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(state.to_payload(), indent=2))


@app.command()
def project(
    plan: Optional[Path] = typer.Option(None, help="Plan JSON (defaults to config plan_path)"),
    config: Optional[Path] = typer.Option(None, help="App config JSON"),
    state_url: Optional[str] = typer.Option(None, help="Base URL of the state server"),
    state_file: Optional[Path] = typer.Option(None, help="Local state file when no server is used"),
    schedule: int = typer.Option(0, help="Also print the first N simulated months"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Project when the long-term and buffer goals are reached."""
    _setup_logging(verbose)
    cfg = _resolve_config(config, plan, state_url, state_file)
    session = _open_session(cfg)
    session.start()
    now = dt.datetime.now()
    snapshot = session.snapshot(now)
    console.print(_projection_line("LT goal", snapshot.longterm, now))
    console.print(_projection_line("Buffer", snapshot.buffer, now))

    if schedule > 0:
        frame = projector.simulate_balances(
            session.plan.stages,
            session.state,
            add_months(current_year_month(now), 1),
            schedule,
            cfg.annual_growth_rate,
        )
        table = Table(title=f"Next {schedule} months")
        for col in ("month", "stage", "deposit_longterm", "deposit_buffer", "longterm", "buffer"):
            table.add_column(col, justify="left" if col in ("month", "stage") else "right")
        for row in frame.itertuples(index=False):
            table.add_row(
                row.month,
                str(row.stage),
                _amount(None if pd.isna(row.deposit_longterm) else row.deposit_longterm),
                _amount(None if pd.isna(row.deposit_buffer) else row.deposit_buffer),
                _amount(row.longterm),
                _amount(row.buffer),
            )
        console.print(table)


@app.command()
def watch(
    plan: Optional[Path] = typer.Option(None, help="Plan JSON (defaults to config plan_path)"),
    config: Optional[Path] = typer.Option(None, help="App config JSON"),
    state_url: Optional[str] = typer.Option(None, help="Base URL of the state server"),
    state_file: Optional[Path] = typer.Option(None, help="Local state file when no server is used"),
    mode: str = typer.Option("monthly", help="Amounts as monthly|yearly"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Live dashboard: countdowns tick every second, balances are rolled forward
    once a minute and the view is rebuilt only when they moved.
    """
    _setup_logging(verbose)
    cfg = _resolve_config(config, plan, state_url, state_file)
    session = _open_session(cfg)
    session.start()
    current = {"snapshot": session.snapshot()}
    scheduler = Scheduler()

    initial = _render_snapshot(current["snapshot"], mode, dt.datetime.now(), session.annual_rate)
    with Live(initial, console=console) as live:

        def refresh_countdown():
            live.update(_render_snapshot(current["snapshot"], mode, dt.datetime.now(), session.annual_rate))

        def catch_up():
            if session.catch_up():
                current["snapshot"] = session.snapshot()
                refresh_countdown()

        scheduler.every(cfg.countdown_interval_seconds, refresh_countdown, name="countdown")
        scheduler.every(cfg.rollover_interval_seconds, catch_up, name="rollover")
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            scheduler.cancel_all()


if __name__ == "__main__":
    app()
