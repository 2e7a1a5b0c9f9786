"""Agenda CLI - task prioritization and meeting scheduling."""

import json
import logging
import sys

import click

from .config import load_config
from .core.errors import AgendaError
from .core.prioritization import ScoringCriteria
from .core.scheduling import SchedulingPreferences
from .core.tasks import suggest_priority_adjustments
from .scheduler import JobScheduler, register_default_jobs
from .workflows import (
    build_services,
    check_availability,
    day_conflicts,
    find_meeting_times,
    generate_daily_briefing,
    now_in,
    prioritize,
    run_proactive_checks,
)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_weights(values: tuple[str, ...]) -> dict[str, float]:
    weights = {}
    for value in values:
        key, sep, number = value.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected KEY=VALUE, got {value!r}", param_hint="--weight")
        try:
            weights[key.strip()] = float(number)
        except ValueError:
            raise click.BadParameter(f"Weight must be a number, got {number!r}", param_hint="--weight")
    return weights


@click.group()
@click.version_option(package_name="agenda")
def main():
    """Agenda - task prioritization and meeting scheduling assistant."""
    pass


@main.command("prioritize")
@click.option("--id", "ids", multiple=True, help="Only rank these task ids")
@click.option("--weight", "weights", multiple=True, help="Factor weight, e.g. due_date=2")
@click.option("--active-only", is_flag=True, help="Skip completed and cancelled tasks")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def prioritize_cmd(ids: tuple[str, ...], weights: tuple[str, ...], active_only: bool, as_json: bool):
    """Rank tasks by weighted urgency."""
    config = load_config()
    services = build_services(config)
    try:
        criteria = ScoringCriteria.from_mapping(_parse_weights(weights), base=config.criteria)
        result = prioritize(
            services,
            config,
            now_in(config),
            subset_ids=ids or None,
            criteria=criteria,
            exclude_inactive=active_only,
        )
    except AgendaError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "prioritizedTasks": [
                        {
                            "task": r.task.to_dict(),
                            "score": r.score,
                            "band": r.band,
                            "recommendation": r.recommendation,
                            "factors": r.factors.as_dict(),
                        }
                        for r in result.prioritized_tasks
                    ],
                    "summary": vars(result.summary),
                    "recommendations": result.recommendations,
                },
                indent=2,
            )
        )
        return

    if not result.prioritized_tasks:
        click.echo("No tasks to prioritize.")
        return

    for r in result.prioritized_tasks:
        click.echo(f"{r.score:6.2f}  {r.task.title}  [{r.task.priority.value}/{r.task.status.value}]  {r.recommendation}")
    s = result.summary
    click.echo()
    click.echo(f"{s.total} tasks: {s.critical} critical, {s.high} high, {s.medium} medium, {s.low} low")
    for rec in result.recommendations:
        click.echo(f"• {rec}")


@main.command()
def adjust():
    """Suggest priority changes for tasks with pressing deadlines."""
    config = load_config()
    services = build_services(config)
    try:
        tasks = services.tasks.fetch_all()
    except AgendaError as e:
        _fail(e)

    suggestions = suggest_priority_adjustments(tasks, now_in(config))
    if not suggestions:
        click.echo("Declared priorities look right.")
        return
    for s in suggestions:
        click.echo(f"{s.task.title}: {s.current.value} -> {s.suggested.value} ({s.reason})")


@main.command()
@click.option("--date", "target", type=click.DateTime(formats=["%Y-%m-%d"]), help="Day to check (default: today)")
@click.option("--duration", type=int, help="Slot length in minutes")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def availability(target, duration: int | None, as_json: bool):
    """List free slots for a day."""
    config = load_config()
    services = build_services(config)
    day = target.date() if target else now_in(config).date()
    try:
        slots = check_availability(services, config, day, duration)
    except AgendaError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([{"start": s.start.isoformat(), "end": s.end.isoformat()} for s in slots], indent=2))
        return

    if not slots:
        click.echo(f"No available slots on {day.isoformat()}.")
        return
    click.echo(f"### {day.strftime('%A, %B %d')}")
    for slot in slots:
        click.echo(f"  {slot.format()}")


@main.command()
@click.option("--date", "target", type=click.DateTime(formats=["%Y-%m-%d"]), help="Day to check (default: today)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def conflicts(target, as_json: bool):
    """Show overlapping events for a day."""
    config = load_config()
    services = build_services(config)
    day = target.date() if target else now_in(config).date()
    try:
        found = day_conflicts(services, day)
    except AgendaError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "first": {"title": c.first.title, "start": c.first.start.isoformat(), "end": c.first.end.isoformat()},
                        "second": {"title": c.second.title, "start": c.second.start.isoformat(), "end": c.second.end.isoformat()},
                        "overlapMinutes": c.overlap_minutes(),
                    }
                    for c in found
                ],
                indent=2,
            )
        )
        return

    if not found:
        click.echo("No conflicts.")
        return
    for c in found:
        click.echo(f"• {c.describe()}")


@main.command()
@click.option("--duration", type=int, help="Meeting length in minutes")
@click.option("--prefer", "preferred", multiple=True, help="Preferred time, HH:MM (repeatable)")
@click.option("--priority", type=click.Choice(["low", "medium", "high"]), default="medium", show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def schedule(duration: int | None, preferred: tuple[str, ...], priority: str, as_json: bool):
    """Suggest the best days for a meeting."""
    config = load_config()
    services = build_services(config)
    try:
        preferences = SchedulingPreferences.from_times(list(preferred) or config.preferred_times, priority)
    except ValueError:
        raise click.BadParameter("Preferred times must be HH:MM", param_hint="--prefer")
    try:
        result = find_meeting_times(services, config, now_in(config).date(), duration, preferences)
    except AgendaError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "duration": result.duration_minutes,
                    "suggestions": [
                        {
                            "date": s.date.isoformat(),
                            "score": s.score,
                            "totalSlots": s.total_slots,
                            "slots": [{"start": t.start.isoformat(), "end": t.end.isoformat()} for t in s.slots],
                        }
                        for s in result.suggestions
                    ],
                    "recommendation": result.recommendation.date.isoformat() if result.recommendation else None,
                },
                indent=2,
            )
        )
        return

    if not result.suggestions:
        click.echo(f"No availability in the next {config.horizon_days} days.")
        return
    for s in result.suggestions:
        slots = ", ".join(t.format() for t in s.slots)
        click.echo(f"{s.date.strftime('%a %m/%d')}  score {s.score:g}  {slots}")
    click.echo()
    click.echo(f"Recommended: {result.recommendation.date.strftime('%A, %B %d')}")


@main.command()
@click.option("--send", is_flag=True, help="Deliver through the configured notifier")
def briefing(send: bool):
    """Generate today's briefing."""
    config = load_config()
    services = build_services(config)
    try:
        click.echo(generate_daily_briefing(services, config, now_in(config), send=send))
    except AgendaError as e:
        _fail(e)


@main.command()
def checks():
    """Run all proactive checks once and report the tally."""
    config = load_config()
    services = build_services(config)
    batch = run_proactive_checks(services, config)
    for r in batch.results:
        status = "ok" if r.ok else f"failed: {r.error}"
        click.echo(f"{r.name:24} {status}")
    tally = batch.tally()
    click.echo(f"\n{tally['succeeded']}/{tally['total']} succeeded")
    if tally["failed"]:
        sys.exit(1)


@main.command()
@click.option("--limit", default=10, show_default=True, help="Number of runs to show")
def runs(limit: int):
    """Show recent automation runs."""
    config = load_config()
    services = build_services(config)
    recent = services.runs.recent(limit)
    if not recent:
        click.echo("No runs recorded.")
        return
    for run in recent:
        status = "ok" if run.success else "FAILED"
        detail = f"  {run.detail}" if run.detail else ""
        click.echo(f"{run.started_at.strftime('%Y-%m-%d %H:%M')}  {run.name:24} {status}{detail}")


@main.command()
def serve():
    """Run proactive checks on their cron schedules."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    config = load_config()
    services = build_services(config)
    scheduler = JobScheduler(timezone=config.timezone)
    registered = register_default_jobs(scheduler, services, config)
    if not registered:
        click.echo("No jobs scheduled - check the *_CRON settings.", err=True)
        sys.exit(1)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        scheduler.shutdown()
