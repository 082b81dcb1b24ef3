"""studytrack CLI: scheduling commands and the config subgroup."""

import json
import logging
import sys
from typing import Annotated

import typer

from studytrack.application.config import resolve_config
from studytrack.application.fsrs import (
    difficulty_label,
    interval_days,
    preview_all_ratings,
    retrievability_at,
    review,
    review_status,
)
from studytrack.domain.dates import parse_iso_date
from studytrack.domain.errors import StudytrackError
from studytrack.domain.fsrs.models import ReviewOptions
from studytrack.interface._common import _fail, _resolve_with_overrides, _state_from_options

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="studytrack: FSRS spaced-repetition scheduling for your study topics.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage studytrack configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Shared option types
# ---------------------------------------------------------------------------

DifficultyOpt = Annotated[float, typer.Option(help="Current difficulty (1-10, 0 if new).")]
StabilityOpt = Annotated[float, typer.Option(help="Current stability in days (0 if new).")]
LastReviewOpt = Annotated[
    str | None, typer.Option("--last-review", help="Day of the last review (YYYY-MM-DD).")
]
TodayOpt = Annotated[
    str | None, typer.Option(help="Review day (YYYY-MM-DD). Defaults to today.")
]
ElapsedOpt = Annotated[
    int | None,
    typer.Option("--elapsed-days", help="Override days since the last review."),
]
FsrsVersionOpt = Annotated[
    str | None, typer.Option("--fsrs-version", help="Algorithm variant: fsrs5 or fsrs6.")
]
RetentionOpt = Annotated[
    float | None, typer.Option("--retention", help="Requested retention (0.01-0.999).")
]
MaxIntervalOpt = Annotated[
    int | None, typer.Option("--max-interval", help="Cap for scheduled intervals (days).")
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for studytrack."""
    if verbose > 0:
        logging.getLogger("studytrack").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command("review")
def review_cmd(
    rating: Annotated[str, typer.Argument(help="Rating: 1-4 or again/hard/good/easy.")],
    difficulty: DifficultyOpt = 0.0,
    stability: StabilityOpt = 0.0,
    last_review: LastReviewOpt = None,
    today: TodayOpt = None,
    elapsed_days: ElapsedOpt = None,
    fuzz: Annotated[
        bool | None, typer.Option("--fuzz/--no-fuzz", help="Jitter the scheduled interval.")
    ] = None,
    fsrs_version: FsrsVersionOpt = None,
    retention: RetentionOpt = None,
    max_interval: MaxIntervalOpt = None,
    json_output: JsonOpt = False,
):
    """[bold green]Review[/bold green] an item and print its next schedule."""
    settings = _resolve_with_overrides(
        fsrs_version=fsrs_version,
        requested_retention=retention,
        max_interval_days=max_interval,
    )
    config = settings.fsrs_config()

    try:
        state = _state_from_options(difficulty, stability, last_review)
        options = ReviewOptions(
            custom_elapsed_days=elapsed_days,
            apply_fuzzing=fuzz,
            today=parse_iso_date(today),
        )
        outcome = review(state, rating, config, options)
    except StudytrackError as e:
        raise _fail(e)

    if json_output:
        typer.echo(json.dumps(outcome.to_dict(), indent=2))
        return

    new_state = outcome.new_state
    typer.echo(f"Rating: {outcome.rating.label}  ({config.version.label})")
    if outcome.retrievability is not None:
        typer.echo(f"Retrievability at review: {outcome.retrievability:.1%}")
    typer.echo(
        f"Difficulty: {new_state.difficulty}  ({difficulty_label(new_state.difficulty).text})"
    )
    typer.echo(f"Stability: {new_state.stability}")
    typer.echo(f"Interval: {outcome.interval_days}d  Scheduled: {outcome.scheduled_days}d")
    typer.secho(f"Next review: {new_state.next_review.isoformat()}", fg="green")


@app.command("preview")
def preview_cmd(
    difficulty: DifficultyOpt = 0.0,
    stability: StabilityOpt = 0.0,
    last_review: LastReviewOpt = None,
    today: TodayOpt = None,
    elapsed_days: ElapsedOpt = None,
    fsrs_version: FsrsVersionOpt = None,
    retention: RetentionOpt = None,
    max_interval: MaxIntervalOpt = None,
    json_output: JsonOpt = False,
):
    """Show what each rating would schedule, without recording anything."""
    settings = _resolve_with_overrides(
        fsrs_version=fsrs_version,
        requested_retention=retention,
        max_interval_days=max_interval,
    )
    config = settings.fsrs_config()

    try:
        state = _state_from_options(difficulty, stability, last_review)
        outcomes = preview_all_ratings(
            state,
            config,
            ReviewOptions(custom_elapsed_days=elapsed_days, today=parse_iso_date(today)),
        )
    except StudytrackError as e:
        raise _fail(e)

    if json_output:
        typer.echo(json.dumps([o.to_dict() for o in outcomes], indent=2))
        return

    for outcome in outcomes:
        typer.echo(
            f"{outcome.rating.label:<6} {outcome.scheduled_days:>5}d  "
            f"-> {outcome.new_state.next_review.isoformat()}  "
            f"(S={outcome.new_state.stability}, D={outcome.new_state.difficulty})"
        )


@app.command("retention")
def retention_cmd(
    stability: Annotated[float, typer.Argument(help="Stability in days.")],
    elapsed_days: Annotated[int, typer.Argument(help="Days since the last review.")],
    fsrs_version: FsrsVersionOpt = None,
    retention: RetentionOpt = None,
    json_output: JsonOpt = False,
):
    """Estimate current recall probability without performing a review."""
    config = _resolve_with_overrides(
        fsrs_version=fsrs_version, requested_retention=retention
    ).fsrs_config()

    recall = retrievability_at(stability, elapsed_days, config)
    interval = interval_days(stability, config)

    if json_output:
        typer.echo(json.dumps({"retrievability": recall, "interval_days": interval}, indent=2))
        return

    typer.echo(f"Retrievability: {recall:.1%}")
    typer.echo(f"Interval at {config.requested_retention:.0%} retention: {interval}d")


@app.command("status")
def status_cmd(
    next_review: Annotated[
        str | None, typer.Argument(help="Scheduled review day (YYYY-MM-DD).")
    ] = None,
    today: TodayOpt = None,
    json_output: JsonOpt = False,
):
    """Classify a scheduled review day (overdue, today, soon...)."""
    try:
        status = review_status(next_review, parse_iso_date(today))
    except StudytrackError as e:
        raise _fail(e)

    if json_output:
        typer.echo(json.dumps({"text": status.text, "urgency": status.urgency}, indent=2))
        return

    color = {"overdue": "red", "today": "yellow", "tomorrow": "yellow"}.get(status.urgency)
    typer.secho(status.text, fg=color)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = config.model_dump()
    d["fsrs"] = config.fsrs_config().to_dict()
    typer.echo(json.dumps(d, indent=2))
