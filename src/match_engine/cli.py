"""CLI for the matching engine.

Commands:
- jobs: Rank job listings in a pool file for one candidate
- mentors: Rank mentors in a pool file for one mentee
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from . import __version__
from .application.job_matching import build_job_matcher
from .application.matching import MatchService
from .application.mentor_matching import build_mentor_matcher
from .application.ranker import RankOptions
from .application.reporting import summarise_matches, write_matches_csv
from .application.weight_catalog import load_weight_catalog, resolve_weight_table
from .config import MatchingConfig
from .config_file import load_matching_config_file
from .domain.aggregation import MatchResult
from .domain.profiles import MatchDomain
from .domain.weights import WeightTable
from .exceptions import MatchingError
from .protocols import FileSystem, PoolProvider

type MatcherFactory = Callable[[PoolProvider, MatchingConfig, WeightTable], MatchService]


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, pool_path: Path) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    provider: PoolProvider


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: MatchingConfig
    deps_builder: DependenciesBuilder
    config_path: Path | None = None

    def build_dependencies(self, *, pool_path: Path) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(pool_path=pool_path)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the match-engine entry point.")


DEFAULT_POOL_PATH = Path("data/pool.json")

_console = Console()


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _print_version(value: bool) -> None:
    if value:
        rprint(f"match-engine {__version__}")
        raise typer.Exit()


def _resolve_config(state: CliContext, fs: FileSystem) -> MatchingConfig:
    if state.config_path is None:
        return state.config
    file_config = load_matching_config_file(path=state.config_path, fs=fs)
    return state.config.with_file_overrides(file_config)


def _weights_for(
    config: MatchingConfig, fs: FileSystem, domain: MatchDomain, table_name: str | None
) -> WeightTable:
    catalog = None
    if config.weights_catalog_path:
        catalog = load_weight_catalog(path=Path(config.weights_catalog_path), fs=fs)
    configured = (
        config.job_weights_name if domain is MatchDomain.JOB else config.mentor_weights_name
    )
    return resolve_weight_table(catalog, domain, table_name or configured or None)


def _render_table(title: str, results: list[MatchResult]) -> None:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Target")
    table.add_column("Score", justify="right")
    table.add_column("Bonus", justify="right")
    table.add_column("Tier")
    table.add_column("Reasons")
    for rank, result in enumerate(results, start=1):
        table.add_row(
            str(rank),
            result.target_id,
            f"{result.total:.1f}",
            f"{result.bonus:.1f}",
            result.tier,
            "; ".join(result.reasons),
        )
    _console.print(table)


def _run_matches(
    ctx: typer.Context,
    *,
    domain: MatchDomain,
    build_matcher: MatcherFactory,
    pool_path: Path,
    subject_id: str,
    limit: int | None,
    offset: int,
    min_score: float | None,
    tier: str | None,
    prioritize: bool,
    exclude: list[str] | None,
    weights_name: str | None,
    output: Path | None,
) -> None:
    state = _get_context(ctx)
    try:
        deps = state.build_dependencies(pool_path=pool_path)
        config = _resolve_config(state, deps.fs)
        weights = _weights_for(config, deps.fs, domain, weights_name)
        matcher = build_matcher(deps.provider, config, weights)
        options = RankOptions(
            limit=limit,
            offset=offset,
            min_score=min_score,
            exclude_ids=frozenset(exclude or ()),
            prioritize=prioritize,
            tier=tier,
        )
        results = matcher.find_matches(subject_id, options)
    except (MatchingError, ValueError) as exc:
        rprint(f"[red]✗ {exc}[/red]")
        raise typer.Exit(code=1) from exc

    _render_table(f"{domain} matches for {subject_id}", results)

    summary = summarise_matches(results)
    if summary.count == 0:
        rprint("[yellow]No matches above the minimum score.[/yellow]")
    else:
        rprint(f"[green]✓ {summary.count} matches[/green] (weights: {weights.name})")
        rprint(f"  Mean score: {summary.mean_total:.1f}")
        rprint(f"  Recommended: {summary.recommended_count}")
        tiers = ", ".join(f"{tier} {count}" for tier, count in summary.tier_counts.items())
        rprint(f"  Tiers: {tiers}")
        if summary.bonus_applied:
            rprint("  Preference bonus applied to ranking")

    if output is not None:
        written = write_matches_csv(
            results, output, deps.fs, include_bonus=summary.bonus_applied
        )
        rprint(f"[green]✓ Written:[/green] {written}")


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Rank job listings or mentors for a subject from a JSON pool file.",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file overriding environment settings",
            ),
        ] = None,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_print_version,
                is_eager=True,
                help="Show the installed version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        ctx.obj = CliContext(
            config=MatchingConfig.from_env(),
            deps_builder=deps_builder,
            config_path=config_path,
        )

    @app.command()
    def jobs(
        ctx: typer.Context,
        subject_id: Annotated[
            str,
            typer.Option("--subject", "-s", help="Candidate id to rank jobs for"),
        ],
        pool_path: Annotated[
            Path,
            typer.Option("--pool", "-p", help="JSON pool file with candidates and jobs"),
        ] = DEFAULT_POOL_PATH,
        limit: Annotated[
            int | None,
            typer.Option("--limit", "-n", help="Maximum matches to return (default: 20)"),
        ] = None,
        offset: Annotated[
            int,
            typer.Option("--offset", help="Skip this many ranked matches"),
        ] = 0,
        min_score: Annotated[
            float | None,
            typer.Option("--min-score", help="Minimum total score (default: 30)"),
        ] = None,
        tier: Annotated[
            str | None,
            typer.Option("--tier", "-t", help="Only return matches in this compatibility tier"),
        ] = None,
        prioritize: Annotated[
            bool,
            typer.Option(
                "--prioritize",
                help="Rank Indigenous-owned employers first (Indigenous candidates only)",
            ),
        ] = False,
        exclude: Annotated[
            list[str] | None,
            typer.Option("--exclude", "-x", help="Job id to exclude (repeatable)"),
        ] = None,
        weights_name: Annotated[
            str | None,
            typer.Option("--weights", "-w", help="Weight table name from the catalogue"),
        ] = None,
        output: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Write ranked matches to this CSV"),
        ] = None,
    ) -> None:
        """Rank job listings for a candidate."""
        _run_matches(
            ctx,
            domain=MatchDomain.JOB,
            build_matcher=build_job_matcher,
            pool_path=pool_path,
            subject_id=subject_id,
            limit=limit,
            offset=offset,
            min_score=min_score,
            tier=tier,
            prioritize=prioritize,
            exclude=exclude,
            weights_name=weights_name,
            output=output,
        )

    @app.command()
    def mentors(
        ctx: typer.Context,
        subject_id: Annotated[
            str,
            typer.Option("--subject", "-s", help="Mentee id to rank mentors for"),
        ],
        pool_path: Annotated[
            Path,
            typer.Option("--pool", "-p", help="JSON pool file with mentees and mentors"),
        ] = DEFAULT_POOL_PATH,
        limit: Annotated[
            int | None,
            typer.Option("--limit", "-n", help="Maximum matches to return (default: 20)"),
        ] = None,
        offset: Annotated[
            int,
            typer.Option("--offset", help="Skip this many ranked matches"),
        ] = 0,
        min_score: Annotated[
            float | None,
            typer.Option("--min-score", help="Minimum total score (default: 50)"),
        ] = None,
        tier: Annotated[
            str | None,
            typer.Option("--tier", "-t", help="Only return matches in this compatibility tier"),
        ] = None,
        prioritize: Annotated[
            bool,
            typer.Option(
                "--prioritize",
                help="Rank Elders first (mentees seeking an Elder only)",
            ),
        ] = False,
        exclude: Annotated[
            list[str] | None,
            typer.Option("--exclude", "-x", help="Mentor id to exclude (repeatable)"),
        ] = None,
        weights_name: Annotated[
            str | None,
            typer.Option("--weights", "-w", help="Weight table name from the catalogue"),
        ] = None,
        output: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Write ranked matches to this CSV"),
        ] = None,
    ) -> None:
        """Rank available mentors for a mentee."""
        _run_matches(
            ctx,
            domain=MatchDomain.MENTORSHIP,
            build_matcher=build_mentor_matcher,
            pool_path=pool_path,
            subject_id=subject_id,
            limit=limit,
            offset=offset,
            min_score=min_score,
            tier=tier,
            prioritize=prioritize,
            exclude=exclude,
            weights_name=weights_name,
            output=output,
        )

    _ = (main, jobs, mentors)

    return app
