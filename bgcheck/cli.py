"""Command-line interface for bgcheck."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from bgcheck import Checker, CheckerConfig, __version__
from bgcheck.core.blacklist import DIVISION_NAMES
from bgcheck.core.exporter import merge_results, save_many_json, to_json
from bgcheck.core.transformer import parse_account_id
from bgcheck.core.wizard import EvaluationView, GeneralInfoView, Stage, Wizard
from bgcheck.exceptions import BgcheckError, InvalidAccountIdError, UpstreamError

app = typer.Typer(
    name="bgcheck",
    help="Background check lookups over public profile data",
    add_completion=False,
)
console = Console()

LEVEL_STYLES = {"Low": "green", "Medium": "yellow", "High": "red"}


def version_callback(value: bool):
    if value:
        console.print(f"bgcheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """bgcheck - background check lookups over public profile data."""
    pass


def _lookup_config(quiet: bool) -> CheckerConfig:
    """Quiet runs only log errors."""
    return CheckerConfig(log_level="ERROR") if quiet else CheckerConfig()


def _parse_ids(raw_ids: list[str]) -> list[int]:
    try:
        return [parse_account_id(raw) for raw in raw_ids]
    except InvalidAccountIdError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)


@app.command()
def lookup(
    account_ids: list[str] = typer.Argument(..., help="Numeric account IDs to look up"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory for JSON files"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress output, only show errors"
    ),
):
    """Look up one or more accounts and summarize their risk."""
    ids = _parse_ids(account_ids)
    config = _lookup_config(quiet)

    async def run():
        async with Checker(config) as checker:
            outcomes = await checker.lookup_many(ids)

        for outcome in outcomes:
            if outcome.success and outcome.result:
                if not quiet:
                    _print_summary(outcome.result)
            else:
                console.print(
                    f"[red]✗[/red] Failed to look up {outcome.account_id}: "
                    f"{outcome.error_message or 'Unknown error'}"
                )

        if output:
            for path in save_many_json(outcomes, output):
                console.print(f"[dim]Saved to {path}[/dim]")

        summary = merge_results(outcomes)
        console.print(f"\n[bold]Looked up {summary['successful']}/{len(outcomes)} accounts[/bold]")

    asyncio.run(run())


@app.command()
def info(
    account_id: str = typer.Argument(..., help="Numeric account ID"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw aggregate as JSON"),
):
    """Show full profile info for a single account."""
    user_id = _parse_ids([account_id])[0]

    async def run():
        async with Checker(CheckerConfig()) as checker:
            try:
                result = await checker.lookup(user_id)
            except UpstreamError as e:
                console.print(f"[red]Failed to fetch profile: {e}[/red]")
                raise typer.Exit(1)

        if as_json:
            console.print_json(to_json(result))
            return
        _print_general_info(Wizard(lookup=result).general_info_view())

    asyncio.run(run())


@app.command()
def evaluate(
    account_id: str = typer.Argument(..., help="Numeric account ID"),
    division: str = typer.Option(
        "default", "--division", "-d", help=f"Division: {', '.join(DIVISION_NAMES)}"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the evaluation as JSON"),
):
    """Evaluate an account for a division, including blacklist checks."""
    user_id = _parse_ids([account_id])[0]

    async def run():
        async with Checker(CheckerConfig()) as checker:
            try:
                lookup_result = await checker.lookup(user_id)
            except UpstreamError as e:
                console.print(f"[red]Failed to fetch profile: {e}[/red]")
                raise typer.Exit(1)
            evaluation = checker.evaluate_lookup(lookup_result, division)

        if as_json:
            console.print_json(to_json(evaluation))
            return
        wizard = Wizard()
        wizard.show_results(lookup_result, evaluation)
        _print_evaluation(wizard.evaluation_view())

    asyncio.run(run())


@app.command()
def wizard():
    """Step through division, ID, general info and evaluation interactively."""
    config = CheckerConfig()

    async def run():
        state = Wizard()
        async with Checker(config) as checker:
            while True:
                console.rule(f"[bold]Step {state.stage + 1}/4 · {state.title}[/bold]")

                if state.stage == Stage.DIVISION:
                    choice = Prompt.ask(
                        "Division",
                        choices=list(DIVISION_NAMES),
                        default=state.division,
                    )
                    state.select_division(choice)
                    continue

                if state.stage == Stage.ACCOUNT_ID:
                    if state.error:
                        console.print(f"[red]{state.error}[/red]")
                    raw = Prompt.ask(
                        f"User ID for [cyan]{state.division_name}[/cyan] (b=back, q=quit)",
                        default=state.account_input or None,
                    )
                    if raw in ("q", "quit"):
                        return
                    if raw in ("b", "back"):
                        state.back()
                        continue
                    try:
                        user_id = state.enter_account_id(raw or "")
                    except InvalidAccountIdError:
                        continue
                    with console.status("Checking..."):
                        try:
                            lookup_result = await checker.lookup(user_id)
                        except BgcheckError as e:
                            state.fail(str(e))
                            continue
                    state.show_results(lookup_result, checker.evaluate_lookup(lookup_result, state.division))
                    continue

                if state.stage == Stage.GENERAL_INFO:
                    _print_general_info(state.general_info_view())
                else:
                    _print_evaluation(state.evaluation_view())

                action = Prompt.ask(
                    "n=next, b=back, r=restart, q=quit",
                    choices=["n", "b", "r", "q"],
                    default="n" if state.can_advance() else "r",
                )
                if action == "q":
                    return
                if action == "r":
                    state.reset()
                elif action == "b":
                    state.back()
                else:
                    state.next()

    asyncio.run(run())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("bgcheck.api:app", host=host, port=port)


def _print_summary(result):
    """Print lookup result summary."""
    p = result.profile
    style = LEVEL_STYLES[result.risk.level.value]

    console.print(f"\n[bold]@{p.username}[/bold] [dim]({p.user_id})[/dim]")
    console.print(f"  {p.display_name}")
    age = f"{p.account_age_days}d" if p.account_age_days is not None else "unknown"
    console.print(
        f"  age {age} · {p.total_badges:,} badges · "
        f"{p.friends_count:,} friends · {p.groups_count:,} groups"
    )
    console.print(f"  risk [{style}]{result.risk.level.value}[/{style}] (score {result.risk.score})")


def _print_general_info(view: GeneralInfoView):
    """Print the general-info stage as tables."""
    table = Table(title=f"@{view.username}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("User ID", str(view.user_id))
    table.add_row("Display Name", view.display_name or "-")
    table.add_row("Account Created", view.created)
    table.add_row("Banned", "✓" if view.is_banned else "✗")
    table.add_row("Friends", f"{view.friends_count:,}")
    table.add_row("Followers", f"{view.followers_count:,}")
    table.add_row("Following", f"{view.following_count:,}")
    table.add_row("Groups", f"{view.groups_count:,}")
    table.add_row("Badges", f"{view.badge_count:,}")
    table.add_row("Avatar", view.avatar_url or "-")
    table.add_row("Bio", view.description)

    console.print(table)

    if view.unverified:
        console.print(f"[yellow]Could not verify: {', '.join(view.unverified)}[/yellow]")

    if view.groups:
        groups = Table(title=f"Groups ({len(view.groups)})")
        groups.add_column("Name")
        groups.add_column("Role", style="dim")
        for name, role in view.groups:
            groups.add_row(name, role)
        console.print(groups)

    if view.friends:
        console.print(f"\n[bold]Friends ({len(view.friends)})[/bold]")
        for display_name, username, friend_id in view.friends[:20]:
            console.print(f"  {display_name} [dim]@{username} ({friend_id})[/dim]")
        if len(view.friends) > 20:
            console.print(f"  [dim]... and {len(view.friends) - 20} more[/dim]")

    history = ", ".join(view.username_history) or "No username history provided."
    console.print(f"\n[bold]Username History[/bold] {history}")


def _print_evaluation(view: EvaluationView):
    """Print the evaluation stage."""
    style = LEVEL_STYLES[view.level]

    console.print(f"\nDivision: [cyan]{view.division_name}[/cyan]")
    console.print(f"Level: [bold {style}]{view.level}[/bold {style}]  Score: {view.score}")

    console.print("\n[bold]Risk Factors[/bold]")
    for factor in view.factors:
        console.print(f"  • {factor}")

    if view.warnings:
        console.print("\n[bold yellow]Warnings[/bold yellow]")
        for warning in view.warnings:
            console.print(f"  ! {warning}")

    console.print("\n[bold]Blacklist Status[/bold]")
    console.print(f"  Groups: {', '.join(view.blacklisted_groups) or 'none'}")
    console.print(f"  Friends: {', '.join(view.blacklisted_friends) or 'none'}")
    console.print(f"  Other divisions: {', '.join(view.cross_division) or 'none'}")


if __name__ == "__main__":
    app()
