"""Command-line interface for the adapter harness.

Example:
    >>> # From terminal:
    >>> # efs-harness --version
    >>> # efs-harness run --base-url http://localhost:8080 --booking-credentials "$CREDS"
    >>> # efs-harness run --scenario check_get_bookings --json
    >>> # efs-harness transitions
"""

import json
from typing import Annotated, Optional

import typer

from efs_harness import __version__
from efs_harness.config import HarnessConfig
from efs_harness.lifecycle.machine import VALID_TRANSITIONS
from efs_harness.models.enums import BookingState
from efs_harness.observability import configure_logging
from efs_harness.scenarios import SCENARIO_NAMES
from efs_harness.runner import run_scenarios

app = typer.Typer(help="Booking adapter integration harness.")

# Global verbose flag
_verbose: bool = False


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show harness version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(
    version: bool = VERSION_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output."),
) -> None:
    """EFS adapter harness CLI entrypoint."""
    global _verbose
    _verbose = verbose


@app.command("run")
def run(
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", "-u", help="Adapter base URL (default: EFS_ADAPTER_URL)."),
    ] = None,
    scenario: Annotated[
        Optional[list[str]],
        typer.Option("--scenario", "-s", help="Scenario to run; repeatable (default: all)."),
    ] = None,
    options_credentials: Annotated[
        Optional[str],
        typer.Option("--options-credentials", help="x-credentials for the options endpoint."),
    ] = None,
    booking_credentials: Annotated[
        Optional[str],
        typer.Option("--booking-credentials", help="x-credentials for booking endpoints."),
    ] = None,
    from_lat_lon: Annotated[
        Optional[str], typer.Option("--from", help="Options query origin as 'lat,lon'.")
    ] = None,
    to_lat_lon: Annotated[
        Optional[str], typer.Option("--to", help="Options query destination as 'lat,lon'.")
    ] = None,
    radius: Annotated[
        Optional[int], typer.Option("--radius", help="Search radius in meters.")
    ] = None,
    sharing: Annotated[
        Optional[bool], typer.Option("--sharing/--no-sharing", help="Shared vehicles only.")
    ] = None,
    seed: Annotated[Optional[int], typer.Option("--seed", help="Random seed.")] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", help="HTTP timeout in seconds.")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print results as JSON.")] = False,
) -> None:
    """Run lifecycle scenarios against an adapter; exit 1 if any fails."""
    configure_logging(log_level="DEBUG" if _verbose else None, force=True)
    unknown = [name for name in scenario or [] if name not in SCENARIO_NAMES]
    if unknown:
        raise typer.BadParameter(
            f"Unknown scenario(s): {', '.join(unknown)}. Choose from: {', '.join(SCENARIO_NAMES)}"
        )
    config = HarnessConfig.from_env(
        base_url=base_url,
        options_credentials=options_credentials,
        booking_credentials=booking_credentials,
        from_lat_lon=from_lat_lon,
        to_lat_lon=to_lat_lon,
        radius=radius,
        sharing=sharing,
        seed=seed,
        timeout_seconds=timeout,
    )
    result = run_scenarios(config, scenario)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for check in result.checks:
            mark = "PASS" if check.passed else "FAIL"
            typer.echo(f"[{mark}] {check.name} ({check.duration_seconds:.2f}s)")
            if not check.passed:
                typer.echo(f"       {check.message}")
        typer.echo(f"{len(result.checks) - len(result.failed)}/{len(result.checks)} passed")

    if not result.passed:
        raise typer.Exit(1)


@app.command("transitions")
def transitions() -> None:
    """Print the booking state machine."""
    for state in BookingState:
        targets = ", ".join(t.value for t in BookingState if t in VALID_TRANSITIONS[state])
        suffix = " (terminal)" if state.is_terminal() else ""
        typer.echo(f"{state.value:<16} -> {targets or '-'}{suffix}")


def main() -> None:
    """Run the harness CLI."""
    app()


if __name__ == "__main__":
    main()
