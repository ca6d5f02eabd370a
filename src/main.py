"""
trellis-setup — CLI entrypoint.

Usage:
    trellis-setup --help
    trellis-setup --basic --flash-attn
    trellis-setup --all
    python -m src.main --o-voxel
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from src import __version__
from src.core.config.loader import ConfigError, load_settings
from src.core.context import set_work_dir
from src.core.models.outcome import ComponentReceipt, RunReport
from src.core.models.selection import Selection
from src.core.observability.logging_config import resolve_level, setup_from_env
from src.core.services.tool_install.data.recipes import COMPONENT_RECIPES
from src.core.services.tool_install.errors import SetupError
from src.core.services.tool_install.orchestration.orchestrator import provision

_RULE = "=" * 42

_HELP_FLAGS = ("-h", "--help")

_OUTCOME_NOTES = {
    "skipped": "already installed",
    "installed": "installed",
    "fallback": "installed with fallback",
}

_EPILOG = """\
\b
Examples:
  trellis-setup --basic --flash-attn
  trellis-setup --all

\b
Note: Make sure you've activated your conda environment first:
  conda activate trellis2
"""


class SetupCommand(click.Command):
    """Command whose usage errors exit 1 and whose empty call shows help.

    Help wins over everything else on the line, including unknown
    flags; no arguments at all is treated as a request for help.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args or any(arg in _HELP_FLAGS for arg in args):
            click.echo(ctx.get_help())
            ctx.exit(0)
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo(ctx.get_help())
            ctx.exit(1)


def _component_options(f):
    """One boolean flag per component recipe, in install order."""
    for component in reversed(list(COMPONENT_RECIPES.values())):
        f = click.option(
            component.flag, component.name, is_flag=True, help=component.help,
        )(f)
    return f


# ── Output helpers ──────────────────────────────────────────────


def _echo_progress(label: str, summary: str) -> None:
    if label == "🔧":
        click.echo()
        click.secho(_RULE, fg="cyan")
        click.secho(summary, fg="cyan", bold=True)
        click.secho(_RULE, fg="cyan")
        return
    click.echo(f"{label} {summary}")


def _quiet_progress(label: str, summary: str) -> None:
    return None


def _receipt_line(receipt: ComponentReceipt) -> str:
    note = _OUTCOME_NOTES.get(receipt.outcome, receipt.outcome)
    version = f" {receipt.version}" if receipt.version else ""
    return f"  ✓ {receipt.label}{version} ({note})"


def _print_report(report: RunReport) -> None:
    click.echo()
    click.secho(_RULE, fg="green")
    click.secho("✓ Installation Completed Successfully!", fg="green", bold=True)
    click.secho(_RULE, fg="green")
    click.echo()
    click.echo("Installed components:")
    for receipt in report.receipts:
        click.echo(_receipt_line(receipt))

    if report.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in report.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    click.echo("You can now use Trellis2!")


def _print_failure(error: SetupError, report: RunReport) -> None:
    click.echo()
    click.secho(f"❌ Error: {error.message}", fg="red", bold=True, err=True)
    if error.detail:
        for line in error.detail.strip().splitlines()[-10:]:
            click.echo(f"     │ {line}", err=True)
    if error.remedy:
        click.echo(error.remedy, err=True)

    if report.receipts:
        click.echo(err=True)
        click.echo("Completed before the failure:", err=True)
        for receipt in report.receipts:
            click.echo(_receipt_line(receipt), err=True)


# ── Command ─────────────────────────────────────────────────────


@click.command(
    cls=SetupCommand,
    context_settings={"help_option_names": list(_HELP_FLAGS)},
    epilog=_EPILOG,
)
@click.version_option(version=__version__, prog_name="trellis-setup")
@_component_options
@click.option("--all", "select_all", is_flag=True, help="Install all components (o-voxel excluded)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    select_all: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    **components: bool,
) -> None:
    """Trellis2 installation script. Installs the selected extensions."""
    setup_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    selection = Selection.from_flags(select_all=select_all, **components)
    if selection.empty:
        click.echo(ctx.get_help())
        return

    work_dir = Path.cwd()
    set_work_dir(work_dir)

    try:
        settings = load_settings(start_dir=work_dir)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    progress = _quiet_progress if quiet else _echo_progress
    if not quiet:
        click.secho(_RULE, fg="cyan")
        click.secho("Trellis2 Installation Script", fg="cyan", bold=True)
        click.secho(_RULE, fg="cyan")

    report = RunReport()
    try:
        provision(
            selection,
            settings=settings,
            work_dir=work_dir,
            report=report,
            progress=progress,
        )
    except SetupError as e:
        _print_failure(e, report)
        sys.exit(1)

    _print_report(report)


if __name__ == "__main__":
    cli()
