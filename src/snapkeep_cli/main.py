"""
Main CLI entry point for snapkeep.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, List, NoReturn, Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape

from snapkeep import __version__
from snapkeep.config import (
    CommandInput,
    CommandParseError,
    ConfigError,
    GlobalOptions,
    LOG_LEVEL_ALIASES,
    LOG_LEVELS,
    ProfileResolver,
    SnapkeepConfig,
    flush_merge_logs,
    load_config,
)

console = Console()
logger = logging.getLogger(__name__)

LOGGING_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

# Handlers installed by configure_logging, replaced on every call
_installed_handlers: List[logging.Handler] = []


class CommandInputType(click.ParamType):
    """Click parameter type parsing a shell-syntax command."""

    name = "command"

    def convert(self, value, param, ctx):
        if isinstance(value, CommandInput):
            return value
        try:
            return CommandInput.from_str(value)
        except CommandParseError as e:
            self.fail(str(e), param, ctx)


COMMAND = CommandInputType()


def configure_logging(log_level: Optional[str], log_file: Optional[Path]) -> None:
    """
    Configure the root logger from the merged global options.

    Args:
        log_level: One of the configured log level names (default: info)
        log_file: If given, log records are written to this file and only
            warnings and errors are still printed to stderr
    """
    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    level_name = log_level or "info"
    if level_name == "off":
        root_logger.setLevel(logging.CRITICAL + 1)
        return

    level = LOGGING_LEVELS[level_name]

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    _installed_handlers.append(console_handler)

    if log_file is not None:
        # Warnings and errors are still printed
        console_handler.setLevel(max(level, logging.WARNING))
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        _installed_handlers.append(file_handler)

    root_logger.setLevel(level)
    for handler in _installed_handlers:
        root_logger.addHandler(handler)


def apply_environment(config: SnapkeepConfig) -> None:
    """Export the ``[global] env`` entries into the process environment."""
    for name, value in config.global_.env.items():
        logger.debug(f"setting environment variable {name}")
        os.environ[name] = value


def fail(message: str) -> NoReturn:
    """Print an error and exit with a non-zero status."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)
    sys.exit(1)


def run_hooked(config: SnapkeepConfig, action: Callable[[], None]) -> None:
    """
    Run an action between the configured before and after hooks.

    A hook exiting non-zero only logs a warning; a hook that cannot be
    started aborts the command.
    """
    run_hook(config.global_.run_before, "run-before")
    action()
    run_hook(config.global_.run_after, "run-after")


def run_hook(command: CommandInput, label: str) -> None:
    """Run a hook command, exiting with an error if it cannot be started."""
    try:
        command.run(label)
    except OSError as e:
        fail(f"cannot run command: {e}")


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option(
    "--use-profile", "-P",
    multiple=True,
    metavar="PROFILE",
    envvar="SNAPKEEP_USE_PROFILE",
    help="Config profile to use. This parses the file <PROFILE>.toml [default: snapkeep]",
)
@click.option(
    "--dry-run", "-n",
    is_flag=True,
    envvar="SNAPKEEP_DRY_RUN",
    help="Only show what would be done without modifying anything",
)
@click.option(
    "--check-index",
    is_flag=True,
    envvar="SNAPKEEP_CHECK_INDEX",
    help="Check if index matches pack files",
)
@click.option(
    "--log-level",
    type=click.Choice([*LOG_LEVELS, *LOG_LEVEL_ALIASES], case_sensitive=False),
    envvar="SNAPKEEP_LOG_LEVEL",
    help="Use this log level [default: info]",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="SNAPKEEP_LOG_FILE",
    help="Write log messages to the given file instead of printing them",
)
@click.option(
    "--no-progress",
    is_flag=True,
    envvar="SNAPKEEP_NO_PROGRESS",
    help="Don't show any progress bar",
)
@click.option(
    "--progress-interval",
    envvar="SNAPKEEP_PROGRESS_INTERVAL",
    help="Interval to update progress bars, e.g. 100ms",
)
@click.option(
    "--run-before",
    type=COMMAND,
    envvar="SNAPKEEP_RUN_BEFORE",
    help="Call this command before every snapkeep operation",
)
@click.option(
    "--run-after",
    type=COMMAND,
    envvar="SNAPKEEP_RUN_AFTER",
    help="Call this command after every snapkeep operation",
)
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    use_profile: tuple,
    dry_run: bool,
    check_index: bool,
    log_level: Optional[str],
    log_file: Optional[Path],
    no_progress: bool,
    progress_interval: Optional[str],
    run_before: Optional[CommandInput],
    run_after: Optional[CommandInput],
) -> None:
    """
    snapkeep - layered configuration profiles for backups.

    Options given here take precedence over the values in profile files.
    """
    if version:
        console.print(f"[bold cyan]snapkeep[/bold cyan] version [green]{__version__}[/green]")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    seed = SnapkeepConfig(
        global_=GlobalOptions(
            use_profile=list(use_profile),
            dry_run=dry_run,
            check_index=check_index,
            log_level=log_level,
            log_file=log_file,
            no_progress=no_progress,
            progress_interval=progress_interval,
            run_before=run_before or CommandInput(),
            run_after=run_after or CommandInput(),
        )
    )
    resolver = ProfileResolver()

    try:
        config, merge_logs = load_config(seed, resolver)
    except ConfigError as e:
        fail(str(e))

    configure_logging(config.global_.log_level, config.global_.log_file)
    flush_merge_logs(merge_logs)
    apply_environment(config)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["resolver"] = resolver


@cli.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the merged configuration as YAML."""
    config: SnapkeepConfig = ctx.obj["config"]

    def action() -> None:
        data = config.model_dump(mode="json", by_alias=True)
        click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), nl=False)

    run_hooked(config, action)


@cli.command("config-paths")
@click.argument("profile", required=False)
@click.pass_context
def config_paths(ctx: click.Context, profile: Optional[str]) -> None:
    """Show where the file for PROFILE is looked up, in order."""
    config: SnapkeepConfig = ctx.obj["config"]
    resolver: ProfileResolver = ctx.obj["resolver"]
    profile = profile or resolver.app_name

    def action() -> None:
        for path in resolver.candidate_paths(profile):
            status = "found" if path.exists() else "missing"
            click.echo(f"{path}\t{status}")

    run_hooked(config, action)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
