"""CLI entrypoint for git-auto-fetch."""

from pathlib import Path

import rich_click as click

from git_auto_fetch import __version__
from git_auto_fetch.config import ConfigError
from git_auto_fetch.controllers import SyncCliController, SyncRunCommand
from git_auto_fetch.logging_config import LOG_LEVELS, TRACE, setup_logging
from git_auto_fetch.sync.models import ExitCode

click.rich_click.USE_MARKDOWN = True
SYNC_CONTROLLER = SyncCliController()


@click.command()
@click.version_option(version=__version__, prog_name="git-auto-fetch")
@click.option(
    "-c",
    "--config-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Repository list (.json, .yaml, .yml or .toml). Defaults to GIT_AUTO_FETCH_CONFIG_FILE.",
)
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Log verbosity. Defaults to GIT_AUTO_FETCH_LOG_LEVEL or info.",
)
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of repositories fetched at the same time.",
)
@click.pass_context
def git_auto_fetch(
    ctx: click.Context,
    config_file: Path | None,
    log_level: str | None,
    max_workers: int | None,
) -> None:
    """Fetch the configured branches of every configured repository in parallel."""

    command = SyncRunCommand(
        config_file=config_file,
        max_workers=max_workers,
        log_level=log_level,
    )
    try:
        settings = SYNC_CONTROLLER.resolve_settings(command)
    except ConfigError as error:
        click.echo(f"Configuration error: {error}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)

    logging_handle = setup_logging(settings.log_level)
    try:
        logging_handle.logger.log(TRACE, "Initialized logger %s", logging_handle)
        result = SYNC_CONTROLLER.run(command, settings=settings)
        _emit_lines(result.lines)
    finally:
        logging_handle.close()
    ctx.exit(result.exit_code)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    git_auto_fetch()
