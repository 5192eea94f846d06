"""CLI entry point for kilo. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from kilo.view.config import LOG_LEVELS, ViewerConfig, load_config
from kilo.view.editor import Editor, new_state
from kilo.view.errors import ViewerError
from kilo.view.loader import LoadStatus, load_file
from kilo.view.rows import RowStore
from kilo.view.terminal import ProcessTerminal, raw_mode

logger = logging.getLogger(__name__)


def _setup_logging(config: ViewerConfig) -> None:
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    if config.log_file:
        logging.basicConfig(
            filename=config.log_file,
            level=getattr(logging, config.log_level.upper()),
            format=fmt,
        )
    else:
        # The screen belongs to the renderer; only fatal errors reach stderr,
        # and those are logged after the terminal has been restored.
        logging.basicConfig(stream=sys.stderr, level=logging.ERROR, format=fmt)


@click.command()
@click.argument("filename")
@click.option("--log-file", default=None, help="Write log records to this file")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default=None,
    help="Log level for --log-file (default: warning)",
)
def main(filename, log_file, log_level):
    """View FILENAME in the terminal. Ctrl-Q quits."""
    try:
        config = load_config()
    except ValueError as e:
        click.echo(f"kilo: invalid config: {e}", err=True)
        sys.exit(1)

    if log_file:
        config.log_file = log_file
    if log_level:
        config.log_level = log_level
    _setup_logging(config)

    rows = RowStore()
    try:
        status = load_file(filename, rows)
    except OSError as e:
        click.echo(f"kilo: {filename}: {e.strerror or e}", err=True)
        sys.exit(1)

    terminal = ProcessTerminal(write_log=config.write_log)
    try:
        state = new_state(rows, terminal.size(), filename)
        message = f"HELP: Ctrl-{config.quit_key.upper()} = quit"
        if status is LoadStatus.NEW_FILE:
            message = f"New file | {message}"
        state.set_status_message(message)

        mode = raw_mode(terminal.in_fd, read_timeout=config.read_timeout)
        Editor(terminal, state, mode, config=config).run()
    except ViewerError as e:
        logger.error("Fatal: %s", e)
        click.echo(f"kilo: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
