"""Command line entry point."""
import logging
import sys

import click
import structlog
from dotenv import load_dotenv

from .sample import sample


def configure_logging(level: str = "warning", json_logs: bool = False) -> None:
    """Configure structlog to write to stderr at ``level``."""
    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@click.group()
@click.option(
    "--log-level",
    envvar="VOID_FEED_LOG_LEVEL",
    default="warning",
    type=click.Choice(["debug", "info", "warning", "error"]),
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
def cli(log_level: str, json_logs: bool):
    """Void feed tools."""
    configure_logging(log_level, json_logs)


cli.add_command(sample)


def main():
    """Console script entry point."""
    load_dotenv()
    cli()
