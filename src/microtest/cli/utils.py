# src/microtest/cli/utils.py

import logging

import click
import structlog

from microtest.config import GlobalConfig
from microtest.telemetry import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="MICROTEST_LOG_LEVEL",
        help="Set the logging level.",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="MICROTEST_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="MICROTEST_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def resolve_global_config(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> GlobalConfig:
    """Merges command options over group options over defaults."""
    obj = ctx.obj or {}
    json_logs = local_json_logs if local_json_logs is not None else obj.get("JSON_LOGS")
    return GlobalConfig(
        log_level=(local_log_level or obj.get("LOG_LEVEL") or default_log_level).upper(),
        log_file=local_log_file or obj.get("LOG_FILE"),
        json_logs=bool(json_logs),
    )


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> GlobalConfig:
    """
    Setup logging using context values, allowing local overrides.
    """
    config = resolve_global_config(
        ctx,
        local_log_level=local_log_level,
        local_log_file=local_log_file,
        local_json_logs=local_json_logs,
        default_log_level=default_log_level,
    )

    core_setup_logging(
        level=config.numeric_log_level,
        json_logs=config.json_logs,
        log_file=config.log_file,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=config.log_level,
        file=config.log_file or "console",
        json=config.json_logs,
    )
    return config

# ⚙️🛠️
