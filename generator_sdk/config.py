"""Runtime constants and the environment contract with the host."""

from __future__ import annotations

import logging
import os
import sys

PROTOCOL_VERSION = "2.0"

# Set by the host when it spawns a generator; guards the request loop.
INVOCATION_ENV_VAR = "PRISMA_GENERATOR_INVOCATION"

LOG_LEVEL_ENV_VAR = "GENERATOR_SDK_LOG_LEVEL"
FORMATTER_ENV_VAR = "GENERATOR_SDK_FORMATTER"

INVOCATION_MESSAGE = (
    "This command is only meant to be invoked internally. "
    "Please specify a command to run."
)

HEADER_TEMPLATE = "// Code generated by {name}. DO NOT EDIT\n\n"

# Output suffix -> formatter argv (the output path is appended)
DEFAULT_FORMATTERS: dict[str, list[str]] = {
    ".ts": ["prettier", "--write"],
    ".js": ["prettier", "--write"],
    ".py": ["black", "-q"],
    ".rs": ["rustfmt", "--edition", "2021"],
    ".go": ["gofmt", "-w"],
}


def log_level() -> int:
    """Return the configured log level, WARNING when unset or unknown."""
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging() -> None:
    """Send log records to stderr, alongside protocol replies."""
    logging.basicConfig(
        level=log_level(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
