"""Best-effort formatting of the generated file.

Failures are logged, never raised: the file is already written.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_FORMATTERS, FORMATTER_ENV_VAR

_LOGGER = logging.getLogger(__name__)


def resolve_command(path: Path, command: Sequence[str] | None = None) -> list[str] | None:
    """Pick the formatter argv for ``path``; None when formatting is off."""
    override = os.environ.get(FORMATTER_ENV_VAR)
    if override is not None:
        if override.strip().lower() in ("", "none"):
            return None
        try:
            return shlex.split(override) or None
        except ValueError as exc:
            _LOGGER.warning("Ignoring %s=%r: %s", FORMATTER_ENV_VAR, override, exc)
            return None
    if command is not None:
        return list(command) or None
    default = DEFAULT_FORMATTERS.get(path.suffix)
    return list(default) if default else None


def format_file(path: Path, command: Sequence[str] | None = None) -> bool:
    """Run the formatter on ``path``. Returns True if it ran and succeeded."""
    argv = resolve_command(path, command)
    if argv is None:
        return False
    try:
        found = shutil.which(argv[0])
    except ValueError as exc:
        _LOGGER.warning("Invalid formatter %r: %s", argv[0], exc)
        return False
    if found is None:
        _LOGGER.debug("Formatter %s not found, leaving %s unformatted", argv[0], path)
        return False

    _LOGGER.info("Formatting %s with %s", path, argv[0])
    try:
        result = subprocess.run(
            [*argv, str(path)],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Could not run formatter %s: %s", argv[0], exc)
        return False
    if result.returncode != 0:
        _LOGGER.warning(
            "Formatter %s exited with %d: %s",
            argv[0], result.returncode, result.stderr.strip(),
        )
        return False
    return True
