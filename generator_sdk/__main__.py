"""Entry point: python -m generator_sdk

Spawned by the host with no arguments, it speaks the generator protocol;
run by hand with arguments, it is a small CLI (see cli.py).
"""

from __future__ import annotations

import logging
import sys

from .codegen import typescript_generator
from .config import configure_logging
from .errors import GeneratorError
from .metadata import GeneratorMetadata
from .runtime import run_generator

_LOGGER = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    metadata = GeneratorMetadata(
        generator=typescript_generator(),
        name="TypeScript Models",
        default_output="./generated/models.ts",
    )
    try:
        status = run_generator(metadata, sys.argv[1:])
    except GeneratorError as exc:
        _LOGGER.critical("%s", exc)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
