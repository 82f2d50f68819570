"""Turn a decoded EngineDMMF into a written, labelled output file.

Steps, each fatal on failure:
  1. compile the datamodel text
  2. build the derived schema
  3. create parent directories and open (truncate) the output file
  4. assemble GenerateArgs
  5. validate names
  6. run the emitter
  7. write header + emitted text
Then the formatter runs, best effort.

If anything fails after the file is opened, the file is removed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from .args import GenerateArgs, build_schema
from .dmmf import EngineDMMF
from .errors import OutputFileError
from .formatter import format_file
from .metadata import GeneratorMetadata
from .naming import validate_names
from .schema import parse_schema

_LOGGER = logging.getLogger(__name__)


@contextmanager
def create_generated_file(path: Path) -> Iterator[IO[str]]:
    """Open ``path`` for writing, creating parents; unlink it if the body fails."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputFileError(f"Failed to create output directory {path.parent}: {exc}") from exc
    try:
        file = open(path, "w", encoding="utf-8", newline="")
    except OSError as exc:
        raise OutputFileError(f"Failed to open output file {path}: {exc}") from exc

    try:
        yield file
    except BaseException:
        file.close()
        path.unlink(missing_ok=True)
        raise
    try:
        file.close()
    except OSError as exc:
        path.unlink(missing_ok=True)
        raise OutputFileError(f"Failed to write generated code to {path}: {exc}") from exc


def generate(metadata: GeneratorMetadata, dmmf: EngineDMMF) -> Path:
    """Run one generation cycle and return the written path."""
    configuration, datamodel = parse_schema(dmmf.datamodel)
    schema = build_schema(datamodel, configuration)

    output_path = Path(dmmf.output_path())

    with create_generated_file(output_path) as file:
        args = GenerateArgs(
            datamodel=datamodel,
            schema=schema,
            datamodel_str=dmmf.datamodel,
            datasources=tuple(dmmf.datasources),
        )
        validate_names(args)

        generated = metadata.generator.emit(args, dmmf.generator.config)

        try:
            file.write(metadata.header())
            file.write(generated)
        except OSError as exc:
            raise OutputFileError(f"Failed to write generated code to {output_path}: {exc}") from exc

    _LOGGER.info("Wrote %s", output_path)
    format_file(output_path, metadata.formatter)
    return output_path
