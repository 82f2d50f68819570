"""Host-facing entry: pick the invocation mode, then serve the protocol.

The host writes one JSON request per line on our stdin and reads one
JSON response per line from our stderr. stdout is left alone so that
nothing a generator prints can be mistaken for a reply.

    getManifest -> reply, keep reading
    generate    -> run the pipeline, reply null, stop
    anything else, EOF, bad JSON -> fatal
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Mapping, Sequence

from . import cli
from .config import INVOCATION_ENV_VAR, INVOCATION_MESSAGE
from .dmmf import decode_dmmf
from .errors import ProtocolError, UnknownMethodError
from .jsonrpc import Response, decode_request, encode_response
from .metadata import GeneratorMetadata
from .pipeline import generate

_LOGGER = logging.getLogger(__name__)


def run_session(metadata: GeneratorMetadata, stdin: IO[str], stderr: IO[str]) -> None:
    """Serve requests until one generate cycle has completed."""
    while True:
        line = stdin.readline()
        if not line:
            raise ProtocolError("Failed to read Prisma engine output: stdin closed")

        request = decode_request(line)
        _LOGGER.info("Handling %s (id=%r)", request.method, request.id)

        if request.method == "getManifest":
            result = metadata.manifest().to_result()
        elif request.method == "generate":
            generate(metadata, decode_dmmf(request.params))
            result = None
        else:
            raise UnknownMethodError(request.method)

        stderr.write(encode_response(Response(id=request.id, result=result)))
        stderr.flush()

        if request.method == "generate":
            return


def run_generator(
    metadata: GeneratorMetadata,
    argv: Sequence[str],
    environ: Mapping[str, str] | None = None,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> int:
    """Run direct CLI mode when given arguments, else the host protocol.

    Exits with status 1 when started without arguments outside the host.
    """
    if argv:
        return cli.main(metadata, argv)

    environ = os.environ if environ is None else environ
    if INVOCATION_ENV_VAR not in environ:
        print(INVOCATION_MESSAGE, file=stdout or sys.stdout)
        raise SystemExit(1)

    run_session(metadata, stdin or sys.stdin, stderr or sys.stderr)
    return 0
