"""Error taxonomy for the generator runtime.

Every error here is fatal: library code raises, the entry point reports
and exits non-zero. Nothing is turned into a JSON-RPC error reply.
"""

from __future__ import annotations

from dataclasses import dataclass


class GeneratorError(Exception):
    """Base class for all fatal generator errors."""


class ProtocolError(GeneratorError):
    """The host sent no line, invalid JSON, or a malformed request envelope."""


class UnknownMethodError(ProtocolError):
    """The host called a method this generator does not implement."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown generator method {method}")
        self.method = method


class ManifestDecodeError(GeneratorError):
    """The generate params do not match the EngineDMMF shape."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(
            f"Failed to deserialize DMMF from Prisma engines: {path}: {message}"
        )
        self.path = path
        self.message = message


@dataclass(frozen=True)
class SchemaDiagnostic:
    line: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class SchemaCompileError(GeneratorError):
    """The datamodel text failed to compile."""

    def __init__(self, diagnostics: list[SchemaDiagnostic]) -> None:
        lines = "\n".join(f"  {d}" for d in diagnostics)
        super().__init__(f"Failed to parse datamodel:\n{lines}")
        self.diagnostics = diagnostics


class NameValidationError(GeneratorError):
    """Names in the datamodel collide or clash with reserved names."""

    def __init__(self, problems: list[str]) -> None:
        lines = "\n".join(f"  {p}" for p in problems)
        super().__init__(f"Invalid names in datamodel:\n{lines}")
        self.problems = problems


class OutputFileError(GeneratorError):
    """Creating, opening or writing the output file failed."""
