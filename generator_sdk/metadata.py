"""Generator identity and the emission interface concrete generators implement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from .args import GenerateArgs
from .config import HEADER_TEMPLATE
from .jsonrpc import Manifest


class Generator(Protocol):
    """Turns the compiled schema into source text."""

    def emit(self, args: GenerateArgs, config: dict[str, Any]) -> str:
        ...


@dataclass(frozen=True)
class FunctionGenerator:
    """Adapts a plain ``fn(args, config) -> str`` to the Generator interface."""

    fn: Callable[[GenerateArgs, dict[str, Any]], str]

    def emit(self, args: GenerateArgs, config: dict[str, Any]) -> str:
        return self.fn(args, config)


@dataclass(frozen=True)
class GeneratorMetadata:
    """Who this generator is. Built once at startup, never mutated.

    ``formatter`` overrides the suffix-based formatter choice; an empty
    tuple disables formatting.
    """

    generator: Generator
    name: str
    default_output: str
    formatter: tuple[str, ...] | None = None

    def manifest(self) -> Manifest:
        return Manifest(default_output=self.default_output, pretty_name=self.name)

    def header(self) -> str:
        return HEADER_TEMPLATE.format(name=self.name)
