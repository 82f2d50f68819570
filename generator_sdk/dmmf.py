"""The EngineDMMF envelope delivered with a generate request.

Only the envelope is modelled here; the datamodel itself stays raw text
until the schema compiler reads it.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ManifestDecodeError


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EnvValue(_Envelope):
    """A literal value, or the name of an environment variable holding it."""

    value: str | None = None
    from_env_var: str | None = Field(default=None, alias="fromEnvVar")

    def get_value(self, path: str = "") -> str:
        """Resolve the value; ``path`` names the field in errors."""
        if self.from_env_var:
            try:
                return os.environ[self.from_env_var]
            except KeyError:
                raise ManifestDecodeError(
                    path, f"environment variable {self.from_env_var} is not set"
                ) from None
        if self.value is None:
            raise ManifestDecodeError(path, "neither value nor fromEnvVar is set")
        return self.value


class GeneratorConfig(_Envelope):
    output: EnvValue
    config: dict[str, Any]
    name: str = ""
    provider: EnvValue | None = None
    binary_targets: list[Any] = Field(default_factory=list, alias="binaryTargets")
    preview_features: list[str] = Field(default_factory=list, alias="previewFeatures")


class Datasource(_Envelope):
    name: str = ""
    provider: str = ""
    active_provider: str = Field(default="", alias="activeProvider")
    url: EnvValue | None = None
    schemas: list[str] = Field(default_factory=list)


class EngineDMMF(_Envelope):
    datamodel: str
    generator: GeneratorConfig
    datasources: list[Datasource]
    schema_path: str = Field(default="", alias="schemaPath")
    version: str = ""
    other_generators: list[GeneratorConfig] = Field(default_factory=list, alias="otherGenerators")

    def output_path(self) -> str:
        return self.generator.output.get_value("generator.output")


def format_loc(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as ``generator.output`` / ``datasources[0].url``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "<root>"


def decode_dmmf(params: Any) -> EngineDMMF:
    """Strictly decode generate params, naming the first offending field."""
    try:
        return EngineDMMF.model_validate(params)
    except ValidationError as exc:
        error = exc.errors()[0]
        raise ManifestDecodeError(format_loc(error["loc"]), error["msg"]) from exc
