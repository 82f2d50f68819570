"""Jinja2-backed emission capability.

TemplateGenerator renders one template with the compiled schema; the
rendered text is what lands in the output file below the header.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import jinja2

from .args import GenerateArgs
from .naming import camel_to_snake, snake_to_camel, snake_to_pascal
from .schema import Field

TEMPLATE_DIR = Path(__file__).parent / "templates"

TYPESCRIPT_SCALARS: dict[str, str] = {
    "String": "string",
    "Int": "number",
    "Float": "number",
    "Decimal": "number",
    "BigInt": "bigint",
    "Boolean": "boolean",
    "DateTime": "Date",
    "Json": "unknown",
    "Bytes": "Uint8Array",
}


def ts_type(field: Field) -> str:
    """TypeScript type for a model field."""
    base = TYPESCRIPT_SCALARS.get(field.type, field.type) if field.kind == "scalar" else field.type
    if field.is_list:
        return f"{base}[]"
    if field.is_optional:
        return f"{base} | null"
    return base


def is_enabled(value: Any, default: bool = True) -> bool:
    """Read a generator config flag; the host passes config values as strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("false", "0", "no", "off")


def make_environment(template_dir: Path = TEMPLATE_DIR) -> jinja2.Environment:
    """Jinja2 environment with the naming and type filters registered."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["snake"] = camel_to_snake
    env.filters["camel"] = snake_to_camel
    env.filters["pascal"] = snake_to_pascal
    env.filters["ts_type"] = ts_type
    return env


class TemplateGenerator:
    """Emit source text by rendering a single Jinja2 template."""

    def __init__(
        self,
        template_name: str,
        template_dir: Path | None = None,
        filters: dict[str, Callable[..., Any]] | None = None,
    ) -> None:
        self.template_name = template_name
        self.env = make_environment(template_dir or TEMPLATE_DIR)
        self.env.filters.update(filters or {})

    def emit(self, args: GenerateArgs, config: dict[str, Any]) -> str:
        template = self.env.get_template(self.template_name)
        return template.render(
            datamodel=args.datamodel,
            schema=args.schema,
            datasources=args.datasources,
            datamodel_str=args.datamodel_str,
            config=config,
            banner=config.get("banner"),
            export_enums=is_enabled(config.get("exportEnums")),
        )


def typescript_generator() -> TemplateGenerator:
    """The bundled generator: one interface per model, one union per enum."""
    return TemplateGenerator("typescript.ts.j2")
