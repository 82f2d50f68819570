"""Direct command-line mode, used when the generator is run with arguments.

    python -m generator_sdk manifest
    python -m generator_sdk generate --schema prisma/schema.prisma [--output out.ts]
    python -m generator_sdk generate --dmmf captured-request.json
"""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Any, Sequence

from .dmmf import Datasource, EngineDMMF, EnvValue, GeneratorConfig, decode_dmmf
from .loader import load_datamodel, load_dmmf
from .metadata import GeneratorMetadata
from .pipeline import generate
from .schema import ConfigBlock, EnvVar, parse_schema

# Generator block properties the host consumes itself; the rest is config
_HOST_KEYS = {"provider", "output", "binaryTargets", "previewFeatures"}


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def _env_value(value: Any) -> EnvValue:
    if isinstance(value, EnvVar):
        return EnvValue(from_env_var=value.name)
    return EnvValue(value=str(value))


def _config_value(value: Any) -> Any:
    """Render a parsed property the way the host passes config: as strings."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return [_config_value(v) for v in value]
    if isinstance(value, EnvVar):
        return os.environ.get(value.name, "")
    return str(value)


def _datasource(block: ConfigBlock) -> Datasource:
    provider = _config_value(block.properties.get("provider", ""))
    url = block.properties.get("url")
    return Datasource(
        name=block.name,
        provider=provider,
        active_provider=provider,
        url=_env_value(url) if url is not None else None,
    )


def dmmf_from_schema(
    metadata: GeneratorMetadata,
    schema_path: Path,
    output: str | None = None,
    generator_name: str | None = None,
    overrides: dict[str, str] | None = None,
) -> EngineDMMF:
    """Build the EngineDMMF the host would send for a schema file."""
    text = load_datamodel(schema_path)
    configuration, _ = parse_schema(text)
    block = configuration.generator(generator_name)
    properties = dict(block.properties) if block else {}

    if output is not None:
        output_value = EnvValue(value=output)
    elif isinstance(properties.get("output"), EnvVar):
        output_value = _env_value(properties["output"])
    elif properties.get("output"):
        # Relative outputs are relative to the schema file, as with the host
        output_value = EnvValue(value=str(schema_path.parent / str(properties["output"])))
    else:
        output_value = EnvValue(value=metadata.default_output)

    config = {k: _config_value(v) for k, v in properties.items() if k not in _HOST_KEYS}
    config.update(overrides or {})

    return EngineDMMF(
        datamodel=text,
        generator=GeneratorConfig(
            output=output_value,
            config=config,
            name=block.name if block else "",
        ),
        datasources=[_datasource(b) for b in configuration.datasources],
        schema_path=str(schema_path),
    )


def build_parser(metadata: GeneratorMetadata) -> argparse.ArgumentParser:
    """Argument parser for the manifest and generate commands."""
    parser = argparse.ArgumentParser(
        prog="generator",
        description=f"{metadata.name} code generator",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("manifest", help="Print the generator manifest as JSON")

    gen = sub.add_parser("generate", help="Generate code without the host")
    source = gen.add_mutually_exclusive_group(required=True)
    source.add_argument("--schema", type=Path, help="Datamodel file to generate from")
    source.add_argument("--dmmf", type=Path, help="Captured generate params (JSON) to replay")
    gen.add_argument("--output", help="Output file (overrides the schema's generator output)")
    gen.add_argument("--generator", help="Generator block to read settings from (default: first)")
    gen.add_argument(
        "--config",
        action="append",
        type=_key_value,
        default=[],
        metavar="KEY=VALUE",
        help="Generator config entry, may be repeated",
    )
    return parser


def main(metadata: GeneratorMetadata, argv: Sequence[str]) -> int:
    """Run one direct-mode command and return the exit status."""
    parser = build_parser(metadata)
    args = parser.parse_args(list(argv))

    if args.command == "manifest":
        print(json.dumps(metadata.manifest().to_result(), indent=2))
        return 0

    overrides = dict(args.config)
    if args.dmmf is not None:
        try:
            params = load_dmmf(args.dmmf)
        except (OSError, json.JSONDecodeError) as exc:
            parser.error(f"cannot read {args.dmmf}: {exc}")
        dmmf = decode_dmmf(params)
        if args.output is not None:
            dmmf.generator.output = EnvValue(value=args.output)
        dmmf.generator.config.update(overrides)
    else:
        try:
            dmmf = dmmf_from_schema(metadata, args.schema, args.output, args.generator, overrides)
        except OSError as exc:
            parser.error(f"cannot read {args.schema}: {exc}")

    path = generate(metadata, dmmf)
    print(f"Generated {path}")
    return 0
