"""Compile Prisma-style datamodel text into configuration and models.

Handles:
- datasource / generator blocks (``key = value`` properties)
- model blocks with field attributes (@id, @default(now()), ...) and
  block attributes (@@id, @@unique, @@map, ...)
- enum blocks
- ``///`` documentation comments, ``//`` comments
- ``?`` (optional) and ``[]`` (list) type modifiers

All problems are collected and raised together as a SchemaCompileError.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from .errors import SchemaCompileError, SchemaDiagnostic

SCALAR_TYPES = frozenset({
    "String", "Int", "BigInt", "Float", "Decimal",
    "Boolean", "DateTime", "Json", "Bytes",
})

_BLOCK_KINDS = ("model", "enum", "datasource", "generator")

_BLOCK_RE = re.compile(r"^(\w+)\s+(\w+)\s*\{$")
_FIELD_RE = re.compile(r"^(\w+)\s+(\w+)(\[\]|\?)?(?:\s+(.*))?$")
_PROPERTY_RE = re.compile(r"^(\w+)\s*=\s*(.+)$")
_ENUM_VALUE_RE = re.compile(r"^(\w+)(?:\s+(@.*))?$")
_ENV_RE = re.compile(r'^env\(\s*"([^"]*)"\s*\)$')
_ATTR_NAME_RE = re.compile(r"@{1,2}[\w.]+")
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


@dataclass(frozen=True)
class EnvVar:
    """A config value read from the environment, ``env("NAME")``."""

    name: str


@dataclass
class Attribute:
    name: str
    args: str = ""

    def list_args(self) -> list[str]:
        """Field names from ``[a, b]`` or ``fields: [a, b]`` style arguments."""
        match = re.search(r"\[([^\]]*)\]", self.args)
        inner = match.group(1) if match else self.args
        return [part.strip() for part in inner.split(",") if part.strip()]

    def string_arg(self) -> str | None:
        """First string literal argument, e.g. the name in ``@@map("users")``."""
        match = re.search(r'"((?:[^"\\]|\\.)*)"', self.args)
        return json.loads(f'"{match.group(1)}"') if match else None


@dataclass
class Field:
    name: str
    type: str
    arity: str  # "required", "optional" or "list"
    attributes: list[Attribute] = field(default_factory=list)
    documentation: str | None = None
    line: int = 0
    kind: str = "scalar"  # "scalar", "enum" or "object", set once types resolve

    @property
    def is_optional(self) -> bool:
        return self.arity == "optional"

    @property
    def is_list(self) -> bool:
        return self.arity == "list"

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def has_attribute(self, name: str) -> bool:
        return self.attribute(name) is not None


@dataclass
class Model:
    name: str
    fields: list[Field] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    documentation: str | None = None
    line: int = 0

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass
class Enum:
    name: str
    values: list[str] = field(default_factory=list)
    documentation: str | None = None
    line: int = 0


@dataclass
class Datamodel:
    models: list[Model] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)

    def model(self, name: str) -> Model | None:
        return next((m for m in self.models if m.name == name), None)

    def enum(self, name: str) -> Enum | None:
        return next((e for e in self.enums if e.name == name), None)


@dataclass
class ConfigBlock:
    """A datasource or generator block."""

    kind: str
    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    line: int = 0


@dataclass
class Configuration:
    datasources: list[ConfigBlock] = field(default_factory=list)
    generators: list[ConfigBlock] = field(default_factory=list)

    def generator(self, name: str | None = None) -> ConfigBlock | None:
        """Return the named generator block, or the first one."""
        for block in self.generators:
            if name is None or block.name == name:
                return block
        return None


def _strip_comment(line: str) -> str:
    """Drop a trailing ``//`` comment that is not inside a string literal."""
    in_string = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and in_string:
            i += 2
            continue
        if ch == '"':
            in_string = not in_string
        elif ch == "/" and not in_string and line.startswith("//", i):
            return line[:i]
        i += 1
    return line


def _split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on ``sep`` outside brackets, parentheses and strings."""
    parts: list[str] = []
    depth = 0
    in_string = False
    current = ""
    for ch in text:
        if ch == '"':
            in_string = not in_string
        elif not in_string and ch in "([":
            depth += 1
        elif not in_string and ch in ")]":
            depth -= 1
        elif not in_string and depth == 0 and ch == sep:
            parts.append(current.strip())
            current = ""
            continue
        current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


def parse_value(text: str) -> Any:
    """Parse the right-hand side of a config property."""
    text = text.strip()
    if text.startswith('"') and text.endswith('"') and len(text) >= 2:
        return json.loads(text)
    env = _ENV_RE.match(text)
    if env:
        return EnvVar(env.group(1))
    if text.startswith("[") and text.endswith("]"):
        return [parse_value(part) for part in _split_top_level(text[1:-1])]
    if text in ("true", "false"):
        return text == "true"
    if _NUMBER_RE.match(text):
        return float(text) if "." in text else int(text)
    return text


def parse_attributes(text: str) -> list[Attribute]:
    """Parse a run of ``@name(args)`` attributes.

    Raises ValueError on text that is not an attribute.
    """
    attrs: list[Attribute] = []
    i = 0
    while i < len(text):
        if text[i].isspace():
            i += 1
            continue
        match = _ATTR_NAME_RE.match(text, i)
        if not match:
            raise ValueError(f"unexpected {text[i:]!r}")
        name = match.group(0)
        i = match.end()
        args = ""
        if i < len(text) and text[i] == "(":
            depth = 0
            in_string = False
            start = i + 1
            while i < len(text):
                ch = text[i]
                if ch == '"' and text[i - 1] != "\\":
                    in_string = not in_string
                elif not in_string and ch == "(":
                    depth += 1
                elif not in_string and ch == ")":
                    depth -= 1
                    if depth == 0:
                        break
                i += 1
            if i >= len(text):
                raise ValueError(f"unbalanced parentheses in {name}")
            args = text[start:i].strip()
            i += 1
        attrs.append(Attribute(name=name, args=args))
    return attrs


class _Parser:
    def __init__(self, text: str) -> None:
        self.lines = text.splitlines()
        self.diagnostics: list[SchemaDiagnostic] = []
        self.configuration = Configuration()
        self.datamodel = Datamodel()

    def error(self, line: int, message: str) -> None:
        self.diagnostics.append(SchemaDiagnostic(line, message))

    def parse(self) -> None:
        """Split the text into top-level blocks and parse each one."""
        doc: list[str] = []
        i = 0
        while i < len(self.lines):
            raw = self.lines[i].strip()
            line_no = i + 1
            i += 1
            if raw.startswith("///"):
                doc.append(raw[3:].strip())
                continue
            line = _strip_comment(raw).strip()
            if not line:
                if not raw:
                    doc = []
                continue
            header = _BLOCK_RE.match(line)
            if not header:
                self.error(line_no, f"unexpected {line!r} outside of a block")
                doc = []
                continue
            kind, name = header.groups()
            body: list[tuple[int, str]] = []
            closed = False
            while i < len(self.lines):
                body_line = self.lines[i].strip()
                i += 1
                if _strip_comment(body_line).strip() == "}":
                    closed = True
                    break
                body.append((i, body_line))
            if not closed:
                self.error(line_no, f"{kind} {name} is missing a closing brace")
            documentation = "\n".join(doc) or None
            doc = []
            if kind == "model":
                self.parse_model(name, body, line_no, documentation)
            elif kind == "enum":
                self.parse_enum(name, body, line_no, documentation)
            elif kind in ("datasource", "generator"):
                self.parse_config(kind, name, body, line_no)
            else:
                self.error(line_no, f"unknown block type {kind!r}, expected one of {', '.join(_BLOCK_KINDS)}")

    def parse_model(self, name: str, body: list[tuple[int, str]], line_no: int, documentation: str | None) -> None:
        """Parse the fields and block attributes of one model."""
        model = Model(name=name, documentation=documentation, line=line_no)
        doc: list[str] = []
        for number, raw in body:
            if raw.startswith("///"):
                doc.append(raw[3:].strip())
                continue
            line = _strip_comment(raw).strip()
            if not line:
                continue
            if line.startswith("@@"):
                try:
                    model.attributes.extend(parse_attributes(line))
                except ValueError as exc:
                    self.error(number, f"invalid block attribute in {name}: {exc}")
                continue
            match = _FIELD_RE.match(line)
            if not match:
                self.error(number, f"invalid field definition {line!r} in model {name}")
                doc = []
                continue
            field_name, field_type, modifier, rest = match.groups()
            arity = {"?": "optional", "[]": "list"}.get(modifier or "", "required")
            try:
                attributes = parse_attributes(rest or "")
            except ValueError as exc:
                self.error(number, f"invalid attribute on {name}.{field_name}: {exc}")
                attributes = []
            model.fields.append(Field(
                name=field_name,
                type=field_type,
                arity=arity,
                attributes=attributes,
                documentation="\n".join(doc) or None,
                line=number,
            ))
            doc = []
        self.datamodel.models.append(model)

    def parse_enum(self, name: str, body: list[tuple[int, str]], line_no: int, documentation: str | None) -> None:
        enum = Enum(name=name, documentation=documentation, line=line_no)
        for number, raw in body:
            line = _strip_comment(raw).strip()
            if not line or raw.startswith("///") or line.startswith("@@"):
                continue
            match = _ENUM_VALUE_RE.match(line)
            if not match:
                self.error(number, f"invalid enum value {line!r} in enum {name}")
                continue
            if match.group(1) in enum.values:
                self.error(number, f"value {match.group(1)} is defined twice in enum {name}")
                continue
            enum.values.append(match.group(1))
        self.datamodel.enums.append(enum)

    def parse_config(self, kind: str, name: str, body: list[tuple[int, str]], line_no: int) -> None:
        block = ConfigBlock(kind=kind, name=name, line=line_no)
        for number, raw in body:
            line = _strip_comment(raw).strip()
            if not line:
                continue
            match = _PROPERTY_RE.match(line)
            if not match:
                self.error(number, f"invalid property {line!r} in {kind} {name}")
                continue
            try:
                block.properties[match.group(1)] = parse_value(match.group(2))
            except json.JSONDecodeError as exc:
                self.error(number, f"invalid string in {kind} {name}: {exc.msg}")
        if kind == "datasource":
            self.configuration.datasources.append(block)
        else:
            self.configuration.generators.append(block)

    def validate(self) -> None:
        """Cross-block checks: duplicates, datasource count, field type resolution."""
        if len(self.configuration.datasources) > 1:
            extra = self.configuration.datasources[1]
            self.error(extra.line, "only one datasource block is allowed")

        seen: dict[str, int] = {}
        for item in [*self.datamodel.models, *self.datamodel.enums]:
            if item.name in seen:
                self.error(item.line, f"{item.name} is already defined on line {seen[item.name]}")
            else:
                seen[item.name] = item.line

        for enum in self.datamodel.enums:
            if not enum.values:
                self.error(enum.line, f"enum {enum.name} must have at least one value")

        model_names = {m.name for m in self.datamodel.models}
        enum_names = {e.name for e in self.datamodel.enums}
        for model in self.datamodel.models:
            field_names: set[str] = set()
            for f in model.fields:
                if f.name in field_names:
                    self.error(f.line, f"field {f.name} is already defined on model {model.name}")
                field_names.add(f.name)
                if f.type in SCALAR_TYPES:
                    f.kind = "scalar"
                elif f.type in enum_names:
                    f.kind = "enum"
                elif f.type in model_names:
                    f.kind = "object"
                else:
                    self.error(
                        f.line,
                        f'type "{f.type}" is neither a built-in type, '
                        "nor refers to another model or enum",
                    )


def parse_schema(text: str) -> tuple[Configuration, Datamodel]:
    """Compile datamodel text into a (configuration, datamodel) pair."""
    parser = _Parser(text)
    parser.parse()
    parser.validate()
    if parser.diagnostics:
        raise SchemaCompileError(sorted(parser.diagnostics, key=lambda d: d.line))
    return parser.configuration, parser.datamodel
