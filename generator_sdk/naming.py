"""Identifier case conversion and the datamodel name checks.

validate_names runs before any emitter sees the datamodel. It rejects:
  - model/enum names the generated client reserves (Client, Prisma, ...)
  - model/enum names that collapse to the same snake_case name
      UserPost, User_Post        -> user_post
  - field names that collapse to the same snake_case name in one model
      createdAt, created_at      -> created_at
  - field names starting with an underscore
"""

from __future__ import annotations

import re

from .args import GenerateArgs
from .errors import NameValidationError

RESERVED_NAMES = frozenset({
    "Client",
    "Prisma",
    "PrismaClient",
    "Actions",
    "Query",
    "Mutation",
    "Transaction",
    "BatchPayload",
})


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()
    return re.sub(r"_+", "_", s2)


def snake_to_pascal(name: str) -> str:
    """Convert snake_case (or camelCase) to PascalCase."""
    return "".join(part[:1].upper() + part[1:] for part in camel_to_snake(name).split("_") if part)


def snake_to_camel(name: str) -> str:
    """Convert snake_case (or PascalCase) to camelCase."""
    pascal = snake_to_pascal(name)
    return pascal[:1].lower() + pascal[1:]


def _collisions(names: list[str]) -> list[tuple[str, str]]:
    """Pairs of distinct names sharing a snake_case form."""
    seen: dict[str, str] = {}
    pairs = []
    for name in names:
        key = camel_to_snake(name)
        if key in seen and seen[key] != name:
            pairs.append((seen[key], name))
        else:
            seen.setdefault(key, name)
    return pairs


def validate_names(args: GenerateArgs) -> None:
    """Raise NameValidationError listing every naming problem found."""
    problems: list[str] = []
    datamodel = args.datamodel

    type_names = [m.name for m in datamodel.models] + [e.name for e in datamodel.enums]
    for name in type_names:
        if name in RESERVED_NAMES:
            problems.append(f"{name} is a reserved name and cannot be used for a model or enum")
    for first, second in _collisions(type_names):
        problems.append(f"{first} and {second} both map to {camel_to_snake(first)}")

    for model in datamodel.models:
        field_names = [f.name for f in model.fields]
        for name in field_names:
            if name.startswith("_"):
                problems.append(f"{model.name}.{name} must not start with an underscore")
        for first, second in _collisions(field_names):
            problems.append(
                f"{model.name}.{first} and {model.name}.{second} both map to {camel_to_snake(first)}"
            )

    if problems:
        raise NameValidationError(problems)
