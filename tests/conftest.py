"""Shared fixtures: a small datamodel, the generate params the host would
send for it, and a metadata record whose emitter is a recording fake.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from generator_sdk.args import GenerateArgs
from generator_sdk.metadata import GeneratorMetadata

DATAMODEL = """\
datasource db {
  provider = "postgresql"
  url      = env("DATABASE_URL")
}

generator client {
  provider = "node generator.js"
  output   = "../generated/client.ts"
}

/// A registered user
model User {
  id        Int      @id @default(autoincrement())
  email     String   @unique
  name      String?
  role      Role     @default(USER)
  posts     Post[]
  createdAt DateTime @default(now())

  @@map("users")
}

model Post {
  id       Int    @id @default(autoincrement())
  title    String
  author   User   @relation(fields: [authorId], references: [id])
  authorId Int
}

enum Role {
  USER
  ADMIN
}
"""


class RecordingGenerator:
    """Emitter fake: remembers what it was called with, returns fixed text."""

    def __init__(self, text: str = "export const answer = 42;\n") -> None:
        self.text = text
        self.calls: list[tuple[GenerateArgs, dict[str, Any]]] = []

    def emit(self, args: GenerateArgs, config: dict[str, Any]) -> str:
        self.calls.append((args, config))
        return self.text


@pytest.fixture
def datamodel() -> str:
    return DATAMODEL


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def metadata(recording_generator) -> GeneratorMetadata:
    # Empty formatter tuple: never shell out during unit tests
    return GeneratorMetadata(
        generator=recording_generator,
        name="demo",
        default_output="./gen/demo.ts",
        formatter=(),
    )


@pytest.fixture
def make_params(tmp_path):
    """Build generate params pointing at a file under tmp_path."""

    def _make(output: str | None = None, datamodel: str = DATAMODEL, **config: Any) -> dict[str, Any]:
        return {
            "datamodel": datamodel,
            "generator": {
                "name": "client",
                "provider": {"value": "node generator.js", "fromEnvVar": None},
                "output": {"value": output or str(tmp_path / "out" / "client.ts"), "fromEnvVar": None},
                "config": config,
                "binaryTargets": [],
                "previewFeatures": [],
            },
            "datasources": [
                {
                    "name": "db",
                    "provider": "postgresql",
                    "activeProvider": "postgresql",
                    "url": {"fromEnvVar": "DATABASE_URL", "value": None},
                },
            ],
            "otherGenerators": [],
            "schemaPath": str(tmp_path / "schema.prisma"),
        }

    return _make


def request_line(method: str, id: Any = 1, params: Any = None) -> str:
    return json.dumps({"method": method, "id": id, "params": params}) + "\n"
