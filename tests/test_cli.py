"""Tests for direct command-line mode."""

import json

import pytest
from conftest import DATAMODEL

from generator_sdk import cli
from generator_sdk.errors import SchemaCompileError


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "prisma" / "schema.prisma"
    path.parent.mkdir()
    path.write_text(DATAMODEL)
    return path


class TestManifestCommand:

    def test_prints_manifest(self, metadata, capsys):
        assert cli.main(metadata, ["manifest"]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "defaultOutput": "./gen/demo.ts",
            "prettyName": "demo",
        }


class TestGenerateCommand:
    """Running the pipeline without the host."""

    def test_output_relative_to_schema(self, metadata, schema_file, tmp_path, capsys):
        assert cli.main(metadata, ["generate", "--schema", str(schema_file)]) == 0
        expected = tmp_path / "generated" / "client.ts"
        assert expected.read_text().startswith("// Code generated by demo. DO NOT EDIT")
        assert "Generated" in capsys.readouterr().out

    def test_explicit_output(self, metadata, schema_file, tmp_path):
        target = tmp_path / "elsewhere.ts"
        cli.main(metadata, ["generate", "--schema", str(schema_file), "--output", str(target)])
        assert target.exists()

    def test_config_from_schema_and_flags(self, metadata, recording_generator, tmp_path):
        schema = tmp_path / "schema.prisma"
        schema.write_text(
            'generator ts {\n  provider = "x"\n  output = "out.ts"\n  exportEnums = false\n  banner = "hi"\n}\n'
            "model A {\n  id Int @id\n}\n"
        )
        cli.main(metadata, ["generate", "--schema", str(schema), "--config", "banner=bye"])
        ((_, config),) = recording_generator.calls
        assert config == {"exportEnums": "false", "banner": "bye"}

    def test_default_output_when_schema_has_none(self, metadata, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        schema = tmp_path / "schema.prisma"
        schema.write_text("model A {\n  id Int @id\n}\n")
        cli.main(metadata, ["generate", "--schema", str(schema)])
        assert (tmp_path / "gen" / "demo.ts").exists()

    def test_datasources_from_schema(self, metadata, schema_file, tmp_path):
        dmmf = cli.dmmf_from_schema(metadata, schema_file)
        (ds,) = dmmf.datasources
        assert ds.provider == "postgresql"
        assert ds.url.from_env_var == "DATABASE_URL"
        assert dmmf.generator.name == "client"

    def test_replay_captured_request(self, metadata, make_params, tmp_path):
        captured = tmp_path / "request.json"
        captured.write_text(json.dumps({"method": "generate", "id": 1, "params": make_params()}))
        target = tmp_path / "replayed.ts"
        cli.main(metadata, ["generate", "--dmmf", str(captured), "--output", str(target)])
        assert target.read_text().endswith("export const answer = 42;\n")

    def test_compile_errors_propagate(self, metadata, tmp_path):
        schema = tmp_path / "schema.prisma"
        schema.write_text("model A {\n  b Nope\n}\n")
        with pytest.raises(SchemaCompileError):
            cli.main(metadata, ["generate", "--schema", str(schema)])


class TestUsageErrors:

    def test_missing_schema_file(self, metadata, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(metadata, ["generate", "--schema", str(tmp_path / "nope.prisma")])
        assert exc_info.value.code == 2

    def test_source_required(self, metadata):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(metadata, ["generate"])
        assert exc_info.value.code == 2

    def test_bad_config_pair(self, metadata, schema_file):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(metadata, ["generate", "--schema", str(schema_file), "--config", "novalue"])
        assert exc_info.value.code == 2

    def test_unreadable_dmmf(self, metadata, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        with pytest.raises(SystemExit) as exc_info:
            cli.main(metadata, ["generate", "--dmmf", str(bad)])
        assert exc_info.value.code == 2
