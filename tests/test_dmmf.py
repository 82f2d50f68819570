"""Tests for decoding the EngineDMMF envelope."""

import pytest

from generator_sdk.dmmf import EnvValue, decode_dmmf, format_loc
from generator_sdk.errors import ManifestDecodeError


class TestDecodeDmmf:
    """Strict envelope decoding with field paths on failure."""

    def test_full_params(self, make_params, datamodel):
        dmmf = decode_dmmf(make_params(output="/tmp/x.ts", exportEnums="false"))
        assert dmmf.datamodel == datamodel
        assert dmmf.generator.name == "client"
        assert dmmf.generator.config == {"exportEnums": "false"}
        assert dmmf.output_path() == "/tmp/x.ts"
        assert dmmf.datasources[0].active_provider == "postgresql"
        assert dmmf.datasources[0].url.from_env_var == "DATABASE_URL"

    def test_unknown_keys_ignored(self, make_params):
        params = make_params()
        params["dmmf"] = {"datamodel": {"models": []}}
        params["generator"]["isCustomOutput"] = True
        decode_dmmf(params)

    def test_missing_output_names_path(self, make_params):
        params = make_params()
        del params["generator"]["output"]
        with pytest.raises(ManifestDecodeError) as exc_info:
            decode_dmmf(params)
        assert exc_info.value.path == "generator.output"

    def test_missing_datamodel(self, make_params):
        params = make_params()
        del params["datamodel"]
        with pytest.raises(ManifestDecodeError) as exc_info:
            decode_dmmf(params)
        assert exc_info.value.path == "datamodel"

    def test_wrong_type_in_list_names_index(self, make_params):
        params = make_params()
        params["datasources"][0]["url"] = 5
        with pytest.raises(ManifestDecodeError) as exc_info:
            decode_dmmf(params)
        assert exc_info.value.path == "datasources[0].url"

    def test_params_not_an_object(self):
        with pytest.raises(ManifestDecodeError):
            decode_dmmf(None)

    def test_message_mentions_path(self, make_params):
        params = make_params()
        del params["generator"]["config"]
        with pytest.raises(ManifestDecodeError, match="generator.config"):
            decode_dmmf(params)


class TestEnvValue:
    """Resolving {value, fromEnvVar} pairs."""

    def test_literal(self):
        assert EnvValue(value="out.ts").get_value() == "out.ts"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("GEN_OUT", "/env/out.ts")
        assert EnvValue(from_env_var="GEN_OUT", value=None).get_value() == "/env/out.ts"

    def test_missing_env_var(self, monkeypatch):
        monkeypatch.delenv("GEN_OUT", raising=False)
        with pytest.raises(ManifestDecodeError) as exc_info:
            EnvValue(from_env_var="GEN_OUT").get_value("generator.output")
        assert exc_info.value.path == "generator.output"

    def test_neither_set(self):
        with pytest.raises(ManifestDecodeError):
            EnvValue().get_value("generator.output")


class TestFormatLoc:

    def test_nested(self):
        assert format_loc(("generator", "output", "value")) == "generator.output.value"

    def test_index(self):
        assert format_loc(("datasources", 2, "name")) == "datasources[2].name"

    def test_root(self):
        assert format_loc(()) == "<root>"
