"""Tests for configuration loading and validation."""

import os

import pytest
import yaml

from rdstext.models.schemas import UNIT_SEPARATOR_SYMBOL
from rdstext.utils.config_loader import (
    _apply_env_overrides, _convert_env_value, _merge_configs, get_config_template,
    load_config, to_normalization_config
)
from rdstext.utils.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("RDSTEXT_"):
            monkeypatch.delenv(name)


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_defaults(self):
        config = load_config()
        assert config['text']['max_len'] == 64
        assert config['text']['delimiter_key'] == "unit"
        assert config['prefix']['language'] == "en"
        assert config['concurrency']['max_workers'] == 4

    def test_file_overrides_defaults(self, tmp_path):
        path = write_yaml(tmp_path / "rdstext.yaml", {"text": {"ascii_safe": True}, "prefix": {"language": "de"}})
        config = load_config(path)
        assert config['text']['ascii_safe'] is True
        assert config['text']['max_len'] == 64
        assert config['prefix']['language'] == "de"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("text: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_template_is_valid(self, tmp_path):
        path = tmp_path / "template.yaml"
        path.write_text(get_config_template(), encoding="utf-8")
        assert load_config(path) == load_config()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("RDSTEXT_TEXT__ASCII_SAFE", "true")
        monkeypatch.setenv("RDSTEXT_TEXT__MAX_LEN", "32")
        config = load_config()
        assert config['text']['ascii_safe'] is True
        assert config['text']['max_len'] == 32


class TestValidation:

    @pytest.mark.parametrize("text", [
        {"delimiter_key": "comma"},
        {"delimiter_key": "custom", "delimiter_custom": ""},
        {"delimiter_key": "custom", "delimiter_custom": "toolong"},
        {"max_len": 0},
        {"max_len": True},
        {"joiner": "   "},
        {"ascii_safe": "sometimes"},
    ])
    def test_invalid_text_section(self, tmp_path, text):
        path = write_yaml(tmp_path / "rdstext.yaml", {"text": text})
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_log_level(self, tmp_path):
        path = write_yaml(tmp_path / "rdstext.yaml", {"logging": {"level": "LOUD"}})
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_workers(self, tmp_path):
        path = write_yaml(tmp_path / "rdstext.yaml", {"concurrency": {"max_workers": 0}})
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestHelpers:

    def test_merge_is_recursive(self):
        merged = _merge_configs({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}, "d": 4})
        assert merged == {"a": {"b": 1, "c": 3}, "d": 4}

    def test_convert_env_value(self):
        assert _convert_env_value("yes") is True
        assert _convert_env_value("off") is False
        assert _convert_env_value("12") == 12
        assert _convert_env_value('{"a": 1}') == {"a": 1}
        assert _convert_env_value("de") == "de"

    def test_env_overrides_use_given_environment(self):
        config = _apply_env_overrides(
            {"prefix": {"language": "en"}},
            environ={"RDSTEXT_PREFIX__LANGUAGE": "fr", "OTHER": "x"},
        )
        assert config == {"prefix": {"language": "fr"}}


class TestNormalizationConfig:

    def test_defaults(self):
        normalization = to_normalization_config(load_config())
        assert normalization.delimiter == UNIT_SEPARATOR_SYMBOL
        assert normalization.max_len == 64
        assert not normalization.transliterate

    def test_tab_delimiter(self):
        config = load_config()
        config['text']['delimiter_key'] = "tab"
        assert to_normalization_config(config).delimiter == "\t"

    def test_custom_delimiter(self):
        config = load_config()
        config['text'].update(delimiter_key="custom", delimiter_custom="||")
        assert to_normalization_config(config).delimiter == "||"

    def test_ascii_implies_transliteration(self):
        config = load_config()
        config['text']['ascii_safe'] = True
        assert to_normalization_config(config).transliterate

    def test_invalid_values_raise_configuration_error(self):
        config = load_config()
        config['text']['max_len'] = -1
        with pytest.raises(ConfigurationError):
            to_normalization_config(config)
