"""
Configuration management for rdstext.

This module handles loading and validating configuration from YAML files
with sensible defaults and environment variable support, and turns the
result into the immutable NormalizationConfig the pipeline consumes.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from rdstext.models.schemas import (
    DEFAULT_JOINER, DEFAULT_MAX_LEN, DelimiterKey, NormalizationConfig, resolve_delimiter
)
from rdstext.text.prefixes import DEFAULT_LANGUAGE
from rdstext.utils.exceptions import ConfigurationError

ENV_PREFIX = "RDSTEXT_"
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class TextConfig:
    transliterate: bool = False
    ascii_safe: bool = False
    delimiter_key: str = DelimiterKey.UNIT.value
    delimiter_custom: str = ""
    max_len: int = DEFAULT_MAX_LEN
    joiner: str = DEFAULT_JOINER


@dataclass
class PrefixConfig:
    language: str = DEFAULT_LANGUAGE


@dataclass
class IOConfig:
    input_file: str = "nowplaying.txt"
    output_dir: str = "."
    rt_file: str = "rt.txt"
    rtplus_file: str = "rtplus.txt"
    prefix_file: str = "prefix.txt"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = ""


@dataclass
class ConcurrencyConfig:
    max_workers: int = 4


@dataclass
class RdsTextConfig:
    """Structured configuration class with defaults."""

    text: TextConfig = field(default_factory=TextConfig)
    prefix: PrefixConfig = field(default_factory=PrefixConfig)
    io: IOConfig = field(default_factory=IOConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    concurrency: ConcurrencyConfig = field(default_factory=ConcurrencyConfig)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with defaults and environment variable support.

    Args:
        config_path: Path to configuration file (optional)

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config_dict = _dataclass_to_dict(RdsTextConfig())

    if config_path:
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except IOError as e:
            raise ConfigurationError(f"Cannot read config file {config_path}: {e}")
        if file_config:
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {config_path} must contain a mapping")
            config_dict = _merge_configs(config_dict, file_config)

    config_dict = _apply_env_overrides(config_dict)

    _validate_config(config_dict)

    return config_dict


def _dataclass_to_dict(obj) -> Dict[str, Any]:
    """Convert dataclass to dictionary recursively."""
    if hasattr(obj, '__dataclass_fields__'):
        return {name: _dataclass_to_dict(getattr(obj, name)) for name in obj.__dataclass_fields__}
    elif isinstance(obj, dict):
        return {k: _dataclass_to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_dataclass_to_dict(item) for item in obj]
    else:
        return obj


def _merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def _apply_env_overrides(config: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables should be prefixed with RDSTEXT_ and use
    double underscores to represent nested keys.

    Examples:
        RDSTEXT_TEXT__ASCII_SAFE=true
        RDSTEXT_LOGGING__LEVEL=DEBUG
    """
    environ = os.environ if environ is None else environ

    for env_var, value in environ.items():
        if not env_var.startswith(ENV_PREFIX):
            continue

        key_path = env_var[len(ENV_PREFIX):].lower().split('__')
        _set_nested_value(config, key_path, _convert_env_value(value))

    return config


def _convert_env_value(value: str) -> Any:
    """Convert environment variable string to appropriate Python type."""
    if value.lower() in ('true', 'yes', 'on'):
        return True
    elif value.lower() in ('false', 'no', 'off'):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    if value.startswith(('[', '{')):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def _set_nested_value(config: Dict[str, Any], key_path: list, value: Any):
    """Set a value in a nested dictionary using a list of keys."""
    current = config

    for key in key_path[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[key_path[-1]] = value


def _validate_config(config: Dict[str, Any]):
    """
    Validate configuration values.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: If configuration is invalid
    """
    text_config = config.get('text', {})

    for flag in ('transliterate', 'ascii_safe'):
        if not isinstance(text_config.get(flag, False), bool):
            raise ConfigurationError(f"text.{flag} must be true or false")

    delimiter_key = str(text_config.get('delimiter_key', DelimiterKey.UNIT.value)).lower()
    valid_keys = [key.value for key in DelimiterKey]
    if delimiter_key not in valid_keys:
        raise ConfigurationError(f"text.delimiter_key must be one of {valid_keys}")

    if delimiter_key == DelimiterKey.CUSTOM.value:
        custom = text_config.get('delimiter_custom')
        if not isinstance(custom, str) or not 1 <= len(custom) <= 5:
            raise ConfigurationError("text.delimiter_custom must be a string of 1-5 characters")

    max_len = text_config.get('max_len', DEFAULT_MAX_LEN)
    if isinstance(max_len, bool) or not isinstance(max_len, int) or max_len < 1:
        raise ConfigurationError("text.max_len must be a positive integer")

    joiner = text_config.get('joiner', DEFAULT_JOINER)
    if not isinstance(joiner, str) or not joiner.strip():
        raise ConfigurationError("text.joiner must contain a visible character")

    language = config.get('prefix', {}).get('language', DEFAULT_LANGUAGE)
    if not isinstance(language, str) or not language.strip():
        raise ConfigurationError("prefix.language must be a non-empty language code")

    io_config = config.get('io', {})
    for name in ('rt_file', 'rtplus_file', 'prefix_file'):
        value = io_config.get(name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"io.{name} must be a non-empty file name")

    concurrency_config = config.get('concurrency', {})

    max_workers = concurrency_config.get('max_workers', 4)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ConfigurationError("concurrency.max_workers must be a positive integer")

    logging_config = config.get('logging', {})

    log_level = logging_config.get('level', 'INFO')
    if not isinstance(log_level, str) or log_level.upper() not in VALID_LOG_LEVELS:
        raise ConfigurationError(f"logging.level must be one of {VALID_LOG_LEVELS}")


def to_normalization_config(config: Dict[str, Any]) -> NormalizationConfig:
    """
    Build the immutable pipeline configuration from a loaded config dictionary.

    Raises:
        ConfigurationError: If the text section does not form a valid configuration
    """
    text_config = config.get('text', {})
    try:
        delimiter = resolve_delimiter(
            DelimiterKey(str(text_config.get('delimiter_key', DelimiterKey.UNIT.value)).lower()),
            text_config.get('delimiter_custom')
        )
        return NormalizationConfig(
            transliteration_enabled=text_config.get('transliterate', False),
            ascii_safe_enabled=text_config.get('ascii_safe', False),
            delimiter=delimiter,
            max_len=text_config.get('max_len', DEFAULT_MAX_LEN),
            joiner=text_config.get('joiner', DEFAULT_JOINER),
        )
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid text configuration: {e}")


def get_config_template() -> str:
    """
    Get a YAML template for the configuration file.

    Returns:
        YAML configuration template as string
    """
    return """# Configuration for rdstext
text:
  transliterate: false     # Map Cyrillic/Greek to Latin, keep Latin scripts only
  ascii_safe: false        # Printable ASCII only (implies transliterate)
  delimiter_key: unit      # unit (U+241F), tab or custom
  delimiter_custom: ""     # 1-5 characters, used when delimiter_key is custom
  max_len: 64              # RadioText limit in UTF-16 code units
  joiner: " - "

prefix:
  language: en             # "now playing" prefix language code

io:
  input_file: "nowplaying.txt"
  output_dir: "."
  rt_file: "rt.txt"
  rtplus_file: "rtplus.txt"
  prefix_file: "prefix.txt"

logging:
  level: INFO
  format: "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
  file: ""

concurrency:
  max_workers: 4           # Threads used by --batch
"""
