"""
Toolchain configuration.

Parses and validates an optional YAML file (toyasm.yaml) holding defaults
for the command-line tools. Command-line flags override these values.
"""

from dataclasses import dataclass
from typing import Any

import yaml

from .errors import ConfigError
from .objfile import ObjectFormat


DEFAULT_CONFIG_NAME = "toyasm.yaml"

# key -> expected type
_KEYS = {
    "object_format": str,
    "output_dir": str,
    "write_text_dump": bool,
    "verbose": bool,
}


@dataclass
class AsmConfig:
    """
    Resolved configuration.

    Attributes:
        object_format: Object file layout (RAW or LEGACY)
        output_dir: Directory for default output files
        write_text_dump: Also write a grouped-binary .txt next to the object
        verbose: Print progress while assembling
    """

    object_format: ObjectFormat = ObjectFormat.RAW
    output_dir: str = "out"
    write_text_dump: bool = True
    verbose: bool = False


def parse_config(yaml_content: str) -> AsmConfig:
    """
    Parse and validate YAML configuration.

    Args:
        yaml_content: Raw YAML string content

    Returns:
        AsmConfig with defaults filled in

    Raises:
        ConfigError: If the configuration is invalid
    """
    try:
        raw = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    # An empty file means all defaults
    if raw is None:
        return AsmConfig()

    if not isinstance(raw, dict):
        raise ConfigError("Configuration must be a YAML mapping/dictionary")

    _validate_config(raw)

    config = AsmConfig()
    if "object_format" in raw:
        try:
            config.object_format = ObjectFormat.from_name(raw["object_format"])
        except ValueError as e:
            raise ConfigError(str(e))
    if "output_dir" in raw:
        config.output_dir = raw["output_dir"]
    if "write_text_dump" in raw:
        config.write_text_dump = raw["write_text_dump"]
    if "verbose" in raw:
        config.verbose = raw["verbose"]
    return config


def _validate_config(raw: dict) -> None:
    """Reject unknown keys and mistyped values."""
    for key, value in raw.items():
        if key not in _KEYS:
            raise ConfigError(f"Unknown configuration key '{key}'")
        _check_type(key, value, _KEYS[key])


def _check_type(key: str, value: Any, expected: type) -> None:
    if not isinstance(value, expected):
        raise ConfigError(
            f"'{key}' must be of type {expected.__name__}, got {type(value).__name__}"
        )
    if expected is str and not value:
        raise ConfigError(f"'{key}' must not be empty")


def load_config(path: str) -> AsmConfig:
    """Load configuration from a YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_config(f.read())
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}")
