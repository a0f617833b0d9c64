"""
Tests for YAML configuration loading.
"""

import pytest

from toyasm.config import AsmConfig, load_config, parse_config
from toyasm.errors import ConfigError
from toyasm.objfile import ObjectFormat


class TestParseConfig:
    def test_empty_is_defaults(self):
        assert parse_config("") == AsmConfig()

    def test_full(self):
        config = parse_config("""
object_format: legacy
output_dir: build
write_text_dump: false
verbose: true
""")
        assert config.object_format is ObjectFormat.LEGACY
        assert config.output_dir == "build"
        assert config.write_text_dump is False
        assert config.verbose is True

    def test_invalid_yaml_syntax(self):
        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            parse_config("object_format: [raw\n")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            parse_config("- raw\n- legacy\n")

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown configuration key 'endian'"):
            parse_config("endian: big\n")

    def test_wrong_type(self):
        with pytest.raises(ConfigError, match="'verbose' must be of type bool"):
            parse_config("verbose: 1\n")

    def test_empty_output_dir(self):
        with pytest.raises(ConfigError, match="'output_dir' must not be empty"):
            parse_config("output_dir: ''\n")

    def test_unknown_format(self):
        with pytest.raises(ConfigError, match="Unknown object format 'elf'"):
            parse_config("object_format: elf\n")


class TestLoadConfig:
    def test_load(self, tmp_path):
        path = tmp_path / "toyasm.yaml"
        path.write_text("object_format: raw\noutput_dir: bin\n")
        config = load_config(str(path))
        assert config.object_format is ObjectFormat.RAW
        assert config.output_dir == "bin"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            load_config(str(tmp_path / "missing.yaml"))
