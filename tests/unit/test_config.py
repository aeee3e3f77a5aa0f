#!/usr/bin/env python3
"""
Tests for generator configuration loading.
"""

import json

import pytest

from app.config import DEFAULT_CONFIG, GeneratorConfig, load_config
from core.errors import ConfigError


def test_defaults():
    cfg = GeneratorConfig()
    assert cfg.marker_name == "shallowcopy:generate"
    assert cfg.method_name == "ShallowCopy"
    assert cfg.output_file_name == "zz_generated.shallowcopy.go"
    assert cfg.jobs == 1
    assert cfg.validate() is cfg


class TestValidate:
    @pytest.mark.parametrize("changes", [
        {"method_name": "shallowCopy"},
        {"method_name": "Shallow-Copy"},
        {"receiver_name": "1o"},
        {"marker_name": ""},
        {"output_file_name": "copy.txt"},
        {"jobs": 0},
        {"log_level": "LOUD"},
    ])
    def test_rejected(self, changes):
        with pytest.raises(ConfigError):
            GeneratorConfig(**changes).validate()

    def test_year_becomes_string(self):
        assert GeneratorConfig(year=2024).validate().year == "2024"


class TestOverrides:
    def test_none_values_are_ignored(self):
        cfg = DEFAULT_CONFIG.with_overrides(jobs=None, output_directory="out")
        assert cfg.jobs == 1
        assert cfg.output_directory == "out"

    def test_original_is_untouched(self):
        DEFAULT_CONFIG.with_overrides(jobs=4)
        assert DEFAULT_CONFIG.jobs == 1

    def test_invalid_override(self):
        with pytest.raises(ConfigError):
            DEFAULT_CONFIG.with_overrides(jobs=-1)


class TestLoadConfig:
    def test_yaml(self, tmp_path):
        path = tmp_path / "gen.yaml"
        path.write_text("method-name: Clone\njobs: 3\nyear: 2022\n")
        cfg = load_config(str(path))
        assert cfg.method_name == "Clone"
        assert cfg.jobs == 3
        assert cfg.year == "2022"

    def test_json(self, tmp_path):
        path = tmp_path / "gen.json"
        path.write_text(json.dumps({"receiver_name": "in", "to_stdout": True}))
        cfg = load_config(str(path))
        assert cfg.receiver_name == "in"
        assert cfg.to_stdout is True

    def test_empty_yaml_keeps_base(self, tmp_path):
        path = tmp_path / "gen.yml"
        path.write_text("")
        base = GeneratorConfig(jobs=2)
        assert load_config(str(path), base).jobs == 2

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "gen.yaml"
        path.write_text("colour: blue\n")
        with pytest.raises(ConfigError, match="unknown config key"):
            load_config(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "gen.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "gen.yaml"
        path.write_text("jobs: [1\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "gen.json"
        path.write_text("{")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yaml"))


class TestReadHeader:
    def test_no_header(self):
        assert DEFAULT_CONFIG.read_header() is None

    def test_reads_file(self, tmp_path):
        path = tmp_path / "boilerplate.go.txt"
        path.write_text("// Copyright YEAR\n")
        assert GeneratorConfig(header_file=str(path)).read_header() == "// Copyright YEAR\n"

    def test_missing_file(self, tmp_path):
        cfg = GeneratorConfig(header_file=str(tmp_path / "missing.txt"))
        with pytest.raises(ConfigError):
            cfg.read_header()
