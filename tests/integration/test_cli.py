#!/usr/bin/env python3
"""
Tests for the shallowcopy-gen command line.
"""

import json
import os

import pytest

from app.cli import build_parser, main, parse_cli
from app.config import DEFAULT_CONFIG

OUTPUT = os.path.join("api", "zz_generated.shallowcopy.go")


@pytest.fixture
def dump_file(tmp_path, api_dump):
    path = tmp_path / "types.json"
    path.write_text(json.dumps(api_dump))
    return str(path)


class TestParseCli:
    def test_flags_override_config(self):
        args, cfg = parse_cli(["types.json", "--jobs", "4", "--year", "2021", "--stdout"], DEFAULT_CONFIG)
        assert args.input == "types.json"
        assert cfg.jobs == 4
        assert cfg.year == "2021"
        assert cfg.to_stdout is True

    def test_config_file_then_flags(self, tmp_path):
        path = tmp_path / "gen.yaml"
        path.write_text("jobs: 2\nmethod_name: Clone\n")
        _, cfg = parse_cli(["--config", str(path), "--jobs", "5"], DEFAULT_CONFIG)
        assert cfg.method_name == "Clone"
        assert cfg.jobs == 5

    def test_verbosity(self):
        assert parse_cli(["-v"], DEFAULT_CONFIG)[1].log_level == "DEBUG"
        assert parse_cli(["-q"], DEFAULT_CONFIG)[1].log_level == "WARNING"
        assert parse_cli([], DEFAULT_CONFIG)[1].log_level == "INFO"

    def test_output_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--stdout", "--output-dir", "out"])


class TestMain:
    def test_writes_files(self, dump_file, tmp_path):
        out_dir = tmp_path / "out"
        assert main([dump_file, "--output-dir", str(out_dir)]) == 0
        text = (out_dir / OUTPUT).read_text()
        assert text.startswith("// Code generated by shallowcopy-gen. DO NOT EDIT.\n")
        assert "func (o User) ShallowCopy() User {" in text

    def test_stdout(self, dump_file, capsys):
        assert main([dump_file, "--stdout"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("// example.com/app/api/zz_generated.shallowcopy.go\n")
        assert "\t\tlabels: o.labels,\n" in out

    def test_header_file(self, dump_file, tmp_path, capsys):
        header = tmp_path / "boilerplate.txt"
        header.write_text("// Copyright YEAR Example\n")
        assert main([dump_file, "--stdout", "--header-file", str(header), "--year", "2020"]) == 0
        assert "// Copyright 2020 Example\n\n// Code generated" in capsys.readouterr().out

    def test_generation_errors_exit_one(self, tmp_path, capsys):
        path = tmp_path / "types.json"
        path.write_text(json.dumps({"name": "p", "types": [
            {"name": "Tags", "pos": "t.go:1:6", "doc": ["// +shallowcopy:generate"], "type": "[]string"},
        ]}))
        assert main([str(path), "--output-dir", str(tmp_path / "out")]) == 1
        err = capsys.readouterr().err
        assert "1 error(s):" in err
        assert "p: t.go:1:6: Tags is not a struct type" in err

    def test_missing_input_exits_two(self, capsys):
        assert main([]) == 2
        assert "a type dump is required" in capsys.readouterr().err

    def test_unreadable_input_exits_two(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_invalid_dump_exits_two(self, tmp_path):
        path = tmp_path / "types.json"
        path.write_text("[1, 2")
        assert main([str(path)]) == 2

    def test_malformed_method_exits_two(self, tmp_path, capsys):
        path = tmp_path / "types.json"
        path.write_text(json.dumps({"name": "p", "types": [
            {"name": "T", "type": "int", "methods": [{"name": "ShallowCopy", "depth": "one"}]},
        ]}))
        assert main([str(path), "--stdout"]) == 2
        assert "depth must be a non-negative count" in capsys.readouterr().err

    def test_bad_flag_exits_two(self):
        assert main(["--jobs", "many"]) == 2

    def test_bad_config_exits_two(self, tmp_path, capsys):
        path = tmp_path / "gen.yaml"
        path.write_text("jobs: 0\n")
        assert main(["--config", str(path), "x.json"]) == 2
        assert "jobs must be at least 1" in capsys.readouterr().err

    def test_help_markers(self, capsys):
        assert main(["--help-markers"]) == 0
        out = capsys.readouterr().out
        assert "+shallowcopy:generate  (object, type, bool, default false)" in out
        assert "enables or disables shallowcopy implementation generation" in out
