"""Tests for the archplot command line."""

import json
import logging

import pytest

import archplot.cli
from archplot.cli import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces the root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestBuildParser:
    """Tests for the argument parser."""

    def test_defaults(self):
        args = build_parser().parse_args(["data.json"])
        assert args.input == "data.json"
        assert args.output == "business-architecture.svg"
        assert not args.demo
        assert not args.report
        assert not args.verbose

    def test_flags(self):
        args = build_parser().parse_args(["--demo", "--report", "-v", "-o", "x.svg"])
        assert args.demo
        assert args.report
        assert args.verbose
        assert args.output == "x.svg"


class TestMain:
    """Tests for main."""

    def test_module_documents_usage(self):
        assert "archplot [INPUT]" in archplot.cli.__doc__

    def test_demo(self, tmp_path, capsys):
        output = tmp_path / "demo.svg"
        assert main(["--demo", "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8").count("<svg") == 1
        out = capsys.readouterr().out
        assert "Systems: 6" in out
        assert "Connections: 6" in out

    def test_input_file_with_report(self, tmp_path, simple_data, capsys):
        data_path = tmp_path / "data.json"
        data_path.write_text(json.dumps(simple_data), encoding="utf-8")
        output = tmp_path / "out.svg"

        assert main([str(data_path), "-o", str(output), "--report"]) == 0
        assert output.exists()
        assert "Spatial analysis report" in capsys.readouterr().out

    def test_missing_input_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.json"), "-o", str(tmp_path / "out.svg")]) == 1

    def test_invalid_json(self, tmp_path):
        data_path = tmp_path / "broken.json"
        data_path.write_text("{oops", encoding="utf-8")
        assert main([str(data_path), "-o", str(tmp_path / "out.svg")]) == 1

    def test_invalid_data(self, tmp_path):
        data_path = tmp_path / "data.json"
        data_path.write_text(json.dumps({"AS": [{"id": "nameless"}]}), encoding="utf-8")
        output = tmp_path / "out.svg"
        assert main([str(data_path), "-o", str(output)]) == 1
        assert not output.exists()
