"""
Tests for contracts/cli.py - the perimeter-validate command.
"""

import json
import logging

import pytest

from common.structured_logging import PACKAGE_LOGGERS
from contracts.cli import EXIT_INVALID, EXIT_OK, EXIT_USAGE, build_parser, main


@pytest.fixture(autouse=True)
def restore_package_loggers():
    """main() configures logging; put the package loggers back afterwards."""
    saved = {}
    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        saved[name] = (list(package_logger.handlers), package_logger.level)
    yield
    for name, (handlers, level) in saved.items():
        package_logger = logging.getLogger(name)
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()
        for handler in handlers:
            package_logger.addHandler(handler)
        package_logger.setLevel(level)


@pytest.fixture
def write_json(tmp_path):
    def _write(data, name="data.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return _write


VALID_USER = {
    "email": "user@example.com",
    "password": "correct horse battery",
    "address": {"city": "Portland", "zip": "97201"},
}


# =============================================================================
# PARSER
# =============================================================================


class TestParser:
    """Tests for build_parser()."""

    def test_required_arguments(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_flags(self):
        args = build_parser().parse_args(
            ["--contract", "c", "--file", "f.json", "--strict", "--json"]
        )

        assert args.contract == "c"
        assert args.strict is True
        assert args.json is True
        assert args.contracts is None


# =============================================================================
# VALIDATION RUNS
# =============================================================================


class TestMain:
    """Tests for main()."""

    def test_valid_data(self, contract_file, write_json, capsys):
        code = main([
            "--contracts", str(contract_file),
            "--contract", "create_user",
            "--file", write_json(VALID_USER),
        ])

        assert code == EXIT_OK
        assert "Validation PASSED for create_user" in capsys.readouterr().out

    def test_invalid_data_prints_report(self, contract_file, write_json, capsys):
        code = main([
            "--contracts", str(contract_file),
            "--contract", "create_user",
            "--file", write_json({"email": "invalid"}),
        ])

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "Validation FAILED for create_user" in out
        assert "Validation failed at perimeter with 2 violation(s):" in out
        assert "  - email: does not match format" in out
        assert "  - password: is required" in out

    def test_strict_exit_code(self, contract_file, write_json):
        code = main([
            "--contracts", str(contract_file),
            "--contract", "ping",
            "--file", write_json({"id": 0}),
            "--strict",
        ])

        assert code == EXIT_INVALID

    def test_json_output(self, contract_file, write_json, capsys):
        main([
            "--contracts", str(contract_file),
            "--contract", "create_user",
            "--file", write_json({**VALID_USER, "address": {"city": "Portland", "zip": "x"}}),
            "--json",
        ])

        out = capsys.readouterr().out
        payload = json.loads(out[out.index("["):])
        assert payload == [{"field": "zip", "error": "does not match format", "path": ["address"]}]

    def test_unknown_contract(self, contract_file, write_json, capsys):
        code = main([
            "--contracts", str(contract_file),
            "--contract", "missing",
            "--file", write_json({}),
            "--strict",
        ])

        assert code == EXIT_INVALID
        assert "_contract: contract missing not found" in capsys.readouterr().out

    def test_non_map_data(self, contract_file, write_json, capsys):
        main([
            "--contracts", str(contract_file),
            "--contract", "ping",
            "--file", write_json([1, 2]),
        ])

        assert "_root: expected map, got list" in capsys.readouterr().out

    def test_contracts_path_from_environment(self, contract_file, write_json, monkeypatch):
        monkeypatch.setenv("PERIMETER_CONTRACTS", str(contract_file))

        code = main(["--contract", "ping", "--file", write_json({"id": 1}), "--strict"])

        assert code == EXIT_OK


# =============================================================================
# USAGE ERRORS
# =============================================================================


class TestUsageErrors:
    """Tests for exit code 2 paths."""

    def test_no_contract_file(self, write_json, capsys):
        code = main(["--contract", "ping", "--file", write_json({})])

        assert code == EXIT_USAGE
        assert "no contract file given" in capsys.readouterr().err

    def test_missing_contract_file(self, tmp_path, write_json, capsys):
        code = main([
            "--contracts", str(tmp_path / "absent.yaml"),
            "--contract", "ping",
            "--file", write_json({}),
        ])

        assert code == EXIT_USAGE
        assert "Error loading contracts" in capsys.readouterr().err

    def test_malformed_contract_file(self, tmp_path, write_json, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("contracts:\n  c:\n    - {name: x, type: decimal}\n")

        code = main(["--contracts", str(path), "--contract", "c", "--file", write_json({})])

        assert code == EXIT_USAGE
        assert "Invalid contract definition" in capsys.readouterr().err

    def test_missing_data_file(self, contract_file, tmp_path, capsys):
        code = main([
            "--contracts", str(contract_file),
            "--contract", "ping",
            "--file", str(tmp_path / "absent.json"),
        ])

        assert code == EXIT_USAGE
        assert "Error loading file" in capsys.readouterr().err

    def test_malformed_data_file(self, contract_file, tmp_path, capsys):
        path = tmp_path / "data.json"
        path.write_text("{oops")

        code = main(["--contracts", str(contract_file), "--contract", "ping", "--file", str(path)])

        assert code == EXIT_USAGE
        assert "Error loading file" in capsys.readouterr().err
