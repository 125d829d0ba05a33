"""
Tests for CLI Commands
======================
Tests for namekit CLI interface in namekit/cli.py.
"""

import json
import os
import pytest
import re
import sys
import subprocess
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namekit.cli import build_parser, main
from namekit.generators.phonemes import load_cultures, load_dialects


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "namekit", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        cwd=str(ROOT),
        env={**os.environ, "COLUMNS": "200", "PYTHONIOENCODING": "utf-8"},
    )


class TestCLIBasic:
    """Basic CLI tests."""

    def test_version_flag(self):
        """Test --version flag."""
        result = run_cli("--version")
        assert result.returncode == 0
        assert "namekit" in result.stdout.lower()

    def test_help_flag(self):
        """Test --help flag."""
        result = run_cli("--help")
        assert result.returncode == 0
        assert "generate" in result.stdout.lower()
        assert "dialects" in result.stdout.lower()

    def test_generate_help(self):
        """Test generate --help."""
        result = run_cli("generate", "--help")
        assert result.returncode == 0
        assert "--culture" in result.stdout
        assert "--dialect" in result.stdout

    def test_no_command_prints_help(self):
        result = run_cli()
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()


class TestCLIGenerate:
    """Tests for generate command."""

    def test_generate_json(self):
        result = run_cli("generate", "--culture", "dwarven", "--gender", "male",
                         "--dialect", "deep_dwarf", "-n", "5", "--seed", "1", "--json")
        assert result.returncode == 0
        names = json.loads(result.stdout)
        assert len(names) == 5
        for entry in names:
            assert entry['dialect'] == 'deep_dwarf'
            assert entry['gender'] == 'male'
            assert entry['name'][0].isupper()

    def test_generate_seed_reproducible(self):
        args = ("generate", "--culture", "elven", "-n", "5", "--seed", "42", "--json")
        first = json.loads(run_cli(*args).stdout)
        second = json.loads(run_cli(*args).stdout)
        assert [n['name'] for n in first] == [n['name'] for n in second]

    def test_generate_alias(self):
        result = run_cli("g", "--culture", "nordic", "-n", "3", "--seed", "5")
        assert result.returncode == 0
        assert "Name" in result.stdout

    def test_generate_verbose(self):
        result = run_cli("generate", "--culture", "elven", "-n", "2", "--seed", "5", "-v")
        assert result.returncode == 0
        assert "Harmony" in result.stdout

    def test_verbose_keeps_logging_quiet(self):
        """-v only widens the table, debug records need --debug."""
        result = run_cli("generate", "--culture", "elven", "-n", "2", "--seed", "5", "-v")
        assert result.returncode == 0
        assert "DEBUG" not in result.stderr

    def test_debug_flag_logs(self):
        result = run_cli("--debug", "generate", "-n", "1", "--seed", "5")
        assert result.returncode == 0
        assert "DEBUG" in result.stderr

    def test_generate_count_clamped(self):
        result = run_cli("generate", "-n", "100", "--seed", "2", "--json")
        assert len(json.loads(result.stdout)) == 20

    def test_unknown_culture_warns(self):
        result = run_cli("generate", "--culture", "klingon", "-n", "1", "--json")
        assert result.returncode == 0
        assert "klingon" in result.stderr
        assert json.loads(result.stdout)[0]['culture'] == 'western'

    def test_quiet(self):
        result = run_cli("--quiet", "generate", "-n", "3")
        assert result.returncode == 0
        assert result.stdout == ""

    def test_invalid_gender_rejected(self):
        result = run_cli("generate", "--gender", "robot")
        assert result.returncode != 0


class TestCLIListings:
    """Tests for dialects, cultures, validate and demo."""

    def test_dialects_for_culture(self, capsys):
        assert main(["dialects", "--culture", "dwarven", "--json"]) == 0
        options = json.loads(capsys.readouterr().out)
        assert [o['value'] for o in options] == ['mountain_dwarf', 'hill_dwarf', 'deep_dwarf']

    def test_dialects_table(self):
        result = run_cli("ls", "--culture", "western")
        assert result.returncode == 0
        assert "irish" in result.stdout

    def test_dialects_unknown_culture(self, capsys):
        assert main(["dialects", "--culture", "klingon"]) == 0
        assert "No dialects" in capsys.readouterr().out

    def test_dialects_unknown_culture_json(self, capsys):
        assert main(["dialects", "--culture", "klingon", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == []

    def test_cultures(self):
        result = run_cli("cultures")
        assert result.returncode == 0
        for culture in ('western', 'elven', 'draconic'):
            assert culture in result.stdout

    def test_validate(self):
        result = run_cli("validate")
        assert result.returncode == 0
        assert "OK" in result.stdout
        assert "finnish" in result.stderr

    def test_demo(self):
        result = run_cli("demo", "--samples", "1", "--seed", "3")
        assert result.returncode == 0
        assert "deep_dwarf" in result.stdout
        assert "ancient" in result.stdout


class TestParser:
    """Tests for argument parsing."""

    def test_generate_defaults(self):
        args = build_parser().parse_args(["generate"])
        assert args.gender == 'any'
        assert args.count is None
        assert args.seed is None

    def test_alias_parsed(self):
        args = build_parser().parse_args(["gen", "--culture", "orcish"])
        assert args.command == 'gen'
        assert args.culture == 'orcish'

    def test_debug_flag(self):
        assert build_parser().parse_args(["--debug", "generate"]).debug is True
        assert build_parser().parse_args(["generate", "-v"]).debug is False

    def test_epilog_examples_use_known_names(self):
        """Every culture and dialect in the help examples is bundled."""
        epilog = build_parser().epilog
        cultures = re.findall(r"--culture (\w+)", epilog)
        dialects = re.findall(r"--dialect (\w+)", epilog)
        assert cultures and dialects
        assert set(cultures) <= set(load_cultures())
        assert set(dialects) <= set(load_dialects())
