"""Tests for YAML include: directive and --include."""

import sys
from pathlib import Path

import pytest

from stablepatch.core.config import State
from stablepatch.core.yaml_settings import (
    YamlWithIncludesSettingsSource,
    cli_includes,
)


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def no_user_config(monkeypatch, tmp_path, mock_argv):
    """Point the user config directory somewhere empty."""
    monkeypatch.setattr(
        "stablepatch.core.yaml_settings.user_config_dir",
        lambda *args, **kwargs: str(tmp_path / "user"),
    )


def load(yaml_file):
    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(yaml_file) if yaml_file else None
    )
    return source()


def test_defaults_always_load(tmp_path):
    """Package defaults apply even with no project config."""
    data = load(tmp_path / "absent.yaml")

    assert data["config"]["run_name"] == "apply"
    assert data["config"]["logger"]["console"]["level"] == "warn"


def test_minimal_config_overrides_defaults(fixtures_dir):
    data = load(fixtures_dir / "minimal.yaml")

    assert data["config"]["run_name"] == "minimal"
    assert data["config"]["fetch"]["timeout"] == 5
    # untouched defaults survive the merge
    assert data["config"]["fetch"]["max_depth"] == 16


def test_yaml_include_directive(fixtures_dir):
    """The including file wins over what it includes."""
    data = load(fixtures_dir / "with_include.yaml")

    assert data["config"]["fetch"]["max_depth"] == 4
    assert data["config"]["fetch"]["user_agent"] == "own-agent"
    assert data["config"]["run_name"] == "with-include"


def test_nested_includes(fixtures_dir):
    data = load(fixtures_dir / "nested_include.yaml")

    assert data["config"]["run_name"] == "nested"
    assert data["config"]["fetch"]["max_depth"] == 4


def test_include_removes_directive(fixtures_dir):
    data = load(fixtures_dir / "with_include.yaml")

    assert "include" not in data


def test_multiple_includes_in_yaml(fixtures_dir, tmp_path):
    config_file = tmp_path / "multi.yaml"
    config_file.write_text(f"""
include:
  - {fixtures_dir / 'extra.yaml'}
  - {fixtures_dir / 'override.yaml'}

config:
  run_name: multi
""")

    data = load(config_file)

    assert data["config"]["fetch"]["max_depth"] == 4
    assert data["config"]["fetch"]["timeout"] == 99
    assert data["config"]["run_name"] == "multi"


def test_circular_include_raises(fixtures_dir):
    with pytest.raises(ValueError, match="Circular include"):
        load(fixtures_dir / "circular_a.yaml")


def test_missing_include_raises(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("include: nowhere.yaml\n")

    with pytest.raises(FileNotFoundError):
        load(config_file)


def test_cli_include_comes_last(fixtures_dir):
    """--include files override the project config."""
    sys.argv = [
        "stablepatch",
        "--include", str(fixtures_dir / "override.yaml"),
    ]

    data = load(fixtures_dir / "minimal.yaml")

    assert data["config"]["fetch"]["timeout"] == 99
    assert data["config"]["run_name"] == "minimal"


def test_cli_include_with_no_base_yaml(fixtures_dir, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    sys.argv = [
        "stablepatch",
        f"--include={fixtures_dir / 'minimal.yaml'}",
    ]

    data = load(None)

    assert data["config"]["run_name"] == "minimal"


@pytest.mark.parametrize(("argv", "expected"), [
    (["prog"], []),
    (["prog", "--include", "a.yaml"], ["a.yaml"]),
    (["prog", "--include=a.yaml", "--include", "b.yaml"],
     ["a.yaml", "b.yaml"]),
    (["prog", "apply", "--include"], []),
])
def test_cli_includes(argv, expected):
    assert cli_includes(argv) == expected


def test_state_reads_project_config(fixtures_dir, tmp_path, monkeypatch):
    """State picks up ./stablepatch.yaml from the working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "stablepatch.yaml").write_text(
        (fixtures_dir / "minimal.yaml").read_text()
    )

    state = State()

    assert state.config.run_name == "minimal"
    assert state.config.fetch.timeout == 5


@pytest.mark.parametrize("deep_merge", [True, False])
def test_read_files_accepts_deep_merge_keyword(fixtures_dir, deep_merge):
    """Layers deep merge whatever pydantic-settings asks for."""
    source = YamlWithIncludesSettingsSource(State, yaml_file=None)

    data = source._read_files(
        str(fixtures_dir / "minimal.yaml"), deep_merge=deep_merge
    )

    assert data["config"]["run_name"] == "minimal"
    assert data["config"]["fetch"]["max_depth"] == 16
