"""Tests for sdkgen.config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sdkgen.config import (
    find_project_config,
    get_data_dir,
    load_config_file,
    resolve_config,
)
from sdkgen.exceptions import ConfigError
from sdkgen.models import TargetConfig, TargetLanguage


# ---------------------------------------------------------------------------
# load_config_file
# ---------------------------------------------------------------------------


class TestLoadConfigFile:
    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "sdkgen.json"
        path.write_text(json.dumps({"strict_types": True}))
        assert load_config_file(path) == {"strict_types": True}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sdkgen.yaml"
        path.write_text("targets:\n  - language: go\n    output_dir: go\n")
        assert load_config_file(path) == {"targets": [{"language": "go", "output_dir": "go"}]}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sdkgen.yml"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "sdkgen.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config_file(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "sdkgen.json"
        path.write_text("[]")
        with pytest.raises(ConfigError, match="must be an object, got list"):
            load_config_file(path)


class TestFindProjectConfig:
    def test_none(self, tmp_path: Path) -> None:
        assert find_project_config(tmp_path) is None

    def test_json_preferred_over_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "sdkgen.yaml").write_text("{}")
        (tmp_path / "sdkgen.json").write_text("{}")
        assert find_project_config(tmp_path) == tmp_path / "sdkgen.json"


# ---------------------------------------------------------------------------
# resolve_config precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.strict_types is False
        assert config.strict_refs is False
        assert config.templates_dir is None
        assert config.targets == []

    def test_project_file_in_cwd(self, isolated_config: Path) -> None:
        (isolated_config / "sdkgen.json").write_text(json.dumps({
            "strict_refs": True,
            "targets": [{"language": "rust", "output_dir": "rust/src"}],
        }))
        config = resolve_config()
        assert config.strict_refs is True
        assert config.targets == [TargetConfig(language=TargetLanguage.RUST, output_dir="rust/src")]

    def test_explicit_config_path(self, isolated_config: Path) -> None:
        other = isolated_config / "other.yaml"
        other.write_text("strict_types: true\n")
        (isolated_config / "sdkgen.json").write_text(json.dumps({"strict_types": False}))
        assert resolve_config(config_path=str(other)).strict_types is True

    def test_invalid_values(self, isolated_config: Path) -> None:
        (isolated_config / "sdkgen.json").write_text(json.dumps({"targets": [{"language": "cobol"}]}))
        with pytest.raises(ConfigError, match="Invalid config"):
            resolve_config()

    def test_env_overrides_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (isolated_config / "sdkgen.json").write_text(json.dumps({"strict_types": True}))
        monkeypatch.setenv("SDKGEN_STRICT_TYPES", "false")
        monkeypatch.setenv("SDKGEN_STRICT_REFS", "yes")
        monkeypatch.setenv("SDKGEN_TEMPLATES_DIR", "/opt/templates")
        config = resolve_config()
        assert config.strict_types is False
        assert config.strict_refs is True
        assert config.templates_dir == "/opt/templates"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SDKGEN_STRICT_TYPES", "1")
        monkeypatch.setenv("SDKGEN_TEMPLATES_DIR", "/opt/templates")
        config = resolve_config(cli_strict_types=False, cli_templates_dir="./tpl")
        assert config.strict_types is False
        assert config.templates_dir == "./tpl"

    def test_cli_targets_replace_file_targets(self, isolated_config: Path) -> None:
        (isolated_config / "sdkgen.json").write_text(json.dumps({
            "targets": [{"language": "rust", "output_dir": "rust"}],
        }))
        cli = [TargetConfig(language=TargetLanguage.GO, output_dir="go")]
        assert resolve_config(cli_targets=cli).targets == cli

    def test_invalid_env_boolean(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SDKGEN_STRICT_REFS", "maybe")
        with pytest.raises(ConfigError, match="SDKGEN_STRICT_REFS"):
            resolve_config()


class TestDataDir:
    def test_created_under_xdg_data_home(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sdkgen.config.platform.system", lambda: "Linux")
        path = get_data_dir()
        assert path == isolated_config / "data" / "sdkgen"
        assert path.is_dir()
