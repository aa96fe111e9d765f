import json
from typing import Any
from unittest.mock import Mock

import pytest
import yaml

from repostructure.libs.config import (
    BranchConfig,
    Config,
    ConfigModule,
    LabelConfig,
    RepostructureConfig,
)
from repostructure.libs.exceptions import ConfigError, NoApiTokenError


class TestConfig:
    """Test suite for Config loaded from the INPUT_CONFIG environment variable."""

    @pytest.fixture
    def valid_config_data(self) -> dict[str, Any]:
        return {
            "log-level": "DEBUG",
            "labels": [{"name": "type:feat", "color": "#60BA86", "description": "new features"}],
            "branches": [{"branch": "main", "required_status_checks": ["build"]}],
            "environments": [{"environment": "release"}],
        }

    def test_init_from_environment(self, input_config_env: str) -> None:
        config = Config()

        assert config.logger is not None
        assert config.env_var == "INPUT_CONFIG"
        assert config.root_data == yaml.safe_load(input_config_env)
        assert isinstance(config.settings, RepostructureConfig)
        assert config.settings.log_level == "DEBUG"
        assert [label.name for label in config.settings.labels][:2] == ["scope:config", "scope:labels"]

    def test_init_with_custom_logger_and_env_var(
        self, valid_config_data: dict[str, Any], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REPOSTRUCTURE_CONFIG", yaml.dump(valid_config_data))
        mock_logger = Mock()

        config = Config(logger=mock_logger, env_var="REPOSTRUCTURE_CONFIG")

        assert config.logger == mock_logger
        assert config.settings.labels[0].color == "60ba86"

    def test_json_config_is_accepted(self, valid_config_data: dict[str, Any], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_CONFIG", json.dumps(valid_config_data))

        config = Config()

        assert config.settings.environments[0].environment == "release"

    def test_missing_env_var_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("INPUT_CONFIG", raising=False)

        with pytest.raises(ConfigError, match="INPUT_CONFIG is not set or empty"):
            Config()

    def test_blank_env_var_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_CONFIG", "   \n")

        with pytest.raises(ConfigError, match="not set or empty"):
            Config()

    def test_invalid_yaml_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_CONFIG", "labels: [\n  - name: broken")
        mock_logger = Mock()

        with pytest.raises(ConfigError, match="invalid YAML syntax"):
            Config(logger=mock_logger)

        mock_logger.exception.assert_called_once()

    def test_non_mapping_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_CONFIG", "- just\n- a\n- list\n")

        with pytest.raises(ConfigError, match="must be a mapping, got list"):
            Config()

    def test_null_document_is_empty_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_CONFIG", "~")

        config = Config()

        assert config.root_data == {}
        assert config.settings.labels == []
        assert config.settings.prune is True

    def test_unknown_key_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_CONFIG", "labelz: []\n")

        with pytest.raises(ConfigError, match="INPUT_CONFIG is invalid"):
            Config(logger=Mock())

    def test_duplicate_label_names_raise(self, monkeypatch: pytest.MonkeyPatch) -> None:
        data = {"labels": [{"name": "Bug", "color": "red"}, {"name": "bug", "color": "blue"}]}
        monkeypatch.setenv("INPUT_CONFIG", yaml.dump(data))

        with pytest.raises(ConfigError, match="Duplicate label entries"):
            Config(logger=Mock())

    def test_duplicate_branch_patterns_raise(self, monkeypatch: pytest.MonkeyPatch) -> None:
        data = {"branches": [{"branch": "main"}, {"branch": "main"}]}
        monkeypatch.setenv("INPUT_CONFIG", yaml.dump(data))

        with pytest.raises(ConfigError, match="Duplicate branch entries"):
            Config(logger=Mock())

    def test_get_value(self, input_config_env: str) -> None:
        config = Config()

        assert config.get_value(value="log-level") == "DEBUG"
        assert config.get_value(value="prune") is True
        assert config.get_value(value="missing", return_on_none="default") == "default"
        assert config.get_value(value="log-level.nested") is None

    def test_token_prefers_input_token(self, input_config_env: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUT_TOKEN", "input-token")
        monkeypatch.setenv("GITHUB_TOKEN", "github-token")

        assert Config().token == "input-token"

    def test_token_falls_back_to_github_token(self, input_config_env: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("INPUT_TOKEN")
        monkeypatch.setenv("GITHUB_TOKEN", "github-token")

        assert Config().token == "github-token"

    def test_missing_token_raises(self, input_config_env: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("INPUT_TOKEN")
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        config = Config()

        with pytest.raises(NoApiTokenError):
            _ = config.token

    def test_owner_and_repo_from_github_repository(self, input_config_env: str, owner: str, repo: str) -> None:
        config = Config()

        assert config.owner == owner
        assert config.repo == repo

    def test_owner_and_repo_inputs_take_precedence(
        self, input_config_env: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("INPUT_OWNER", "someone")
        monkeypatch.setenv("INPUT_REPO", "something")
        config = Config()

        assert config.owner == "someone"
        assert config.repo == "something"

    def test_malformed_github_repository_raises(self, input_config_env: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_REPOSITORY", "no-slash")

        with pytest.raises(ConfigError, match="INPUT_OWNER is not set"):
            _ = Config().owner


class TestLabelConfig:
    @pytest.mark.parametrize(
        "color, expected",
        [
            pytest.param("#74CEFC", "74cefc", id="hex_with_hash"),
            pytest.param("60ba86", "60ba86", id="hex_without_hash"),
            pytest.param("steelblue", "4682b4", id="css3_name"),
            pytest.param("Red", "ff0000", id="css3_name_mixed_case"),
        ],
    )
    def test_color_is_normalized(self, color: str, expected: str) -> None:
        assert LabelConfig(name="label", color=color).color == expected

    def test_invalid_color_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid label color"):
            LabelConfig(name="label", color="not-a-color")

    def test_description_defaults_to_empty(self) -> None:
        assert LabelConfig(name="label", color="red").description == ""

    def test_color_defaults_to_gray(self) -> None:
        assert LabelConfig(name="label").color == "ededed"


class TestBranchConfig:
    def test_defaults(self) -> None:
        branch = BranchConfig(branch="main")

        assert branch.strict is True
        assert branch.dismiss_stale_reviews is True
        assert branch.required_approving_review_count == 0
        assert branch.required_status_checks == []
        assert branch.bypass_pull_request_allowances == []

    def test_review_count_upper_bound(self) -> None:
        with pytest.raises(ValueError):
            BranchConfig(branch="main", required_approving_review_count=7)


class TestConfigModule:
    def test_for_root_exports_config(self, input_config_env: str) -> None:
        module = ConfigModule.for_root()

        result = module.get(Config)

        assert isinstance(result, Config)

    def test_for_root_fails_at_startup_without_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("INPUT_CONFIG", raising=False)

        with pytest.raises(ConfigError):
            ConfigModule.for_root()

    def test_get_unknown_provider_raises(self, input_config_env: str) -> None:
        module = ConfigModule.for_root(logger=Mock())

        with pytest.raises(KeyError, match="RepostructureConfig is not provided by ConfigModule"):
            module.get(RepostructureConfig)
