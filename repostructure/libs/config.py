import os
import re
from logging import Logger
from typing import Any, TypeVar

import webcolors
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from simple_logger.logger import get_logger

from repostructure.libs.exceptions import ConfigError, NoApiTokenError
from repostructure.utils.constants import (
    DEFAULT_BRANCH_PROTECTION,
    DEFAULT_LABEL_COLOR,
    GITHUB_REPOSITORY_ENV,
    GITHUB_TOKEN_ENV,
    INPUT_CONFIG_ENV,
    INPUT_OWNER_ENV,
    INPUT_REPO_ENV,
    INPUT_TOKEN_ENV,
)

T = TypeVar("T")

HEX_COLOR_RE = re.compile(r"^#?(?P<hex>[0-9a-fA-F]{6})$")


class LabelConfig(BaseModel):
    """Desired state of a single repository label."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    color: str = DEFAULT_LABEL_COLOR
    description: str = ""

    @field_validator("color", mode="before")
    @classmethod
    def normalize_color(cls, v: Any) -> str:
        """Accept `#RRGGBB`, `RRGGBB` or a CSS3 color name and return lowercase hex without `#`."""
        value = str(v).strip()
        match = HEX_COLOR_RE.match(value)
        if match:
            return match.group("hex").lower()

        try:
            return webcolors.name_to_hex(value.lower()).lstrip("#")
        except ValueError:
            raise ValueError(f"Invalid label color '{value}'") from None


class BranchConfig(BaseModel):
    """Desired branch protection rule for a branch name pattern."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    branch: str = Field(min_length=1)
    allow_deletions: bool = bool(DEFAULT_BRANCH_PROTECTION["allow_deletions"])
    allow_force_pushes: bool = bool(DEFAULT_BRANCH_PROTECTION["allow_force_pushes"])
    strict: bool = bool(DEFAULT_BRANCH_PROTECTION["strict"])
    require_code_owner_reviews: bool = bool(DEFAULT_BRANCH_PROTECTION["require_code_owner_reviews"])
    dismiss_stale_reviews: bool = bool(DEFAULT_BRANCH_PROTECTION["dismiss_stale_reviews"])
    required_approving_review_count: int = Field(
        default=int(DEFAULT_BRANCH_PROTECTION["required_approving_review_count"]), ge=0, le=6
    )
    required_linear_history: bool = bool(DEFAULT_BRANCH_PROTECTION["required_linear_history"])
    required_conversation_resolution: bool = bool(DEFAULT_BRANCH_PROTECTION["required_conversation_resolution"])
    required_signatures: bool = bool(DEFAULT_BRANCH_PROTECTION["required_signatures"])
    required_status_checks: list[str] = Field(default_factory=list)
    bypass_pull_request_allowances: list[str] = Field(default_factory=list)


class EnvironmentConfig(BaseModel):
    """Desired deployment environment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    environment: str = Field(min_length=1)


class RepostructureConfig(BaseModel):
    """Validated root of the INPUT_CONFIG document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    log_level: str = Field(default="INFO", alias="log-level")
    log_file: str | None = Field(default=None, alias="log-file")
    prune: bool = True
    labels: list[LabelConfig] = Field(default_factory=list)
    branches: list[BranchConfig] = Field(default_factory=list)
    environments: list[EnvironmentConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_keys(self) -> "RepostructureConfig":
        """Reject duplicate label names, branch patterns and environment names."""
        _checks: list[tuple[str, list[str]]] = [
            ("label", [label.name.lower() for label in self.labels]),
            ("branch", [branch.branch for branch in self.branches]),
            ("environment", [environment.environment for environment in self.environments]),
        ]
        for kind, keys in _checks:
            duplicates = sorted({key for key in keys if keys.count(key) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {kind} entries: {duplicates}")

        return self


class Config:
    def __init__(
        self,
        logger: Logger | None = None,
        env_var: str = INPUT_CONFIG_ENV,
    ) -> None:
        self.logger = logger or get_logger(name="config")
        self.env_var = env_var
        self.root_data: dict[str, Any] = self._load()
        self.settings: RepostructureConfig = self._validate()

    def _load(self) -> dict[str, Any]:
        raw = os.environ.get(self.env_var)
        if not raw or not raw.strip():
            raise ConfigError(f"Environment variable {self.env_var} is not set or empty")

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as ex:
            self.logger.exception(f"{self.env_var} has invalid YAML syntax")
            raise ConfigError(f"{self.env_var} has invalid YAML syntax: {ex}") from ex

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ConfigError(f"{self.env_var} must be a mapping, got {type(data).__name__}")

        return data

    def _validate(self) -> RepostructureConfig:
        try:
            return RepostructureConfig.model_validate(self.root_data)
        except ValidationError as ex:
            self.logger.exception(f"{self.env_var} failed validation")
            raise ConfigError(f"{self.env_var} is invalid: {ex}") from ex

    def get_value(self, value: str, return_on_none: Any = None) -> Any:
        """
        Get value from config

        Supports dot notation for nested values (e.g., "labels", "log-level")
        """
        result = self._get_nested_value(value, self.root_data)
        if result is not None:
            return result

        return return_on_none

    def _get_nested_value(self, key: str, data: dict[str, Any]) -> Any:
        keys = key.split(".")
        current: Any = data

        for k in keys:
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return None

        return current

    @property
    def token(self) -> str:
        token = os.environ.get(INPUT_TOKEN_ENV) or os.environ.get(GITHUB_TOKEN_ENV)
        if not token:
            raise NoApiTokenError(f"Neither {INPUT_TOKEN_ENV} nor {GITHUB_TOKEN_ENV} is set")

        return token

    @property
    def owner(self) -> str:
        return self._repository_part(env=INPUT_OWNER_ENV, index=0)

    @property
    def repo(self) -> str:
        return self._repository_part(env=INPUT_REPO_ENV, index=1)

    def _repository_part(self, env: str, index: int) -> str:
        value = os.environ.get(env)
        if value:
            return value

        full_name = os.environ.get(GITHUB_REPOSITORY_ENV, "")
        parts = full_name.split("/")
        if len(parts) == 2 and all(parts):
            return parts[index]

        raise ConfigError(f"{env} is not set and {GITHUB_REPOSITORY_ENV} is not in owner/repo format: '{full_name}'")


class ConfigModule:
    """
    Compiled container exposing `Config` to the rest of the application.

    Example:
        >>> module = ConfigModule.for_root()
        >>> config = module.get(Config)
    """

    def __init__(self, providers: dict[type, Any]) -> None:
        self._providers = providers

    @classmethod
    def for_root(cls, env_var: str = INPUT_CONFIG_ENV, logger: Logger | None = None) -> "ConfigModule":
        """
        Build the module with a ready `Config` instance.

        Config is parsed eagerly so a missing or malformed environment variable fails here.

        Raises:
            ConfigError: If the environment variable is absent or malformed
        """
        return cls(providers={Config: Config(logger=logger, env_var=env_var)})

    def get(self, provider: type[T]) -> T:
        try:
            return self._providers[provider]
        except KeyError:
            raise KeyError(f"{provider.__name__} is not provided by {type(self).__name__}") from None
