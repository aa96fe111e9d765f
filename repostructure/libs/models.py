"""Typed GitHub domain objects built from GraphQL responses.

All models are immutable value objects. Field names are snake_case in Python and
camelCase on the wire, so GraphQL nodes validate directly:

    >>> Label.model_validate({"id": "LA_1", "name": "bug", "color": "d73a4a", "description": None})
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class GitHubModel(BaseModel):
    """Base for GraphQL-backed value objects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")


class Label(GitHubModel):
    id: str
    name: str
    color: str
    description: str | None = None


class BranchProtectionRule(GitHubModel):
    """Repository branch protection rule, keyed by its branch name pattern."""

    id: str
    pattern: str
    allows_deletions: bool = False
    allows_force_pushes: bool = False
    dismisses_stale_reviews: bool = False
    required_approving_review_count: int = 0
    required_status_check_contexts: list[str] = Field(default_factory=list)
    requires_approving_reviews: bool = False
    requires_code_owner_reviews: bool = False
    requires_commit_signatures: bool = False
    requires_conversation_resolution: bool = False
    requires_linear_history: bool = False
    requires_status_checks: bool = False
    requires_strict_status_checks: bool = False

    @field_validator("required_approving_review_count", "required_status_check_contexts", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any, info: ValidationInfo) -> Any:
        """GitHub returns null for unset counts and contexts."""
        if v is None:
            return 0 if info.field_name == "required_approving_review_count" else []
        return v


class Environment(GitHubModel):
    id: str
    name: str


class User(GitHubModel):
    id: str
    login: str
    name: str | None = None


class PageInfo(GitHubModel):
    has_next_page: bool = False
    end_cursor: str | None = None


class Connection(GitHubModel, Generic[T]):
    """One page of a cursor-paginated GraphQL connection."""

    nodes: list[T] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)
    total_count: int = 0

    @classmethod
    def from_response(cls, data: dict[str, Any] | None) -> Connection[T]:
        """Build a connection page, dropping null nodes GitHub may return."""
        data = dict(data or {})
        data["nodes"] = [node for node in data.get("nodes") or [] if node is not None]
        return cls.model_validate(data)


class SyncResult(BaseModel):
    """Names of the resources a reconciliation pass created, updated and deleted."""

    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.updated or self.deleted)
