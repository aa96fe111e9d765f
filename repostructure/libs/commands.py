"""Mutation input payloads for repository sub-resources."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MutationInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid")

    client_mutation_id: str | None = None

    def to_variables(self) -> dict[str, Any]:
        """Serialize to the camelCase `input` object GitHub expects, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CreateLabelInput(MutationInput):
    repository_id: str
    name: str
    color: str
    description: str | None = None


class UpdateLabelInput(MutationInput):
    id: str
    name: str | None = None
    color: str | None = None
    description: str | None = None


class DeleteLabelInput(MutationInput):
    id: str


class BranchProtectionRuleSettings(MutationInput):
    allows_deletions: bool | None = None
    allows_force_pushes: bool | None = None
    bypass_pull_request_actor_ids: list[str] | None = None
    dismisses_stale_reviews: bool | None = None
    required_approving_review_count: int | None = None
    required_status_check_contexts: list[str] | None = None
    requires_approving_reviews: bool | None = None
    requires_code_owner_reviews: bool | None = None
    requires_commit_signatures: bool | None = None
    requires_conversation_resolution: bool | None = None
    requires_linear_history: bool | None = None
    requires_status_checks: bool | None = None
    requires_strict_status_checks: bool | None = None


class CreateBranchProtectionRuleInput(BranchProtectionRuleSettings):
    repository_id: str
    pattern: str


class UpdateBranchProtectionRuleInput(BranchProtectionRuleSettings):
    branch_protection_rule_id: str
    pattern: str | None = None


class DeleteBranchProtectionRuleInput(MutationInput):
    branch_protection_rule_id: str


class CreateEnvironmentInput(MutationInput):
    repository_id: str
    name: str


class DeleteEnvironmentInput(MutationInput):
    id: str = Field(min_length=1)
