from __future__ import annotations

from logging import Logger

from repostructure.libs.commands import (
    BranchProtectionRuleSettings,
    CreateBranchProtectionRuleInput,
    DeleteBranchProtectionRuleInput,
    UpdateBranchProtectionRuleInput,
)
from repostructure.libs.config import BranchConfig
from repostructure.libs.graphql.graphql_builders import MutationBuilder
from repostructure.libs.models import BranchProtectionRule, SyncResult
from repostructure.libs.queries.branches_query import BranchesQuery
from repostructure.libs.queries.users_query import UsersQuery
from repostructure.utils.helpers import format_sync_summary

# Settings compared against the fetched rule; bypass actors are not fetched, status check contexts are unordered
COMPARED_SETTINGS: tuple[str, ...] = (
    "allows_deletions",
    "allows_force_pushes",
    "dismisses_stale_reviews",
    "required_approving_review_count",
    "requires_approving_reviews",
    "requires_code_owner_reviews",
    "requires_commit_signatures",
    "requires_conversation_resolution",
    "requires_linear_history",
    "requires_status_checks",
    "requires_strict_status_checks",
)


def branch_protection_settings(branch: BranchConfig, actor_ids: list[str]) -> BranchProtectionRuleSettings:
    """Translate configured branch protection into GitHub mutation settings."""
    return BranchProtectionRuleSettings(
        allows_deletions=branch.allow_deletions,
        allows_force_pushes=branch.allow_force_pushes,
        bypass_pull_request_actor_ids=actor_ids,
        dismisses_stale_reviews=branch.dismiss_stale_reviews,
        required_approving_review_count=branch.required_approving_review_count,
        required_status_check_contexts=list(branch.required_status_checks),
        requires_approving_reviews=branch.required_approving_review_count > 0,
        requires_code_owner_reviews=branch.require_code_owner_reviews,
        requires_commit_signatures=branch.required_signatures,
        requires_conversation_resolution=branch.required_conversation_resolution,
        requires_linear_history=branch.required_linear_history,
        requires_status_checks=bool(branch.required_status_checks),
        requires_strict_status_checks=branch.strict,
    )


class BranchesHandler:
    """Reconciles branch protection rules with the configured branches. Rules match by pattern."""

    def __init__(self, query: BranchesQuery, users_query: UsersQuery, logger: Logger, prune: bool = True) -> None:
        self.query = query
        self.users_query = users_query
        self.repository = query.repository
        self.client = query.repository.client
        self.logger = logger
        self.prune = prune
        self.log_prefix = f"[{self.repository.full_name}]"

    async def create_rule(self, input_: CreateBranchProtectionRuleInput) -> BranchProtectionRule:
        mutation, variables = MutationBuilder.create_branch_protection_rule(input_)
        data = await self.client.execute(mutation, variables)
        return BranchProtectionRule.model_validate(data["createBranchProtectionRule"]["branchProtectionRule"])

    async def update_rule(self, input_: UpdateBranchProtectionRuleInput) -> BranchProtectionRule:
        mutation, variables = MutationBuilder.update_branch_protection_rule(input_)
        data = await self.client.execute(mutation, variables)
        return BranchProtectionRule.model_validate(data["updateBranchProtectionRule"]["branchProtectionRule"])

    async def delete_rule(self, input_: DeleteBranchProtectionRuleInput) -> str | None:
        mutation, variables = MutationBuilder.delete_branch_protection_rule(input_)
        data = await self.client.execute(mutation, variables)
        return data["deleteBranchProtectionRule"]["clientMutationId"]

    async def resolve_actor_ids(self, logins: list[str]) -> list[str]:
        """Resolve user logins to node ids. Unknown logins raise GraphQLNotFoundError."""
        return [(await self.users_query.fetch(login)).id for login in logins]

    @staticmethod
    def _needs_update(current: BranchProtectionRule, settings: BranchProtectionRuleSettings) -> bool:
        if settings.bypass_pull_request_actor_ids:
            return True

        if sorted(current.required_status_check_contexts) != sorted(settings.required_status_check_contexts or []):
            return True

        return any(getattr(current, field) != getattr(settings, field) for field in COMPARED_SETTINGS)

    async def apply(self, branches: list[BranchConfig]) -> SyncResult:
        result = SyncResult()
        existing: dict[str, BranchProtectionRule] = {rule.pattern: rule for rule in await self.query.fetch()}

        for branch in branches:
            settings = branch_protection_settings(
                branch=branch, actor_ids=await self.resolve_actor_ids(branch.bypass_pull_request_allowances)
            )
            current = existing.pop(branch.branch, None)

            if current is None:
                self.logger.info(f"{self.log_prefix} Creating branch protection rule {branch.branch}")
                await self.create_rule(
                    CreateBranchProtectionRuleInput(
                        repository_id=await self.repository.id(),
                        pattern=branch.branch,
                        **settings.model_dump(exclude_none=True),
                    )
                )
                result.created.append(branch.branch)

            elif self._needs_update(current=current, settings=settings):
                self.logger.info(f"{self.log_prefix} Updating branch protection rule {branch.branch}")
                await self.update_rule(
                    UpdateBranchProtectionRuleInput(
                        branch_protection_rule_id=current.id,
                        **settings.model_dump(exclude_none=True),
                    )
                )
                result.updated.append(branch.branch)

        if self.prune:
            for extra in existing.values():
                self.logger.info(f"{self.log_prefix} Deleting branch protection rule {extra.pattern}")
                await self.delete_rule(DeleteBranchProtectionRuleInput(branch_protection_rule_id=extra.id))
                result.deleted.append(extra.pattern)

        self.logger.info(
            f"{self.log_prefix} {format_sync_summary('branches', result.created, result.updated, result.deleted)}"
        )
        return result
