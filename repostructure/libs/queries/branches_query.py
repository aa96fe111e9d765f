from __future__ import annotations

from logging import Logger

from repostructure.libs.graphql.graphql_builders import QueryBuilder
from repostructure.libs.graphql.graphql_client import GraphQLClient
from repostructure.libs.models import BranchProtectionRule
from repostructure.libs.queries.repository_query import RepositoryQuery


class BranchesQuery:
    """Fetches every branch protection rule of a repository."""

    def __init__(self, owner: str, repo: str, client: GraphQLClient, logger: Logger | None = None) -> None:
        self.repository = RepositoryQuery(owner=owner, repo=repo, client=client, logger=logger)

    async def fetch(self) -> list[BranchProtectionRule]:
        nodes = await self.repository.paginate(
            field="branchProtectionRules", query_factory=QueryBuilder.get_branch_protection_rules
        )
        return [BranchProtectionRule.model_validate(node) for node in nodes]
