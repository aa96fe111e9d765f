from __future__ import annotations

from logging import Logger

from repostructure.libs.graphql.graphql_builders import QueryBuilder
from repostructure.libs.graphql.graphql_client import GraphQLClient
from repostructure.libs.models import Environment
from repostructure.libs.queries.repository_query import RepositoryQuery


class EnvironmentsQuery:
    """Fetches every deployment environment of a repository."""

    def __init__(self, owner: str, repo: str, client: GraphQLClient, logger: Logger | None = None) -> None:
        self.repository = RepositoryQuery(owner=owner, repo=repo, client=client, logger=logger)

    async def fetch(self) -> list[Environment]:
        nodes = await self.repository.paginate(field="environments", query_factory=QueryBuilder.get_environments)
        return [Environment.model_validate(node) for node in nodes]
