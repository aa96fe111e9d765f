from __future__ import annotations

from logging import Logger

from repostructure.libs.graphql.graphql_builders import QueryBuilder
from repostructure.libs.graphql.graphql_client import GraphQLClient
from repostructure.libs.models import Label
from repostructure.libs.queries.repository_query import RepositoryQuery


class LabelsQuery:
    """Fetches every label of a repository."""

    def __init__(self, owner: str, repo: str, client: GraphQLClient, logger: Logger | None = None) -> None:
        self.repository = RepositoryQuery(owner=owner, repo=repo, client=client, logger=logger)

    async def fetch(self) -> list[Label]:
        nodes = await self.repository.paginate(field="labels", query_factory=QueryBuilder.get_labels)
        return [Label.model_validate(node) for node in nodes]
