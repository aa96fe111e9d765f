"""Repository-scoped GraphQL query execution."""

from __future__ import annotations

from collections.abc import Callable
from logging import Logger
from typing import Any

from simple_logger.logger import get_logger

from repostructure.libs.graphql.graphql_builders import QueryBuilder
from repostructure.libs.graphql.graphql_client import GraphQLClient, GraphQLError, GraphQLNotFoundError
from repostructure.libs.models import Connection
from repostructure.utils.constants import NOT_FOUND_STR

ConnectionQueryFactory = Callable[..., tuple[str, dict[str, Any]]]


class RepositoryQuery:
    """
    Executes GraphQL operations scoped to a single repository.

    Specialized queries (labels, branches, environments) own one instance and
    delegate execution and pagination to it.

    Args:
        owner: Repository owner (user or organization login)
        repo: Repository name
        client: GraphQL client used for every round trip

    Raises:
        ValueError: If owner or repo is empty
    """

    def __init__(self, owner: str, repo: str, client: GraphQLClient, logger: Logger | None = None) -> None:
        if not owner or not owner.strip():
            raise ValueError("Repository owner is required")
        if not repo or not repo.strip():
            raise ValueError("Repository name is required")

        self.owner = owner
        self.repo = repo
        self.client = client
        self.logger = logger or get_logger(name="repository-query")
        self._id: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute `query` with the repository `owner` and `name` variables injected."""
        _variables = {**(variables or {}), "owner": self.owner, "name": self.repo}
        return await self.client.execute(query, _variables)

    async def repository(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Execute `query` and return its `repository` object.

        Raises:
            GraphQLNotFoundError: If GitHub returned a null repository
        """
        data = await self.execute(query, variables)
        repository = data.get("repository")
        if repository is None:
            raise GraphQLNotFoundError(
                f"Could not resolve to a Repository with the name '{self.full_name}'.", NOT_FOUND_STR
            )

        return repository

    async def id(self) -> str:
        """Repository node id, fetched once."""
        if self._id is None:
            query, variables = QueryBuilder.get_repository(owner=self.owner, name=self.repo)
            repository = await self.repository(query, variables)
            self._id = repository["id"]
            self.logger.debug(f"{self.full_name}: repository node id is {self._id}")

        return self._id

    async def paginate(self, field: str, query_factory: ConnectionQueryFactory) -> list[dict[str, Any]]:
        """
        Collect every node of a repository connection.

        Args:
            field: Connection field on the repository object (e.g. "labels")
            query_factory: QueryBuilder method accepting owner, name and after

        Returns:
            Raw nodes from all pages, in order
        """
        nodes: list[dict[str, Any]] = []
        cursor: str | None = None
        pages = 0

        while True:
            query, variables = query_factory(owner=self.owner, name=self.repo, after=cursor)
            repository = await self.repository(query, variables)
            page = Connection[dict[str, Any]].from_response(repository.get(field))
            nodes.extend(page.nodes)
            pages += 1

            if not page.page_info.has_next_page:
                break

            if not page.page_info.end_cursor:
                raise GraphQLError(f"{self.full_name}: {field} page {pages} has a next page without an end cursor")

            cursor = page.page_info.end_cursor

        self.logger.debug(f"{self.full_name}: fetched {len(nodes)} {field} in {pages} page(s)")
        return nodes
