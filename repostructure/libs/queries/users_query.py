from __future__ import annotations

from logging import Logger

from simple_logger.logger import get_logger

from repostructure.libs.graphql.graphql_builders import QueryBuilder
from repostructure.libs.graphql.graphql_client import GraphQLClient, GraphQLNotFoundError
from repostructure.libs.models import User
from repostructure.utils.constants import NOT_FOUND_STR


class UsersQuery:
    """Looks up users by exact login. Not repository scoped."""

    def __init__(self, client: GraphQLClient, logger: Logger | None = None) -> None:
        self.client = client
        self.logger = logger or get_logger(name="users-query")

    async def fetch(self, login: str) -> User:
        """
        Get the user with `login`.

        Raises:
            GraphQLNotFoundError: If no user has that login
        """
        query, variables = QueryBuilder.get_user(login=login)
        data = await self.client.execute(query, variables)
        user = data.get("user")
        if user is None:
            raise GraphQLNotFoundError(f"Could not resolve to a User with the login of {login}", NOT_FOUND_STR)

        self.logger.debug(f"Resolved user {login} to {user['id']}")
        return User.model_validate(user)
