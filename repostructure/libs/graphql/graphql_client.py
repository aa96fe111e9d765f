"""GraphQL client wrapper for GitHub API with authentication and error handling."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from gql import Client, gql
from gql.transport.aiohttp import AIOHTTPTransport
from gql.transport.async_transport import AsyncTransport
from gql.transport.exceptions import (
    TransportError,
    TransportQueryError,
    TransportServerError,
)
from graphql import DocumentNode

from repostructure.utils.constants import NOT_FOUND_STR, UNPROCESSABLE_STR


class GraphQLError(Exception):
    """
    Base exception for GraphQL client errors.

    `message` is the remote error message, unchanged. `type` is GitHub's error
    type (e.g. NOT_FOUND, UNPROCESSABLE) when the API reported one.
    """

    def __init__(self, message: str, error_type: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.type = error_type


class GraphQLAuthenticationError(GraphQLError):
    """Raised when authentication fails."""

    pass


class GraphQLRateLimitError(GraphQLError):
    """Raised when rate limit is exceeded."""

    pass


class GraphQLNotFoundError(GraphQLError):
    """Raised when GitHub cannot resolve a node (type NOT_FOUND)."""

    pass


class GraphQLUnprocessableError(GraphQLError):
    """Raised when GitHub rejects a mutation input (type UNPROCESSABLE)."""

    pass


ERROR_TYPES: dict[str, type[GraphQLError]] = {
    NOT_FOUND_STR: GraphQLNotFoundError,
    UNPROCESSABLE_STR: GraphQLUnprocessableError,
}


def _parse_query_error(error: TransportQueryError) -> tuple[str, str | None]:
    """Return (message, type) of the first GraphQL error in a query error."""
    first_error: Any = error.errors[0] if error.errors else str(error)
    if not isinstance(first_error, dict):
        return str(first_error), None

    message = first_error.get("message") or str(error)
    error_type = first_error.get("type") or (first_error.get("extensions") or {}).get("type")
    return message, error_type


class GraphQLClient:
    """
    Async GraphQL client wrapper for GitHub API.

    Every call is a single request/response round trip. Errors reported by
    GitHub are raised as typed `GraphQLError` subclasses carrying the remote
    message unchanged.

    Example:
        >>> async with GraphQLClient(token="ghp_...", logger=logger) as client:
        ...     result = await client.execute("query { viewer { login } }")
        >>> print(result["viewer"]["login"])
    """

    GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

    def __init__(
        self,
        token: str,
        logger: logging.Logger,
        timeout: int = 90,
        connection_timeout: int = 10,
        sock_read_timeout: int = 30,
        transport: AsyncTransport | None = None,
    ) -> None:
        """
        Initialize GraphQL client.

        Args:
            token: GitHub personal access token or GitHub App token
            logger: Logger instance for operation logging
            timeout: Total request timeout in seconds (default: 90)
            connection_timeout: DNS resolution + TCP handshake timeout in seconds (default: 10)
            sock_read_timeout: Socket read timeout in seconds (default: 30)
            transport: Transport to use instead of the GitHub aiohttp transport
        """
        self.token = token
        self.logger = logger
        self.timeout = timeout
        self.connection_timeout = connection_timeout
        self.sock_read_timeout = sock_read_timeout
        self._custom_transport = transport
        self._client: Client | None = None
        self._session: Any = None
        self._transport: AsyncTransport | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> GraphQLClient:
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _build_transport(self) -> AsyncTransport:
        if self._custom_transport is not None:
            return self._custom_transport

        timeout_config = aiohttp.ClientTimeout(
            total=self.timeout,
            connect=self.connection_timeout,
            sock_read=self.sock_read_timeout,
        )

        return AIOHTTPTransport(
            url=self.GITHUB_GRAPHQL_URL,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github.v4+json",
                "User-Agent": "repostructure/graphql-client",
            },
            ssl=True,
            client_session_args={"timeout": timeout_config},
        )

    async def _ensure_client(self) -> None:
        """Ensure the GraphQL client is initialized and connected."""
        async with self._client_lock:
            if self._client is not None:
                return

            self._transport = self._build_transport()
            self._client = Client(
                transport=self._transport,
                fetch_schema_from_transport=False,
            )
            self._session = await self._client.connect_async()

            self.logger.debug("GraphQL client initialized")

    async def close(self) -> None:
        """Close the GraphQL client and cleanup resources."""
        if self._client:
            try:
                await self._client.close_async()
            except Exception as ex:
                self.logger.debug(f"Ignoring error during client close: {ex}")
            self._client = None
            self._session = None
            self._transport = None
            self.logger.debug("GraphQL client closed")

    async def execute(
        self,
        query: str | DocumentNode,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL query string or DocumentNode
            variables: Variables for the query (optional)

        Returns:
            Query result as a dictionary

        Raises:
            GraphQLAuthenticationError: If authentication fails
            GraphQLRateLimitError: If rate limit is exceeded
            GraphQLNotFoundError: If GitHub could not resolve a requested node
            GraphQLUnprocessableError: If GitHub rejected a mutation input
            GraphQLError: For other GraphQL errors
        """
        if isinstance(query, str):
            query = gql(query)

        await self._ensure_client()

        try:
            self.logger.debug(f"Executing GraphQL operation with variables: {variables}")
            result = await self._session.execute(query, variable_values=variables)
            self.logger.debug("GraphQL operation executed successfully")
            return dict(result) if result else {}

        except TransportQueryError as error:
            error_msg, error_type = _parse_query_error(error)

            if error_type in ERROR_TYPES:
                error_class = ERROR_TYPES[error_type]
                if error_class is GraphQLNotFoundError:
                    # Callers decide whether a missing node is fatal
                    self.logger.debug(f"GraphQL query error (NOT_FOUND): {error_msg}")
                else:
                    self.logger.exception(f"GraphQL query error [{error_type}]: {error_msg}")

                raise error_class(error_msg, error_type) from error

            if "401" in error_msg or "Unauthorized" in error_msg or "Bad credentials" in error_msg:
                self.logger.exception(f"AUTH FAILED: GraphQL authentication failed: {error_msg}")
                raise GraphQLAuthenticationError(error_msg, error_type) from error

            if "rate limit" in error_msg.lower() or error_type == "RATE_LIMITED":
                self.logger.exception(f"RATE LIMIT: GraphQL rate limit exceeded: {error_msg}")
                raise GraphQLRateLimitError(error_msg, error_type) from error

            self.logger.exception(f"GraphQL query error [{error_type}]: {error_msg}")
            raise GraphQLError(error_msg, error_type) from error

        except TransportServerError as error:
            self.logger.exception(f"SERVER ERROR: GraphQL server error: {error}")
            raise GraphQLError(f"GraphQL server error: {error}") from error

        except TransportError as error:
            self.logger.exception(f"CONNECTION ERROR: GraphQL transport error: {error}")
            raise GraphQLError(f"GraphQL transport error: {error}") from error

        except TimeoutError as error:
            self.logger.exception(
                f"TIMEOUT: GraphQL operation timed out "
                f"(total={self.timeout}s, connect={self.connection_timeout}s, sock_read={self.sock_read_timeout}s)"
            )
            raise GraphQLError(f"GraphQL operation timed out after {self.timeout}s") from error

        except asyncio.CancelledError:
            self.logger.debug("GraphQL operation cancelled")
            raise

    async def get_viewer_info(self) -> dict[str, Any]:
        """
        Get information about the authenticated user.

        Returns:
            Dictionary with viewer info: login, name, id
        """
        query = """
            query {
                viewer {
                    login
                    name
                    id
                }
            }
        """

        result = await self.execute(query)
        return result["viewer"]
