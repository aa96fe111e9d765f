"""Repository structure synchronization: labels, branch protection rules and environments."""

from __future__ import annotations

from logging import Logger

from gql.transport.async_transport import AsyncTransport

from repostructure.libs.config import Config
from repostructure.libs.graphql.graphql_client import GraphQLClient
from repostructure.libs.handlers.branches_handler import BranchesHandler
from repostructure.libs.handlers.environments_handler import EnvironmentsHandler
from repostructure.libs.handlers.labels_handler import LabelsHandler
from repostructure.libs.models import SyncResult
from repostructure.libs.queries.branches_query import BranchesQuery
from repostructure.libs.queries.environments_query import EnvironmentsQuery
from repostructure.libs.queries.labels_query import LabelsQuery
from repostructure.libs.queries.users_query import UsersQuery
from repostructure.utils.helpers import get_logger_with_params


class RepositoryStructure:
    """
    Applies the configured structure to one repository.

    Example:
        >>> config = ConfigModule.for_root().get(Config)
        >>> results = await RepositoryStructure(config=config).sync()
    """

    def __init__(
        self,
        config: Config,
        logger: Logger | None = None,
        transport: AsyncTransport | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger_with_params(name="repostructure", config=config)
        self.owner = config.owner
        self.repo = config.repo
        self.transport = transport

    def _handlers(self, client: GraphQLClient) -> dict[str, LabelsHandler | BranchesHandler | EnvironmentsHandler]:
        prune = self.config.settings.prune
        common = {"owner": self.owner, "repo": self.repo, "client": client, "logger": self.logger}

        return {
            "labels": LabelsHandler(query=LabelsQuery(**common), logger=self.logger, prune=prune),
            "branches": BranchesHandler(
                query=BranchesQuery(**common),
                users_query=UsersQuery(client=client, logger=self.logger),
                logger=self.logger,
                prune=prune,
            ),
            "environments": EnvironmentsHandler(query=EnvironmentsQuery(**common), logger=self.logger, prune=prune),
        }

    async def sync(self) -> dict[str, SyncResult]:
        """
        Reconcile labels, branch protection rules and environments, in that order.

        Remote errors propagate unchanged; nothing is retried or rolled back.
        """
        settings = self.config.settings
        self.logger.info(f"[{self.owner}/{self.repo}] Synchronizing repository structure (prune={settings.prune})")

        async with GraphQLClient(token=self.config.token, logger=self.logger, transport=self.transport) as client:
            handlers = self._handlers(client=client)
            results: dict[str, SyncResult] = {
                "labels": await handlers["labels"].apply(settings.labels),
                "branches": await handlers["branches"].apply(settings.branches),
                "environments": await handlers["environments"].apply(settings.environments),
            }

        changed = [name for name, result in results.items() if result.changed]
        self.logger.info(f"[{self.owner}/{self.repo}] Done. Changed: {changed or 'nothing'}")
        return results
