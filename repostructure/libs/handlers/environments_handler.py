from __future__ import annotations

from logging import Logger

from repostructure.libs.commands import CreateEnvironmentInput, DeleteEnvironmentInput
from repostructure.libs.config import EnvironmentConfig
from repostructure.libs.graphql.graphql_builders import MutationBuilder
from repostructure.libs.models import Environment, SyncResult
from repostructure.libs.queries.environments_query import EnvironmentsQuery
from repostructure.utils.helpers import format_sync_summary


class EnvironmentsHandler:
    """Creates configured deployment environments and, with prune, deletes the rest."""

    def __init__(self, query: EnvironmentsQuery, logger: Logger, prune: bool = True) -> None:
        self.query = query
        self.repository = query.repository
        self.client = query.repository.client
        self.logger = logger
        self.prune = prune
        self.log_prefix = f"[{self.repository.full_name}]"

    async def create_environment(self, input_: CreateEnvironmentInput) -> Environment:
        mutation, variables = MutationBuilder.create_environment(input_)
        data = await self.client.execute(mutation, variables)
        return Environment.model_validate(data["createEnvironment"]["environment"])

    async def delete_environment(self, input_: DeleteEnvironmentInput) -> str | None:
        mutation, variables = MutationBuilder.delete_environment(input_)
        data = await self.client.execute(mutation, variables)
        return data["deleteEnvironment"]["clientMutationId"]

    async def apply(self, environments: list[EnvironmentConfig]) -> SyncResult:
        result = SyncResult()
        existing: dict[str, Environment] = {environment.name: environment for environment in await self.query.fetch()}

        for desired in environments:
            if existing.pop(desired.environment, None) is None:
                self.logger.info(f"{self.log_prefix} Creating environment {desired.environment}")
                await self.create_environment(
                    CreateEnvironmentInput(repository_id=await self.repository.id(), name=desired.environment)
                )
                result.created.append(desired.environment)

        if self.prune:
            for extra in existing.values():
                self.logger.info(f"{self.log_prefix} Deleting environment {extra.name}")
                await self.delete_environment(DeleteEnvironmentInput(id=extra.id))
                result.deleted.append(extra.name)

        self.logger.info(
            f"{self.log_prefix} {format_sync_summary('environments', result.created, result.updated, result.deleted)}"
        )
        return result
