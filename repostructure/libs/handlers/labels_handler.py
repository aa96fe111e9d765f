from __future__ import annotations

from logging import Logger

from repostructure.libs.commands import CreateLabelInput, DeleteLabelInput, UpdateLabelInput
from repostructure.libs.config import LabelConfig
from repostructure.libs.graphql.graphql_builders import MutationBuilder
from repostructure.libs.models import Label, SyncResult
from repostructure.libs.queries.labels_query import LabelsQuery
from repostructure.utils.helpers import format_sync_summary


class LabelsHandler:
    """Reconciles repository labels with the configured label list. Labels match by case-insensitive name."""

    def __init__(self, query: LabelsQuery, logger: Logger, prune: bool = True) -> None:
        self.query = query
        self.repository = query.repository
        self.client = query.repository.client
        self.logger = logger
        self.prune = prune
        self.log_prefix = f"[{self.repository.full_name}]"

    async def create_label(self, input_: CreateLabelInput) -> Label:
        mutation, variables = MutationBuilder.create_label(input_)
        data = await self.client.execute(mutation, variables)
        return Label.model_validate(data["createLabel"]["label"])

    async def update_label(self, input_: UpdateLabelInput) -> Label:
        mutation, variables = MutationBuilder.update_label(input_)
        data = await self.client.execute(mutation, variables)
        return Label.model_validate(data["updateLabel"]["label"])

    async def delete_label(self, input_: DeleteLabelInput) -> str | None:
        mutation, variables = MutationBuilder.delete_label(input_)
        data = await self.client.execute(mutation, variables)
        return data["deleteLabel"]["clientMutationId"]

    @staticmethod
    def _needs_update(current: Label, desired: LabelConfig) -> bool:
        return (
            current.name != desired.name
            or current.color.lower() != desired.color
            or (current.description or "") != desired.description
        )

    async def apply(self, labels: list[LabelConfig]) -> SyncResult:
        result = SyncResult()
        existing: dict[str, Label] = {label.name.lower(): label for label in await self.query.fetch()}

        for desired in labels:
            current = existing.pop(desired.name.lower(), None)

            if current is None:
                self.logger.info(f"{self.log_prefix} Creating label {desired.name}")
                await self.create_label(
                    CreateLabelInput(
                        repository_id=await self.repository.id(),
                        name=desired.name,
                        color=desired.color,
                        description=desired.description,
                    )
                )
                result.created.append(desired.name)

            elif self._needs_update(current=current, desired=desired):
                self.logger.info(f"{self.log_prefix} Updating label {current.name}")
                await self.update_label(
                    UpdateLabelInput(
                        id=current.id,
                        name=desired.name,
                        color=desired.color,
                        description=desired.description,
                    )
                )
                result.updated.append(desired.name)

        if self.prune:
            for extra in existing.values():
                self.logger.info(f"{self.log_prefix} Deleting label {extra.name}")
                await self.delete_label(DeleteLabelInput(id=extra.id))
                result.deleted.append(extra.name)

        self.logger.info(
            f"{self.log_prefix} {format_sync_summary('labels', result.created, result.updated, result.deleted)}"
        )
        return result
