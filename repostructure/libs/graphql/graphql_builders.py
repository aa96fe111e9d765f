"""GraphQL query and mutation builders for GitHub API."""

from __future__ import annotations

from typing import Any

from repostructure.libs.commands import (
    CreateBranchProtectionRuleInput,
    CreateEnvironmentInput,
    CreateLabelInput,
    DeleteBranchProtectionRuleInput,
    DeleteEnvironmentInput,
    DeleteLabelInput,
    UpdateBranchProtectionRuleInput,
    UpdateLabelInput,
)
from repostructure.utils.constants import DEFAULT_PAGE_SIZE

# Common GraphQL fragments for reuse
LABEL_FRAGMENT = """
fragment LabelFields on Label {
    id
    name
    color
    description
}
"""

BRANCH_PROTECTION_RULE_FRAGMENT = """
fragment BranchProtectionRuleFields on BranchProtectionRule {
    id
    pattern
    allowsDeletions
    allowsForcePushes
    dismissesStaleReviews
    requiredApprovingReviewCount
    requiredStatusCheckContexts
    requiresApprovingReviews
    requiresCodeOwnerReviews
    requiresCommitSignatures
    requiresConversationResolution
    requiresLinearHistory
    requiresStatusChecks
    requiresStrictStatusChecks
}
"""

ENVIRONMENT_FRAGMENT = """
fragment EnvironmentFields on Environment {
    id
    name
}
"""

USER_FRAGMENT = """
fragment UserFields on User {
    id
    login
    name
}
"""


def _connection_query(field: str, fragment_name: str, fragment: str) -> str:
    return f"""
        query($owner: String!, $name: String!, $first: Int!, $after: String) {{
            repository(owner: $owner, name: $name) {{
                {field}(first: $first, after: $after) {{
                    totalCount
                    pageInfo {{
                        hasNextPage
                        endCursor
                    }}
                    nodes {{
                        ...{fragment_name}
                    }}
                }}
            }}
        }}
        {fragment}
    """


def _connection_variables(owner: str, name: str, first: int, after: str | None) -> dict[str, Any]:
    variables: dict[str, Any] = {"owner": owner, "name": name, "first": first}
    if after:
        variables["after"] = after

    return variables


class QueryBuilder:
    """Builder for GraphQL queries."""

    @staticmethod
    def get_repository(owner: str, name: str) -> tuple[str, dict[str, Any]]:
        """
        Get repository node id and name.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = """
            query($owner: String!, $name: String!) {
                repository(owner: $owner, name: $name) {
                    id
                    name
                    nameWithOwner
                }
            }
        """
        variables = {"owner": owner, "name": name}
        return query, variables

    @staticmethod
    def get_labels(
        owner: str, name: str, first: int = DEFAULT_PAGE_SIZE, after: str | None = None
    ) -> tuple[str, dict[str, Any]]:
        """
        Get repository labels with pagination.

        Args:
            owner: Repository owner
            name: Repository name
            first: Number of results to return
            after: Cursor for pagination

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = _connection_query(field="labels", fragment_name="LabelFields", fragment=LABEL_FRAGMENT)
        return query, _connection_variables(owner=owner, name=name, first=first, after=after)

    @staticmethod
    def get_branch_protection_rules(
        owner: str, name: str, first: int = DEFAULT_PAGE_SIZE, after: str | None = None
    ) -> tuple[str, dict[str, Any]]:
        """
        Get repository branch protection rules with pagination.

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = _connection_query(
            field="branchProtectionRules",
            fragment_name="BranchProtectionRuleFields",
            fragment=BRANCH_PROTECTION_RULE_FRAGMENT,
        )
        return query, _connection_variables(owner=owner, name=name, first=first, after=after)

    @staticmethod
    def get_environments(
        owner: str, name: str, first: int = DEFAULT_PAGE_SIZE, after: str | None = None
    ) -> tuple[str, dict[str, Any]]:
        """
        Get repository deployment environments with pagination.

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = _connection_query(field="environments", fragment_name="EnvironmentFields", fragment=ENVIRONMENT_FRAGMENT)
        return query, _connection_variables(owner=owner, name=name, first=first, after=after)

    @staticmethod
    def get_user(login: str) -> tuple[str, dict[str, Any]]:
        """
        Get a user by exact login.

        Args:
            login: Username

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = f"""
            query($login: String!) {{
                user(login: $login) {{
                    ...UserFields
                }}
            }}
            {USER_FRAGMENT}
        """
        variables = {"login": login}
        return query, variables


class MutationBuilder:
    """Builder for GraphQL mutations."""

    @staticmethod
    def create_label(input_: CreateLabelInput) -> tuple[str, dict[str, Any]]:
        """
        Create a repository label.

        Returns:
            Tuple of (mutation string, variables dict)
        """
        mutation = f"""
            mutation($input: CreateLabelInput!) {{
                createLabel(input: $input) {{
                    clientMutationId
                    label {{
                        ...LabelFields
                    }}
                }}
            }}
            {LABEL_FRAGMENT}
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def update_label(input_: UpdateLabelInput) -> tuple[str, dict[str, Any]]:
        """
        Update a repository label by node id.

        Returns:
            Tuple of (mutation string, variables dict)
        """
        mutation = f"""
            mutation($input: UpdateLabelInput!) {{
                updateLabel(input: $input) {{
                    clientMutationId
                    label {{
                        ...LabelFields
                    }}
                }}
            }}
            {LABEL_FRAGMENT}
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def delete_label(input_: DeleteLabelInput) -> tuple[str, dict[str, Any]]:
        """
        Delete a repository label by node id.

        Returns:
            Tuple of (mutation string, variables dict)
        """
        mutation = """
            mutation($input: DeleteLabelInput!) {
                deleteLabel(input: $input) {
                    clientMutationId
                }
            }
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def create_branch_protection_rule(input_: CreateBranchProtectionRuleInput) -> tuple[str, dict[str, Any]]:
        mutation = f"""
            mutation($input: CreateBranchProtectionRuleInput!) {{
                createBranchProtectionRule(input: $input) {{
                    clientMutationId
                    branchProtectionRule {{
                        ...BranchProtectionRuleFields
                    }}
                }}
            }}
            {BRANCH_PROTECTION_RULE_FRAGMENT}
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def update_branch_protection_rule(input_: UpdateBranchProtectionRuleInput) -> tuple[str, dict[str, Any]]:
        mutation = f"""
            mutation($input: UpdateBranchProtectionRuleInput!) {{
                updateBranchProtectionRule(input: $input) {{
                    clientMutationId
                    branchProtectionRule {{
                        ...BranchProtectionRuleFields
                    }}
                }}
            }}
            {BRANCH_PROTECTION_RULE_FRAGMENT}
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def delete_branch_protection_rule(input_: DeleteBranchProtectionRuleInput) -> tuple[str, dict[str, Any]]:
        mutation = """
            mutation($input: DeleteBranchProtectionRuleInput!) {
                deleteBranchProtectionRule(input: $input) {
                    clientMutationId
                }
            }
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def create_environment(input_: CreateEnvironmentInput) -> tuple[str, dict[str, Any]]:
        mutation = f"""
            mutation($input: CreateEnvironmentInput!) {{
                createEnvironment(input: $input) {{
                    clientMutationId
                    environment {{
                        ...EnvironmentFields
                    }}
                }}
            }}
            {ENVIRONMENT_FRAGMENT}
        """
        return mutation, {"input": input_.to_variables()}

    @staticmethod
    def delete_environment(input_: DeleteEnvironmentInput) -> tuple[str, dict[str, Any]]:
        mutation = """
            mutation($input: DeleteEnvironmentInput!) {
                deleteEnvironment(input: $input) {
                    clientMutationId
                }
            }
        """
        return mutation, {"input": input_.to_variables()}


# Pagination Pattern Documentation:
# RepositoryQuery.paginate() walks connections built here:
#
# cursor = None
# while True:
#     query, variables = QueryBuilder.get_labels(owner, name, after=cursor)
#     data = await client.execute(query, variables)
#     page = data["repository"]["labels"]
#     results.extend(page["nodes"])
#     if not page["pageInfo"]["hasNextPage"]:
#         break
#     cursor = page["pageInfo"]["endCursor"]
