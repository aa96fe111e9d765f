INPUT_CONFIG_ENV: str = "INPUT_CONFIG"
INPUT_TOKEN_ENV: str = "INPUT_TOKEN"
INPUT_OWNER_ENV: str = "INPUT_OWNER"
INPUT_REPO_ENV: str = "INPUT_REPO"
GITHUB_TOKEN_ENV: str = "GITHUB_TOKEN"
GITHUB_REPOSITORY_ENV: str = "GITHUB_REPOSITORY"

NOT_FOUND_STR: str = "NOT_FOUND"
UNPROCESSABLE_STR: str = "UNPROCESSABLE"

# GitHub caps connection pages at 100 nodes
DEFAULT_PAGE_SIZE: int = 100
DEFAULT_LABEL_COLOR: str = "ededed"

DEFAULT_BRANCH_PROTECTION: dict[str, bool | int] = {
    "allow_deletions": False,
    "allow_force_pushes": False,
    "strict": True,
    "require_code_owner_reviews": False,
    "dismiss_stale_reviews": True,
    "required_approving_review_count": 0,
    "required_linear_history": True,
    "required_conversation_resolution": True,
    "required_signatures": False,
}
