class ConfigError(Exception):
    """Raised when the INPUT_CONFIG environment variable is missing or malformed."""

    pass


class NoApiTokenError(Exception):
    """Raised when no API token is available for GitHub API operations."""

    pass
