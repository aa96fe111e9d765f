from __future__ import annotations

import os
from logging import Logger
from typing import TYPE_CHECKING

from simple_logger.logger import get_logger

if TYPE_CHECKING:
    from repostructure.libs.config import Config


def get_logger_with_params(
    name: str = "repostructure",
    config: Config | None = None,
) -> Logger:
    mask_sensitive_patterns: list[str] = [
        "token",
        "github_token",
        "GITHUB_TOKEN",
        "INPUT_TOKEN",
        "authorization",
        "Authorization",
    ]

    log_level: str = "INFO"
    log_file: str | None = None
    if config:
        log_level = config.settings.log_level
        log_file = config.settings.log_file

    if log_file and not log_file.startswith("/"):
        log_file_path = os.path.join(os.environ.get("RUNNER_TEMP", os.getcwd()), "logs")

        if not os.path.isdir(log_file_path):
            os.makedirs(log_file_path, exist_ok=True)

        log_file = os.path.join(log_file_path, log_file)

    return get_logger(
        name=name,
        filename=log_file,
        level=log_level,
        file_max_bytes=1024 * 1024 * 10,
        mask_sensitive=True,
        mask_sensitive_patterns=mask_sensitive_patterns,
        console=True,
    )


def format_sync_summary(kind: str, created: list[str], updated: list[str], deleted: list[str]) -> str:
    """Format a one-line summary of a reconciliation pass."""
    return f"{kind}: created={len(created)} {created}, updated={len(updated)} {updated}, deleted={len(deleted)} {deleted}"
