"""Command-line interface for publishing notes to Confluence.

This package provides the `confluence-publish` CLI tool that publishes a
single Obsidian note, together with its folder chain and attachments, into a
Confluence space, with progress indication and error handling.
"""

from .publish_command import PublishCommand
from .models import ExitCode
from .errors import CLIError, ConfigNotFoundError, VaultNotFoundError

__all__ = [
    'PublishCommand',
    'ExitCode',
    'CLIError',
    'ConfigNotFoundError',
    'VaultNotFoundError',
]
