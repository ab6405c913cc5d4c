"""Publish command orchestration for CLI.

This module provides the PublishCommand class that wires the vault layer,
the transcoder and the hierarchy synchronizer together for one note, and
translates failures into exit codes.
"""

import logging
import os
from typing import Optional, Tuple

from src.cli.errors import CLIError, ConfigNotFoundError, VaultNotFoundError
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    RemoteWriteConflictError,
    SyncError,
)
from src.content_converter.storage_transcoder import StorageTranscoder
from src.publisher.diagram_renderer import KrokiRenderer
from src.publisher.errors import ArchivedTitleConflictError
from src.publisher.hierarchy_sync import HierarchySynchronizer
from src.publisher.transport import ConfluenceTransport, Transport
from src.vault.attachments import VaultAttachmentReader
from src.vault.config_loader import CONFIG_DIR, ConfigLoader
from src.vault.errors import ConfigError
from src.vault.models import PublishConfig
from src.vault.note_loader import NoteLoader

logger = logging.getLogger(__name__)

VAULT_MARKERS = (CONFIG_DIR, ".obsidian")
ENV_FILE = ".env"


def find_vault_root(note_path: str) -> Optional[str]:
    """Nearest directory above ``note_path`` holding a vault marker folder."""
    current = os.path.dirname(os.path.abspath(note_path))
    while True:
        if any(os.path.isdir(os.path.join(current, marker)) for marker in VAULT_MARKERS):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


class PublishCommand:
    """Publishes a single vault note to Confluence.

    The publish workflow:
        1. Locate the vault and load its configuration
        2. Read the note, strip frontmatter, derive title and folder chain
        3. Dry run: print the transcoded page and stop
        4. Validate credentials, then synchronize the page hierarchy
        5. Write the page URL back into the note's frontmatter
        6. Return an exit code

    Example:
        >>> command = PublishCommand(output_handler=OutputHandler(verbosity=1))
        >>> exit_code = command.run("vault/Tech/Roadmap.md")
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        transport: Optional[Transport] = None,
    ):
        """Initialize publish command with dependencies.

        Args:
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for Confluence API (optional)
            transport: Transport to publish through (optional, built from
                       config and credentials when omitted)
        """
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.transport = transport

    def run(
        self,
        file: str,
        vault_root: Optional[str] = None,
        config_path: Optional[str] = None,
        dry_run: bool = False,
    ) -> ExitCode:
        """Execute the publish operation.

        Args:
            file: Path of the note to publish
            vault_root: Vault root directory (located from the note if omitted)
            config_path: Configuration file (``<vault>/.confluence-publish/config.yaml``
                         if omitted)
            dry_run: If True, print the transcoded page without publishing

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            vault_root, config_path = self._resolve_paths(file, vault_root, config_path)

            logger.info(f"Loading configuration from {config_path}")
            self.output_handler.info(f"Loading configuration from {config_path}")
            if not os.path.isfile(config_path):
                raise ConfigNotFoundError(config_path)
            config = ConfigLoader.load(config_path)

            loader = NoteLoader(vault_root)
            note = loader.load(file)
            document = loader.to_document(note)
            transcoder = StorageTranscoder(config.attachments_folder)

            if dry_run:
                self.output_handler.print_dryrun_summary(
                    document, transcoder.transcode(document.body)
                )
                return ExitCode.SUCCESS

            transport = self.transport or self._build_transport(config, vault_root)
            synchronizer = HierarchySynchronizer(
                transport,
                transcoder,
                on_notice=self.output_handler.notice,
                on_warning=self.output_handler.warning,
            )

            with self.output_handler.spinner(f"Publishing {document.title}..."):
                result = synchronizer.sync(document)

            url = transport.page_url(result.page.page_id)
            if config.add_confluence_url:
                loader.write_confluence_url(note.path, url)

            self.output_handler.print_publish_summary(result, url)
            return ExitCode.SUCCESS

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check CONFLUENCE_URL, CONFLUENCE_USER and CONFLUENCE_API_TOKEN"
            )
            return ExitCode.AUTH_ERROR

        except (RemoteWriteConflictError, ArchivedTitleConflictError) as e:
            logger.error(f"Publish rejected: {e}")
            self.output_handler.error(str(e))
            return ExitCode.CONFLICTS

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (CLIError, SyncError) as e:
            logger.error(f"Publish failed: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during publish")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _resolve_paths(
        self,
        file: str,
        vault_root: Optional[str],
        config_path: Optional[str]
    ) -> Tuple[str, str]:
        if vault_root is None:
            vault_root = find_vault_root(file)
            if vault_root is None:
                raise VaultNotFoundError(file)
        vault_root = os.path.abspath(vault_root)
        return vault_root, config_path or ConfigLoader.default_path(vault_root)

    def _build_transport(self, config: PublishConfig, vault_root: str) -> Transport:
        if self.authenticator is None:
            env_file = os.path.join(vault_root, CONFIG_DIR, ENV_FILE)
            self.authenticator = Authenticator(env_file if os.path.isfile(env_file) else None)

        # Fail on missing credentials before any remote call
        self.authenticator.get_credentials()

        return ConfluenceTransport(
            APIWrapper(self.authenticator, config.space_key),
            KrokiRenderer(config.diagram_service_url, config.diagram_timeout),
            VaultAttachmentReader(vault_root, config.attachments_folder),
        )
