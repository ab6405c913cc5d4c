"""YAML configuration loading and validation.

Publishing settings live in the vault, by default at
``<vault>/.confluence-publish/config.yaml``. Credentials are not part of this
file; they come from the environment (see ``Authenticator``).
"""

import os
from typing import Any, Dict

import yaml

from .errors import ConfigError, FilesystemError
from .models import DEFAULT_DIAGRAM_SERVICE_URL, PublishConfig

CONFIG_DIR = ".confluence-publish"
CONFIG_FILE = "config.yaml"


class ConfigLoader:
    """Handles publishing configuration loading and validation.

    Configuration file structure:
        space_key: "DOCS"
        attachments_folder: "attachments"
        add_confluence_url: true
        diagram_service_url: "https://kroki.io/mermaid/svg"
        diagram_timeout: 30
    """

    REQUIRED_FIELDS = {'space_key'}

    DEFAULTS: Dict[str, Any] = {
        'attachments_folder': 'attachments',
        'add_confluence_url': True,
        'diagram_service_url': DEFAULT_DIAGRAM_SERVICE_URL,
        'diagram_timeout': 30,
    }

    @staticmethod
    def default_path(vault_root: str) -> str:
        return os.path.join(vault_root, CONFIG_DIR, CONFIG_FILE)

    @classmethod
    def load(cls, config_path: str) -> PublishConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            PublishConfig with defaults applied

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(config_path, 'read', 'Configuration file not found')
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> PublishConfig:
        """Validate a raw configuration dictionary.

        Raises:
            ConfigError: If a field is missing or has an invalid value
        """
        missing_fields = cls.REQUIRED_FIELDS - set(config_dict.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        values = {**cls.DEFAULTS, **config_dict}

        space_key = values['space_key']
        if not isinstance(space_key, str) or not space_key.strip():
            raise ConfigError("Field 'space_key' must be a non-empty string", 'space_key')

        attachments_folder = values['attachments_folder']
        if not isinstance(attachments_folder, str) or not attachments_folder.strip('/ '):
            raise ConfigError(
                "Field 'attachments_folder' must be a non-empty string",
                'attachments_folder'
            )
        if '..' in attachments_folder.replace('\\', '/').split('/'):
            raise ConfigError(
                "Field 'attachments_folder' must stay inside the vault",
                'attachments_folder'
            )

        add_confluence_url = values['add_confluence_url']
        if not isinstance(add_confluence_url, bool):
            raise ConfigError(
                f"Field 'add_confluence_url' must be a boolean, "
                f"got {type(add_confluence_url).__name__}",
                'add_confluence_url'
            )

        diagram_service_url = values['diagram_service_url']
        if (not isinstance(diagram_service_url, str)
                or not diagram_service_url.startswith(('http://', 'https://'))):
            raise ConfigError(
                "Field 'diagram_service_url' must be an http(s) URL",
                'diagram_service_url'
            )

        diagram_timeout = values['diagram_timeout']
        if isinstance(diagram_timeout, bool) or not isinstance(diagram_timeout, int):
            raise ConfigError(
                f"Field 'diagram_timeout' must be an integer, "
                f"got {type(diagram_timeout).__name__}",
                'diagram_timeout'
            )
        if diagram_timeout < 1:
            raise ConfigError(
                f"Field 'diagram_timeout' must be at least 1, got {diagram_timeout}",
                'diagram_timeout'
            )

        return PublishConfig(
            space_key=space_key.strip(),
            attachments_folder=attachments_folder.strip('/ '),
            add_confluence_url=add_confluence_url,
            diagram_service_url=diagram_service_url,
            diagram_timeout=diagram_timeout,
        )
