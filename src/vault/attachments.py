"""Reading attachment binaries out of the vault's attachments folder."""

import logging
import os
from typing import Dict, Tuple

from .errors import FilesystemError
from .path_guard import validate_file_size, validate_path_safety

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Dict[str, str] = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
}


def content_type_for(filename: str) -> str:
    """MIME type for an attachment, from its extension (case-insensitive)."""
    _, extension = os.path.splitext(filename)
    return CONTENT_TYPES.get(extension.lower(), DEFAULT_CONTENT_TYPE)


class VaultAttachmentReader:
    """Reads files referenced by ``![[...]]`` embeds.

    Embeds name files relative to the attachments folder. A name that does
    not exist there is also tried relative to the vault root, since Obsidian
    writes full vault paths when a name is ambiguous.

    Example:
        >>> reader = VaultAttachmentReader("/notes", "attachments")
        >>> data, content_type = reader.read("diagram.png")
    """

    def __init__(self, vault_root: str, attachments_folder: str = "attachments"):
        self.vault_root = os.path.abspath(vault_root)
        self.attachments_folder = attachments_folder

    def resolve(self, filename: str) -> str:
        """Absolute path of an embedded file.

        Raises:
            FilesystemError: If the file does not exist or escapes the vault
        """
        relative = filename.replace('\\', '/').lstrip('/')
        candidates = [
            os.path.join(self.vault_root, self.attachments_folder, relative),
            os.path.join(self.vault_root, relative),
        ]
        for candidate in candidates:
            real_path = validate_path_safety(candidate, self.vault_root)
            if os.path.isfile(real_path):
                return real_path

        raise FilesystemError(
            os.path.join(self.attachments_folder, relative),
            'read',
            'Attachment not found in vault'
        )

    def read(self, filename: str) -> Tuple[bytes, str]:
        """Read an embedded file.

        Returns:
            Tuple of (file bytes, content type)

        Raises:
            FilesystemError: If the file is missing, too large or unreadable
        """
        path = self.resolve(filename)
        validate_file_size(path)
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise FilesystemError(path, 'read', str(e))

        logger.debug(f"Read attachment {filename} ({len(data)} bytes)")
        return data, content_type_for(filename)
