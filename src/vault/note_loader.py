"""Loading notes from a vault and writing the page URL back into them."""

import logging
import os
from typing import Tuple

from src.models.document import Document
from .errors import FilesystemError, NoteOutsideVaultError
from .frontmatter_handler import FrontmatterHandler
from .models import VaultNote
from .path_guard import validate_file_size

logger = logging.getLogger(__name__)

NOTE_EXTENSION = ".md"


class NoteLoader:
    """Reads a note and derives its page title and folder chain.

    The title is the file name without extension; the folder chain is every
    directory between the vault root and the note.

    Example:
        >>> loader = NoteLoader("/notes")
        >>> note = loader.load("/notes/Tech/RnD/Roadmap.md")
        >>> note.title, note.folder_path
        ('Roadmap', ('Tech', 'RnD'))
    """

    def __init__(self, vault_root: str):
        self.vault_root = os.path.realpath(vault_root)

    def folder_chain(self, note_path: str) -> Tuple[str, ...]:
        """Folders from the vault root down to the note's directory.

        Raises:
            NoteOutsideVaultError: If the note is not under the vault root
        """
        real_path = os.path.realpath(note_path)
        if not real_path.startswith(self.vault_root + os.sep):
            raise NoteOutsideVaultError(note_path, self.vault_root)

        relative_dir = os.path.dirname(os.path.relpath(real_path, self.vault_root))
        if not relative_dir:
            return ()
        return tuple(segment for segment in relative_dir.split(os.sep) if segment)

    def load(self, note_path: str) -> VaultNote:
        """Read and split a note.

        Raises:
            NoteOutsideVaultError: If the note is not under the vault root
            FilesystemError: If the note cannot be read
            FrontmatterError: If the note's frontmatter is malformed
        """
        folder_path = self.folder_chain(note_path)
        real_path = os.path.realpath(note_path)

        if not os.path.isfile(real_path):
            raise FilesystemError(note_path, 'read', 'Note not found')
        validate_file_size(real_path)

        try:
            with open(real_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except UnicodeDecodeError:
            raise FilesystemError(note_path, 'read', 'Note is not valid UTF-8')
        except OSError as e:
            raise FilesystemError(note_path, 'read', str(e))

        frontmatter, body = FrontmatterHandler.parse(note_path, content)
        title = os.path.splitext(os.path.basename(real_path))[0]
        logger.debug(f"Loaded note '{title}' at {'/'.join(folder_path) or '<root>'}")

        return VaultNote(
            path=real_path,
            title=title,
            folder_path=folder_path,
            body=body,
            frontmatter=frontmatter,
        )

    @staticmethod
    def to_document(note: VaultNote) -> Document:
        return Document(title=note.title, body=note.body, folder_path=note.folder_path)

    def write_confluence_url(self, note_path: str, url: str) -> bool:
        """Record the page URL in the note's frontmatter.

        The file is replaced atomically; an unchanged note is not rewritten.

        Returns:
            True if the file was modified

        Raises:
            FilesystemError: If the note cannot be read or written
        """
        try:
            with open(note_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise FilesystemError(note_path, 'read', str(e))

        updated = FrontmatterHandler.set_confluence_url(content, url)
        if updated == content:
            return False

        temp_path = f"{note_path}.confluence-publish.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(updated)
            os.replace(temp_path, note_path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise FilesystemError(note_path, 'write', str(e))

        logger.info(f"Recorded Confluence URL in {note_path}")
        return True
