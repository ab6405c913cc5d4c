"""Path and size checks applied before reading anything from a vault."""

import os

from .errors import FilesystemError

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB in bytes


def validate_path_safety(file_path: str, base_directory: str) -> str:
    """Validate that a file path resolves inside the base directory.

    Symlinks and ``..`` segments are resolved before the check.

    Args:
        file_path: Path to validate
        base_directory: Base directory that must contain the path

    Returns:
        The resolved absolute path

    Raises:
        FilesystemError: If path is outside base directory
    """
    real_base = os.path.realpath(base_directory)
    real_path = os.path.realpath(file_path)

    if not real_path.startswith(real_base + os.sep) and real_path != real_base:
        raise FilesystemError(
            file_path,
            'validate',
            f'Path traversal detected: {file_path} is outside base directory {base_directory}'
        )
    return real_path


def validate_file_size(file_path: str, max_size: int = MAX_FILE_SIZE) -> None:
    """Refuse files larger than ``max_size`` before reading them into memory.

    Raises:
        FilesystemError: If the file cannot be stat'ed or is too large
    """
    try:
        file_size = os.path.getsize(file_path)
    except OSError as e:
        raise FilesystemError(file_path, 'stat', f'Failed to check file size: {e}')

    if file_size > max_size:
        size_mb = file_size / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        raise FilesystemError(
            file_path,
            'read',
            f'File size ({size_mb:.2f} MB) exceeds maximum allowed size ({max_mb:.0f} MB)'
        )
