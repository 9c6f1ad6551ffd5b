"""File operation utilities"""

import os
import tempfile
from pathlib import Path
from typing import Union


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = None) -> None:
    """
    Write file atomically

    The content goes to a temporary file in the target directory which is
    then renamed over the target, so readers never see a partial file.

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode (inferred from content type when omitted)
    """
    if mode is None:
        mode = 'wb' if isinstance(content, bytes) else 'w'

    ensure_parent_dir(file_path)

    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent,
                                          prefix=f".{file_path.name}.")

    try:
        if 'b' in mode:
            with os.fdopen(temp_fd, mode) as f:
                f.write(content)
        else:
            with os.fdopen(temp_fd, mode, encoding='utf-8') as f:
                f.write(content)

        os.chmod(temp_path, 0o644)

        # Atomic rename
        os.replace(temp_path, file_path)

    except Exception:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
