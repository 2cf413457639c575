# deploy_stager/core/revision.py
"""REVISION marker file"""

from pathlib import Path
from typing import Optional, Union

from ..api.exceptions import FilesystemError
from ..constants import REVISION_FILE


def write_revision_file(destination: Union[str, Path], revision: str) -> Path:
    """
    Record the deployed revision at the root of the staging tree

    Args:
        destination: Staging directory
        revision: Revision identifier

    Returns:
        Path of the written file

    Raises:
        FilesystemError: If the file cannot be written
    """
    path = Path(destination) / REVISION_FILE
    try:
        with open(path, "w") as f:
            f.write(f"{revision}\n")
    except OSError as e:
        raise FilesystemError(f"Cannot write {path}: {e}", path=str(path)) from e
    return path


def read_revision_file(directory: Union[str, Path]) -> Optional[str]:
    """Read the revision recorded in directory, if any"""
    path = Path(directory) / REVISION_FILE
    try:
        return path.read_text().strip()
    except FileNotFoundError:
        return None
