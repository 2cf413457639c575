"""Source control collaborators"""

from typing import Optional

from .base import SourceControl
from .directory import DirectorySource
from .git import GitSource
from ..api.exceptions import ConfigError, MissingParameterError


def create_source(scm: Optional[str],
                  repository: Optional[str],
                  branch: Optional[str] = None) -> SourceControl:
    """
    Create the collaborator for an scm name

    Args:
        scm: "git" or "none" (default git)
        repository: Repository URL or directory
        branch: Branch to clone (git only)

    Raises:
        ConfigError: If the scm is unknown or repository missing
    """
    if not repository:
        raise MissingParameterError("repository")

    name = (scm or "git").lstrip(":").lower()
    if name == "git":
        return GitSource(repository, branch=branch)
    if name in ("none", "directory"):
        return DirectorySource(repository)

    raise ConfigError(f"invalid scm {scm!r}")


__all__ = [
    "SourceControl",
    "GitSource",
    "DirectorySource",
    "create_source",
]
