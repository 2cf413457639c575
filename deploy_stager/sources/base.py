# deploy_stager/sources/base.py
"""Source control collaborator interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SourceControl(ABC):
    """
    Produces the shell commands that materialize a revision locally

    Implementations only build command lines; the strategy runs them.
    """

    def __init__(self, repository: str):
        self.repository = repository

    @property
    @abstractmethod
    def local_command(self) -> Optional[str]:
        """Binary that must exist locally to run the commands"""
        pass

    @abstractmethod
    def checkout(self, revision: str, destination: str) -> str:
        """Command that creates a working copy of revision at destination"""
        pass

    @abstractmethod
    def export(self, revision: str, destination: str) -> str:
        """Command that creates a pristine copy without repository metadata"""
        pass

    def sync(self, revision: str, destination: str) -> str:
        """Command that moves an existing checkout at destination to revision"""
        return self.checkout(revision, destination)

    def handle_data(self, state: Dict[str, Any], stream: str, text: str) -> Optional[str]:
        """
        React to output from a remote command

        Args:
            state: Per-command scratch dictionary
            stream: "stdout" or "stderr"
            text: Output chunk

        Returns:
            Text to send to the command's stdin, or None
        """
        return None
