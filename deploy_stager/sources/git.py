# deploy_stager/sources/git.py
"""Git source collaborator"""

import logging
import re
from shlex import quote
from typing import Any, Dict, Optional

from .base import SourceControl

logger = logging.getLogger(__name__)

_PASSPHRASE_PROMPT = re.compile(r"passphrase for key|password:", re.IGNORECASE)
_HOST_KEY_PROMPT = re.compile(r"\(yes/no(/\[fingerprint\])?\)\?")


class GitSource(SourceControl):
    """Build git commands for a repository URL"""

    def __init__(self, repository: str, branch: Optional[str] = None, password: Optional[str] = None):
        super().__init__(repository)
        self.branch = branch
        self.password = password

    @property
    def local_command(self) -> str:
        return "git"

    def checkout(self, revision: str, destination: str) -> str:
        dest = quote(destination)
        args = ["git clone -q"]
        if self.branch:
            args.append(f"-b {quote(self.branch)}")
        args.append(f"{quote(self.repository)} {dest}")

        return (
            f"{' '.join(args)} && "
            f"cd {dest} && "
            f"git checkout -q -B deploy {quote(revision)}"
        )

    def export(self, revision: str, destination: str) -> str:
        return f"{self.checkout(revision, destination)} && rm -Rf {quote(destination)}/.git"

    def sync(self, revision: str, destination: str) -> str:
        dest = quote(destination)
        return (
            f"cd {dest} && "
            f"git fetch -q {quote(self.repository)} && "
            f"git fetch --tags -q {quote(self.repository)} && "
            f"git reset -q --hard {quote(revision)} && "
            f"git clean -q -d -x -f"
        )

    def handle_data(self, state: Dict[str, Any], stream: str, text: str) -> Optional[str]:
        """Answer host key and password prompts git raises over ssh"""
        if _HOST_KEY_PROMPT.search(text):
            logger.info("accepting unknown host key")
            return "yes\n"

        if _PASSPHRASE_PROMPT.search(text):
            if not self.password or state.get("password_sent"):
                logger.warning(f"git prompted for credentials on {stream}")
                return None
            state["password_sent"] = True
            return f"{self.password}\n"

        return None
