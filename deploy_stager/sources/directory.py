# deploy_stager/sources/directory.py
"""Plain directory source (no version control)"""

from shlex import quote

from .base import SourceControl


class DirectorySource(SourceControl):
    """
    Copy a local directory as-is

    The revision has no effect on the copied content; it is still recorded
    in the REVISION file by the strategy.
    """

    @property
    def local_command(self) -> str:
        return "cp"

    def checkout(self, revision: str, destination: str) -> str:
        return f"cp -R {quote(self.repository)} {quote(destination)}"

    def export(self, revision: str, destination: str) -> str:
        return f"{self.checkout(revision, destination)} && rm -Rf {quote(destination)}/.git"

    def sync(self, revision: str, destination: str) -> str:
        dest = quote(destination)
        return f"rm -rf {dest} && cp -R {quote(self.repository)} {dest}"
