# deploy_stager/core/rollback.py
"""Best-effort removal of local temporary artifacts"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class RollbackResult:
    """Outcome of a rollback pass"""
    removed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self):
        return {"removed": self.removed, "errors": self.errors}


class RollbackManager:
    """Sole owner of the archive and staging directory teardown"""

    def rollback(self,
                 archive: Optional[Union[str, Path]],
                 destination: Optional[Union[str, Path]]) -> RollbackResult:
        """
        Remove the local archive and staging directory

        Missing paths are fine. Never raises.

        Args:
            archive: Local archive path
            destination: Staging directory

        Returns:
            RollbackResult
        """
        result = RollbackResult()

        if archive is not None:
            self._remove_file(Path(archive), result)
        if destination is not None:
            self._remove_tree(Path(destination), result)

        return result

    def _remove_file(self, path: Path, result: RollbackResult) -> None:
        try:
            path.unlink()
            result.removed.append(str(path))
        except FileNotFoundError:
            pass
        except Exception as e:
            logger.warning(f"Could not remove archive {path}: {e}")
            result.errors.append(f"{path}: {e}")

    def _remove_tree(self, path: Path, result: RollbackResult) -> None:
        try:
            if path.is_symlink() or path.is_file():
                path.unlink()
            else:
                shutil.rmtree(path)
            result.removed.append(str(path))
        except FileNotFoundError:
            pass
        except Exception as e:
            logger.warning(f"Could not remove staging directory {path}: {e}")
            result.errors.append(f"{path}: {e}")
