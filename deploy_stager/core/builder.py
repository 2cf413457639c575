# deploy_stager/core/builder.py
"""Optional build step executed inside the staging tree"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..utils.process import CommandOutcome, run_command

logger = logging.getLogger(__name__)


class BuildRunner:
    """Run the configured build script in the staged tree"""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    async def build(self,
                    directory: Union[str, Path],
                    build_script: Optional[str]) -> Optional[CommandOutcome]:
        """
        Run build_script with directory as working directory

        Args:
            directory: Staging directory
            build_script: Shell command, skipped when empty

        Returns:
            Command outcome, or None if no build script is configured

        Raises:
            CommandFailedError: If the script exits non-zero
        """
        if not build_script:
            return None

        logger.debug(f"running build script on {directory}")
        outcome = await run_command(build_script, cwd=directory, timeout=self.timeout)

        if outcome.stdout:
            logger.info(f"Build output: {outcome.stdout.strip()}")
        if outcome.stderr:
            logger.warning(f"Build error output: {outcome.stderr.strip()}")

        return outcome.check()
