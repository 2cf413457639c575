"""Exception definitions for deploy-stager API"""

from typing import Optional, Sequence, Union

from ..constants import ErrorCode


class StagerError(Exception):
    """Base exception for deploy-stager"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class CommandFailedError(StagerError):
    """A local or remote command exited with a non-zero status"""

    def __init__(self,
                 command: Union[str, Sequence[str]],
                 returncode: int,
                 output: Optional[str] = None):
        if not isinstance(command, str):
            command = " ".join(str(part) for part in command)
        message = f"shell command failed with return code {returncode}: {command}"
        if output:
            message = f"{message}\n{output.strip()}"
        super().__init__(message, ErrorCode.COMMAND_FAILED)
        self.command = command
        self.returncode = returncode
        self.output = output


class ConfigError(StagerError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class MissingParameterError(ConfigError):
    """Required configuration key is not set"""

    def __init__(self, key: str):
        super().__init__(f"Missing required configuration: {key}")
        self.error_code = ErrorCode.MISSING_REQUIRED_PARAMETER
        self.key = key


class FilesystemError(StagerError):
    """Staging tree operation failed"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.FILESYSTEM_ERROR)
        self.path = path


class CrossDeviceError(FilesystemError):
    """Copy cache and destination live on different filesystems"""

    def __init__(self, source: str, destination: str):
        super().__init__(
            f"Cannot hardlink {source} to {destination}: "
            f"copy cache and staging directory must be on the same filesystem",
            path=source
        )
        self.error_code = ErrorCode.CROSS_DEVICE_LINK
        self.destination = destination
