"""Global constants for deploy-stager"""

from enum import Enum

APP_NAME = "deploy-stager"
LOG_FORMAT = "%(message)s"

# Persisted artifacts
REVISION_FILE = "REVISION"

# Default configuration values
DEFAULT_COMPRESSION = "gzip"
DEFAULT_REMOTE_DIR = "/tmp"
DEFAULT_TAR_COMMAND = "tar"
DEFAULT_SSH_PORT = 22
DEFAULT_SERVER_SELECTION = "round_robin"

LOCAL_HOSTS = ("local", "localhost", "127.0.0.1")


class CheckoutStrategy(Enum):
    """How the source collaborator produces the tree"""
    CHECKOUT = "checkout"
    EXPORT = "export"


class SelectionPolicy(Enum):
    """Mirror selection policies"""
    ROUND_ROBIN = "round_robin"
    WEIGHTED = "weighted"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "DS001"
    COMMAND_FAILED = "DS002"
    FILESYSTEM_ERROR = "DS003"
    CROSS_DEVICE_LINK = "DS004"
    MISSING_REQUIRED_PARAMETER = "DS005"


# Environment variables
ENV_CONFIG_PATH = "DEPLOY_STAGER_CONFIG"
ENV_LOG_LEVEL = "DEPLOY_STAGER_LOG_LEVEL"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ARROW = "→"

# Message templates
MSG_STAGE_SUCCESS = f"{EMOJI_SUCCESS} Revision {{revision}} unpacked into {{releases_path}}"
MSG_DISTRIBUTED = f"{EMOJI_SUCCESS} Distributed {{release_path}} {EMOJI_ARROW} {{server}}"
