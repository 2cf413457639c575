"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.rollback import RollbackResult


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: Optional[str]
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class StageResult:
    """Result of one staging run"""

    revision: str
    status: OperationStatus = OperationStatus.IN_PROGRESS
    archive_path: Optional[str] = None
    remote_archive_path: Optional[str] = None
    releases_path: Optional[str] = None
    server: Optional[str] = None
    steps: List[str] = field(default_factory=list)
    errors: List[ErrorDetail] = field(default_factory=list)
    rollback: Optional[RollbackResult] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def step_done(self, name: str) -> None:
        self.steps.append(name)

    def add_error(self, code: Optional[str], message: str) -> None:
        self.errors.append(ErrorDetail(code=code, message=message))

    def complete(self, status: OperationStatus) -> None:
        """Mark operation as complete"""
        self.end_time = datetime.now()
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "revision": self.revision,
            "status": self.status.value,
            "archive_path": self.archive_path,
            "remote_archive_path": self.remote_archive_path,
            "releases_path": self.releases_path,
            "server": self.server,
            "steps": self.steps,
            "errors": [e.to_dict() for e in self.errors],
            "rollback": self.rollback.to_dict() if self.rollback else None,
            "metadata": self.metadata,
            "duration": self.duration,
        }
