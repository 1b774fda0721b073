"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


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
    timestamp: datetime = field(default_factory=datetime.utcnow)


@dataclass
class TaskResult:
    """Outcome of one build, push or deploy action"""

    action: str
    status: OperationStatus = OperationStatus.IN_PROGRESS
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    output_variables: Dict[str, str] = field(default_factory=dict)
    start_time: datetime = field(default_factory=datetime.utcnow)
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

    def add_error(self, code: Optional[str], message: str) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message))

    def complete(self, status: OperationStatus, message: str = "") -> None:
        """Mark operation as complete"""
        self.end_time = datetime.utcnow()
        self.status = status
        if message:
            self.message = message


@dataclass
class RewriteReport:
    """What a manifest rewrite pass changed"""

    manifest_path: str
    replaced: Dict[str, str] = field(default_factory=dict)  # entry key -> matched server
    unresolved: List[str] = field(default_factory=list)
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.replaced)
