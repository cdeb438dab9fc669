"""Job model definitions."""
from enum import Enum


class JobStatusEnum(str, Enum):
    """Job status enumeration."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class JobTypeEnum(str, Enum):
    """Job type enumeration."""
    GENERATE = "generate"
    REGENERATE = "regenerate"
