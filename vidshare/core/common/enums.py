# File: vidshare/core/common/enums.py

from enum import Enum, unique


@unique
class ProcessingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
