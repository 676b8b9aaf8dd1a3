from enum import Enum

class JobType(str, Enum):
    TRANSCODE = "transcode"

class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
