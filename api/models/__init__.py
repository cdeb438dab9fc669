# Models module
from .job import JobStatusEnum, JobTypeEnum

__all__ = ["JobStatusEnum", "JobTypeEnum"]
