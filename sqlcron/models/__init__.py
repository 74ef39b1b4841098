from .base_sql import BaseSQL
from .raw_job import RawJob
from .job import Job


__all__ = ["BaseSQL", "RawJob", "Job"]
