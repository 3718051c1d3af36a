"""
Services Module

Business logic layer built on top of the Jenkins client.
"""

from .job_service import JobService
from .log_service import LogService
from .scm_service import ScmService
from .test_report_service import TestReportService

__all__ = [
    "JobService",
    "LogService",
    "ScmService",
    "TestReportService",
]
