from .boards import GENERIC, JOB_BOARDS, JobBoard, detect_job_board
from .enrich import (
    classify_employment_type,
    classify_experience_level,
    classify_work_mode,
    extract_skills,
    parse_salary,
)
from .extractor import (
    extract_job,
    extract_job_description,
    extract_job_details,
    is_job_posting_page,
)

__all__ = [
    "GENERIC", "JOB_BOARDS", "JobBoard", "detect_job_board",
    "classify_employment_type", "classify_experience_level", "classify_work_mode",
    "extract_skills", "parse_salary",
    "extract_job", "extract_job_description", "extract_job_details", "is_job_posting_page",
]
