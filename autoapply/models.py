"""Data models for fill passes, page feedback and job records."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from autoapply.dom.base import Element


class FieldKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    CHOICE = "choice"

    @classmethod
    def of(cls, element: Element) -> "FieldKind":
        tag = element.tag
        if tag == "select":
            return cls.CHOICE
        if tag == "textarea":
            return cls.TEXTAREA
        return cls.TEXT


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class FieldDescriptor:
    element: Element
    kind: FieldKind
    label: str = ""
    placeholder: str = ""
    name: str = ""
    id: str = ""
    current_value: str = ""
    visible: bool = False

    @property
    def signals(self) -> tuple[str, str, str, str]:
        return self.label, self.placeholder, self.name, self.id

    @property
    def is_empty(self) -> bool:
        return not self.current_value.strip()


@dataclass
class MatchResult:
    field: FieldDescriptor
    key: str
    value: str


@dataclass
class FillResult:
    mode: str
    filled: list[MatchResult] = field(default_factory=list)
    failed: list[MatchResult] = field(default_factory=list)
    errors: int = 0

    @property
    def filled_count(self) -> int:
        return len(self.filled)

    def summary(self) -> str:
        if self.filled_count:
            return f"{self.filled_count} fields filled"
        return "No matching fields found"


@dataclass
class HighlightSession:
    element: Element
    session_id: str
    snapshot: dict[str, str]
    revert_timer: int | None = None
    transition_timer: int | None = None


@dataclass
class ToastEntry:
    id: str
    message: str
    severity: Severity
    element: Element
    dismiss_timer: int | None = None
    listener_key: str = ""
    dismissing: bool = False


@dataclass
class SalaryRange:
    min: int | None = None
    max: int | None = None
    currency: str = "USD"
    period: str = "yearly"

    def to_dict(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max, "currency": self.currency, "period": self.period}


@dataclass
class JobRecord:
    job_title: str = ""
    company: str = ""
    location: str = ""
    jd_url: str = ""
    job_description: str = ""
    salary_range: SalaryRange | None = None
    employment_type: str = "full-time"
    work_mode: str = "onsite"
    experience_level: str = "mid"
    required_skills: list[str] = field(default_factory=list)
    job_source: str = "other"
    job_id: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape expected by the job tracker API."""
        return {
            "jobTitle": self.job_title,
            "company": self.company,
            "location": self.location,
            "jdUrl": self.jd_url,
            "jobDescription": self.job_description,
            "salaryRange": (self.salary_range or SalaryRange()).to_dict(),
            "employmentType": self.employment_type,
            "workMode": self.work_mode,
            "experienceLevel": self.experience_level,
            "requiredSkills": list(self.required_skills),
            "jobSource": self.job_source,
            "jobId": self.job_id,
            "metadata": dict(self.metadata),
        }
