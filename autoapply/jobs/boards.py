"""Job-board adapters as data: host patterns, selector lists and job-id patterns.

Adding a board means adding a ``JobBoard`` entry; the extractor never
branches on board names.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass(frozen=True)
class JobBoard:
    name: str
    hosts: tuple[str, ...] = ()
    title: tuple[str, ...] = ()
    company: tuple[str, ...] = ()
    location: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    salary: tuple[str, ...] = ()
    employment_type: tuple[str, ...] = ()
    job_id_pattern: str = ""
    source: str = "other"

    @property
    def has_adapter(self) -> bool:
        return bool(self.title or self.company)

    def matches(self, host: str) -> bool:
        return any(host == h or host.endswith("." + h) for h in self.hosts)

    def job_id(self, url: str) -> str:
        if not self.job_id_pattern:
            return ""
        m = re.search(self.job_id_pattern, url or "")
        return m.group(1) if m else ""


LINKEDIN = JobBoard(
    name="linkedin",
    hosts=("linkedin.com",),
    title=(
        ".job-details-jobs-unified-top-card__job-title h1",
        ".job-details-jobs-unified-top-card__job-title",
        ".jobs-unified-top-card__job-title",
        'h1[data-test-id="job-title"]',
    ),
    company=(
        ".job-details-jobs-unified-top-card__company-name a",
        ".job-details-jobs-unified-top-card__company-name",
        ".jobs-unified-top-card__company-name",
        'a[data-test-id="job-poster-name"]',
    ),
    location=(
        ".job-details-jobs-unified-top-card__bullet",
        ".jobs-unified-top-card__bullet",
        ".job-location",
    ),
    description=(
        "#job-details",
        ".jobs-description__content",
        ".jobs-box__html-content",
    ),
    salary=(
        ".job-details-jobs-unified-top-card__salary",
        ".jobs-unified-top-card__salary",
        ".salary-main-rail",
        ".compensation-insights",
    ),
    employment_type=(
        ".job-details-jobs-unified-top-card__job-insight",
        ".jobs-unified-top-card__job-insight",
    ),
    job_id_pattern=r"/jobs/view/(\d+)",
    source="linkedin",
)

INDEED = JobBoard(
    name="indeed",
    hosts=("indeed.com",),
    title=(
        'h1[data-testid="jobsearch-JobInfoHeader-title"]',
        'h1[data-testid="jobTitle"]',
        ".jobsearch-JobInfoHeader-title",
    ),
    company=(
        '[data-testid="inlineHeader-companyName"]',
        '[data-testid="inlineCompanyName"]',
        ".jobsearch-InlineCompanyName",
    ),
    location=(
        '[data-testid="inlineHeader-companyLocation"]',
        '[data-testid="job-location"]',
        ".jobsearch-JobInfoHeader-subtitle",
    ),
    description=(
        "#jobDescriptionText",
        ".jobsearch-jobDescriptionText",
        ".job-description",
    ),
    salary=(
        '[data-testid="salaryRange"]',
        ".salary-snippet",
        ".jobsearch-JobMetadataHeader-item",
    ),
    employment_type=(
        '[data-testid="job-type"]',
        ".jobsearch-JobMetadataHeader-item",
    ),
    job_id_pattern=r"[?&]jk=([^&#]+)",
    source="indeed",
)

GLASSDOOR = JobBoard(
    name="glassdoor",
    hosts=("glassdoor.com",),
    title=('h1[data-test="job-title"]', '[data-test="job-title"]', ".job-title", ".jobTitle"),
    company=('div[data-test="employer-name"] a', '[data-test="employer-name"]', ".employer-name", ".companyName"),
    location=('[data-test="job-location"]', ".location", ".jobLocation"),
    description=('[data-test="jobDescriptionContainer"]', '[data-test="job-description"]',
                 ".jobDescriptionContent", ".job-description-content"),
    salary=('[data-test="salary"]', ".salary", ".salaryRange"),
    job_id_pattern=r"jobListingId=(\d+)",
    source="glassdoor",
)

WELLFOUND = JobBoard(
    name="wellfound",
    hosts=("wellfound.com", "angel.co"),
    title=('[data-test="JobTitle"]', ".job-title", "h1"),
    company=('[data-test="CompanyName"]', ".company-name"),
    location=('[data-test="JobLocation"]', ".location"),
)

# Recognised hosts with no tuned selectors; the generic adapter does the work.
MONSTER = JobBoard(name="monster", hosts=("monster.com",))
ZIPRECRUITER = JobBoard(name="ziprecruiter", hosts=("ziprecruiter.com",))
CAREERBUILDER = JobBoard(name="careerbuilder", hosts=("careerbuilder.com",))

GENERIC = JobBoard(
    name="generic",
    title=(
        "h1",
        ".job-title",
        ".jobTitle",
        '[class*="job-title"]',
        '[data-test*="title"]',
        '[data-testid*="title"]',
        ".position-title",
        '[class*="position"]',
        '[class*="title"]',
        '[id*="title"]',
    ),
    company=(
        ".company-name",
        ".companyName",
        '[data-test*="company"]',
        '[data-testid*="company"]',
        '[class*="company"]',
        ".employer-name",
        '[class*="employer"]',
        ".organization",
        '[id*="company"]',
    ),
    location=(
        ".location",
        ".jobLocation",
        ".job-location",
        '[data-test*="location"]',
        '[data-testid*="location"]',
        '[class*="location"]',
        '[id*="location"]',
        ".workplace",
        '[class*="address"]',
    ),
    description=(
        ".job-description",
        "#job-description",
        '[data-automation="jobDescriptionText"]',
        '[data-testid*="description"]',
        '[class*="description"]',
        '[id*="description"]',
    ),
    salary=(".salary", '[class*="salary"]', '[class*="compensation"]'),
    employment_type=('[class*="job-type"]', '[class*="employment-type"]'),
)

JOB_BOARDS: tuple[JobBoard, ...] = (
    LINKEDIN,
    INDEED,
    GLASSDOOR,
    WELLFOUND,
    MONSTER,
    ZIPRECRUITER,
    CAREERBUILDER,
)

# Containers the job-description analyzer reads, most specific first.
DESCRIPTION_CONTAINERS: tuple[str, ...] = (
    "div.job-description",
    "div.description",
    'div[data-automation="jobDescriptionText"]',
    "div#job-description",
    "div.jobsearch-jobDescriptionText",
    'div[class*="description"]',
    'section[class*="description"]',
    'div[id*="description"]',
    'section[id*="description"]',
    'div[class*="job-description"]',
    'div[id*="job-description"]',
)


def host_of(url: str) -> str:
    try:
        host = urlparse(url or "").hostname or ""
    except ValueError:
        return ""
    return host.lower()


def detect_job_board(url: str) -> JobBoard:
    """Board whose host matches ``url``, or the generic board."""
    host = host_of(url)
    if host:
        for board in JOB_BOARDS:
            if board.matches(host):
                return board
    return GENERIC
