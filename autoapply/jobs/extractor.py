"""Turn a job-posting page into a normalized ``JobRecord``.

Pipeline: detect the board from the URL, run its selector adapter, fill
missing title/company from the generic adapter, enrich from the resolved
description, then sanitize and default the text fields.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from autoapply.dom.base import Document
from autoapply.jobs import enrich
from autoapply.jobs.boards import DESCRIPTION_CONTAINERS, GENERIC, JobBoard, detect_job_board
from autoapply.log import get_logger
from autoapply.models import JobRecord

log = get_logger(__name__)

UNKNOWN_TITLE = "Unknown Position"
UNKNOWN_COMPANY = "Unknown Company"

MIN_DESCRIPTION_CHARS = 100
MAX_DESCRIPTION_CHARS = 5000
BLOCK_MIN_WORDS = 50
BLOCK_MAX_WORDS = 2000
ANALYZER_MIN_CHARS = 50
ANALYZER_MIN_PARAGRAPH_WORDS = 100

_TITLE_DISALLOWED = re.compile(r"[^\w\s\-()/&,.+#]")
_COMPANY_DISALLOWED = re.compile(r"[^\w\s\-()&.,']")

JOB_URL_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"/jobs?/",
        r"/careers?/",
        r"/positions?/",
        r"/openings?/",
        r"/vacancies",
        r"/opportunities",
        r"job-?id",
        r"position-?id",
        r"/viewjob",
    )
)
JOB_CONTENT_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"job description",
        r"apply now",
        r"responsibilities",
        r"qualifications",
        r"experience required",
    )
)


def collapse(text: str | None) -> str:
    return " ".join((text or "").split())


def sanitize_title(text: str | None) -> str:
    return collapse(_TITLE_DISALLOWED.sub("", collapse(text)))


def sanitize_company(text: str | None) -> str:
    return collapse(_COMPANY_DISALLOWED.sub("", collapse(text)))


def first_text(document: Document, selectors: tuple[str, ...]) -> str:
    """Text of the first selector that matches an element with text."""
    for selector in selectors:
        try:
            text = document.first_text(selector)
        except Exception as exc:
            log.debug("Selector %r failed: %s", selector, exc)
            continue
        if text:
            return text
    return ""


def largest_text_block(document: Document) -> str:
    best, best_words = "", 0
    for text in document.texts("div, section, article, p"):
        words = len(text.split())
        if BLOCK_MIN_WORDS < words < BLOCK_MAX_WORDS and words > best_words:
            best, best_words = text, words
    return best


def cap_description(text: str) -> str:
    if len(text) > MAX_DESCRIPTION_CHARS:
        return text[:MAX_DESCRIPTION_CHARS] + "..."
    return text


@dataclass
class _Scrape:
    board: JobBoard
    adapter: str = ""
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    salary_text: str = ""
    employment_text: str = ""
    notes: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return bool(self.title and self.company)


def _run_adapter(document: Document, board: JobBoard, scrape: _Scrape) -> None:
    """Fill whatever ``scrape`` is still missing from ``board``'s selectors."""
    if not scrape.title:
        scrape.title = sanitize_title(first_text(document, board.title))
    if not scrape.company:
        scrape.company = sanitize_company(first_text(document, board.company))
    if not scrape.location:
        scrape.location = collapse(first_text(document, board.location))
    if not scrape.description:
        scrape.description = first_text(document, board.description)
    if not scrape.salary_text:
        scrape.salary_text = first_text(document, board.salary)
    if not scrape.employment_text:
        scrape.employment_text = first_text(document, board.employment_type)


def _scrape(document: Document) -> _Scrape:
    board = detect_job_board(document.url)
    scrape = _Scrape(board=board)
    if board.has_adapter:
        _run_adapter(document, board, scrape)
        scrape.adapter = board.name
    if not scrape.complete and board is not GENERIC:
        if board.has_adapter:
            log.debug("%s adapter incomplete on %s, trying generic", board.name, document.url)
            scrape.adapter = f"{board.name}+generic"
        else:
            scrape.adapter = GENERIC.name
        _run_adapter(document, GENERIC, scrape)

    if len(scrape.description) < MIN_DESCRIPTION_CHARS:
        block = largest_text_block(document)
        if block:
            scrape.description = block
    scrape.description = cap_description(scrape.description.strip())
    return scrape


def _build_record(document: Document, scrape: _Scrape) -> JobRecord:
    description = scrape.description
    body_text = document.body_text()

    salary = enrich.parse_salary(scrape.salary_text) or enrich.parse_salary(description)
    employment = (
        enrich.classify_employment_type(scrape.employment_text, default="")
        if scrape.employment_text
        else ""
    ) or enrich.classify_employment_type(description)

    metadata = {
        "adapter": scrape.adapter,
        "jobBoard": scrape.board.name,
        "pageTitle": document.title,
        "extractedAt": datetime.now(timezone.utc).isoformat(),
        "experienceYears": enrich.experience_years(description),
        "requirements": enrich.extract_requirements(document.texts("ul li, ol li")),
        "benefits": enrich.extract_benefits(body_text),
        "contactEmail": enrich.extract_contact_email(body_text),
    }

    return JobRecord(
        job_title=scrape.title if len(scrape.title) >= 2 else UNKNOWN_TITLE,
        company=scrape.company if len(scrape.company) >= 2 else UNKNOWN_COMPANY,
        location=scrape.location,
        jd_url=document.url,
        job_description=description,
        salary_range=salary,
        employment_type=employment,
        work_mode=enrich.classify_work_mode(description, scrape.location),
        experience_level=enrich.classify_experience_level(description),
        required_skills=enrich.extract_skills(description),
        job_source=scrape.board.source,
        job_id=scrape.board.job_id(document.url),
        metadata=metadata,
    )


def extract_job_details(document: Document) -> JobRecord:
    """Always returns a record; missing fields are empty or defaulted."""
    scrape = _scrape(document)
    record = _build_record(document, scrape)
    log.info("Extracted %r at %r via %s", record.job_title, record.company, scrape.adapter)
    return record


def extract_job(document: Document) -> JobRecord | None:
    """Record for the page, or None when no adapter finds a title and company."""
    scrape = _scrape(document)
    if not scrape.complete:
        log.info("No job posting found on %s", document.url or "page")
        return None
    record = _build_record(document, scrape)
    log.info("Extracted %r at %r via %s", record.job_title, record.company, scrape.adapter)
    return record


def extract_job_description(document: Document) -> str:
    """Job description text for the analyzer: containers, long paragraphs, then page text."""
    for selector in DESCRIPTION_CONTAINERS:
        try:
            text = document.first_text(selector)
        except Exception as exc:
            log.debug("Selector %r failed: %s", selector, exc)
            continue
        if len(text) > ANALYZER_MIN_CHARS:
            return text

    longest = ""
    for text in document.texts("p"):
        if len(text.split()) > ANALYZER_MIN_PARAGRAPH_WORDS and len(text) > len(longest):
            longest = text
    if longest:
        return longest

    for selector in ("main", "article"):
        text = document.first_text(selector)
        if text:
            return text[:MAX_DESCRIPTION_CHARS]
    return document.body_text().strip()[:MAX_DESCRIPTION_CHARS]


def is_job_posting_page(document: Document) -> bool:
    url = (document.url or "").lower()
    if any(p.search(url) for p in JOB_URL_PATTERNS):
        return True
    text = f"{document.title}\n{document.body_text()}".lower()
    return any(p.search(text) for p in JOB_CONTENT_PATTERNS)
