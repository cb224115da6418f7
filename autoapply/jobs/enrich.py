"""Classifiers that enrich a job record from its description text.

All of them are pure functions over strings: salary, employment type, work
mode, experience level, skills, requirements, benefits and a contact email.
"""
from __future__ import annotations

import re

from autoapply.models import SalaryRange

CURRENCY_SYMBOLS: dict[str, str] = {"$": "USD", "£": "GBP", "€": "EUR", "₹": "INR"}

_CUR = r"[$£€₹]"
_NUM = r"\d[\d,]*(?:\.\d+)?"
_DASH = r"(?:-|–|—|to)"
_PER = r"(?:per|/|an|a)"
_PERIOD = r"(?P<period>year|annum|annual|yr|hour|hr)"
_START = rf"(?:(?P<cur>{_CUR})\s*|(?<![\w.,]))"

# Tried in order; the first pattern with an acceptable match wins.
SALARY_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(
        rf"{_START}(?P<min>{_NUM})\s*(?P<k1>k)?\s*{_DASH}\s*(?P<cur2>{_CUR})?\s*(?P<max>{_NUM})\s*(?P<k2>k)?"
        rf"\s*{_PER}\s*{_PERIOD}\b",
        re.IGNORECASE,
    ),
    re.compile(
        rf"{_START}(?P<min>{_NUM})\s*(?P<k1>k)?\s*{_DASH}\s*(?P<cur2>{_CUR})?\s*(?P<max>{_NUM})\s*(?P<k2>k)?\b",
        re.IGNORECASE,
    ),
    re.compile(
        rf"{_START}(?P<min>{_NUM})\s*(?P<k1>k)?\s*{_PER}\s*{_PERIOD}\b",
        re.IGNORECASE,
    ),
    re.compile(
        rf"salary\s*:?\s*(?P<cur>{_CUR})?\s*(?P<min>{_NUM})\s*(?P<k1>k)?"
        rf"(?:\s*{_DASH}\s*(?P<cur2>{_CUR})?\s*(?P<max>{_NUM})\s*(?P<k2>k)?)?",
        re.IGNORECASE,
    ),
)

EMPLOYMENT_TYPE_RULES: tuple[tuple[str, re.Pattern], ...] = (
    ("full-time", re.compile(r"full[\s-]?time|\bpermanent\b", re.IGNORECASE)),
    ("part-time", re.compile(r"part[\s-]?time", re.IGNORECASE)),
    ("contract", re.compile(r"\bcontract(?:or)?\b|\bconsulting\b", re.IGNORECASE)),
    ("internship", re.compile(r"\binternship\b|\bintern\b", re.IGNORECASE)),
    ("temporary", re.compile(r"\btemporary\b|\btemp\b", re.IGNORECASE)),
    ("freelance", re.compile(r"\bfreelance\b", re.IGNORECASE)),
)

WORK_MODE_RULES: tuple[tuple[str, re.Pattern], ...] = (
    ("remote", re.compile(r"\bremote\b|work[\s-]from[\s-]home|\bwfh\b", re.IGNORECASE)),
    ("hybrid", re.compile(r"\bhybrid\b", re.IGNORECASE)),
)

EXPERIENCE_LEVEL_RULES: tuple[tuple[str, re.Pattern], ...] = (
    (
        "entry",
        re.compile(r"\bentry[\s-]level\b|\bnew grad(?:uate)?\b|\bgraduate (?:program|scheme|role)\b", re.IGNORECASE),
    ),
    ("junior", re.compile(r"\bjunior\b|\bjr\b", re.IGNORECASE)),
    ("senior", re.compile(r"\bsenior\b|\bsr\b", re.IGNORECASE)),
    ("lead", re.compile(r"\blead\b|\bprincipal\b|\bstaff engineer\b|\barchitect\b", re.IGNORECASE)),
    ("executive", re.compile(r"\bdirector\b|\bvice president\b|\bvp\b|\bexecutive\b|\bhead of\b", re.IGNORECASE)),
)

YEARS_PATTERN = re.compile(
    r"(?P<low>\d{1,2})\s*\+?\s*(?:(?:-|–|to)\s*(?P<high>\d{1,2})\s*\+?\s*)?years?\s*(?:of\s+)?(?:\w+\s+)?experience",
    re.IGNORECASE,
)

SKILL_DICTIONARY: tuple[str, ...] = (
    "javascript", "typescript", "python", "java", "react", "node.js", "angular", "vue.js",
    "sql", "html", "css", "aws", "azure", "gcp", "docker", "kubernetes", "git", "linux",
    "mongodb", "postgresql", "mysql", "redis", "elasticsearch", "jenkins", "terraform",
    "ansible", "microservices", "rest api", "graphql", "agile", "scrum", "devops", "ci/cd",
    "machine learning", "data science", "pandas", "numpy", "tensorflow", "pytorch",
    "spark", "hadoop",
)
MAX_SKILLS = 15

REQUIREMENT_HINTS = ("experience", "skill", "knowledge", "proficiency", "degree", "bachelor", "master")
MAX_REQUIREMENTS = 20

BENEFITS: tuple[str, ...] = (
    "health insurance", "dental insurance", "vision insurance", "401k", "retirement plan",
    "paid time off", "pto", "vacation", "remote work", "work from home", "flexible hours",
    "flexible schedule", "gym membership", "professional development",
    "tuition reimbursement", "stock options", "equity", "bonus",
)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


# ---------------------------------------------------------------------------
# Salary
# ---------------------------------------------------------------------------

def _to_number(raw: str | None) -> float | None:
    if not raw:
        return None
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def _year_like(value: float | None) -> bool:
    return value is not None and value == int(value) and 1900 <= value <= 2100


def _plausible(match: re.Match, low: float | None, high: float | None) -> bool:
    groups = match.groupdict()
    if groups.get("cur") or groups.get("cur2") or groups.get("k1") or groups.get("k2"):
        return True
    if groups.get("period"):
        return True
    values = [v for v in (low, high) if v is not None]
    if not values:
        return False
    return all(v >= 1000 for v in values) and not all(_year_like(v) for v in values)


def parse_salary(text: str) -> SalaryRange | None:
    """First salary found in ``text``, or None.

    ``k`` multiplies both ends of a range; ``hour``/``hr`` means hourly,
    anything else yearly; the currency comes from the first symbol seen.
    """
    if not text:
        return None
    for index, pattern in enumerate(SALARY_PATTERNS):
        for match in pattern.finditer(text):
            groups = match.groupdict()
            low = _to_number(groups.get("min"))
            high = _to_number(groups.get("max"))
            # the bare range pattern needs some money signal
            if index == 1 and not _plausible(match, low, high):
                continue
            if index == 2 and not _plausible(match, low, high):
                continue
            if low is None:
                continue
            if groups.get("k1") or groups.get("k2"):
                low *= 1000
                if high is not None:
                    high *= 1000
            period = (groups.get("period") or "").lower()
            symbol = groups.get("cur") or groups.get("cur2") or "$"
            return SalaryRange(
                min=int(low),
                max=int(high) if high is not None else None,
                currency=CURRENCY_SYMBOLS.get(symbol, "USD"),
                period="hourly" if period in ("hour", "hr") else "yearly",
            )
    return None


# ---------------------------------------------------------------------------
# Classifiers
# ---------------------------------------------------------------------------

def classify_employment_type(text: str, default: str = "full-time") -> str:
    for label, pattern in EMPLOYMENT_TYPE_RULES:
        if pattern.search(text or ""):
            return label
    return default


def classify_work_mode(*texts: str) -> str:
    combined = " ".join(t for t in texts if t)
    for label, pattern in WORK_MODE_RULES:
        if pattern.search(combined):
            return label
    return "onsite"


def experience_years(text: str) -> str:
    """Years-of-experience phrase such as ``"3-5 years"`` or ``"5+ years"``."""
    m = YEARS_PATTERN.search(text or "")
    if not m:
        return ""
    if m.group("high"):
        return f"{m.group('low')}-{m.group('high')} years"
    return f"{m.group('low')}+ years"


def _level_for_years(years: int) -> str:
    if years <= 1:
        return "entry"
    if years <= 3:
        return "junior"
    if years < 5:
        return "mid"
    if years < 8:
        return "senior"
    return "lead"


def classify_experience_level(text: str) -> str:
    text = text or ""
    m = YEARS_PATTERN.search(text)
    if m:
        return _level_for_years(int(m.group("low")))
    for label, pattern in EXPERIENCE_LEVEL_RULES:
        if pattern.search(text):
            return label
    return "mid"


def extract_skills(text: str, limit: int = MAX_SKILLS) -> list[str]:
    lowered = (text or "").lower()
    return [skill for skill in SKILL_DICTIONARY if skill in lowered][:limit]


def extract_requirements(items: list[str], limit: int = MAX_REQUIREMENTS) -> list[str]:
    """List items that read like requirements."""
    found: list[str] = []
    for text in items:
        text = " ".join(text.split())
        if not 10 < len(text) < 200:
            continue
        lowered = text.lower()
        if any(h in lowered for h in REQUIREMENT_HINTS) or any(s in lowered for s in SKILL_DICTIONARY):
            found.append(text)
            if len(found) >= limit:
                break
    return found


def extract_benefits(text: str) -> list[str]:
    lowered = (text or "").lower()
    return [b for b in BENEFITS if b in lowered]


def extract_contact_email(text: str) -> str:
    m = EMAIL_PATTERN.search(text or "")
    return m.group(0) if m else ""
