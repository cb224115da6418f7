"""Keyword tables mapping form-field text signals to canonical profile keys.

Rules are checked in declaration order and keywords in rule order; the first
keyword found as a substring of the field's combined signals wins. More
specific keys are declared before broad ones ("first_name" before "name").
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class FieldMap:
    name: str
    rules: tuple[tuple[str, tuple[str, ...]], ...]

    def __iter__(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def keys(self) -> list[str]:
        return [key for key, _ in self.rules]

    def keywords(self, key: str) -> tuple[str, ...]:
        for rule_key, words in self.rules:
            if rule_key == key:
                return words
        return ()

    def extend(
        self,
        rules: Iterable[tuple[str, Iterable[str]]],
        *,
        before: str | None = None,
    ) -> "FieldMap":
        """New table with extra rules appended (or inserted before ``before``).

        Keywords for an existing key are appended to that key's list.
        """
        merged = [(key, list(words)) for key, words in self.rules]
        for key, words in rules:
            words = [w.lower() for w in words]
            for existing_key, existing in merged:
                if existing_key == key:
                    existing.extend(w for w in words if w not in existing)
                    break
            else:
                position = len(merged)
                if before is not None:
                    position = next((i for i, (k, _) in enumerate(merged) if k == before), position)
                merged.insert(position, (key, words))
        return FieldMap(self.name, tuple((k, tuple(w)) for k, w in merged))


def _table(name: str, rules: list[tuple[str, list[str]]]) -> FieldMap:
    return FieldMap(name, tuple((key, tuple(w.lower() for w in words)) for key, words in rules))


GENERAL_FIELD_MAP = _table("general", [
    # Personal information
    ("email", ["email", "e-mail", "emailaddress", "email address", "your email"]),
    ("firstName", ["first_name", "firstname", "first name", "given name", "given_name", "forename"]),
    ("lastName", ["last_name", "lastname", "last name", "surname", "family name", "family_name"]),
    ("phone", ["phone", "telephone", "mobile", "cell", "contact", "phone number", "your phone"]),

    # Links
    ("linkedin", ["linkedin", "linked in", "linkedinprofile", "linkedin url", "linkedin profile"]),
    ("github", ["github", "git hub", "githubprofile", "github url", "repository"]),
    ("website", ["website", "personal website", "portfolio", "personal site", "homepage"]),

    # Skills, education and experience
    ("skills", ["skill", "technologies", "tech stack", "competenc"]),
    ("yearsOfExperience", ["years of experience", "years experience", "yearsofexperience",
                           "years_of_experience", "experience_years"]),
    ("degree", ["degree", "qualification", "education"]),
    ("institution", ["institution", "school", "university", "college"]),
    ("graduationYear", ["graduation", "grad_year", "graduation year", "year of completion"]),
    ("currentCompany", ["company", "employer", "organization", "organisation"]),
    ("duration", ["duration", "tenure", "period"]),

    # Address
    ("zipCode", ["zip", "zipcode", "postal code", "postalcode", "post code"]),
    ("city", ["city", "town", "municipality"]),
    ("state", ["state", "province", "region"]),
    ("country", ["country", "nation"]),
    ("address", ["address", "street", "location", "residence"]),

    # Work authorization and salary
    ("citizenship", ["citizenship", "citizen of", "nationality"]),
    ("workAuthorization", ["work authorization", "work permit", "authorized to work",
                           "legally authorized", "sponsorship"]),
    ("salaryExpectation", ["salary", "compensation", "expected salary", "desired salary",
                           "salary expectation", "salary requirement"]),

    # Professional information
    ("headline", ["headline", "job title", "title", "position", "role"]),
    ("summary", ["summary", "about", "profile", "overview", "bio", "about me", "introduction"]),
    ("name", ["full name", "full_name", "fullname", "your name", "name", "applicant", "candidate"]),
])

INSTANT_FIELD_MAP = _table("instant", [
    ("email", ["email", "e-mail", "user_email", "emailaddress"]),
    ("firstName", ["first_name", "firstname", "given_name", "forename"]),
    ("lastName", ["last_name", "lastname", "surname", "family_name"]),
    ("phone", ["phone", "mobile", "contact", "telephone", "cell"]),
    ("linkedin", ["linkedin", "linkedin_profile", "linkedinurl"]),
    ("github", ["github", "github_url", "githubprofile"]),
    ("website", ["website", "personal_website", "portfolio", "homepage"]),
    ("zipCode", ["zip", "zipcode", "postal_code", "postalcode"]),
    ("city", ["city", "town", "municipality"]),
    ("state", ["state", "province", "region"]),
    ("country", ["country", "nation"]),
    ("address", ["address", "location", "addr", "street"]),
    ("headline", ["headline", "title", "job_title", "position", "role"]),
    ("summary", ["summary", "bio", "about", "profile", "introduction"]),
    ("fullName", ["name", "full_name", "fullname", "applicant", "candidate"]),
])


def combine_signals(*signals: str | None) -> str:
    return " ".join(s for s in signals if s and isinstance(s, str)).lower()


def match_field(
    field_map: FieldMap,
    label: str | None = None,
    placeholder: str | None = None,
    name: str | None = None,
    element_id: str | None = None,
) -> str | None:
    """Canonical key for a field's label/placeholder/name/id, or None."""
    text = combine_signals(label, placeholder, name, element_id)
    if not text:
        return None
    for key, keywords in field_map:
        for keyword in keywords:
            if keyword in text:
                return key
    return None
