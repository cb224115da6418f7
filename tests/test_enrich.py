"""Tests for the description classifiers."""
import pytest

from autoapply.jobs.enrich import (
    MAX_SKILLS,
    SKILL_DICTIONARY,
    classify_employment_type,
    classify_experience_level,
    classify_work_mode,
    experience_years,
    extract_benefits,
    extract_contact_email,
    extract_requirements,
    extract_skills,
    parse_salary,
)


class TestParseSalary:
    def test_dollar_range_per_year(self):
        salary = parse_salary("Compensation: $80,000 - $100,000 per year plus equity")
        assert (salary.min, salary.max, salary.currency, salary.period) == (80000, 100000, "USD", "yearly")

    def test_k_multiplies_both_ends(self):
        salary = parse_salary("Pay band 50k-70k depending on experience")
        assert (salary.min, salary.max) == (50000, 70000)
        assert salary.period == "yearly"

    def test_hourly(self):
        salary = parse_salary("$25 - $35 per hour")
        assert (salary.min, salary.max, salary.period) == (25, 35, "hourly")

    def test_single_value_in_pounds(self):
        salary = parse_salary("Up to £45,000 per annum")
        assert (salary.min, salary.max, salary.currency) == (45000, None, "GBP")

    def test_k_with_period(self):
        salary = parse_salary("€50k a year")
        assert (salary.min, salary.currency, salary.period) == (50000, "EUR", "yearly")

    def test_salary_prefix(self):
        salary = parse_salary("Salary: 60000")
        assert salary.min == 60000

    def test_year_ranges_are_not_salaries(self):
        assert parse_salary("Our team has grown since 2010 - 2015 and keeps growing.") is None

    @pytest.mark.parametrize("text", ["", "No numbers here", "Team of 5-10 engineers"])
    def test_nothing_found(self, text):
        assert parse_salary(text) is None


class TestEmploymentType:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("This is a full-time permanent role", "full-time"),
            ("Part time, 20 hours a week", "part-time"),
            ("6 month contract", "contract"),
            ("Summer internship program", "internship"),
            ("Temporary cover", "temporary"),
            ("Freelance designers welcome", "freelance"),
            ("Join our team", "full-time"),
        ],
    )
    def test_rules(self, text, expected):
        assert classify_employment_type(text) == expected

    def test_full_time_wins_over_later_rules(self):
        assert classify_employment_type("Full-time, contract-to-hire") == "full-time"

    def test_custom_default(self):
        assert classify_employment_type("", default="") == ""


class TestWorkMode:
    def test_remote(self):
        assert classify_work_mode("This role is fully remote") == "remote"

    def test_hybrid(self):
        assert classify_work_mode("Hybrid, 3 days in office") == "hybrid"

    def test_remote_checked_before_hybrid(self):
        assert classify_work_mode("Hybrid or remote") == "remote"

    def test_location_counts_too(self):
        assert classify_work_mode("Build APIs", "Remote (US)") == "remote"

    def test_defaults_to_onsite(self):
        assert classify_work_mode("Office in Berlin", "") == "onsite"


class TestExperience:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Senior Backend Engineer", "senior"),
            ("Entry-level analyst", "entry"),
            ("Junior developer", "junior"),
            ("Principal engineer", "lead"),
            ("Director of Engineering", "executive"),
            ("1 year of experience", "entry"),
            ("3-5 years of experience", "junior"),
            ("4 years experience", "mid"),
            ("5+ years of experience", "senior"),
            ("10 years of relevant experience", "lead"),
            ("Great team", "mid"),
            ("Senior engineer. 7+ years of experience. A graduate degree is a plus.", "senior"),
            ("Senior title, but 2 years of experience is enough", "junior"),
            ("Join our graduate program", "entry"),
            ("New grad software engineer", "entry"),
        ],
    )
    def test_level(self, text, expected):
        assert classify_experience_level(text) == expected

    def test_years_phrase(self):
        assert experience_years("We want 3-5 years of experience") == "3-5 years"
        assert experience_years("5+ years professional experience") == "5+ years"
        assert experience_years("No requirement") == ""


class TestSkills:
    def test_dictionary_order(self):
        assert extract_skills("Docker, SQL and Python") == ["python", "sql", "docker"]

    def test_capped(self):
        assert len(extract_skills(" ".join(SKILL_DICTIONARY))) == MAX_SKILLS

    def test_no_ai_keyword(self):
        assert extract_skills("We said hi to the main team") == []


def test_extract_requirements():
    items = ["Short", "5+ years of Python experience", "x" * 250 + " experience", "Free snacks every day"]
    assert extract_requirements(items) == ["5+ years of Python experience"]


def test_extract_benefits():
    assert extract_benefits("We offer Health Insurance, a 401k and a bonus") == ["health insurance", "401k", "bonus"]


def test_extract_contact_email():
    assert extract_contact_email("Questions? Write to jobs@acme.io today") == "jobs@acme.io"
    assert extract_contact_email("No email") == ""
