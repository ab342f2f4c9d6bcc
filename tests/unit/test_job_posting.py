"""
Unit tests for the JobPosting data structure.
"""

import pytest

from jobtrail.contexts.intake.job_data_structure import JobPosting


@pytest.mark.unit
class TestFromPayload:
    """Extraction payload → JobPosting."""

    def test_hourly_salary_range(self):
        """'30-40€/h' extracted by the job parser."""
        job = JobPosting.from_payload(
            {"salaryMin": 30, "salaryMax": 40, "salaryCurrency": "EUR", "salaryRateType": "hourly"}
        )
        assert (job.salary_min, job.salary_max, job.salary_rate_type) == (30, 40, "hourly")
        assert job.salary_currency == "EUR"
        assert job.has_salary

    def test_full_payload(self):
        job = JobPosting.from_payload(
            {
                "title": "Data Engineer",
                "company": "Acme",
                "city": "Lyon",
                "country": "France",
                "presenceType": "hybrid",
                "contractType": "CDI",
                "hoursPerWeek": 35,
                "requiredSkills": ["Python", "SQL"],
                "niceToHaveSkills": ["dbt"],
                "perks": ["meal_vouchers", "remote_days"],
            }
        )
        assert job.title == "Data Engineer"
        assert job.presence_type == "hybrid"
        assert job.hours_per_week == 35
        assert job.required_skills == ["Python", "SQL"]
        assert job.perks == ["meal_vouchers", "remote_days"]
        assert not job.has_salary

    def test_invalid_values_dropped(self):
        job = JobPosting.from_payload(
            {
                "title": 42,
                "salaryMin": "30",
                "salaryMax": True,
                "salaryRateType": "weekly",
                "presenceType": "remote",
                "requiredSkills": "Python",
                "perks": ["gym", None, 3],
            }
        )
        assert job.title is None
        assert (job.salary_min, job.salary_max) == (None, None)
        assert job.salary_rate_type is None
        assert job.presence_type is None
        assert job.required_skills == []
        assert job.perks == ["gym"]

    def test_non_dict_payload(self):
        assert JobPosting.from_payload(None) == JobPosting()

    def test_amounts_kept_as_extracted(self):
        job = JobPosting.from_payload({"salaryMin": 45000.5, "salaryRateType": "annual"})
        assert job.salary_min == 45000.5


@pytest.mark.unit
def test_to_payload_has_every_key():
    payload = JobPosting(title="PM", salary_min=30, salary_rate_type="hourly").to_payload()
    assert payload["title"] == "PM"
    assert payload["salaryRateType"] == "hourly"
    assert payload["company"] is None
    assert payload["requiredSkills"] == []
    assert JobPosting.from_payload(payload) == JobPosting(title="PM", salary_min=30, salary_rate_type="hourly")
