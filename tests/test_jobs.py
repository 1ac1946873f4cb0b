"""
Tests for the jobs repository.
"""

import pytest
from decimal import Decimal

from jobly.errors import BadRequestError, NotFoundError
from jobly.repositories import jobs
from jobly.repositories.jobs import format_equity

C1 = {"handle": "c1", "name": "C1", "description": "Desc1", "numEmployees": 1, "logoUrl": "http://c1.img"}


def _listed(job_ids, idx, title, salary, equity):
    return {
        "id": job_ids[idx],
        "title": title,
        "salary": salary,
        "equity": equity,
        "companyHandle": "c1",
        "companyName": "C1",
    }


class TestCreate:
    """Test job creation."""

    def test_create(self, db, new_job):
        job = jobs.create(db, new_job)
        assert isinstance(job["id"], int)
        assert job == {**new_job, "id": job["id"]}

    def test_create_without_optional_fields(self, db):
        job = jobs.create(db, {"title": "Intern", "companyHandle": "c2"})
        assert job["salary"] is None
        assert job["equity"] is None
        assert job["companyHandle"] == "c2"

    def test_missing_company_fails(self, db, new_job):
        with pytest.raises(BadRequestError, match="Company does not exist: nope"):
            jobs.create(db, {**new_job, "companyHandle": "nope"})
        assert db.query("SELECT id FROM jobs WHERE title = 'Test'").rows == []

    def test_ids_are_distinct(self, db, new_job):
        first = jobs.create(db, new_job)
        second = jobs.create(db, new_job)
        assert first["id"] != second["id"]


class TestFindAll:
    """Test job listing and filtering."""

    def test_no_filter(self, db, job_ids):
        assert jobs.find_all(db) == [
            _listed(job_ids, 0, "Job1", 100, "0.1"),
            _listed(job_ids, 1, "Job2", 200, "0.2"),
            _listed(job_ids, 2, "Job3", 300, "0"),
            _listed(job_ids, 3, "Job4", None, None),
        ]

    def test_filter_by_min_salary(self, db, job_ids):
        assert jobs.find_all(db, {"minSalary": 250}) == [
            _listed(job_ids, 2, "Job3", 300, "0"),
        ]

    def test_filter_by_equity(self, db, job_ids):
        assert jobs.find_all(db, {"hasEquity": True}) == [
            _listed(job_ids, 0, "Job1", 100, "0.1"),
            _listed(job_ids, 1, "Job2", 200, "0.2"),
        ]

    def test_has_equity_false_returns_all(self, db):
        assert len(jobs.find_all(db, {"hasEquity": False})) == 4

    def test_filter_by_min_salary_and_equity(self, db, job_ids):
        assert jobs.find_all(db, {"minSalary": 150, "hasEquity": True}) == [
            _listed(job_ids, 1, "Job2", 200, "0.2"),
        ]

    def test_filter_by_title(self, db, job_ids):
        assert jobs.find_all(db, {"title": "ob1"}) == [
            _listed(job_ids, 0, "Job1", 100, "0.1"),
        ]

    def test_title_is_case_insensitive(self, db):
        assert [j["title"] for j in jobs.find_all(db, {"title": "JOB"})] == [
            "Job1", "Job2", "Job3", "Job4",
        ]

    def test_no_match(self, db):
        assert jobs.find_all(db, {"title": "nope"}) == []


class TestGet:
    """Test single job lookup."""

    def test_get(self, db, job_ids):
        assert jobs.get(db, job_ids[0]) == {
            "id": job_ids[0],
            "title": "Job1",
            "salary": 100,
            "equity": "0.1",
            "company": C1,
        }

    def test_not_found(self, db):
        with pytest.raises(NotFoundError, match="No job: 0"):
            jobs.get(db, 0)


class TestFindAllByCompanyHandle:
    """Test listing a company's jobs."""

    def test_jobs_for_company(self, db, job_ids):
        assert jobs.find_all_by_company_handle(db, "c1") == [
            {"id": job_ids[0], "title": "Job1", "salary": 100, "equity": "0.1"},
            {"id": job_ids[1], "title": "Job2", "salary": 200, "equity": "0.2"},
            {"id": job_ids[2], "title": "Job3", "salary": 300, "equity": "0"},
            {"id": job_ids[3], "title": "Job4", "salary": None, "equity": None},
        ]

    def test_company_without_jobs(self, db):
        assert jobs.find_all_by_company_handle(db, "c3") == []

    def test_missing_company(self, db):
        with pytest.raises(NotFoundError):
            jobs.find_all_by_company_handle(db, "nope")


class TestUpdate:
    """Test partial job updates."""

    update_data = {"title": "New", "salary": 500, "equity": "0.5"}

    def test_update(self, db, job_ids):
        job = jobs.update(db, job_ids[0], self.update_data)
        assert job == {"id": job_ids[0], "companyHandle": "c1", **self.update_data}

    def test_update_null_fields(self, db, job_ids):
        job = jobs.update(db, job_ids[0], {"salary": None, "equity": None})
        assert job == {
            "id": job_ids[0],
            "title": "Job1",
            "salary": None,
            "equity": None,
            "companyHandle": "c1",
        }

    def test_not_found(self, db):
        with pytest.raises(NotFoundError):
            jobs.update(db, 0, {"title": "test"})

    def test_no_data(self, db, job_ids):
        with pytest.raises(BadRequestError):
            jobs.update(db, job_ids[0], {})

    @pytest.mark.parametrize("field", ["companyHandle", "id"])
    def test_fixed_fields_cannot_change(self, db, job_ids, field):
        with pytest.raises(BadRequestError, match=field):
            jobs.update(db, job_ids[0], {field: "c2"})
        assert jobs.get(db, job_ids[0])["company"]["handle"] == "c1"


class TestRemove:
    """Test job deletion."""

    def test_remove(self, db, job_ids):
        jobs.remove(db, job_ids[0])
        result = db.query("SELECT id FROM jobs WHERE id = $1", [job_ids[0]])
        assert result.rows == []

    def test_not_found(self, db):
        with pytest.raises(NotFoundError):
            jobs.remove(db, 0)

    def test_remove_records_write(self, db, job_ids, quiet_logger):
        jobs.remove(db, job_ids[0])
        assert quiet_logger.metrics["records_written"]["job"]["removed"] == 1


class TestFormatEquity:
    """Test equity rendering across driver types."""

    @pytest.mark.parametrize("raw, expected", [
        (0.1, "0.1"),
        (0, "0"),
        (Decimal("0.25"), "0.25"),
        ("0.5", "0.5"),
        (None, None),
    ])
    def test_format(self, raw, expected):
        assert format_equity(raw) == expected
