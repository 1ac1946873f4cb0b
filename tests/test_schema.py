"""
Tests for schema validation.
"""

import pytest
from jobly.schema import (
    validate_company_filter,
    validate_company_new,
    validate_company_update,
    validate_job_filter,
    validate_job_new,
    validate_job_update,
)


class TestValidateCompanyNew:
    """Test new company payloads."""

    def test_valid_company(self, new_company):
        """Valid payload should have no errors."""
        assert validate_company_new(new_company) == []

    def test_missing_required_field(self):
        """Missing required field should error."""
        errors = validate_company_new({"handle": "acme", "name": "Acme"})
        assert any("description" in err.lower() for err in errors)

    def test_handle_too_long(self):
        data = {"handle": "h" * 26, "name": "Acme", "description": "d"}
        errors = validate_company_new(data)
        assert any("handle" in err.lower() and "length" in err.lower() for err in errors)

    def test_negative_employees(self):
        data = {"handle": "acme", "name": "Acme", "description": "d", "numEmployees": -1}
        errors = validate_company_new(data)
        assert any("numemployees" in err.lower() for err in errors)

    def test_invalid_logo_url(self):
        data = {"handle": "acme", "name": "Acme", "description": "d", "logoUrl": "not-a-url"}
        errors = validate_company_new(data)
        assert any("logourl" in err.lower() for err in errors)

    def test_optional_fields(self):
        """Optional fields can be omitted or null."""
        data = {"handle": "acme", "name": "Acme", "description": "d", "logoUrl": None}
        assert validate_company_new(data) == []


class TestValidateCompanyUpdate:
    """Test company update payloads."""

    def test_valid_partial(self):
        assert validate_company_update({"numEmployees": 5}) == []

    def test_empty(self):
        assert validate_company_update({}) == ["No data"]

    def test_handle_not_updatable(self):
        errors = validate_company_update({"handle": "other"})
        assert any("handle" in err for err in errors)


class TestValidateJob:
    """Test job payloads."""

    def test_valid_job(self, new_job):
        assert validate_job_new(new_job) == []

    def test_missing_company_handle(self):
        errors = validate_job_new({"title": "Engineer"})
        assert any("companyHandle" in err for err in errors)

    @pytest.mark.parametrize("equity", ["1.5", "-0.1", "abc", 0.5, "NaN"])
    def test_bad_equity(self, equity):
        errors = validate_job_new({"title": "t", "companyHandle": "c1", "equity": equity})
        assert any("equity" in err for err in errors)

    def test_bool_salary_rejected(self):
        errors = validate_job_new({"title": "t", "companyHandle": "c1", "salary": True})
        assert any("salary" in err for err in errors)

    def test_company_handle_not_updatable(self):
        errors = validate_job_update({"companyHandle": "c2"})
        assert any("companyHandle" in err for err in errors)

    def test_valid_update(self):
        assert validate_job_update({"equity": "0"}) == []


class TestValidateFilters:
    """Test filter validation."""

    def test_company_filter_valid(self):
        assert validate_company_filter({"name": "net", "minEmployees": 1}) == []

    def test_company_filter_unknown(self):
        assert validate_company_filter({"city": "x"}) == ["Unknown filter: city"]

    def test_job_filter_valid(self):
        assert validate_job_filter({"title": "eng", "minSalary": 0, "hasEquity": True}) == []

    def test_job_filter_has_equity_must_be_bool(self):
        errors = validate_job_filter({"hasEquity": "true"})
        assert any("hasEquity" in err for err in errors)
