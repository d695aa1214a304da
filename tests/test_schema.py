"""
Tests for roster/schema.py -- employee schema, validation, coercion, form helpers.

Validates:
    - Valid submissions pass and come back normalized
    - Every violated field is reported in a single pass
    - Per-field rules and their messages
    - Numeric coercion from form text
    - Input is never modified
"""

import copy

import pytest
from jsonschema import Draft202012Validator

from roster.errors import RecordValidationError
from roster.schema import (
    EMPLOYEE_SCHEMA,
    FIELD_NAMES,
    REQUIRED_FIELDS,
    coerce_numeric,
    default_form_values,
    form_values,
    full_name,
    parse_date,
    validate,
)
from roster.utils import clean_schema_for_validation


# ---------------------------------------------------------------------------
# Schema description
# ---------------------------------------------------------------------------

class TestSchemaDescription:
    """Tests for the EMPLOYEE_SCHEMA document itself."""

    def test_clean_schema_is_valid_json_schema(self):
        """The cleaned schema should be a valid draft 2020-12 schema."""
        Draft202012Validator.check_schema(clean_schema_for_validation(EMPLOYEE_SCHEMA))

    def test_clean_schema_has_no_extension_keywords(self):
        """x-label and x-messages must not reach jsonschema."""
        clean = clean_schema_for_validation(EMPLOYEE_SCHEMA)
        for prop in clean["properties"].values():
            assert not any(key.startswith("x-") for key in prop)
        assert "$id" not in clean

    def test_required_and_optional_fields(self):
        """Notes and project assignment are the only optional fields."""
        assert len(REQUIRED_FIELDS) == 16
        assert set(FIELD_NAMES) - set(REQUIRED_FIELDS) == {"notes", "projectAssignment"}


# ---------------------------------------------------------------------------
# Valid submissions
# ---------------------------------------------------------------------------

class TestValidSubmission:
    """Tests for submissions that pass validation."""

    def test_valid_submission_passes(self, valid_employee):
        result = validate(valid_employee)
        assert result.passed is True
        assert result.errors == {}
        assert result.record == valid_employee

    def test_form_text_numbers_are_coerced(self, second_employee):
        """Salary and rating posted as text come back as numbers."""
        result = validate(second_employee)
        assert result.passed, result.errors
        assert result.record["salary"] == 82000.5
        assert result.record["performanceRating"] == 4.5

    def test_integral_text_becomes_int(self, valid_employee):
        data = dict(valid_employee, salary="50000", performanceRating="3")
        result = validate(data)
        assert result.record["salary"] == 50000
        assert isinstance(result.record["salary"], int)
        assert isinstance(result.record["performanceRating"], int)

    def test_unknown_keys_are_dropped(self, valid_employee):
        """department and id are not schema fields and are stripped."""
        data = dict(valid_employee, department="IT", id="abc")
        result = validate(data)
        assert result.passed
        assert "department" not in result.record
        assert "id" not in result.record

    def test_optional_fields_kept_when_given(self, second_employee):
        result = validate(second_employee)
        assert result.record["notes"] == "Leads the onboarding revamp."
        assert result.record["projectAssignment"] == "Onboarding"

    def test_optional_none_is_omitted(self, valid_employee):
        result = validate(dict(valid_employee, notes=None))
        assert result.passed
        assert "notes" not in result.record

    def test_input_is_not_modified(self, second_employee):
        before = copy.deepcopy(second_employee)
        validate(second_employee)
        assert second_employee == before

    def test_result_record_is_a_new_dict(self, valid_employee):
        result = validate(valid_employee)
        assert result.record is not valid_employee

    @pytest.mark.parametrize("rating", [1, 5, 2.5, "1", "5"])
    def test_rating_bounds_are_inclusive(self, valid_employee, rating):
        assert validate(dict(valid_employee, performanceRating=rating)).passed

    @pytest.mark.parametrize("status", ["Active", "On Leave", "Terminated"])
    def test_every_status_is_accepted(self, valid_employee, status):
        assert validate(dict(valid_employee, status=status)).passed

    @pytest.mark.parametrize("hire_date", [
        "2024-01-01",
        "2024-01-01T09:30:00",
        "2024-01-01T09:30:00Z",
        "01/15/2024",
        "2024/01/15",
        "January 15, 2024",
    ])
    def test_date_shapes_are_accepted(self, valid_employee, hire_date):
        assert validate(dict(valid_employee, hireDate=hire_date)).passed


# ---------------------------------------------------------------------------
# Invalid submissions
# ---------------------------------------------------------------------------

class TestFieldErrors:
    """Tests for per-field rules and their messages."""

    def test_short_first_name_and_missing_fields(self):
        """A lone short first name reports it plus every missing required field."""
        result = validate({"firstName": "J"})
        assert result.passed is False
        assert result.record is None
        assert result.errors["firstName"] == "First name must be at least 2 characters."
        assert set(result.errors) == set(REQUIRED_FIELDS)
        assert result.errors["lastName"] == "Last name is required."

    def test_empty_submission_reports_every_required_field(self):
        result = validate({})
        assert len(result.errors) == len(REQUIRED_FIELDS)

    @pytest.mark.parametrize("count", [1, 3, 7, 16])
    def test_one_error_per_missing_field(self, valid_employee, count):
        """Removing N required fields yields exactly N errors."""
        data = dict(valid_employee)
        removed = REQUIRED_FIELDS[:count]
        for name in removed:
            del data[name]
        result = validate(data)
        assert sorted(result.errors) == sorted(removed)

    def test_mixed_violations_all_reported(self, valid_employee):
        data = dict(
            valid_employee,
            email="nope",
            salary=-1,
            hireDate="someday",
            status="Retired",
            performanceRating=9,
        )
        result = validate(data)
        assert result.errors == {
            "email": "Invalid email address.",
            "salary": "Salary must be a positive number.",
            "hireDate": "Invalid date format.",
            "status": "Status must be one of: Active, On Leave, Terminated.",
            "performanceRating": "Performance rating must be between 1 and 5.",
        }

    @pytest.mark.parametrize("field,value,message", [
        ("lastName", "L", "Last name must be at least 2 characters."),
        ("phone", "12345", "Phone number must be at least 10 digits."),
        ("position", "", "Position must be at least 2 characters."),
        ("address", "1 St", "Address must be at least 5 characters."),
        ("city", "X", "City must be at least 2 characters."),
        ("state", "Y", "State must be at least 2 characters."),
        ("zipCode", "1234", "Zip code must be at least 5 characters."),
        ("country", "U", "Country must be at least 2 characters."),
        ("emergencyContact", "A", "Emergency contact must be at least 2 characters."),
        ("emergencyPhone", "555", "Emergency phone must be at least 10 digits."),
        ("firstName", 42, "First name must be text."),
        ("notes", 7, "Notes must be text."),
        ("status", 1, "Status must be one of: Active, On Leave, Terminated."),
    ])
    def test_text_rules(self, valid_employee, field, value, message):
        result = validate(dict(valid_employee, **{field: value}))
        assert result.errors == {field: message}

    @pytest.mark.parametrize("email", [
        "plain", "@x.com", "jo@", "jo@x", "jo..li@x.com", ".jo@x.com", "jo li@x.com",
    ])
    def test_bad_emails(self, valid_employee, email):
        result = validate(dict(valid_employee, email=email))
        assert result.errors == {"email": "Invalid email address."}

    @pytest.mark.parametrize("salary,message", [
        (0, "Salary must be a positive number."),
        (-100, "Salary must be a positive number."),
        ("0", "Salary must be a positive number."),
        ("", "Salary must be a number."),
        ("abc", "Salary must be a number."),
        ("1_000", "Salary must be a number."),
        ("inf", "Salary must be a number."),
        (float("nan"), "Salary must be a number."),
        (True, "Salary must be a number."),
    ])
    def test_salary_rules(self, valid_employee, salary, message):
        result = validate(dict(valid_employee, salary=salary))
        assert result.errors == {"salary": message}

    @pytest.mark.parametrize("rating", [0, 0.99, 5.01, 6, "10"])
    def test_rating_out_of_range(self, valid_employee, rating):
        result = validate(dict(valid_employee, performanceRating=rating))
        assert result.errors == {
            "performanceRating": "Performance rating must be between 1 and 5.",
        }

    @pytest.mark.parametrize("hire_date", ["", "someday", "2024-13-01", "31/31/2024"])
    def test_unparseable_dates(self, valid_employee, hire_date):
        result = validate(dict(valid_employee, hireDate=hire_date))
        assert result.errors == {"hireDate": "Invalid date format."}

    def test_none_counts_as_missing(self, valid_employee):
        result = validate(dict(valid_employee, city=None))
        assert result.errors == {"city": "City is required."}

    def test_non_mapping_input_raises(self):
        with pytest.raises(TypeError):
            validate(["not", "a", "dict"])

    def test_raise_for_errors(self):
        result = validate({"firstName": "J"})
        with pytest.raises(RecordValidationError) as excinfo:
            result.raise_for_errors()
        assert excinfo.value.field_errors == result.errors
        assert isinstance(excinfo.value, ValueError)

    def test_raise_for_errors_noop_when_passed(self, valid_employee):
        validate(valid_employee).raise_for_errors()

    def test_to_dict(self):
        result = validate({"firstName": "J"})
        assert result.to_dict()["passed"] is False
        assert "firstName" in result.to_dict()["errors"]
        assert result.to_dict()["record"] is None

    def test_to_dict_carries_record(self, valid_employee):
        data = validate(valid_employee).to_dict()
        assert data["passed"] is True
        assert data["errors"] == {}
        assert data["record"]["firstName"] == valid_employee["firstName"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestCoercion:
    def test_only_numeric_fields_are_touched(self):
        data = coerce_numeric({"salary": "10", "zipCode": "02110", "phone": "1234567890"})
        assert data == {"salary": 10, "zipCode": "02110", "phone": "1234567890"}

    def test_whitespace_is_ignored(self):
        assert coerce_numeric({"salary": " 75000 "})["salary"] == 75000

    def test_unreadable_text_is_left_alone(self):
        assert coerce_numeric({"performanceRating": "great"})["performanceRating"] == "great"

    @pytest.mark.parametrize("text", ["1_000", "1,000", "Infinity"])
    def test_non_decimal_text_is_left_alone(self, text):
        assert coerce_numeric({"salary": text})["salary"] == text

    def test_exponent_notation(self):
        assert coerce_numeric({"salary": "1e3"})["salary"] == 1000

    def test_numbers_pass_through(self):
        data = coerce_numeric({"salary": 1.5})
        assert data["salary"] == 1.5

    def test_returns_copy(self):
        raw = {"salary": "10"}
        coerce_numeric(raw)
        assert raw == {"salary": "10"}


class TestParseDate:
    def test_iso(self):
        assert parse_date("2024-01-01").isoformat() == "2024-01-01"

    def test_us_format(self):
        assert parse_date("01/15/2024").isoformat() == "2024-01-15"

    def test_garbage(self):
        assert parse_date("tomorrow") is None

    def test_blank(self):
        assert parse_date("   ") is None


class TestFormHelpers:
    def test_default_form_values(self):
        values = default_form_values()
        assert values["status"] == "Active"
        assert values["performanceRating"] == 3
        assert values["salary"] == 0
        assert values["firstName"] == ""

    def test_defaults_are_fresh_each_call(self):
        values = default_form_values()
        values["firstName"] = "changed"
        assert default_form_values()["firstName"] == ""

    def test_form_values_fill_from_record(self, valid_employee):
        values = form_values(dict(valid_employee, id="r1"))
        assert values["firstName"] == "Jo"
        assert values["salary"] == 50000
        assert "id" not in values
        # Optional fields the record lacks fall back to blanks
        assert values["notes"] == ""

    def test_form_values_of_record_pass_validation(self, valid_employee):
        assert validate(form_values(valid_employee)).passed

    def test_full_name(self, valid_employee):
        assert full_name(valid_employee) == "Jo Li"

    def test_full_name_of_partial_record(self):
        assert full_name({"firstName": "Jo"}) == "Jo"

    def test_full_name_is_not_stored(self, valid_employee):
        assert "fullName" not in validate(valid_employee).record

