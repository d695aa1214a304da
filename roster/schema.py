"""
roster/schema.py -- Employee record schema and validation.

The schema is an explicit JSON Schema (draft 2020-12) document: one entry
per field with its constraints, plus two extension keywords that
``jsonschema`` never sees (they are stripped by
``clean_schema_for_validation``):

    x-label     Human name of the field, used in "is required" messages.
    x-messages  Validator keyword -> message shown when that keyword fails.

Validation runs every field independently so that a submission gets one
message per violated field in a single pass.

Usage::

    from roster.schema import validate

    result = validate(form_data)
    if result.passed:
        record = result.record
    else:
        show(result.errors)       # {"firstName": "First name must be ...", ...}
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker

from roster.errors import RecordValidationError
from roster.utils import clean_schema_for_validation

logger = logging.getLogger(__name__)

STATUS_VALUES = ("Active", "On Leave", "Terminated")
NUMERIC_FIELDS = ("salary", "performanceRating")

# Plain decimal or exponent notation; no digit separators, no inf/nan words.
_NUMBER_TEXT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ------------------------------------------------------------------
# Schema description
# ------------------------------------------------------------------

def _text_field(label: str, min_length: int | None = None, unit: str = "characters") -> dict:
    prop: dict[str, Any] = {
        "type": "string",
        "x-label": label,
        "x-messages": {"type": f"{label} must be text."},
    }
    if min_length is not None:
        prop["minLength"] = min_length
        prop["x-messages"]["minLength"] = f"{label} must be at least {min_length} {unit}."
    return prop


def _number_field(label: str, **constraints) -> dict:
    prop: dict[str, Any] = {
        "type": "number",
        "x-label": label,
        "x-messages": {"type": f"{label} must be a number."},
    }
    prop.update(constraints)
    return prop


EMPLOYEE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "employee-record",
    "title": "Employee",
    "type": "object",
    "required": [
        "firstName", "lastName", "email", "phone", "position", "salary",
        "hireDate", "address", "city", "state", "zipCode", "country",
        "emergencyContact", "emergencyPhone", "status", "performanceRating",
    ],
    "properties": {
        "firstName": _text_field("First name", 2),
        "lastName": _text_field("Last name", 2),
        "email": {
            **_text_field("Email"),
            "format": "email",
        },
        "phone": _text_field("Phone number", 10, unit="digits"),
        "position": _text_field("Position", 2),
        "salary": _number_field("Salary", exclusiveMinimum=0),
        "hireDate": {
            **_text_field("Hire date"),
            "format": "calendar-date",
        },
        "address": _text_field("Address", 5),
        "city": _text_field("City", 2),
        "state": _text_field("State", 2),
        "zipCode": _text_field("Zip code", 5),
        "country": _text_field("Country", 2),
        "emergencyContact": _text_field("Emergency contact", 2),
        "emergencyPhone": _text_field("Emergency phone", 10, unit="digits"),
        "notes": _text_field("Notes"),
        "status": {
            "type": "string",
            "enum": list(STATUS_VALUES),
            "x-label": "Status",
            "x-messages": {},
        },
        "performanceRating": _number_field("Performance rating", minimum=1, maximum=5),
        "projectAssignment": _text_field("Project assignment"),
    },
}

_props = EMPLOYEE_SCHEMA["properties"]
_props["email"]["x-messages"]["format"] = "Invalid email address."
_props["salary"]["x-messages"]["exclusiveMinimum"] = "Salary must be a positive number."
_props["hireDate"]["x-messages"]["format"] = "Invalid date format."
_status_message = "Status must be one of: " + ", ".join(STATUS_VALUES) + "."
_props["status"]["x-messages"].update(type=_status_message, enum=_status_message)
_rating_message = "Performance rating must be between 1 and 5."
_props["performanceRating"]["x-messages"].update(minimum=_rating_message, maximum=_rating_message)
del _props

REQUIRED_FIELDS: tuple[str, ...] = tuple(EMPLOYEE_SCHEMA["required"])
FIELD_NAMES: tuple[str, ...] = tuple(EMPLOYEE_SCHEMA["properties"])
FIELD_LABELS: dict[str, str] = {
    name: prop["x-label"] for name, prop in EMPLOYEE_SCHEMA["properties"].items()
}


# ------------------------------------------------------------------
# Format checks
# ------------------------------------------------------------------

_EMAIL_RE = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+\-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)

_DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y")


def parse_date(text: str) -> date | None:
    """Parse a calendar date the way a browser date input would accept it.

    Accepts ISO 8601 dates and date-times plus a handful of common
    written forms.  Returns ``None`` when *text* is not a date.
    """
    text = text.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


FORMAT_CHECKER = FormatChecker(formats=())


@FORMAT_CHECKER.checks("email")
def _is_email(instance) -> bool:
    if not isinstance(instance, str):
        return True
    return _EMAIL_RE.match(instance) is not None


@FORMAT_CHECKER.checks("calendar-date")
def _is_calendar_date(instance) -> bool:
    if not isinstance(instance, str):
        return True
    return parse_date(instance) is not None


# One validator per field; built once per process.
_FIELD_VALIDATORS: dict[str, Draft202012Validator] = {
    name: Draft202012Validator(
        clean_schema_for_validation(prop), format_checker=FORMAT_CHECKER,
    )
    for name, prop in EMPLOYEE_SCHEMA["properties"].items()
}


# ------------------------------------------------------------------
# Validation result
# ------------------------------------------------------------------

class ValidationResult:
    """Result of validating a submission against the employee schema.

    Attributes
    ----------
    passed : bool
        Whether validation succeeded.
    errors : dict[str, str]
        Field name -> message for every violated field (empty if passed).
    record : dict | None
        The normalized record (only set if passed).
    """

    __slots__ = ("passed", "errors", "record")

    def __init__(
        self,
        passed: bool,
        errors: dict[str, str],
        record: dict[str, Any] | None,
    ):
        self.passed = passed
        self.errors = errors
        self.record = record

    def raise_for_errors(self) -> None:
        """Raise ``RecordValidationError`` if validation failed."""
        if not self.passed:
            raise RecordValidationError(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "errors": dict(self.errors),
            "record": dict(self.record) if self.record is not None else None,
        }


# ------------------------------------------------------------------
# Coercion
# ------------------------------------------------------------------

def _to_number(value: Any) -> Any:
    """Read form text as a number; anything unreadable is returned unchanged."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not _NUMBER_TEXT.fullmatch(text):
        return value
    try:
        number = float(text)
    except ValueError:
        return value
    if not math.isfinite(number):
        return value
    return int(number) if number.is_integer() else number


def coerce_numeric(raw: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *raw* with the numeric fields converted from text."""
    data = dict(raw)
    for name in NUMERIC_FIELDS:
        if name in data:
            data[name] = _to_number(data[name])
    return data


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

def _field_error(name: str, value: Any) -> str | None:
    """Return the message for the first rule *value* breaks, or None."""
    prop = EMPLOYEE_SCHEMA["properties"][name]
    messages = prop.get("x-messages", {})

    if name in NUMERIC_FIELDS and isinstance(value, float) and not math.isfinite(value):
        return messages["type"]

    for error in _FIELD_VALIDATORS[name].iter_errors(value):
        message = messages.get(error.validator)
        if message is None:
            message = f"{prop['x-label']}: {error.message}"
        return message
    return None


def validate(raw: dict[str, Any]) -> ValidationResult:
    """Validate a raw form submission.

    Every field is checked; the result carries one message per violated
    field.  *raw* is not modified.  On success the normalized record holds
    only schema fields, with numeric fields as numbers.  Unknown keys
    (including any ``id``) are dropped.
    """
    if not isinstance(raw, dict):
        raise TypeError(f"Expected a mapping of field values, got {type(raw).__name__}")

    data = coerce_numeric(raw)
    errors: dict[str, str] = {}

    for name in FIELD_NAMES:
        value = data.get(name)
        if value is None:
            if name in REQUIRED_FIELDS:
                errors[name] = f"{FIELD_LABELS[name]} is required."
            continue
        message = _field_error(name, value)
        if message is not None:
            errors[name] = message

    if errors:
        logger.debug("Submission rejected: %s", ", ".join(errors))
        return ValidationResult(passed=False, errors=errors, record=None)

    record = {name: data[name] for name in FIELD_NAMES if data.get(name) is not None}
    return ValidationResult(passed=True, errors={}, record=record)


# ------------------------------------------------------------------
# Form helpers
# ------------------------------------------------------------------

def default_form_values() -> dict[str, Any]:
    """Return the blank form an add/edit form resets to."""
    return {
        "firstName": "",
        "lastName": "",
        "email": "",
        "phone": "",
        "department": "",
        "position": "",
        "salary": 0,
        "hireDate": "",
        "address": "",
        "city": "",
        "state": "",
        "zipCode": "",
        "country": "",
        "emergencyContact": "",
        "emergencyPhone": "",
        "notes": "",
        "status": "Active",
        "performanceRating": 3,
        "projectAssignment": "",
    }


def form_values(record: dict[str, Any]) -> dict[str, Any]:
    """Return the form values that re-populate a form for editing *record*."""
    values = default_form_values()
    values.update({k: v for k, v in record.items() if k != "id"})
    return values


def full_name(record: dict[str, Any]) -> str:
    """Display name: first name + " " + last name."""
    return f"{record.get('firstName', '')} {record.get('lastName', '')}".strip()
