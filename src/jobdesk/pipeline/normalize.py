"""
Convert between the jobs API's JSON and our normalized Job dicts.

This module handles the messy details at the API <-> UI boundary:
- ISO-8601 timestamps (with or without offset) become UTC-aware datetimes
- status strings are matched leniently and fail closed to JobStatus.UNKNOWN
- required text fields are checked for presence before anything is sent
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping

from jobdesk.errors import ValidationError
from jobdesk.models import (
    FORM_FIELDS,
    VALID_STATUSES,
    Job,
    JobDraft,
    JobStatus,
)

# Display format of the original dashboard: "YYYY/MM/DD h:mm A"
_DISPLAY_RE = re.compile(
    r"^(\d{4})/(\d{1,2})/(\d{1,2})\s+(\d{1,2}):(\d{2})\s*([AaPp][Mm])$"
)

# wire key -> Job key
_WIRE_FIELDS = {
    "customerName": "customer_name",
    "jobType": "job_type",
    "technician": "technician",
}
_KNOWN_WIRE_KEYS = {"id", "customerName", "jobType", "appointmentDate", "technician", "status"}

# Messages shown next to a field when it fails validation.
FIELD_MESSAGES = {
    "customer_name": "Please enter customer name",
    "job_type": "Please enter job type",
    "appointment_date": "Please select appointment date and time",
    "technician": "Please enter technician name",
    "status": "Please select a status",
}

_STATUS_LOOKUP = {
    re.sub(r"[\s_-]", "", s.value).lower(): s for s in VALID_STATUSES
}


# ---- Status ------------------------------------------------------------------

def parse_status(value: Any) -> JobStatus:
    """
    Map any value onto a JobStatus, never raising.

    Matching ignores case, surrounding whitespace and separators, so
    "InProgress", "in_progress" and "In Progress" are all IN_PROGRESS.
    Anything unrecognized lands in the UNKNOWN display bucket.
    """
    if isinstance(value, JobStatus):
        return value
    if not isinstance(value, str):
        return JobStatus.UNKNOWN
    key = re.sub(r"[\s_-]", "", value).lower()
    return _STATUS_LOOKUP.get(key, JobStatus.UNKNOWN)


def is_valid_status(value: Any) -> bool:
    """True only for the four statuses a job may be saved with."""
    return parse_status(value) in VALID_STATUSES


# ---- Dates -------------------------------------------------------------------

def _as_utc(dt: datetime) -> datetime:
    # Naive times carry no offset; the dashboard renders in UTC, so read them as UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_appointment(value: Any) -> datetime:
    """
    Parse an appointment time into an aware UTC datetime.

    Accepts a datetime, an ISO-8601 string ("2024-01-01T10:00:00Z") or the
    display format ("2024/01/01 10:00 AM"). Raises ValueError otherwise.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Not an appointment time: {value!r}")

    text = value.strip()
    m = _DISPLAY_RE.match(text)
    if m:
        year, month, day, hour, minute, meridiem = m.groups()
        hour_12 = int(hour)
        if not 1 <= hour_12 <= 12:
            raise ValueError(f"Hour out of range in {text!r}")
        hour_24 = hour_12 % 12 + (12 if meridiem.upper() == "PM" else 0)
        return datetime(int(year), int(month), int(day), hour_24, int(minute), tzinfo=timezone.utc)

    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError as e:
        raise ValueError(f"Not an appointment time: {value!r}") from e


def format_appointment(dt: datetime) -> str:
    """Render as "YYYY/MM/DD h:mm A" in UTC, e.g. "2024/01/01 10:00 AM"."""
    utc = _as_utc(dt)
    hour = utc.hour % 12 or 12
    meridiem = "AM" if utc.hour < 12 else "PM"
    return f"{utc:%Y/%m/%d} {hour}:{utc:%M} {meridiem}"


def to_iso(dt: datetime) -> str:
    """Encode as "2024-01-01T10:00:00.000Z" (microseconds kept when present)."""
    utc = _as_utc(dt)
    timespec = "milliseconds" if utc.microsecond % 1000 == 0 else "microseconds"
    return utc.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


# ---- Records -----------------------------------------------------------------

def job_from_wire(raw: Mapping[str, Any]) -> Job:
    """
    Turn one API job object into a normalized Job.

    Raises ValueError when the payload has no id or no usable appointment time;
    every other field is tolerated as-is (missing text becomes "").
    """
    if not isinstance(raw, Mapping):
        raise ValueError(f"Job payload must be an object, got {type(raw).__name__}")
    if raw.get("id") is None:
        raise ValueError("Job payload has no id")

    job: Dict[str, Any] = {"id": str(raw["id"])}
    for wire_key, key in _WIRE_FIELDS.items():
        value = raw.get(wire_key)
        job[key] = "" if value is None else str(value)
    job["appointment_date"] = parse_appointment(raw.get("appointmentDate"))
    job["status"] = parse_status(raw.get("status"))
    job["extra"] = {k: v for k, v in raw.items() if k not in _KNOWN_WIRE_KEYS}
    return job  # type: ignore[return-value]


def job_to_wire(job: Job) -> Dict[str, Any]:
    """Encode a Job as the full object PUT expects, unmodeled keys included."""
    return {
        **(job.get("extra") or {}),
        "id": job["id"],
        "customerName": job["customer_name"],
        "jobType": job["job_type"],
        "appointmentDate": to_iso(job["appointment_date"]),
        "technician": job["technician"],
        "status": parse_status(job["status"]).value,
    }


def draft_to_wire(draft: JobDraft, status: JobStatus) -> Dict[str, Any]:
    """Encode a create payload; the API assigns the id."""
    return {
        "customerName": draft["customer_name"],
        "jobType": draft["job_type"],
        "appointmentDate": to_iso(draft["appointment_date"]),
        "technician": draft["technician"],
        "status": status.value,
    }


def form_values(job: Job) -> Dict[str, Any]:
    """The editable fields of a job, as a fresh dict."""
    return {field: job[field] for field in FORM_FIELDS}


# ---- Validation --------------------------------------------------------------

def validate_fields(values: Mapping[str, Any], fields: Iterable[str]) -> Dict[str, str]:
    """
    Presence checks for the given fields; returns {field: message} for failures.

    Text must be non-empty after trimming, the appointment must parse to an
    instant and status must be one of the four real values.
    """
    errors: Dict[str, str] = {}
    for field in fields:
        value = values.get(field)
        if field == "appointment_date":
            try:
                parse_appointment(value)
            except ValueError:
                errors[field] = FIELD_MESSAGES[field]
        elif field == "status":
            if not is_valid_status(value):
                errors[field] = FIELD_MESSAGES[field]
        elif not isinstance(value, str) or not value.strip():
            errors[field] = FIELD_MESSAGES[field]
    return errors


def check_fields(values: Mapping[str, Any], fields: Iterable[str]) -> None:
    """Like validate_fields, but raises ValidationError when anything fails."""
    errors = validate_fields(values, fields)
    if errors:
        raise ValidationError(errors)
