# src/jobdesk/models.py
"""
Typed dictionaries for job records, on the wire and in memory.

Everything is a plain dict with type hints:
- `JobWire` is the JSON object exactly as the jobs API sends/accepts it (camelCase).
- `Job` is the normalized in-memory shape the views work with (snake_case,
  offset-aware datetime, enum status).
- `JobDraft` is what the creation form collects before the API assigns an id.

Conversion between the two lives in `jobdesk.pipeline.normalize`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, TypedDict


class JobStatus(str, Enum):
    """Closed set of job statuses, plus a display-only bucket for anything else."""

    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    PENDING = "Pending"

    # Never sent to the server; only what unrecognized values decode to.
    UNKNOWN = "Unknown"


# The four values a job may actually be saved with (selection order of the original form).
VALID_STATUSES = (
    JobStatus.SCHEDULED,
    JobStatus.IN_PROGRESS,
    JobStatus.PENDING,
    JobStatus.COMPLETED,
)

# Fields the detail editor exposes, in display order.
FORM_FIELDS = ("customer_name", "job_type", "appointment_date", "technician", "status")

# Fields the creation form collects (status is forced, not chosen).
DRAFT_FIELDS = ("customer_name", "job_type", "appointment_date", "technician")


class JobWire(TypedDict, total=False):
    """
    A job as the API transmits it.

    Notes:
    - At runtime this is just the decoded JSON dict.
    - `appointmentDate` is an ISO-8601 string, e.g. "2024-01-01T10:00:00Z".
    """

    # Assigned by the API on create; absent from create payloads
    id: str

    customerName: str
    jobType: str
    appointmentDate: str
    technician: str

    # One of the JobStatus values (except UNKNOWN)
    status: str


class JobDraft(TypedDict):
    """Values collected by the creation form; no id, no status."""

    customer_name: str
    job_type: str
    appointment_date: datetime
    technician: str


class Job(TypedDict):
    """
    A normalized job record.

    `appointment_date` is always offset-aware and in UTC. `extra` keeps wire keys
    this client does not model so they survive an update round trip.
    """

    id: str
    customer_name: str
    job_type: str
    appointment_date: datetime
    technician: str
    status: JobStatus
    extra: Dict[str, Any]
