"""Status tag colours for job statuses."""

from __future__ import annotations

from typing import Any

from jobdesk.models import JobStatus
from jobdesk.pipeline.normalize import parse_status

STATUS_TAG_COLORS = {
    JobStatus.COMPLETED: "green",
    JobStatus.IN_PROGRESS: "blue",
    JobStatus.PENDING: "dark_orange",
    JobStatus.SCHEDULED: "purple",
}

DEFAULT_TAG_COLOR = "grey50"


def status_tag_color(status: Any) -> str:
    """Return the tag colour for a status; anything unrecognized gets the neutral grey."""
    if status is None:
        return DEFAULT_TAG_COLOR
    return STATUS_TAG_COLORS.get(parse_status(status), DEFAULT_TAG_COLOR)


def status_label(status: Any) -> str:
    """Text shown inside the tag; unrecognized raw strings are shown as given."""
    parsed = parse_status(status)
    if parsed is not JobStatus.UNKNOWN or isinstance(status, JobStatus):
        return parsed.value
    if isinstance(status, str) and status.strip():
        return status.strip()
    return JobStatus.UNKNOWN.value
