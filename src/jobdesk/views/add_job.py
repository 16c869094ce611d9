"""
Creation form for a new job.

Collects customer name, job type, appointment time and technician (status is
not the user's to choose). Submitting validates locally, then hands a JobDraft
to `on_submit`, which returns the created job or None on failure.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional

from jobdesk.errors import ValidationError
from jobdesk.models import DRAFT_FIELDS, Job, JobDraft
from jobdesk.pipeline.normalize import check_fields, parse_appointment
from jobdesk.views.base import Notify, View


class JobCreationForm(View):
    def __init__(
        self,
        on_submit: Callable[[JobDraft], Awaitable[Optional[Job]]],
        *,
        notify: Optional[Notify] = None,
    ):
        super().__init__(notify)
        self._on_submit = on_submit
        self.submitting = False
        self.reset()

    def reset(self) -> None:
        self.values: Dict[str, Any] = {
            "customer_name": "",
            "job_type": "",
            "appointment_date": None,
            "technician": "",
        }
        self.errors: Dict[str, str] = {}
        self._refresh()

    def set_field(self, name: str, value: Any) -> None:
        if name not in DRAFT_FIELDS:
            raise ValueError(f"Unknown draft field: {name!r}")
        self.values[name] = value
        self.errors.pop(name, None)
        self._refresh()

    async def submit(self) -> Optional[Job]:
        """
        Validate and create. On invalid fields nothing is sent and `errors` is
        filled in; on a failed request the values stay as they are. Only a
        successful create resets the form.
        """
        if self.submitting:
            return None

        try:
            check_fields(self.values, DRAFT_FIELDS)
        except ValidationError as e:
            self.errors = e.field_errors
            self._refresh()
            return None
        self.errors = {}

        draft: JobDraft = {
            "customer_name": self.values["customer_name"],
            "job_type": self.values["job_type"],
            "appointment_date": parse_appointment(self.values["appointment_date"]),
            "technician": self.values["technician"],
        }

        self.submitting = True
        self._refresh()
        try:
            created = await self._on_submit(draft)
        finally:
            self.submitting = False

        if not self.alive:
            return None
        if created is None:
            self._refresh()
            return None
        self.reset()
        return created
