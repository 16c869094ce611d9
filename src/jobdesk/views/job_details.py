"""
Detail editor for a single job.

Two modes: VIEWING (fields read-only) and EDITING. Entering EDITING takes a
snapshot of the current field values; cancel restores it without touching the
network. Save validates locally, merges the edited fields into the original
job (id and unmodeled fields preserved), PUTs the whole record and, once the
server confirms, hands the confirmed job to `on_update` for reconciliation.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from jobdesk.clients import jobs_api
from jobdesk.errors import EditorStateError, NotFoundError, TransportError, ValidationError
from jobdesk.models import FORM_FIELDS, Job
from jobdesk.pipeline.normalize import (
    check_fields,
    form_values,
    parse_appointment,
    parse_status,
)
from jobdesk.views.base import Notify, View

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class JobDetailEditor(View):
    def __init__(
        self,
        job: Job,
        client: httpx.AsyncClient,
        *,
        on_update: Callable[[Job], None],
        on_stale: Optional[Callable[[str], Awaitable[Any]]] = None,
        notify: Optional[Notify] = None,
    ):
        super().__init__(notify)
        self._client = client
        self._on_update = on_update
        self._on_stale = on_stale
        # Bumped whenever the editor is pointed at a (new) job; a save that
        # started under an older generation must not touch the current state.
        self._generation = 0
        self.saving = False
        self.load_job(job)

    @property
    def editing(self) -> bool:
        return self.mode is EditorMode.EDITING

    def load_job(self, job: Job) -> None:
        """Show `job`, dropping any unsaved edits for the previous one."""
        self._generation += 1
        self.job = job
        self.snapshot: Dict[str, Any] = form_values(job)
        self.values: Dict[str, Any] = dict(self.snapshot)
        self.errors: Dict[str, str] = {}
        self.mode = EditorMode.VIEWING
        self.saving = False
        self._refresh()

    def begin_edit(self) -> None:
        if self.editing:
            return
        self.snapshot = dict(self.values)
        self.mode = EditorMode.EDITING
        self._refresh()

    def set_field(self, name: str, value: Any) -> None:
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown job field: {name!r}")
        if not self.editing:
            raise EditorStateError("Fields are read-only until editing starts")
        self.values[name] = value
        self.errors.pop(name, None)
        self._refresh()

    def cancel(self) -> None:
        """Drop in-progress edits and go back to VIEWING. No-op when already viewing."""
        if not self.editing:
            return
        self.values = dict(self.snapshot)
        self.errors = {}
        self.mode = EditorMode.VIEWING
        self._refresh()

    def _merged(self) -> Job:
        merged: Dict[str, Any] = {**self.job, **self.values}
        merged["appointment_date"] = parse_appointment(self.values["appointment_date"])
        merged["status"] = parse_status(self.values["status"])
        return merged  # type: ignore[return-value]

    def _is_current(self, generation: int) -> bool:
        return self.alive and generation == self._generation

    async def save(self) -> Optional[Job]:
        """
        Submit the edits. Returns the confirmed job, or None when nothing was
        saved (not editing, already saving, invalid fields or a failed request).
        Edits are kept on failure so the user can retry.
        """
        if not self.editing or self.saving:
            return None

        try:
            check_fields(self.values, FORM_FIELDS)
        except ValidationError as e:
            self.errors = e.field_errors
            self._refresh()
            return None
        self.errors = {}

        job_id = self.job["id"]
        merged = self._merged()
        generation = self._generation
        self.saving = True
        self._refresh()

        try:
            confirmed = await jobs_api.update_job(self._client, job_id, merged)
        except TransportError as e:
            if not self._is_current(generation):
                logger.debug("Dropping failed save for job %s; editor moved on", job_id)
                return None
            self.saving = False
            self._error("Failed to update job")
            self._refresh()
            if isinstance(e, NotFoundError) and self._on_stale is not None:
                await self._on_stale(job_id)
            return None

        if not self._is_current(generation):
            logger.debug("Dropping save result for job %s; editor moved on", job_id)
            return None

        self.saving = False
        self.job = confirmed
        self.snapshot = form_values(confirmed)
        self.values = dict(self.snapshot)
        self.mode = EditorMode.VIEWING
        self._success("Job updated successfully")
        self._on_update(confirmed)
        self._refresh()
        return confirmed
