"""
List controller: the single owner of the job collection for a session.

The detail editor and the creation form only hold working copies; their
outcomes come back here. Updates are patched in locally (the editor already
holds the server-confirmed record), while creates and deletes are followed by
a full reload so the list always mirrors the server.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

import httpx

from jobdesk.clients import jobs_api
from jobdesk.errors import NotFoundError, TransportError
from jobdesk.models import Job, JobDraft, JobStatus
from jobdesk.pipeline.filter import replace_by_id, unique_by_id
from jobdesk.views.add_job import JobCreationForm
from jobdesk.views.base import Notify, View
from jobdesk.views.job_details import JobDetailEditor

logger = logging.getLogger(__name__)


class JobListController(View):
    def __init__(self, client: httpx.AsyncClient, *, notify: Optional[Notify] = None):
        super().__init__(notify)
        self._client = client

        self.jobs: List[Job] = []
        self.loading = False
        self._load_seq = 0

        # detail drawer
        self.detail_open = False
        self.detail_loading = False
        self.selected_job: Optional[Job] = None
        self.editor: Optional[JobDetailEditor] = None
        self._detail_seq = 0

        # creation modal
        self.creation_form = JobCreationForm(self.create, notify=self._notify_cb)
        self.create_form_visible = False

        self._deleting: Set[str] = set()

    def find(self, job_id: str) -> Optional[Job]:
        return next((j for j in self.jobs if j["id"] == job_id), None)

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------
    async def load(self) -> bool:
        """
        Replace the collection with the server's listing.
        On failure the previous collection stays and an error notice goes out.
        """
        self._load_seq += 1
        seq = self._load_seq
        self.loading = True
        self._refresh()
        try:
            fetched = await jobs_api.list_jobs(self._client)
        except TransportError as e:
            logger.warning("Loading jobs failed: %s", e)
            if self.alive and seq == self._load_seq:
                self.loading = False
                self._error("Error fetching jobs")
                self._refresh()
            return False

        if not self.alive or seq != self._load_seq:
            logger.debug("Dropping stale job listing (load #%s)", seq)
            return False
        self.jobs = unique_by_id(fetched)
        self.loading = False
        logger.info("Loaded %d jobs", len(self.jobs))
        self._refresh()
        return True

    def apply_update(self, job: Job) -> None:
        """Swap in a server-confirmed job by id; no request is made."""
        if not self.alive:
            return
        if self.find(job["id"]) is None:
            logger.debug("Job %s is not in the collection; nothing to update", job["id"])
            return
        self.jobs = replace_by_id(self.jobs, job)
        if self.selected_job is not None and self.selected_job["id"] == job["id"]:
            self.selected_job = job
        logger.info("Applied update for job %s", job["id"])
        self._refresh()

    async def remove(self, job_id: str) -> bool:
        """
        Delete a job, then reload. The collection is untouched if the delete
        fails; a NotFoundError still triggers a reload to purge the stale row.
        """
        if job_id in self._deleting:
            return False
        self._deleting.add(job_id)
        try:
            await jobs_api.delete_job(self._client, job_id)
        except TransportError as e:
            logger.warning("Deleting job %s failed: %s", job_id, e)
            if self.alive:
                self._error("Error deleting job")
                if isinstance(e, NotFoundError):
                    await self.load()
            return False
        finally:
            self._deleting.discard(job_id)

        if not self.alive:
            return False
        self._success("Job deleted successfully")
        if self.selected_job is not None and self.selected_job["id"] == job_id:
            self.close_detail()
        await self.load()
        return True

    async def create(self, draft: JobDraft) -> Optional[Job]:
        """Create a job with status forced to Scheduled, then reload."""
        try:
            created = await jobs_api.create_job(self._client, draft, JobStatus.SCHEDULED)
        except TransportError as e:
            logger.warning("Creating job failed: %s", e)
            if self.alive:
                self._error("Error adding job")
            return None

        if not self.alive:
            return None
        self._success("Job added successfully")
        self.close_create_form()
        await self.load()
        return created

    # ------------------------------------------------------------------
    # Detail drawer
    # ------------------------------------------------------------------
    async def view_detail(self, job_id: str) -> Optional[Job]:
        """
        Open the drawer and fetch a fresh copy of the job (never the local one).
        Results for a drawer that was closed or re-targeted meanwhile are dropped.
        """
        self._detail_seq += 1
        seq = self._detail_seq
        self.detail_open = True
        self.detail_loading = True
        self._refresh()

        try:
            job = await jobs_api.get_job(self._client, job_id)
        except TransportError as e:
            logger.warning("Fetching job %s failed: %s", job_id, e)
            if not self.alive or seq != self._detail_seq:
                return None
            self.detail_loading = False
            self._error("Error fetching job details")
            self._refresh()
            if isinstance(e, NotFoundError):
                await self.load()
            return None

        if not self.alive or seq != self._detail_seq:
            logger.debug("Dropping stale detail for job %s", job_id)
            return None

        self.detail_loading = False
        self.selected_job = job
        if self.editor is None:
            self.editor = JobDetailEditor(
                job,
                self._client,
                on_update=self.apply_update,
                on_stale=self._purge_stale,
                notify=self._notify_cb,
            )
        else:
            self.editor.load_job(job)
        self._refresh()
        return job

    def close_detail(self) -> None:
        self._detail_seq += 1
        self.detail_open = False
        self.detail_loading = False
        self.selected_job = None
        if self.editor is not None:
            self.editor.close()
            self.editor = None
        self._refresh()

    async def _purge_stale(self, job_id: str) -> None:
        logger.info("Job %s vanished server-side; reloading", job_id)
        await self.load()

    # ------------------------------------------------------------------
    # Creation modal
    # ------------------------------------------------------------------
    def open_create_form(self) -> JobCreationForm:
        self.create_form_visible = True
        self._refresh()
        return self.creation_form

    def close_create_form(self) -> None:
        """Hide the modal; whatever was typed stays in the form."""
        self.create_form_visible = False
        self._refresh()

    def close(self) -> None:
        if self.editor is not None:
            self.editor.close()
            self.editor = None
        self.creation_form.close()
        super().close()
