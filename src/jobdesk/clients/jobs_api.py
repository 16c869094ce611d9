# src/jobdesk/clients/jobs_api.py

"""
Plain-function async client for the jobs REST API.

Design goals:
- Keep *all* HTTP details here so the views never worry about URLs or status codes.
- One function per CRUD operation; each call is a fresh round trip (no retries, no cache).
- Every failure comes out as TransportError (NotFoundError for a missing job),
  so callers only ever catch one family of exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from jobdesk.config import Settings
from jobdesk.errors import NotFoundError, TransportError
from jobdesk.models import Job, JobDraft, JobStatus
from jobdesk.pipeline.normalize import draft_to_wire, job_from_wire, job_to_wire

logger = logging.getLogger(__name__)


# ---- Internal helpers ---------------------------------------------------------

def _job_path(job_id: str) -> str:
    return f"/jobs/{job_id}"


def _default_headers() -> Dict[str, str]:
    return {"User-Agent": "jobdesk/0.1", "Accept": "application/json"}


async def _send(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    *,
    json: Optional[Dict[str, Any]] = None,
    job_id: Optional[str] = None,
) -> httpx.Response:
    """
    Do one request and translate every failure into TransportError.
    A 404 on a single-job path becomes NotFoundError(job_id).
    """
    logger.debug("%s %s", method, path)
    try:
        resp = await client.request(method, path, json=json)
    except httpx.RequestError as e:
        logger.warning("%s %s failed: %s", method, path, e)
        raise TransportError(f"Request error: {e}") from e

    if resp.status_code == 404 and job_id is not None:
        logger.warning("%s %s: job %s not found", method, path, job_id)
        raise NotFoundError(job_id)
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning("%s %s returned HTTP %s", method, path, resp.status_code)
        raise TransportError(
            f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code
        ) from e
    return resp


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise TransportError(f"Malformed response from {resp.request.url}") from e


def _decode_job(raw: Any) -> Job:
    try:
        return job_from_wire(raw)
    except ValueError as e:
        raise TransportError(f"Malformed job payload: {e}") from e


# ---- Public API (call these from the views) -----------------------------------

def open_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Build the AsyncClient every call below goes through.
    `transport` is for tests (httpx.MockTransport); leave it None in real use.
    """
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout,
        headers=_default_headers(),
        transport=transport,
    )


async def list_jobs(client: httpx.AsyncClient) -> List[Job]:
    """
    GET /jobs. Entries that cannot be normalized are skipped with a warning
    rather than failing the whole listing.
    """
    data = _json(await _send(client, "GET", "/jobs"))
    if not isinstance(data, list):
        raise TransportError(f"Expected a list of jobs, got {type(data).__name__}")

    out: List[Job] = []
    for raw in data:
        try:
            out.append(job_from_wire(raw))
        except ValueError as e:
            logger.warning("Skipping malformed job in listing: %s", e)
    return out


async def get_job(client: httpx.AsyncClient, job_id: str) -> Job:
    """GET /jobs/{id}."""
    resp = await _send(client, "GET", _job_path(job_id), job_id=job_id)
    return _decode_job(_json(resp))


async def create_job(client: httpx.AsyncClient, draft: JobDraft, status: JobStatus) -> Job:
    """POST /jobs with a draft (no id); returns the created job with its new id."""
    resp = await _send(client, "POST", "/jobs", json=draft_to_wire(draft, status))
    return _decode_job(_json(resp))


async def update_job(client: httpx.AsyncClient, job_id: str, job: Job) -> Job:
    """
    PUT /jobs/{id} with the full job.
    Returns the server's copy, or the submitted job when the response has no body.
    """
    resp = await _send(client, "PUT", _job_path(job_id), json=job_to_wire(job), job_id=job_id)
    if not resp.content:
        return job
    return _decode_job(_json(resp))


async def delete_job(client: httpx.AsyncClient, job_id: str) -> None:
    """DELETE /jobs/{id}."""
    await _send(client, "DELETE", _job_path(job_id), job_id=job_id)
