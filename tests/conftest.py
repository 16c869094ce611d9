"""
Pytest configuration and shared fixtures.

The jobs API is faked in memory and wired in through httpx.MockTransport, so
every test goes through the real client code without touching the network.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from jobdesk.clients.jobs_api import open_client
from jobdesk.config import Settings

BASE_URL = "http://jobs.test"

ACME = {
    "id": "1",
    "customerName": "Acme",
    "jobType": "Repair",
    "appointmentDate": "2024-01-01T10:00:00Z",
    "technician": "Sam",
    "status": "Scheduled",
}


class FakeJobsServer:
    """
    In-memory stand-in for the jobs API.

    - `jobs` holds wire dicts keyed by id
    - `fail(method, path, status)` makes a route answer with an error status
      (status "connect" raises a connection error instead)
    - `hold(method, path)` parks matching requests until `release()` is called
    """

    def __init__(self):
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.failures: Dict[tuple, Any] = {}
        self.held: Dict[tuple, asyncio.Event] = {}
        self.empty_put_body = False
        self._next_id = 100

    def add(self, **wire: Any) -> Dict[str, Any]:
        self.jobs[str(wire["id"])] = dict(wire)
        return self.jobs[str(wire["id"])]

    def fail(self, method: str, path: str, status: Any = 500) -> None:
        self.failures[(method, path)] = status

    def hold(self, method: str, path: str) -> None:
        self.held[(method, path)] = asyncio.Event()

    def release(self, method: str, path: str) -> None:
        self.held.pop((method, path)).set()

    def calls(self, method: str, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and (path is None or r.url.path == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)

        gate = self.held.get(key)
        if gate is not None:
            await gate.wait()

        if key in self.failures:
            status = self.failures[key]
            if status == "connect":
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(status, json={"error": "boom"})

        parts = request.url.path.strip("/").split("/")
        if parts == ["jobs"]:
            if request.method == "GET":
                return httpx.Response(200, json=list(self.jobs.values()))
            if request.method == "POST":
                payload = self.body(request)
                payload["id"] = str(self._next_id)
                self._next_id += 1
                self.jobs[payload["id"]] = payload
                return httpx.Response(201, json=payload)

        if len(parts) == 2 and parts[0] == "jobs":
            job_id = parts[1]
            if job_id not in self.jobs:
                return httpx.Response(404, json={"error": "not found"})
            if request.method == "GET":
                return httpx.Response(200, json=self.jobs[job_id])
            if request.method == "PUT":
                self.jobs[job_id] = self.body(request)
                if self.empty_put_body:
                    return httpx.Response(204)
                return httpx.Response(200, json=self.jobs[job_id])
            if request.method == "DELETE":
                del self.jobs[job_id]
                return httpx.Response(200)

        return httpx.Response(405)


@pytest.fixture
def server():
    fake = FakeJobsServer()
    fake.add(**ACME)
    return fake


@pytest.fixture
def settings():
    return Settings(api_base_url=BASE_URL, api_timeout=5.0)


@pytest_asyncio.fixture
async def client(server, settings):
    async with open_client(settings, transport=httpx.MockTransport(server.handler)) as c:
        yield c


@pytest.fixture
def notices():
    """Collected notices; pass `notices.append` as a view's notify callback."""
    return []


async def settle():
    """Let pending tasks run until they block (e.g. on a held request)."""
    for _ in range(10):
        await asyncio.sleep(0)
