"""Tests for the creation form."""

import asyncio
from datetime import datetime, timezone

import pytest

from jobdesk.views.add_job import JobCreationForm
from jobdesk.views.job_list import JobListController

from conftest import settle


def fill(form, **overrides):
    values = {
        "customer_name": "Bea",
        "job_type": "Install",
        "appointment_date": "2024/03/01 2:00 PM",
        "technician": "Sam",
        **overrides,
    }
    for field, value in values.items():
        form.set_field(field, value)


class FakeCreate:
    """Stands in for the controller's create(); records drafts."""

    def __init__(self, result=None):
        self.drafts = []
        self.result = result
        self.gate = None

    async def __call__(self, draft):
        self.drafts.append(draft)
        if self.gate is not None:
            await self.gate.wait()
        return self.result


class TestValidation:
    @pytest.mark.asyncio
    async def test_empty_customer_name_never_submits(self):
        create = FakeCreate(result={"id": "1"})
        form = JobCreationForm(create)
        fill(form, customer_name="")

        assert await form.submit() is None

        assert create.drafts == []
        assert form.errors == {"customer_name": "Please enter customer name"}

    @pytest.mark.asyncio
    async def test_every_missing_field_is_reported(self):
        create = FakeCreate()
        form = JobCreationForm(create)

        await form.submit()

        assert set(form.errors) == {"customer_name", "job_type", "appointment_date", "technician"}
        assert create.drafts == []

    def test_status_is_not_a_form_field(self):
        form = JobCreationForm(FakeCreate())
        with pytest.raises(ValueError):
            form.set_field("status", "Completed")

    def test_editing_a_field_clears_its_error(self):
        form = JobCreationForm(FakeCreate())
        form.errors = {"technician": "Please enter technician name"}

        form.set_field("technician", "Sam")

        assert form.errors == {}


class TestSubmit:
    @pytest.mark.asyncio
    async def test_success_sends_normalized_draft_and_resets(self):
        create = FakeCreate(result={"id": "100"})
        form = JobCreationForm(create)
        fill(form)

        assert await form.submit() == {"id": "100"}

        assert create.drafts == [{
            "customer_name": "Bea",
            "job_type": "Install",
            "appointment_date": datetime(2024, 3, 1, 14, 0, tzinfo=timezone.utc),
            "technician": "Sam",
        }]
        assert form.values["customer_name"] == ""
        assert form.values["appointment_date"] is None

    @pytest.mark.asyncio
    async def test_failure_keeps_form_populated(self):
        form = JobCreationForm(FakeCreate(result=None))
        fill(form)

        assert await form.submit() is None

        assert form.values["customer_name"] == "Bea"
        assert form.submitting is False

    @pytest.mark.asyncio
    async def test_double_submit_is_ignored(self):
        create = FakeCreate(result={"id": "100"})
        create.gate = asyncio.Event()
        form = JobCreationForm(create)
        fill(form)

        first = asyncio.create_task(form.submit())
        await settle()
        assert form.submitting is True
        assert await form.submit() is None

        create.gate.set()
        await first
        assert len(create.drafts) == 1


class TestWithController:
    @pytest.mark.asyncio
    async def test_submit_creates_scheduled_job_and_reloads(self, client, server, notices):
        controller = JobListController(client, notify=notices.append)
        await controller.load()
        form = controller.open_create_form()
        fill(form)

        created = await form.submit()

        body = server.body(server.calls("POST", "/jobs")[0])
        assert body["status"] == "Scheduled"
        assert body["appointmentDate"] == "2024-03-01T14:00:00.000Z"
        assert len(server.calls("GET", "/jobs")) == 2
        assert created["id"] in [j["id"] for j in controller.jobs]
        assert controller.create_form_visible is False
        assert form.values["customer_name"] == ""

    @pytest.mark.asyncio
    async def test_transport_failure_leaves_form_open_and_filled(self, client, server, notices):
        server.fail("POST", "/jobs", 502)
        controller = JobListController(client, notify=notices.append)
        form = controller.open_create_form()
        fill(form)

        assert await form.submit() is None

        assert controller.create_form_visible is True
        assert form.values["technician"] == "Sam"
        assert [(n.level, n.text) for n in notices] == [("error", "Error adding job")]
