"""
Command-line interface for the job dashboard.

Each command opens one session against the jobs API:
- list the jobs table
- show one job's details (always freshly fetched)
- edit a job through the detail editor
- add a job through the creation form (status is always Scheduled)
- delete a job after confirmation
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

import typer

from jobdesk.clients.jobs_api import open_client
from jobdesk.config import Settings, load_settings
from jobdesk.render import console, job_panel, jobs_table, print_field_errors, print_notice
from jobdesk.views.base import Notice
from jobdesk.views.job_list import JobListController

# Typer app instance for CLI commands
app = typer.Typer(help="Job management dashboard")

BaseUrlOption = typer.Option(None, "--base-url", help="Jobs API base URL (overrides JOBDESK_API_BASE_URL)")


def _setup(base_url: Optional[str]) -> Settings:
    settings = load_settings(base_url)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return settings


def _run(settings: Settings, body: Callable[[JobListController], Awaitable[bool]]) -> None:
    """
    Run `body` against a fresh controller and exit 1 if it reports failure
    or any error notice was shown along the way.
    """
    errors: List[Notice] = []

    def notify(notice: Notice) -> None:
        print_notice(notice)
        if notice.level == "error":
            errors.append(notice)

    async def main() -> bool:
        async with open_client(settings) as client:
            controller = JobListController(client, notify=notify)
            try:
                return await body(controller)
            finally:
                controller.close()

    ok = asyncio.run(main())
    if not ok or errors:
        raise typer.Exit(code=1)


@app.command("list")
def list_jobs(base_url: Optional[str] = BaseUrlOption):
    """Show all jobs as a table."""
    settings = _setup(base_url)

    async def body(controller: JobListController) -> bool:
        if not await controller.load():
            return False
        console.print(jobs_table(controller.jobs))
        return True

    _run(settings, body)


@app.command()
def show(job_id: str, base_url: Optional[str] = BaseUrlOption):
    """Show one job's details, fetched fresh from the API."""
    settings = _setup(base_url)

    async def body(controller: JobListController) -> bool:
        job = await controller.view_detail(job_id)
        console.print(job_panel(job))
        return job is not None

    _run(settings, body)


@app.command()
def edit(
    job_id: str,
    customer_name: Optional[str] = typer.Option(None, "--customer-name", help="New customer name"),
    job_type: Optional[str] = typer.Option(None, "--job-type", help="New job type"),
    appointment_date: Optional[str] = typer.Option(
        None, "--appointment-date", help='New appointment, e.g. "2024/01/01 10:00 AM" (UTC) or ISO-8601'
    ),
    technician: Optional[str] = typer.Option(None, "--technician", help="New technician"),
    status: Optional[str] = typer.Option(None, "--status", help="Scheduled, In Progress, Pending or Completed"),
    base_url: Optional[str] = BaseUrlOption,
):
    """
    Edit a job: open its details, change the given fields and save.
    Fields not given keep their current values.
    """
    changes: Dict[str, str] = {
        k: v
        for k, v in {
            "customer_name": customer_name,
            "job_type": job_type,
            "appointment_date": appointment_date,
            "technician": technician,
            "status": status,
        }.items()
        if v is not None
    }
    if not changes:
        typer.echo("Nothing to change; pass at least one field option.", err=True)
        raise typer.Exit(code=2)
    settings = _setup(base_url)

    async def body(controller: JobListController) -> bool:
        await controller.load()
        if await controller.view_detail(job_id) is None:
            return False

        editor = controller.editor
        editor.begin_edit()
        for field, value in changes.items():
            editor.set_field(field, value)

        saved = await editor.save()
        if saved is None:
            console.print(job_panel(controller.selected_job, errors=editor.errors))
            return False
        console.print(job_panel(saved))
        console.print(jobs_table(controller.jobs))
        return True

    _run(settings, body)


@app.command()
def add(
    customer_name: str = typer.Option(..., "--customer-name", help="Customer name"),
    job_type: str = typer.Option(..., "--job-type", help="Job type, e.g. Repair"),
    appointment_date: str = typer.Option(
        ..., "--appointment-date", help='Appointment, e.g. "2024/01/01 10:00 AM" (UTC) or ISO-8601'
    ),
    technician: str = typer.Option(..., "--technician", help="Assigned technician"),
    base_url: Optional[str] = BaseUrlOption,
):
    """Add a new job. New jobs always start as Scheduled."""
    settings = _setup(base_url)

    async def body(controller: JobListController) -> bool:
        form = controller.open_create_form()
        form.set_field("customer_name", customer_name)
        form.set_field("job_type", job_type)
        form.set_field("appointment_date", appointment_date)
        form.set_field("technician", technician)

        created = await form.submit()
        if created is None:
            print_field_errors(form.errors)
            return False
        console.print(jobs_table(controller.jobs))
        return True

    _run(settings, body)


@app.command()
def delete(
    job_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    base_url: Optional[str] = BaseUrlOption,
):
    """Delete a job, then show the reloaded table."""
    if not yes:
        typer.confirm("Are you sure to delete this job?", abort=True)
    settings = _setup(base_url)

    async def body(controller: JobListController) -> bool:
        if not await controller.remove(job_id):
            return False
        console.print(jobs_table(controller.jobs))
        return True

    _run(settings, body)


if __name__ == "__main__":
    app()
