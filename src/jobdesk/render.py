"""
Terminal rendering with rich: the jobs table, the detail card and notices.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jobdesk.models import Job
from jobdesk.pipeline.normalize import FIELD_MESSAGES, format_appointment
from jobdesk.status import status_label, status_tag_color
from jobdesk.views.base import Notice

console = Console()

FIELD_LABELS = {
    "customer_name": "Customer Name",
    "job_type": "Job Type",
    "appointment_date": "Appointment Date and Time",
    "technician": "Technician",
    "status": "Status",
}

NOTICE_STYLES = {"success": "green", "error": "bold red"}


def status_tag(status: Any) -> Text:
    return Text(f" {status_label(status)} ", style=f"bold {status_tag_color(status)} reverse")


def jobs_table(jobs: Iterable[Job]) -> Table:
    table = Table(title="Job Management Dashboard")
    table.add_column("Customer Name")
    table.add_column("Job Type")
    table.add_column("Status")
    table.add_column("Appointment Date")
    table.add_column("ID", style="dim")
    for job in jobs:
        table.add_row(
            job["customer_name"],
            job["job_type"],
            status_tag(job["status"]),
            format_appointment(job["appointment_date"]),
            job["id"],
        )
    return table


def job_panel(job: Optional[Job], errors: Optional[Dict[str, str]] = None) -> Panel:
    """The detail drawer; `errors` puts field messages under the fields they belong to."""
    if job is None:
        return Panel("No job data available", title="Service Details")

    body = Text()
    for field, label in FIELD_LABELS.items():
        body.append(f"{label}: ", style="bold")
        if field == "status":
            body.append_text(status_tag(job["status"]))
        elif field == "appointment_date":
            body.append(format_appointment(job["appointment_date"]))
        else:
            body.append(str(job[field]))
        body.append("\n")
        if errors and field in errors:
            body.append(f"  {errors[field]}\n", style="red")
    return Panel(body, title="Service Details", subtitle=job["id"])


def print_notice(notice: Notice, out: Optional[Console] = None) -> None:
    (out or console).print(notice.text, style=NOTICE_STYLES.get(notice.level, ""))


def print_field_errors(errors: Dict[str, str], out: Optional[Console] = None) -> None:
    out = out or console
    for field in FIELD_MESSAGES:
        if field in errors:
            out.print(f"{FIELD_LABELS[field]}: {errors[field]}", style="red")
