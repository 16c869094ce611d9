"""
Exceptions shared by the transport client and the views.

ValidationError never reaches the network; TransportError (and NotFoundError)
always originate from it.
"""

from typing import Dict, Optional


class JobDeskError(Exception):
    """Base exception for all jobdesk errors."""
    pass


class ValidationError(JobDeskError):
    """
    Raised when local field checks fail before any request is made.

    `field_errors` maps a field name (e.g. "customer_name") to the message
    shown next to that field.
    """

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Invalid fields: {fields}")


class TransportError(JobDeskError):
    """Raised for any failed round trip to the jobs API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(TransportError):
    """Raised when the API reports that a job no longer exists."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}", status_code=404)


class EditorStateError(JobDeskError):
    """Raised when an editor operation is not allowed in its current mode."""
    pass
