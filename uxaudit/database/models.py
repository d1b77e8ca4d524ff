from dataclasses import dataclass
from datetime import datetime

from uxaudit.analysis.models import JobStatus


@dataclass
class JobRecord:
    """Represents a row from the analyses table."""

    id: str
    status: JobStatus
    file_reference: str
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
