"""
Result types returned by the repository and the services.

Persistence operations never raise driver errors into a request. They
return one of these objects instead, and the caller decides how to degrade.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import DatabaseError
from models.records import Record

# Values of the X-Submission-Status response header
STATUS_STORED = "stored"
STATUS_INCOMPLETE = "incomplete"
STATUS_NOT_STORED = "not-stored"

# Response headers that report degraded outcomes to the caller
SUBMISSION_STATUS_HEADER = "X-Submission-Status"
READ_STATUS_HEADER = "X-Read-Status"
READ_STATUS_DEGRADED = "degraded"


@dataclass
class InsertResult:
    """Outcome of inserting one document."""

    inserted_id: Optional[str] = None
    error: Optional[DatabaseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FindResult:
    """Documents read from the collection, plus the error that cut the read short (if any)."""

    documents: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[DatabaseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.documents)


@dataclass
class SubmissionOutcome:
    """What happened to one form submission."""

    record: Record
    missing_fields: Tuple[str, ...] = ()
    insert: InsertResult = field(default_factory=InsertResult)

    @property
    def stored(self) -> bool:
        return self.insert.ok

    @property
    def status(self) -> str:
        if not self.insert.ok:
            return STATUS_NOT_STORED
        if self.missing_fields:
            return STATUS_INCOMPLETE
        return STATUS_STORED
