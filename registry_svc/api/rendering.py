"""
Jinja2 template setup and response helpers shared by the HTML routers.
"""
from pathlib import Path
from typing import Dict

from fastapi.templating import Jinja2Templates

from models.records import document_kind
from models.results import (
    READ_STATUS_DEGRADED,
    READ_STATUS_HEADER,
    SUBMISSION_STATUS_HEADER,
    FindResult,
    SubmissionOutcome,
)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["document_kind"] = document_kind


def submission_headers(outcome: SubmissionOutcome) -> Dict[str, str]:
    return {SUBMISSION_STATUS_HEADER: outcome.status}


def read_headers(result: FindResult) -> Dict[str, str]:
    """Mark a page rendered from an incomplete read."""
    if result.ok:
        return {}
    return {READ_STATUS_HEADER: READ_STATUS_DEGRADED}
