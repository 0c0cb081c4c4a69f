"""
Registration router - patient form, submission and the raw data listing.

Architecture:
    HTTP Request → Router (this file) → PatientService → RecordRepository → MongoDB

A request never fails because of the database or a missing field: the page
is always rendered, and degraded outcomes are reported in the
X-Submission-Status / X-Read-Status headers and on the page itself.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from api.rendering import read_headers, submission_headers, templates
from core.dependencies import get_patient_service
from schemas import PatientForm
from services import PatientService
from services.patient_service import SUCCESS_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Registration"])


@router.get(
    "/",
    response_class=HTMLResponse,
    summary="Registration form",
)
def show_form(request: Request):
    return templates.TemplateResponse(request, "form.html", {})


@router.post(
    "/submit",
    response_class=HTMLResponse,
    summary="Register a patient",
    description="Store full_name, email and cpf from a URL-encoded form. Missing fields are stored as empty strings."
)
def submit_form(
    request: Request,
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    cpf: Optional[str] = Form(None),
    patient_service: PatientService = Depends(get_patient_service),
):
    """
    Store a registration and render the confirmation page.

    The confirmation message is shown even when the insert failed; the page
    adds a notice and the X-Submission-Status header says "not-stored".
    """
    form = PatientForm.from_form(full_name=full_name, email=email, cpf=cpf)
    outcome = patient_service.register(form)

    return templates.TemplateResponse(
        request,
        "success.html",
        {"message": SUCCESS_MESSAGE, "outcome": outcome},
        headers=submission_headers(outcome),
    )


@router.get(
    "/data",
    response_class=HTMLResponse,
    summary="List stored documents",
)
def display_data(
    request: Request,
    patient_service: PatientService = Depends(get_patient_service),
):
    """Render every stored document with all of its fields."""
    result = patient_service.list_documents()

    return templates.TemplateResponse(
        request,
        "data.html",
        {"data": result.documents, "load_error": result.error},
        headers=read_headers(result),
    )
