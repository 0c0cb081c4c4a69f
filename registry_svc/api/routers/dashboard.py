"""
Dashboard router - blood pressure readings.

Architecture:
    HTTP Request → Router (this file) → BloodPressureService → RecordRepository → MongoDB
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from api.rendering import read_headers, submission_headers, templates
from core.dependencies import get_blood_pressure_service
from schemas import BloodPressureForm
from services import BloodPressureService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "",
    response_class=HTMLResponse,
    summary="Blood pressure dashboard",
    description="Every stored document projected onto date, systolic_pressure and diastolic_pressure."
)
def user_dashboard(
    request: Request,
    blood_pressure_service: BloodPressureService = Depends(get_blood_pressure_service),
):
    result = blood_pressure_service.dashboard_rows()

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"bloodPressureData": result.documents, "load_error": result.error},
        headers=read_headers(result),
    )


@router.post(
    "/submit",
    summary="Record a blood pressure reading",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
)
def submit_blood_pressure(
    systolic_pressure: Optional[str] = Form(None, alias="systolicPressure"),
    diastolic_pressure: Optional[str] = Form(None, alias="diastolicPressure"),
    blood_pressure_service: BloodPressureService = Depends(get_blood_pressure_service),
):
    """
    Store a reading and redirect back to the dashboard.

    Always answers 303 to /dashboard, whether or not the insert succeeded.
    """
    form = BloodPressureForm.from_form(
        systolic_pressure=systolic_pressure,
        diastolic_pressure=diastolic_pressure,
    )
    outcome = blood_pressure_service.submit_reading(form)

    return RedirectResponse(
        url="/dashboard",
        status_code=status.HTTP_303_SEE_OTHER,
        headers=submission_headers(outcome),
    )
