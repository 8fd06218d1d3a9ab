"""
FastAPI transport for the simulation and report-metrics call contracts.
"""

import logging
from typing import Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from .config import (
    API_DESCRIPTION,
    API_TITLE,
    API_VERSION,
    CORS_CREDENTIALS,
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGINS,
    configure_logging,
)
from .errors import InvalidParameterError
from .models import DerivedMetrics, SimulationOutcome, SimulationParameters
from .report_schema import ReportData, build_report_data
from .service import derive_report_metrics, run_simulation

configure_logging()
logger = logging.getLogger(__name__)


class ReportResponse(BaseModel):
    outcome: SimulationOutcome
    metrics: DerivedMetrics
    report: ReportData


# ============================
# FastAPI app
# ============================
app = FastAPI(title=API_TITLE, description=API_DESCRIPTION, version=API_VERSION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_CREDENTIALS,
    allow_methods=CORS_METHODS,
    allow_headers=CORS_HEADERS,
)


@app.get("/")
def root():
    return {"message": API_TITLE, "docs": "Visit /docs for API documentation"}


@app.get("/api/default_parameters")
def default_parameters() -> SimulationParameters:
    return SimulationParameters()


@app.post("/api/simulate")
def simulate(params: SimulationParameters) -> SimulationOutcome:
    try:
        return run_simulation(params)
    except InvalidParameterError as e:
        logger.info("Rejected simulation request: %s", e)
        raise HTTPException(status_code=400, detail={"field": e.field, "message": e.message})


@app.post("/api/report")
def report(params: SimulationParameters, locale: Literal["de", "en"] = "en") -> ReportResponse:
    try:
        outcome = run_simulation(params)
        metrics = derive_report_metrics(params, outcome)
    except InvalidParameterError as e:
        logger.info("Rejected report request: %s", e)
        raise HTTPException(status_code=400, detail={"field": e.field, "message": e.message})
    try:
        payload = build_report_data(outcome.params, outcome, metrics, locale=locale)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ReportResponse(outcome=outcome, metrics=metrics, report=payload)
