"""POST /analyze and /users/{id} - score, list, update and delete assessments"""

import time
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from cibil_analyzer.api.v1.schemas import (
    AnalyzeResponse,
    AssessmentResponse,
    MessageResponse,
    ProfileRequest,
)
from cibil_analyzer.api.dependencies import get_assessment_service, get_current_account, get_request_id
from cibil_analyzer.infrastructure.database.session import get_db
from cibil_analyzer.domain.assessments import AssessmentService
from cibil_analyzer.domain.exceptions import AssessmentNotFoundError
from cibil_analyzer.domain.models import Account
from cibil_analyzer.infrastructure.observability.metrics import record_assessment
from cibil_analyzer.infrastructure.observability.logging import log_assessment

router = APIRouter()


def _require_uuid(assessment_id: str) -> str:
    try:
        return str(uuid.UUID(assessment_id))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid assessment ID format")


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    request_body: ProfileRequest,
    request: Request,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    service: AssessmentService = Depends(get_assessment_service),
):
    """
    Score a financial profile and store it in the caller's history.

    Flow:
    1. Validate inputs (range and type errors are rejected with 400)
    2. Compute score, risk tier and suggestions
    3. Persist the assessment for the authenticated account
    4. Return the result
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        record = service.analyze(account.id, request_body.to_profile())
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_assessment(record.result.score, record.result.risk_tier)
    log_assessment(request_id, account.id, record.result.score, record.result.risk_tier, duration_ms)

    return AnalyzeResponse.from_result(record.result)


@router.get("/users", response_model=List[AssessmentResponse])
def list_assessments(
    account: Account = Depends(get_current_account),
    service: AssessmentService = Depends(get_assessment_service),
):
    """Retrieve the caller's assessments, newest first"""
    return [AssessmentResponse.from_record(record) for record in service.history(account.id)]


@router.get("/users/{assessment_id}", response_model=AssessmentResponse)
def get_assessment(
    assessment_id: str,
    account: Account = Depends(get_current_account),
    service: AssessmentService = Depends(get_assessment_service),
):
    try:
        record = service.get(account.id, _require_uuid(assessment_id))
    except AssessmentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return AssessmentResponse.from_record(record)


@router.put("/users/{assessment_id}", response_model=AssessmentResponse)
def update_assessment(
    assessment_id: str,
    request_body: ProfileRequest,
    request: Request,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    service: AssessmentService = Depends(get_assessment_service),
):
    """Replace an assessment's inputs and re-score it; 404 unless owned by the caller"""
    start_time = time.time()
    request_id = get_request_id(request)
    assessment_id = _require_uuid(assessment_id)

    try:
        record = service.update(account.id, assessment_id, request_body.to_profile())
        db.commit()
    except AssessmentNotFoundError as e:
        db.rollback()
        logging.warning(f"Assessment not found for update: {assessment_id}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_assessment(record.result.score, record.result.risk_tier, source="update")
    log_assessment(
        request_id, account.id, record.result.score, record.result.risk_tier, duration_ms, step="assessment_updated"
    )

    return AssessmentResponse.from_record(record)


@router.delete("/users/{assessment_id}", response_model=MessageResponse)
def delete_assessment(
    assessment_id: str,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    service: AssessmentService = Depends(get_assessment_service),
):
    assessment_id = _require_uuid(assessment_id)

    try:
        service.delete(account.id, assessment_id)
        db.commit()
    except AssessmentNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    return MessageResponse(message="Assessment deleted successfully")
