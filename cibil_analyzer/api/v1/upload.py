"""POST /upload-csv - batch assessments from a CSV file"""

import csv
import io
import time
import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from cibil_analyzer.api.v1.schemas import ProfileRequest, UploadResponse
from cibil_analyzer.api.dependencies import get_assessment_service, get_current_account, get_request_id
from cibil_analyzer.infrastructure.database.session import get_db
from cibil_analyzer.domain.assessments import AssessmentService
from cibil_analyzer.domain.exceptions import InvalidProfileError
from cibil_analyzer.domain.models import Account, FinancialProfile
from cibil_analyzer.infrastructure.observability.metrics import record_assessment
from cibil_analyzer.infrastructure.observability.logging import log_assessment

router = APIRouter()

PROFILE_COLUMNS = ("paymentHistory", "creditUtilization", "creditAge", "creditMix", "hardInquiries")


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def parse_profiles_csv(content: bytes) -> List[FinancialProfile]:
    """
    Parse and validate every row of an uploaded CSV.

    The header must name the profile columns plus fullName (or name). Rows are
    validated with the same rules as POST /analyze; the first bad row aborts
    the whole batch.

    Raises:
        InvalidProfileError: On undecodable content, missing columns, no data
            rows, or an invalid row (1-based data row number in the message)
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InvalidProfileError("CSV file must be UTF-8 encoded") from e

    reader = csv.DictReader(io.StringIO(text))
    header = [name.strip() for name in (reader.fieldnames or [])]
    missing = [column for column in PROFILE_COLUMNS if column not in header]
    if "fullName" not in header and "name" not in header:
        missing.insert(0, "fullName")
    if missing:
        raise InvalidProfileError(f"CSV is missing columns: {', '.join(missing)}")

    profiles = []
    for row_number, raw_row in enumerate(reader, start=1):
        # Surplus cells land under the None key
        row = {key.strip(): (value or "").strip() for key, value in raw_row.items() if key is not None}
        payload = {column: row.get(column, "") for column in PROFILE_COLUMNS}
        payload["fullName"] = row.get("name") or row.get("fullName", "")
        try:
            profiles.append(ProfileRequest.model_validate(payload).to_profile())
        except ValidationError as e:
            raise InvalidProfileError(f"Row {row_number}: {_describe(e)}") from e

    if not profiles:
        raise InvalidProfileError("CSV file contains no data rows")

    return profiles


@router.post("/upload-csv", response_model=UploadResponse)
async def upload_csv(
    request: Request,
    file: UploadFile = File(..., description="CSV file of financial profiles"),
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    service: AssessmentService = Depends(get_assessment_service),
):
    """Score and store every row of an uploaded CSV; all rows or none"""
    start_time = time.time()
    request_id = get_request_id(request)

    content = await file.read()

    try:
        profiles = parse_profiles_csv(content)
    except InvalidProfileError as e:
        logging.warning(f"CSV rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    try:
        records = service.analyze_batch(account.id, profiles)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"CSV processing failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="CSV Processing Failed")

    duration_ms = (time.time() - start_time) * 1000
    for record in records:
        record_assessment(record.result.score, record.result.risk_tier, source="csv")
        log_assessment(
            request_id, account.id, record.result.score, record.result.risk_tier, duration_ms, step="csv_row_imported"
        )

    return UploadResponse(message="CSV Uploaded Successfully", imported=len(records))
