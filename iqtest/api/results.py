from typing import Optional
import logging
import os

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from iqtest.core.config import settings
from iqtest.db.session import get_db
from iqtest.engine.question_bank import QuestionBank, get_question_bank
from iqtest.reports.report_builder import build_result_report
from iqtest.reports.report_docx import generate_report_docx
from iqtest.schemas.result import ResultList, ResultSubmission, ScoredResultOut
from iqtest.services.results import (
    ResultNotFoundError,
    ResultService,
    ResultStorageError,
    serialize_result,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/results", tags=["Results"])

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


# -------------------------------------------------
# POST: Submit answers
# -------------------------------------------------

@router.post(
    "",
    response_model=ScoredResultOut,
    status_code=status.HTTP_201_CREATED,
)
def submit_result(
    payload: ResultSubmission,
    db: Session = Depends(get_db),
    bank: QuestionBank = Depends(get_question_bank),
):
    try:
        score = ResultService.score_submission(bank, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    try:
        result = ResultService.create_result(db, score, user_id=payload.user_id)
    except ResultStorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    return serialize_result(result)


# -------------------------------------------------
# GET: Result history
# -------------------------------------------------

@router.get("", response_model=ResultList)
def list_results(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    try:
        results = ResultService.list_results(db, user_id=user_id)
    except ResultStorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    return {"results": [serialize_result(r) for r in results]}


# -------------------------------------------------
# GET: Single result (JSON or DOCX report)
# -------------------------------------------------

@router.get("/{result_id}", response_model=ScoredResultOut)
def get_result(
    result_id: str,
    download: bool = Query(False, description="Set true to download the report"),
    db: Session = Depends(get_db),
):
    try:
        result = ResultService.get_result(db, result_id)
    except ResultNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Result not found")
    except ResultStorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    data = serialize_result(result)

    if not download:
        return data

    # Results are immutable, so one file per id is reused across downloads
    os.makedirs(settings.REPORTS_DIR, exist_ok=True)
    file_path = os.path.join(settings.REPORTS_DIR, f"iq_test_report_{result.id}.docx")
    if not os.path.exists(file_path):
        generate_report_docx(build_result_report(data), file_path)
        logger.info(f"Generated report for result {result.id}")

    return FileResponse(
        path=file_path,
        filename="iq-test-results.docx",
        media_type=DOCX_MEDIA_TYPE,
    )
