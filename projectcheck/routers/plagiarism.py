from fastapi import APIRouter, Depends, HTTPException
import logging

from projectcheck.dependencies.auth import verify_token
from projectcheck.dependencies.services import get_submission_store
from projectcheck.errors import InputError
from projectcheck.schemas.duplicate_schemas import AssignmentStats, ComprehensiveCheck, TextComparison, WebCheck
from projectcheck.schemas.submission_schemas import AssignmentCheckRequest, CompareTextsRequest, WebCheckRequest
from projectcheck.utils.duplicate_check import (
    assignment_stats,
    check_and_store,
    check_generic_originality,
    compare_texts,
)
from projectcheck.utils.repositories import SubmissionStore

router = APIRouter(prefix="/plagiarism", tags=["assignment-plagiarism"])
logger = logging.getLogger("projectcheck.routers.plagiarism")


@router.post("/check", response_model=ComprehensiveCheck)
async def check_assignment_text(
    body: AssignmentCheckRequest,
    token_data: dict = Depends(verify_token),
    store: SubmissionStore = Depends(get_submission_store),
):
    try:
        return await check_and_store(
            body.text,
            body.assignmentId,
            store,
            student_id=body.studentId or token_data.get("id"),
            student_name=body.studentName or token_data.get("name"),
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/compare", response_model=TextComparison)
async def compare_two_texts(body: CompareTextsRequest, token_data: dict = Depends(verify_token)):
    try:
        return compare_texts(body.text1, body.text2)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/web-check", response_model=WebCheck)
async def web_check(body: WebCheckRequest, token_data: dict = Depends(verify_token)):
    try:
        return check_generic_originality(body.text)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/stats/{assignment_id}", response_model=AssignmentStats)
async def get_assignment_stats(
    assignment_id: str,
    token_data: dict = Depends(verify_token),
    store: SubmissionStore = Depends(get_submission_store),
):
    return await assignment_stats(assignment_id, store)


@router.delete("/clear/{assignment_id}")
async def clear_assignment_submissions(
    assignment_id: str,
    token_data: dict = Depends(verify_token),
    store: SubmissionStore = Depends(get_submission_store),
):
    await store.clear(assignment_id)
    logger.info(f"🗑️  Cleared submissions for assignment {assignment_id}")
    return {"message": "Assignment submissions cleared successfully"}
