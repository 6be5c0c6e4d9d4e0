from fastapi import APIRouter, Depends, HTTPException
import logging

from projectcheck.dependencies.auth import verify_token
from projectcheck.dependencies.services import get_corpus_source, get_pipeline, get_report_repository
from projectcheck.errors import InputError, PipelineFailure
from projectcheck.schemas.plagiarism_schemas import PlagiarismReport, StoredReport
from projectcheck.schemas.submission_schemas import ProjectCheckRequest, Submission
from projectcheck.utils.plagiarism_pipeline import PlagiarismPipeline
from projectcheck.utils.repositories import CorpusSource, ReportRepository

router = APIRouter(prefix="/projects", tags=["project-plagiarism"])
logger = logging.getLogger("projectcheck.routers.projects")


@router.post("/{submission_id}/check-plagiarism", response_model=PlagiarismReport)
async def check_project_plagiarism(
    submission_id: str,
    body: ProjectCheckRequest,
    token_data: dict = Depends(verify_token),
    pipeline: PlagiarismPipeline = Depends(get_pipeline),
    corpus_source: CorpusSource = Depends(get_corpus_source),
    reports: ReportRepository = Depends(get_report_repository),
):
    logger.info(f"📥 Plagiarism check requested for submission {submission_id} by {token_data.get('id')}")
    submission = Submission(
        title=body.title,
        abstract=body.abstract,
        fullText=body.fullText,
        submitterId=body.submitterId,
        submitterName=body.submitterName,
    )
    try:
        return await pipeline.check_and_record(submission_id, submission, corpus_source, reports)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PipelineFailure as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{submission_id}/plagiarism-report", response_model=StoredReport)
async def get_plagiarism_report(
    submission_id: str,
    token_data: dict = Depends(verify_token),
    reports: ReportRepository = Depends(get_report_repository),
):
    stored = await reports.get_report(submission_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"No plagiarism check found for submission {submission_id}")
    return stored
