import logging
from functools import lru_cache
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from resume_analyzer.models.analysis import AnalysisResult, ErrorResponse
from resume_analyzer.services.config import Settings
from resume_analyzer.services.errors import AnalysisError, ErrorKind
from resume_analyzer.services.pipeline import (
    RESUME_NOT_FOUND,
    AnalysisPipeline,
    PipelineRun,
    build_pipeline,
)

logger = logging.getLogger("uvicorn.error")

GENERIC_ERROR = "Something went wrong"
ERROR_KIND_HEADER = "X-Error-Kind"

# Intake failures the client can fix by resubmitting the file.
_RESUME_INTAKE_KINDS = (ErrorKind.STORAGE_FAILURE, ErrorKind.NOT_FOUND)

router = APIRouter(tags=["Resume Analysis"])


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@lru_cache()
def get_pipeline() -> AnalysisPipeline:
    return build_pipeline(get_settings())


def _error_response(status_code: int, message: str, kind: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers={ERROR_KIND_HEADER: kind},
    )


def run_to_response(run: PipelineRun) -> JSONResponse:
    """Map a finished pipeline run onto the public response contract."""
    if run.succeeded:
        return JSONResponse(status_code=200, content=run.result.model_dump())

    error = run.error
    if not isinstance(error, AnalysisError):
        return _error_response(500, GENERIC_ERROR, "internal")
    if error.kind == ErrorKind.INVALID_REQUEST:
        return _error_response(400, str(error), error.kind.value)
    if error.kind in _RESUME_INTAKE_KINDS:
        return _error_response(400, RESUME_NOT_FOUND, error.kind.value)
    return _error_response(500, GENERIC_ERROR, error.kind.value)


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_resume(
    resume: Union[UploadFile, str, None] = File(None),
    jobUrl: Optional[str] = Form(None),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
):
    logger.info("Start resume analysis")

    resume_bytes = None
    filename = None
    # A plain form value under `resume` is not a file upload.
    if isinstance(resume, str):
        logger.warning("Resume field arrived as a plain form value, not a file")
    elif resume is not None and resume.filename:
        resume_bytes = await resume.read()
        filename = resume.filename
        logger.info(f"Resume file read: {len(resume_bytes)} bytes, content_type={resume.content_type}, filename={filename}")

    run = await pipeline.run(resume_bytes, filename, jobUrl)
    return run_to_response(run)
