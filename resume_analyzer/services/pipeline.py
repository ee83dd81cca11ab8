import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from resume_analyzer.models.analysis import AnalysisResult, ExtractedText, JobReference
from resume_analyzer.services.errors import AnalysisError, CorruptDocument, InvalidRequest
from resume_analyzer.services.extractor import PdfPlumberExtractor, TextExtractor
from resume_analyzer.services.generator import AnalysisInvoker
from resume_analyzer.services.jobs import JobDescriptionResolver, PlaceholderJobResolver
from resume_analyzer.services.parser import parse_reply
from resume_analyzer.services.prompts import EMPTY_RESUME_MARKER, build_prompt
from resume_analyzer.services.storage import DocumentStore

logger = logging.getLogger("uvicorn.error")

JOB_URL_REQUIRED = "Job URL is required"
RESUME_NOT_FOUND = "Resume file not found"


class Stage(str, Enum):
    VALIDATING = "Validating"
    STORING = "Storing"
    EXTRACTING = "Extracting"
    RESOLVING = "Resolving"
    PROMPTING = "Prompting"
    INVOKING = "Invoking"
    PARSING = "Parsing"
    CLEANING = "Cleaning"
    DONE = "Done"
    FAILED = "Failed"


TERMINAL_STAGES = (Stage.DONE, Stage.FAILED)


@dataclass
class PipelineRun:
    """Outcome and stage history of one request's trip through the pipeline."""

    stages: List[Stage] = field(default_factory=list)
    result: Optional[AnalysisResult] = None
    error: Optional[Exception] = None
    failed_at: Optional[Stage] = None

    @property
    def stage(self) -> Optional[Stage]:
        return self.stages[-1] if self.stages else None

    @property
    def succeeded(self) -> bool:
        return self.stage == Stage.DONE

    def advance(self, stage: Stage) -> None:
        if self.stage in TERMINAL_STAGES:
            raise RuntimeError(f"Run already finished in {self.stage.value}")
        self.stages.append(stage)

    def fail(self, error: Exception) -> None:
        if self.failed_at is None:
            self.failed_at = self.stage
        self.error = error
        self.advance(Stage.FAILED)


class AnalysisPipeline:
    """Runs validate -> store -> extract -> resolve -> prompt -> invoke -> parse.

    The stored upload is released on every path once it exists. Failures
    never escape ``run``; they are recorded on the returned PipelineRun with
    their original exception.
    """

    def __init__(
        self,
        store: DocumentStore,
        extractor: TextExtractor,
        resolver: JobDescriptionResolver,
        invoker: AnalysisInvoker,
        allow_empty_resume: bool = False,
    ):
        self._store = store
        self._extractor = extractor
        self._resolver = resolver
        self._invoker = invoker
        self._allow_empty_resume = allow_empty_resume

    async def run(
        self,
        file_bytes: Optional[bytes],
        original_name: Optional[str],
        job_url: Optional[str],
    ) -> PipelineRun:
        run = PipelineRun()
        try:
            run.advance(Stage.VALIDATING)
            job = self._validate(file_bytes, job_url)

            run.advance(Stage.STORING)
            with self._store.stored(file_bytes, original_name or "resume") as doc:
                try:
                    run.result = await self._analyze(run, doc, job)
                except Exception:
                    run.failed_at = run.stage
                    raise
                finally:
                    run.advance(Stage.CLEANING)
        except AnalysisError as e:
            run.fail(e)
            logger.error(f"Resume analysis failed in {run.failed_at.value} [{e.kind.value}]: {e}")
            return run
        except Exception as e:
            run.fail(e)
            logger.exception(f"Unexpected error during resume analysis in {run.failed_at.value}")
            return run

        run.advance(Stage.DONE)
        logger.info(f"Resume analysis completed with score {run.result.score}")
        return run

    @staticmethod
    def _validate(file_bytes: Optional[bytes], job_url: Optional[str]) -> JobReference:
        job_url = (job_url or "").strip()
        if not job_url:
            raise InvalidRequest(JOB_URL_REQUIRED)
        if not file_bytes:
            raise InvalidRequest(RESUME_NOT_FOUND)
        return JobReference(url=job_url)

    async def _analyze(self, run: PipelineRun, doc, job: JobReference) -> AnalysisResult:
        run.advance(Stage.EXTRACTING)
        data = self._store.read(doc)
        extracted = await run_in_threadpool(self._extractor.extract, data)
        logger.info(f"Extracted {len(extracted.content)} characters from {doc.original_name}")
        resume_text = self._resume_text(extracted)

        run.advance(Stage.RESOLVING)
        job_description = await self._resolver.resolve(job)

        run.advance(Stage.PROMPTING)
        prompt = build_prompt(resume_text, job_description.text)
        logger.debug(f"Analysis prompt ({prompt.version}):\n{prompt.text}")

        run.advance(Stage.INVOKING)
        reply = await self._invoker.invoke(prompt)

        run.advance(Stage.PARSING)
        return parse_reply(reply)

    def _resume_text(self, extracted: ExtractedText) -> str:
        if not extracted.is_empty:
            return extracted.content
        if not self._allow_empty_resume:
            raise CorruptDocument("No text could be extracted from the resume")
        logger.warning("Resume produced no text; continuing with an empty-resume marker")
        return EMPTY_RESUME_MARKER


def build_pipeline(settings) -> AnalysisPipeline:
    """Wire the pipeline with the Gemini invoker and the placeholder job resolver."""
    return AnalysisPipeline(
        store=DocumentStore(settings.UPLOAD_DIR),
        extractor=PdfPlumberExtractor(),
        resolver=PlaceholderJobResolver(),
        invoker=AnalysisInvoker.from_settings(settings),
        allow_empty_resume=settings.ALLOW_EMPTY_RESUME,
    )
