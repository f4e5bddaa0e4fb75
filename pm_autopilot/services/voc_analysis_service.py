"""
Customer feedback (VOC) analysis pipeline.

Spreadsheet link -> feedback rows -> analysis prompt -> model -> feedback
source plus task candidates derived from the recommended features.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import FeedbackSourceStatus
from pm_autopilot.core.logging import LogContext, get_logger
from pm_autopilot.core.security import generate_id
from pm_autopilot.domain.base import utc_now
from pm_autopilot.domain.feedback import FeedbackEntry, FeedbackSource
from pm_autopilot.domain.task import TaskCandidate
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.ingestion.sheet_reader import SheetReader
from pm_autopilot.llm.gemini_client import LLMClient
from pm_autopilot.llm.response_parser import extract_structured
from pm_autopilot.prompts.assembler import build_voc_analysis_prompt
from pm_autopilot.services.ranking import feature_task_fields

logger = get_logger(__name__)


class VOCAnalysisResult(BaseModel):
    """Outcome of one analysis run."""

    feedback_source: FeedbackSource
    feedback_count: int = Field(..., ge=0)
    analysis_text: str = Field(..., description="Raw analysis text from the model")
    tasks: list[TaskCandidate] = Field(default_factory=list)
    structured: Optional[dict[str, Any]] = Field(
        default=None, description="Parsed analysis object, when the response contained one"
    )
    structured_error: Optional[str] = Field(default=None)


class VOCAnalysisService:
    """
    Runs the feedback analysis pipeline.

    The raw analysis is always kept on the feedback source. Task derivation
    is best-effort: when the response carries no usable JSON the run still
    succeeds with no tasks. Nothing is rolled back if a later write fails.
    """

    def __init__(
        self,
        sheet_reader: SheetReader,
        llm_client: LLMClient,
        feedback_repository: Any,
        task_repository: Any,
        max_features: Optional[int] = None,
    ) -> None:
        self.sheet_reader = sheet_reader
        self.llm_client = llm_client
        self.feedback_repository = feedback_repository
        self.task_repository = task_repository
        self.max_features = max_features or settings.sheets.max_recommended_features

    async def analyze(self, session: AuthSession, spreadsheet_url: str) -> VOCAnalysisResult:
        """
        Analyze the feedback in a shared spreadsheet.

        Raises:
            InvalidSourceError: If the link is not a spreadsheet link
            AccessDeniedError: If the sheet is not publicly readable
            EmptyResultError: If the sheet has no usable rows
            UpstreamServiceError: If the fetch, model call or a write fails
        """
        spreadsheet_url = (spreadsheet_url or "").strip()

        with LogContext(user_id=session.user_id):
            entries = await self.sheet_reader.read(spreadsheet_url)

            prompt = build_voc_analysis_prompt(entries, self.max_features)
            analysis_text = await self.llm_client.generate(
                prompt, settings.gemini.analysis_max_tokens
            )

            source = await self._record_source(session, spreadsheet_url, entries, analysis_text)

            extraction = extract_structured(analysis_text)
            tasks: list[TaskCandidate] = []
            if extraction.ok:
                tasks = await self._create_tasks(session, source, extraction.data)
            else:
                logger.warning(
                    "Analysis response had no structured data",
                    source_id=source.id,
                    error=extraction.error,
                )

            logger.info(
                "VOC analysis completed",
                source_id=source.id,
                feedback_count=len(entries),
                tasks_created=len(tasks),
            )

        return VOCAnalysisResult(
            feedback_source=source,
            feedback_count=len(entries),
            analysis_text=analysis_text,
            tasks=tasks,
            structured=extraction.data,
            structured_error=extraction.error,
        )

    async def _record_source(
        self,
        session: AuthSession,
        spreadsheet_url: str,
        entries: list[FeedbackEntry],
        analysis_text: str,
    ) -> FeedbackSource:
        """Create the source for a new URL, or refresh the existing one."""
        now = utc_now()
        description = f"Automatic VOC analysis ({len(entries)} feedback entries)"

        existing = await self.feedback_repository.get_by_url(spreadsheet_url)
        if existing is not None:
            return await self.feedback_repository.update_fields(
                existing.id,
                status=FeedbackSourceStatus.ACTIVE,
                description=description,
                last_analyzed_at=now,
                feedback_count=len(entries),
                last_analysis=analysis_text,
            )

        source = FeedbackSource(
            id=generate_id("feedback_source"),
            created_by=session.user_id,
            name=f"VOC analysis - {now.date().isoformat()}",
            source_url=spreadsheet_url,
            description=description,
            status=FeedbackSourceStatus.ACTIVE,
            last_analyzed_at=now,
            feedback_count=len(entries),
            last_analysis=analysis_text,
        )
        return await self.feedback_repository.save(source)

    async def _create_tasks(
        self,
        session: AuthSession,
        source: FeedbackSource,
        data: dict[str, Any],
    ) -> list[TaskCandidate]:
        features = data.get("recommended_features")
        if not isinstance(features, list):
            logger.warning("Analysis has no recommended_features list", source_id=source.id)
            return []

        tasks = []
        for fields in feature_task_fields(features, self.max_features):
            task = TaskCandidate(
                id=generate_id("task"),
                created_by=session.user_id,
                source_feedback_id=source.id,
                **fields,
            )
            tasks.append(await self.task_repository.save(task))
        return tasks
