"""
PRD generation, editing and chat refinement.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import (
    CHAT_FALLBACK_RESPONSE,
    DOCUMENT_STATUS_ORDER,
    PRD_SECTIONS,
    DocumentStatus,
)
from pm_autopilot.core.exceptions import InvalidInputError, PRDNotFoundError, TaskNotFoundError
from pm_autopilot.core.logging import LogContext, get_logger
from pm_autopilot.core.security import generate_id
from pm_autopilot.domain.prd import ChatMessage, PRDDraft
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.llm.gemini_client import LLMClient
from pm_autopilot.llm.response_parser import extract_sections
from pm_autopilot.prompts.assembler import build_prd_chat_prompt, build_prd_generation_prompt
from pm_autopilot.services.transitions import check_forward_transition

logger = get_logger(__name__)


class PRDChatResult(BaseModel):
    """Reply to a chat turn and the sections it changed."""

    response: str = Field(..., description="Text to show the user")
    updated_sections: dict[str, str] = Field(
        default_factory=dict, description="Sections proposed by the model"
    )
    applied_sections: list[str] = Field(
        default_factory=list, description="Sections written to the PRD"
    )
    prd: PRDDraft


class PRDService:
    """
    Manages PRD drafts.

    ``version`` is stored as given and never bumped by edits.
    """

    def __init__(
        self,
        prd_repository: Any,
        task_repository: Any,
        llm_client: LLMClient,
    ) -> None:
        self.prd_repository = prd_repository
        self.task_repository = task_repository
        self.llm_client = llm_client

    async def list_prds(
        self,
        session: AuthSession,
        status: Optional[DocumentStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[PRDDraft]:
        filters = {"status": status} if status is not None else None
        return await self.prd_repository.list(filters, limit=limit, offset=offset)

    async def get_prd(self, session: AuthSession, prd_id: str) -> PRDDraft:
        prd = await self.prd_repository.get(prd_id)
        if prd is None:
            raise PRDNotFoundError(prd_id)
        return prd

    async def generate_from_task(self, session: AuthSession, task_id: str) -> PRDDraft:
        """
        Generate a PRD draft for a task.

        Sections the model did not produce are left empty; the raw text and
        the extraction strategy are kept in ``metadata``.

        Raises:
            TaskNotFoundError: If the task does not exist
            UpstreamServiceError: If the model call fails
        """
        task = await self.task_repository.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        with LogContext(user_id=session.user_id, task_id=task_id):
            text = await self.llm_client.generate(
                build_prd_generation_prompt(task), settings.gemini.prd_max_tokens
            )
            extraction = extract_sections(text)
            if not extraction.confident:
                logger.warning(
                    "PRD sections extracted without delimiters",
                    strategy=extraction.strategy,
                    found=sorted(extraction.sections),
                )

            prd = PRDDraft(
                id=generate_id("prd"),
                created_by=session.user_id,
                task_id=task.id,
                title=task.title,
                metadata={
                    "raw_text": text,
                    "extraction_strategy": extraction.strategy,
                    "extraction_confident": extraction.confident,
                },
                **extraction.sections,
            )
            await self.prd_repository.save(prd)

            logger.info("PRD generated", prd_id=prd.id, sections=sorted(extraction.sections))
        return prd

    async def save_prd(
        self,
        session: AuthSession,
        prd_id: str,
        title: Optional[str] = None,
        sections: Optional[dict[str, Optional[str]]] = None,
        output_url: Optional[str] = None,
    ) -> PRDDraft:
        """
        Save edits to a PRD's title, sections and output URL.

        Raises:
            PRDNotFoundError: If the PRD does not exist
            InvalidInputError: On a blank title or an unknown section name
        """
        fields: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise InvalidInputError("Title cannot be empty", field="title")
            fields["title"] = title.strip()
        for name, content in (sections or {}).items():
            if name not in PRD_SECTIONS:
                raise InvalidInputError(f"Unknown PRD section '{name}'", field="sections")
            fields[name] = content
        if output_url is not None:
            fields["output_url"] = output_url

        if not fields:
            return await self.get_prd(session, prd_id)

        updated = await self.prd_repository.update_fields(prd_id, **fields)
        if updated is None:
            raise PRDNotFoundError(prd_id)

        logger.info("PRD saved", prd_id=prd_id, fields=sorted(fields))
        return updated

    async def update_status(
        self,
        session: AuthSession,
        prd_id: str,
        status: DocumentStatus,
    ) -> PRDDraft:
        """
        Move a PRD forward through draft, review, approved and published.

        Raises:
            InvalidStatusTransitionError: If the move goes backwards
        """
        prd = await self.get_prd(session, prd_id)
        check_forward_transition("PRDDraft", DOCUMENT_STATUS_ORDER, prd.status, status)

        updated = await self.prd_repository.update_fields(prd_id, status=status)
        if updated is None:
            raise PRDNotFoundError(prd_id)

        logger.info("PRD status updated", prd_id=prd_id, status=status.value)
        return updated

    async def chat(
        self,
        session: AuthSession,
        prd_id: str,
        message: str,
        history: Sequence[ChatMessage] = (),
        apply_updates: bool = True,
    ) -> PRDChatResult:
        """
        Run one refinement turn for a PRD.

        Only delimited ``[UPDATED_SECTION:...]`` blocks count as section
        updates. With ``apply_updates`` the changed sections are saved.

        Raises:
            InvalidInputError: If the message is blank
            PRDNotFoundError: If the PRD does not exist
        """
        if not (message or "").strip():
            raise InvalidInputError("Message is required", field="message")

        prd = await self.get_prd(session, prd_id)

        with LogContext(user_id=session.user_id, prd_id=prd_id):
            text = await self.llm_client.generate(
                build_prd_chat_prompt(prd, message, history), settings.gemini.chat_max_tokens
            )
            extraction = extract_sections(text, allow_heuristics=False)

            applied: list[str] = []
            if apply_updates and extraction.sections:
                applied = prd.apply_sections(extraction.sections)
                if applied:
                    updated = await self.prd_repository.update_fields(
                        prd_id, **{name: extraction.sections[name] for name in applied}
                    )
                    if updated is None:
                        raise PRDNotFoundError(prd_id)
                    prd = updated

            logger.info(
                "PRD chat turn completed",
                proposed=sorted(extraction.sections),
                applied=applied,
            )

        return PRDChatResult(
            response=extraction.display_text or CHAT_FALLBACK_RESPONSE,
            updated_sections=extraction.sections,
            applied_sections=applied,
            prd=prd,
        )
