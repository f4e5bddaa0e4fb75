"""
PRD endpoints: generation, editing, status, chat refinement and launch.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from pm_autopilot.api.deps import get_current_session, get_launch_service, get_prd_service
from pm_autopilot.core.constants import PRD_SECTIONS, DocumentStatus
from pm_autopilot.domain.launch import ServiceLaunch
from pm_autopilot.domain.prd import ChatMessage, PRDDraft
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.launch_service import LaunchService
from pm_autopilot.services.prd_service import PRDChatResult, PRDService

router = APIRouter(prefix="/prds")


class GeneratePRDRequest(BaseModel):
    """Generate a PRD from a task."""

    task_id: str


class SavePRDRequest(BaseModel):
    """Edits to a PRD. Omitted fields are left unchanged."""

    title: Optional[str] = None
    background: Optional[str] = None
    problem: Optional[str] = None
    solution: Optional[str] = None
    ux_requirements: Optional[str] = None
    edge_cases: Optional[str] = None
    output_url: Optional[str] = None


class PRDStatusRequest(BaseModel):
    status: DocumentStatus


class ChatRequest(BaseModel):
    """One chat turn about a PRD."""

    message: str = Field(..., description="User message")
    history: list[ChatMessage] = Field(default_factory=list, description="Earlier turns")
    apply_updates: bool = Field(default=True, description="Save proposed section updates")


@router.get("", response_model=list[PRDDraft])
async def list_prds(
    status_filter: Optional[DocumentStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AuthSession = Depends(get_current_session),
    prd_service: PRDService = Depends(get_prd_service),
) -> list[PRDDraft]:
    """List PRD drafts, newest first."""
    return await prd_service.list_prds(session, status=status_filter, limit=limit, offset=offset)


@router.post("/generate", response_model=PRDDraft, status_code=status.HTTP_201_CREATED)
async def generate_prd(
    request: GeneratePRDRequest,
    session: AuthSession = Depends(get_current_session),
    prd_service: PRDService = Depends(get_prd_service),
) -> PRDDraft:
    """Generate a PRD draft for a task."""
    return await prd_service.generate_from_task(session, request.task_id)


@router.get("/{prd_id}", response_model=PRDDraft)
async def get_prd(
    prd_id: str,
    session: AuthSession = Depends(get_current_session),
    prd_service: PRDService = Depends(get_prd_service),
) -> PRDDraft:
    """Get a PRD draft."""
    return await prd_service.get_prd(session, prd_id)


@router.patch("/{prd_id}", response_model=PRDDraft)
async def save_prd(
    prd_id: str,
    request: SavePRDRequest,
    session: AuthSession = Depends(get_current_session),
    prd_service: PRDService = Depends(get_prd_service),
) -> PRDDraft:
    """Save edits to a PRD's title, sections or output URL."""
    provided = request.model_dump(exclude_unset=True)
    sections = {name: provided[name] for name in PRD_SECTIONS if name in provided}
    return await prd_service.save_prd(
        session,
        prd_id,
        title=provided.get("title"),
        sections=sections,
        output_url=provided.get("output_url"),
    )


@router.patch("/{prd_id}/status", response_model=PRDDraft)
async def update_prd_status(
    prd_id: str,
    request: PRDStatusRequest,
    session: AuthSession = Depends(get_current_session),
    prd_service: PRDService = Depends(get_prd_service),
) -> PRDDraft:
    """Move a PRD forward in its review lifecycle."""
    return await prd_service.update_status(session, prd_id, request.status)


@router.post("/{prd_id}/chat", response_model=PRDChatResult)
async def chat_with_prd(
    prd_id: str,
    request: ChatRequest,
    session: AuthSession = Depends(get_current_session),
    prd_service: PRDService = Depends(get_prd_service),
) -> PRDChatResult:
    """Ask a question about a PRD or request section rewrites."""
    return await prd_service.chat(
        session,
        prd_id,
        request.message,
        history=request.history,
        apply_updates=request.apply_updates,
    )


@router.post("/{prd_id}/launch", response_model=ServiceLaunch)
async def get_or_create_launch(
    prd_id: str,
    session: AuthSession = Depends(get_current_session),
    launch_service: LaunchService = Depends(get_launch_service),
) -> ServiceLaunch:
    """Get the PRD's service launch, creating it on first use."""
    return await launch_service.get_or_create(session, prd_id)
