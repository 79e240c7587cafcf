"""Writing assist routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..schemas import AssistDraftResponse, User
from ..services import draft_post, get_current_user

router = APIRouter(prefix="/assist", tags=["assist"])


@router.post("/draft-post", response_model=AssistDraftResponse)
async def draft_post_endpoint(current_user: User = Depends(get_current_user)) -> AssistDraftResponse:
    content, generated = await run_in_threadpool(draft_post, current_user)
    return AssistDraftResponse(content=content, generated=generated)
