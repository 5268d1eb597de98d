from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..quran_client import PassageSummary
from ..resolver import FALLBACK_TEXT, ReadingView
from ..session import ScreeningSession
from .auth import get_current_session


router = APIRouter(prefix="/reading", tags=["reading"])


class SelectionRequest(BaseModel):
    passage_id: int = Field(..., ge=1, description="Surah number")


class PassagesResponse(BaseModel):
    passages: List[PassageSummary]
    message: Optional[str] = None


@router.get("/passages", response_model=PassagesResponse)
async def list_passages(session: ScreeningSession = Depends(get_current_session)):
    passages = await session.reading.list_passages()
    # An unreachable API leaves the selection list empty
    return PassagesResponse(passages=passages, message=None if passages else FALLBACK_TEXT)


@router.put("/selection", response_model=ReadingView)
async def select_passage(req: SelectionRequest, session: ScreeningSession = Depends(get_current_session)):
    return session.reading.select(req.passage_id)


@router.get("", response_model=ReadingView)
async def get_reading(wait: bool = False, session: ScreeningSession = Depends(get_current_session)):
    """Current reading panel; ``wait=true`` holds the response until pending loads settle."""
    if wait:
        await session.reading.wait_idle()
    return session.reading.current()
