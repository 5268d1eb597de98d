from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..ledger import AssessmentRecord
from ..scoring import ScoreSet, average
from ..session import ScreeningSession
from .auth import get_current_session


router = APIRouter(prefix="/screening", tags=["screening"])


# Any JSON value; parse_numeric_or_zero decides what counts as a number
RawScore = Any


class StudentRequest(BaseModel):
    student_name: Optional[str] = None
    class_name: Optional[str] = None


class ScoresRequest(BaseModel):
    makhraj: RawScore = None
    tajwid: RawScore = None
    kelancaran: RawScore = None


class TestRequest(BaseModel):
    test: Optional[str] = None


class RecordPayload(BaseModel):
    date: str
    student_name: str
    class_name: str
    scores: ScoreSet
    classification: str
    classification_label: str


class HistoryResponse(BaseModel):
    total: int
    records: List[RecordPayload]


def _record_payload(record: AssessmentRecord) -> RecordPayload:
    return RecordPayload(
        date=record.date,
        student_name=record.student_name,
        class_name=record.class_name,
        scores=record.scores,
        classification=record.classification.value,
        classification_label=record.classification.label,
    )


def _form_payload(session: ScreeningSession) -> Dict[str, Any]:
    result = session.classification
    return {
        "student_name": session.student_name,
        "class_name": session.class_name,
        "scores": session.scores.model_dump(),
        "average": round(average(session.scores), 2),
        "selected_test": session.selected_test,
        "classification": result.value if result else None,
        "classification_label": result.label if result else None,
    }


@router.get("")
async def get_form(session: ScreeningSession = Depends(get_current_session)):
    return _form_payload(session)


@router.put("/student")
async def update_student(req: StudentRequest, session: ScreeningSession = Depends(get_current_session)):
    session.set_student(req.student_name, req.class_name)
    return _form_payload(session)


@router.put("/scores")
async def update_scores(req: ScoresRequest, session: ScreeningSession = Depends(get_current_session)):
    # Only fields present in the body are touched; unparseable values become 0
    session.set_scores(req.model_dump(exclude_unset=True))
    return _form_payload(session)


@router.put("/test")
async def select_test(req: TestRequest, session: ScreeningSession = Depends(get_current_session)):
    session.select_test(req.test)
    return _form_payload(session)


@router.post("/save", response_model=RecordPayload)
async def save_assessment(session: ScreeningSession = Depends(get_current_session)):
    return _record_payload(session.save())


@router.get("/history", response_model=HistoryResponse)
async def get_history(session: ScreeningSession = Depends(get_current_session)):
    records = [_record_payload(r) for r in session.history.all()]
    return HistoryResponse(total=len(records), records=records)
