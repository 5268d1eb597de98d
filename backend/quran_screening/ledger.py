from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .scoring import Classification, ScoreSet


class AssessmentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Localized calendar date of the save, e.g. 19 Oktober 2026")
    student_name: str
    class_name: str
    scores: ScoreSet
    classification: Classification


class HistoryLedger:
    """Append-only history of the assessments saved in one session."""

    def __init__(self) -> None:
        self._records: List[AssessmentRecord] = []

    def append(self, record: AssessmentRecord) -> None:
        self._records.append(record)

    def all(self) -> Tuple[AssessmentRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)
