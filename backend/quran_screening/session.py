from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional

from .dates import today_label
from .ledger import AssessmentRecord, HistoryLedger
from .quran_client import QuranClient
from .resolver import ReadingMaterialResolver
from .scoring import SCORE_FIELDS, Classification, ScoreSet, clamp_score, classify, parse_numeric_or_zero
from .settings import settings


logger = logging.getLogger(__name__)


class ScreeningSession:
    """State of one instructor's screening dashboard.

    The only writer of its edit buffer, history and reading resolver.
    """

    def __init__(
        self,
        instructor: str,
        client: QuranClient,
        *,
        session_id: Optional[str] = None,
        locale: Optional[str] = None,
        clock: Callable[[], date] = date.today,
        expires_at: Optional[datetime] = None,
    ) -> None:
        self.session_id: str = session_id or uuid.uuid4().hex
        self.instructor: str = instructor
        self.locale: str = locale or settings.screening_locale
        self._clock = clock
        # Matches the login token expiry; None never expires
        self.expires_at: Optional[datetime] = expires_at
        self.student_name: str = ""
        self.class_name: str = ""
        self.scores: ScoreSet = ScoreSet()
        self.selected_test: Optional[str] = None
        self.classification: Optional[Classification] = None
        self.history = HistoryLedger()
        self.reading = ReadingMaterialResolver(client)

    def set_student(self, student_name: Optional[str] = None, class_name: Optional[str] = None) -> None:
        if student_name is not None:
            self.student_name = student_name
        if class_name is not None:
            self.class_name = class_name

    def set_score(self, field: str, raw: Any) -> ScoreSet:
        self.scores = self.scores.with_score(field, clamp_score(parse_numeric_or_zero(raw)))
        return self.scores

    def set_scores(self, raw: Dict[str, Any]) -> ScoreSet:
        for field in SCORE_FIELDS:
            if field in raw:
                self.set_score(field, raw[field])
        return self.scores

    def select_test(self, test: Optional[str]) -> None:
        self.selected_test = test or None

    def save(self, today: Optional[date] = None) -> AssessmentRecord:
        result = classify(self.scores)
        record = AssessmentRecord(
            date=today_label(self.locale, today or self._clock()),
            student_name=self.student_name,
            class_name=self.class_name,
            scores=self.scores,
            classification=result,
        )
        self.history.append(record)
        self.classification = result
        logger.info("Session %s saved %s for %r (%d records)", self.session_id, result.value, record.student_name, len(self.history))
        # Clear the form; the classification stays until the next save
        self.student_name = ""
        self.class_name = ""
        self.scores = ScoreSet()
        return record

    def expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    async def aclose(self) -> None:
        await self.reading.aclose()


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: Dict[str, ScreeningSession] = {}

    def create(
        self,
        instructor: str,
        client: QuranClient,
        *,
        expires_at: Optional[datetime] = None,
    ) -> ScreeningSession:
        session = ScreeningSession(instructor, client, expires_at=expires_at)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[ScreeningSession]:
        session = self._sessions.get(session_id)
        if session is None or session.expired():
            return None
        return session

    async def prune(self, now: Optional[datetime] = None) -> int:
        """Drop every session whose login has expired; returns how many."""
        stale = [sid for sid, s in self._sessions.items() if s.expired(now)]
        for session_id in stale:
            await self.drop(session_id)
        if stale:
            logger.info("Pruned %d expired screening sessions", len(stale))
        return len(stale)

    async def drop(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.aclose()
        return True

    async def clear(self) -> None:
        for session_id in list(self._sessions):
            await self.drop(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
