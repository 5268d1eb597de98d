from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


SCORE_FIELDS = ("makhraj", "tajwid", "kelancaran")
SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Leading decimal number, the way a lenient float parse reads "85abc" as 85
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class Classification(str, Enum):
    MUMTAZ = "Mumtaz"
    JAYYID_JIDDAN = "JayyidJiddan"
    JAYYID = "Jayyid"
    MAQUL = "Maqul"

    @property
    def label(self) -> str:
        return CLASSIFICATION_LABELS[self]


CLASSIFICATION_LABELS: Dict[Classification, str] = {
    Classification.MUMTAZ: "Mumtaz (Istimewa)",
    Classification.JAYYID_JIDDAN: "Jayyid Jiddan (Sangat Baik)",
    Classification.JAYYID: "Jayyid (Baik)",
    Classification.MAQUL: "Maqul (Perlu Bimbingan)",
}

# Lower bounds, checked top-down; anything below the last one is Maqul
THRESHOLDS = (
    (90.0, Classification.MUMTAZ),
    (75.0, Classification.JAYYID_JIDDAN),
    (60.0, Classification.JAYYID),
)


class ScoreSet(BaseModel):
    """Scores for the three screening criteria.

    Frozen so that a snapshot stored in the history can never be changed
    through the edit buffer it was copied from.
    """

    model_config = ConfigDict(frozen=True)

    makhraj: float = 0.0
    tajwid: float = 0.0
    kelancaran: float = 0.0

    def with_score(self, field: str, value: float) -> "ScoreSet":
        if field not in SCORE_FIELDS:
            raise ValueError(f"unknown score field: {field}")
        return self.model_copy(update={field: value})


def parse_numeric_or_zero(value: Any) -> float:
    """Coerce a score input to a float; anything unusable becomes 0.

    Accepts ints, floats and strings. ``None``, empty strings, booleans,
    non-numeric text and non-finite numbers all yield ``0.0``. Strings with
    a numeric prefix keep the prefix ("85abc" -> 85.0).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def clamp_score(value: float) -> float:
    return max(SCORE_MIN, min(value, SCORE_MAX))


def average(scores: ScoreSet) -> float:
    return (scores.makhraj + scores.tajwid + scores.kelancaran) / 3


def classify(scores: ScoreSet) -> Classification:
    # No clamping here: out-of-range values are averaged as given
    avg = average(scores)
    for lower_bound, result in THRESHOLDS:
        if avg >= lower_bound:
            return result
    return Classification.MAQUL
