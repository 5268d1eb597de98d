from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional


MONTH_NAMES: Dict[str, List[str]] = {
    "id": [
        "Januari", "Februari", "Maret", "April", "Mei", "Juni",
        "Juli", "Agustus", "September", "Oktober", "November", "Desember",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}


def _month_names(locale: str) -> List[str]:
    # "id-ID" and "id_ID" resolve to "id"; unknown locales use English names
    language = (locale or "").replace("_", "-").split("-")[0].lower()
    return MONTH_NAMES.get(language, MONTH_NAMES["en"])


def format_long_date(day: date, locale: str = "id") -> str:
    """Day, full month name and year, e.g. ``19 Oktober 2026``."""
    month = _month_names(locale)[day.month - 1]
    return f"{day.day} {month} {day.year}"


def today_label(locale: str = "id", today: Optional[date] = None) -> str:
    return format_long_date(today or date.today(), locale)
