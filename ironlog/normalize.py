"""Normalization: export dates across locales and exercise-name cleanup for matching."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

# --- Export dates: "d MMM yyyy, HH:mm", e.g. "4 Feb 2025, 16:21" or "4 Şub 2025, 16:21" ---


class DateLocale(BaseModel):
    """Month spellings for one locale. Each month accepts any of its listed names."""
    name: str
    months: list[list[str]]  # 12 entries, January first

    @field_validator("months")
    @classmethod
    def _twelve_months(cls, v: list[list[str]]) -> list[list[str]]:
        if len(v) != 12:
            raise ValueError("months must list exactly 12 entries")
        return v

    def month_number(self, token: str) -> Optional[int]:
        t = token.strip().rstrip(".").casefold()
        for i, names in enumerate(self.months):
            if any(t == n.casefold() for n in names):
                return i + 1
        return None


TR_TR = DateLocale(name="tr_TR", months=[
    ["Oca", "Ocak"],
    ["Şub", "Şubat"],
    ["Mar", "Mart"],
    ["Nis", "Nisan"],
    ["May", "Mayıs"],
    ["Haz", "Haziran"],
    ["Tem", "Temmuz"],
    ["Ağu", "Ağustos"],
    ["Eyl", "Eylül"],
    ["Eki", "Ekim"],
    ["Kas", "Kasım"],
    ["Ara", "Aralık"],
])

EN_US = DateLocale(name="en_US", months=[
    ["Jan", "January"],
    ["Feb", "February"],
    ["Mar", "March"],
    ["Apr", "April"],
    ["May"],
    ["Jun", "June"],
    ["Jul", "July"],
    ["Aug", "August"],
    ["Sep", "September"],
    ["Oct", "October"],
    ["Nov", "November"],
    ["Dec", "December"],
])

EN_GB = DateLocale(name="en_GB", months=[
    ["Jan", "January"],
    ["Feb", "February"],
    ["Mar", "March"],
    ["Apr", "April"],
    ["May"],
    ["Jun", "June"],
    ["Jul", "July"],
    ["Aug", "August"],
    ["Sept", "Sep", "September"],
    ["Oct", "October"],
    ["Nov", "November"],
    ["Dec", "December"],
])

DEFAULT_DATE_LOCALES: list[DateLocale] = [TR_TR, EN_US, EN_GB]

_EXPORT_DATE = re.compile(r"^(\d{1,2})\s+([^\s\d,]+)\s+(\d{4}),?\s+(\d{1,2}):(\d{2})$")


def parse_export_date(value: str | None, locales: list[DateLocale] | None = None) -> Optional[datetime]:
    """Parse an export timestamp trying each locale in order. None if no locale accepts it."""
    if not value or not value.strip():
        return None
    m = _EXPORT_DATE.match(value.strip())
    if not m:
        return None
    day, month_token, year, hour, minute = m.groups()
    for locale in locales if locales is not None else DEFAULT_DATE_LOCALES:
        month = locale.month_number(month_token)
        if month is None:
            continue
        try:
            return datetime(int(year), month, int(day), int(hour), int(minute))
        except ValueError:
            return None
    return None


def format_export_date(value: datetime) -> str:
    """Render in the en_US export spelling: '4 Feb 2025, 16:21'."""
    return f"{value.day} {EN_US.months[value.month - 1][0]} {value.year}, {value:%H:%M}"


# --- Exercise names ---

# Equipment qualifiers exporters append to names; removed before comparing.
EQUIPMENT_QUALIFIERS: tuple[str, ...] = (
    "(bar)",
    "(barbell)",
    "(dumbbell)",
    "(ağırlıklı)",
    "(dambıl)",
    "(halter)",
)


def normalize_exercise_name(name: str) -> str:
    """Lowercase, drop equipment qualifiers, collapse whitespace."""
    s = (name or "").lower()
    for qualifier in EQUIPMENT_QUALIFIERS:
        s = s.replace(qualifier, " ")
    return re.sub(r"\s+", " ", s).strip()


def contains_phrase(haystack: str, phrase: str) -> bool:
    """True if phrase occurs in haystack on word boundaries ('row' is not inside 'narrow')."""
    if not phrase:
        return False
    return re.search(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)", haystack) is not None
