"""
Bikram Sambat (BS) date helpers.

The conversion is the approximate one the rental app has always used
(year + 57, month shifted by 8, same day). It is good enough for labelling
bills and readings with a Nepali date string; it is not a calendar library.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

NEPALI_MONTHS = [
    "बैशाख", "जेठ", "आषाढ", "श्रावण", "भाद्र", "आश्विन",
    "कार्तिक", "मंसिर", "पौष", "माघ", "फाल्गुन", "चैत्र",
]

# Sunday first
NEPALI_DAYS = [
    "आइतबार", "सोमबार", "मंगलबार", "बुधबार", "बिहिबार", "शुक्रबार", "शनिबार",
]

_ENGLISH_DIGITS = "0123456789"
_NEPALI_DIGITS = "०१२३४५६७८९"
_TO_NEPALI = str.maketrans(_ENGLISH_DIGITS, _NEPALI_DIGITS)
_TO_ENGLISH = str.maketrans(_NEPALI_DIGITS, _ENGLISH_DIGITS)

MIN_YEAR = 2000
MAX_YEAR = 2200


@dataclass(frozen=True)
class NepaliDate:
    year: int
    month: int
    day: int
    month_name: str
    day_name: Optional[str] = None  # unknown for parsed strings


def english_to_nepali_digits(value) -> str:
    return str(value).translate(_TO_NEPALI)


def nepali_to_english_digits(value: str) -> str:
    return value.translate(_TO_ENGLISH)


def to_nepali_date(d: date) -> NepaliDate:
    year = d.year + 57
    # Coarse mapping: BS year starts mid-April, so Baisakh lands on May here
    month = ((d.month - 1 + 8) % 12) + 1
    # Python weekday(): Monday=0; NEPALI_DAYS starts on Sunday
    day_name = NEPALI_DAYS[(d.weekday() + 1) % 7]
    return NepaliDate(
        year=year,
        month=month,
        day=d.day,
        month_name=NEPALI_MONTHS[month - 1],
        day_name=day_name,
    )


def format_nepali_date(nd: NepaliDate) -> str:
    """Input/storage form: zero padded YYYY-MM-DD with ASCII digits."""
    return f"{nd.year:04d}-{nd.month:02d}-{nd.day:02d}"


def nepali_date_string(d: date) -> str:
    return format_nepali_date(to_nepali_date(d))


def today_nepali() -> str:
    return nepali_date_string(date.today())


def is_valid_nepali_date(year: int, month: int, day: int) -> bool:
    # Month lengths vary by year in BS; only the coarse range is checked
    if year < MIN_YEAR or year > MAX_YEAR:
        return False
    if month < 1 or month > 12:
        return False
    if day < 1 or day > 32:
        return False
    return True


def parse_nepali_date(value: str) -> Optional[NepaliDate]:
    """Parse "YYYY-MM-DD" (ASCII or Devanagari digits). Returns None when invalid."""
    parts = nepali_to_english_digits(value.strip()).split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return None
    if not is_valid_nepali_date(year, month, day):
        return None
    return NepaliDate(
        year=year,
        month=month,
        day=day,
        month_name=NEPALI_MONTHS[month - 1],
    )


def to_english_date(year: int, month: int, day: int) -> date:
    """Inverse of to_nepali_date under the same approximation."""
    english_month = ((month - 1 - 8) % 12) + 1
    return date(year - 57, english_month, day)


def nepali_month_of(value: Optional[str]) -> Optional[str]:
    """Two digit month part of a stored BS date string, e.g. "2081-04-10" -> "04"."""
    if not value or "-" not in value:
        return None
    parts = value.split("-")
    return parts[1] if len(parts) >= 2 else None


def format_bilingual_date(d: date) -> str:
    """e.g. "14/08/2024 (२०८१/४/१४ बि.स.)"."""
    nd = to_nepali_date(d)
    nepali = "/".join(english_to_nepali_digits(v) for v in (nd.year, nd.month, nd.day))
    return f"{d.strftime('%d/%m/%Y')} ({nepali} बि.स.)"
