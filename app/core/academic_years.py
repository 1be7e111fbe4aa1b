"""
Academic year utilities
Format: YYYY/YYYY (e.g. 2024/2025). An academic year runs September to August.
"""

import re
from datetime import date
from typing import Dict, List, Optional, Tuple

ACADEMIC_YEAR_PATTERN = re.compile(r"^(\d{4})/(\d{4})$")
START_MONTH = 9
PAST_YEARS = 5


def _start_year(today: Optional[date] = None) -> int:
    today = today or date.today()
    return today.year if today.month >= START_MONTH else today.year - 1


def format_academic_year(start_year: int) -> str:
    return f"{start_year}/{start_year + 1}"


def current_academic_year(today: Optional[date] = None) -> str:
    return format_academic_year(_start_year(today))


def academic_years(include_future: bool = False, today: Optional[date] = None) -> List[str]:
    """Past five academic years plus the current one, oldest first."""
    start = _start_year(today)
    years = [format_academic_year(start - i) for i in range(PAST_YEARS, -1, -1)]
    if include_future:
        years.append(format_academic_year(start + 1))
    return years


def academic_year_options(include_future: bool = False, today: Optional[date] = None) -> List[Dict[str, str]]:
    return [{"value": y, "label": y} for y in academic_years(include_future, today)]


def parse_academic_year(academic_year: str) -> Tuple[int, int]:
    match = ACADEMIC_YEAR_PATTERN.match(academic_year or "")
    if not match:
        raise ValueError(f"Invalid academic year: {academic_year!r}, expected YYYY/YYYY")
    return int(match.group(1)), int(match.group(2))


def is_valid_academic_year(academic_year: str) -> bool:
    try:
        start, end = parse_academic_year(academic_year)
    except ValueError:
        return False
    return end == start + 1


def is_past_academic_year(academic_year: str, today: Optional[date] = None) -> bool:
    start, _ = parse_academic_year(academic_year)
    return start < _start_year(today)


def is_current_academic_year(academic_year: str, today: Optional[date] = None) -> bool:
    return academic_year == current_academic_year(today)
