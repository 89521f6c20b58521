"""Text normalizers for roadrun.co.kr detail page values."""
import logging
import re
from datetime import date
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r'\s+')
KOREAN_DATE_RE = re.compile(r'(\d{4})\s*년\s*(\d{1,2})\s*월\s*(\d{1,2})\s*일')
CLOCK_TIME_RE = re.compile(r'(\d{1,2}):(\d{2})')
MERIDIEM_TIME_RE = re.compile(r'(오전|오후)(\d{1,2})시(?:(\d{1,2})분)?')
HOUR_ONLY_RE = re.compile(r'(\d{1,2})시')
DISTANCE_RE = re.compile(r'(\d+)\s*k', re.IGNORECASE)

FULL_MARKER = '풀'
HALF_MARKER = '하프'
RANGE_DELIMITER = '~'


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim the ends."""
    return WHITESPACE_RE.sub(' ', text).strip()


def parse_korean_date(text: str) -> Optional[date]:
    """
    Parse a Korean calendar date such as "2026년 1월 11일".

    Args:
        text: Free text that may contain a date anywhere

    Returns:
        date object, or None if no date is present or the date is invalid
    """
    match = KOREAN_DATE_RE.search(text)
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        logger.debug(f"Ignoring invalid calendar date: {match.group(0)}")
        return None


def format_date(value: Optional[date]) -> Optional[str]:
    """Format a date as YYYY-MM-DD, passing None through."""
    if value is None:
        return None
    return value.strftime('%Y-%m-%d')


def parse_time_of_day(text: str) -> Optional[str]:
    """
    Extract a 24-hour HH:MM time from free text.

    Recognized forms, tried in order:
        "09:00", "출발시간: 9:00"
        "오전 9시", "오후 3시30분"
        "9시"

    Args:
        text: Free text such as a date/time value cell

    Returns:
        Zero-padded "HH:MM" string or None if no time is found
    """
    compact = WHITESPACE_RE.sub('', text)

    match = CLOCK_TIME_RE.search(compact)
    if match:
        hour, minute = match.groups()
        return f"{int(hour):02d}:{minute}"

    match = MERIDIEM_TIME_RE.search(compact)
    if match:
        meridiem, hour_text, minute_text = match.groups()
        hour = int(hour_text)
        minute = int(minute_text) if minute_text else 0

        if meridiem == '오후' and 0 < hour < 12:
            hour += 12
        elif meridiem == '오전' and hour == 12:
            hour = 0

        return f"{hour:02d}:{minute:02d}"

    match = HOUR_ONLY_RE.search(compact)
    if match:
        return f"{int(match.group(1)):02d}:00"

    return None


def _normalize_category(segment: str) -> str:
    if FULL_MARKER in segment:
        return 'full'
    if HALF_MARKER in segment:
        return 'half'

    match = DISTANCE_RE.search(segment)
    if match:
        return f"{match.group(1)}k"

    return segment


def normalize_categories(text: str) -> List[str]:
    """
    Normalize a comma-separated course list.

    "풀코스, 하프, 10k, 5K" becomes ["full", "half", "10k", "5k"]. Order and
    duplicates are preserved; unknown segments pass through trimmed.
    """
    segments = (segment.strip() for segment in text.split(','))
    return [_normalize_category(segment) for segment in segments if segment]


def split_entry_period(text: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split an entry period like "2025년12월1일 ~ 2025년12월31일".

    Each endpoint is parsed independently, so one bad side does not
    discard the other.

    Returns:
        Tuple of (entry_start, entry_end) as YYYY-MM-DD strings or None
    """
    if not text or RANGE_DELIMITER not in text:
        return None, None

    parts = text.split(RANGE_DELIMITER)
    start_raw = collapse_whitespace(parts[0])
    end_raw = collapse_whitespace(parts[1])

    return (
        format_date(parse_korean_date(start_raw)),
        format_date(parse_korean_date(end_raw)),
    )
