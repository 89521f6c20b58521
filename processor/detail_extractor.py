"""Detail page extractor for roadrun.co.kr race announcements."""
import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from processor.models import ExtractionError, RaceRecord
from processor.normalizers import (
    collapse_whitespace,
    format_date,
    normalize_categories,
    parse_korean_date,
    parse_time_of_day,
    split_entry_period,
)

logger = logging.getLogger(__name__)

URL_RE = re.compile(r'https?://\S+')
DEFAULT_TIME = '00:00'


class RaceLabel(str, Enum):
    """Row labels recognized on a detail page, in match priority order."""
    NAME = '대회명'
    DATE_TIME = '대회일시'
    CATEGORY = '대회종목'
    REGION = '대회지역'
    VENUE = '대회장소'
    ENTRY_PERIOD = '접수기간'
    HOMEPAGE = '홈페이지'


# Raw value slot filled by each label
LABEL_FIELDS: Dict[RaceLabel, str] = {
    RaceLabel.NAME: 'name',
    RaceLabel.DATE_TIME: 'date_raw',
    RaceLabel.CATEGORY: 'category_raw',
    RaceLabel.REGION: 'region',
    RaceLabel.VENUE: 'venue',
    RaceLabel.ENTRY_PERIOD: 'entry_raw',
    RaceLabel.HOMEPAGE: 'homepage',
}

if set(LABEL_FIELDS) != set(RaceLabel):
    raise RuntimeError("LABEL_FIELDS must map every RaceLabel")


def match_label(label_text: str) -> Optional[RaceLabel]:
    """Return the first recognized label contained in the cell text."""
    for label in RaceLabel:
        if label.value in label_text:
            return label
    return None


def rows_from_html(html_content: str) -> List[List[Tag]]:
    """
    Model a detail page as table rows of cells.

    Args:
        html_content: Decoded detail page HTML

    Returns:
        List of rows, each a list of td elements
    """
    soup = BeautifulSoup(html_content, 'html.parser')
    return [row.find_all('td') for row in soup.select('table tr')]


def extract_homepage(cell: Tag, value_text: str) -> Optional[str]:
    """Prefer an anchor target in the cell, else the first URL in its text."""
    anchor = cell.find('a')
    if anchor is not None and anchor.get('href'):
        return anchor['href']

    match = URL_RE.search(value_text)
    if match:
        return match.group(0)
    return None


def extract_race(
    rows: Sequence[Sequence[Tag]],
    source_id: str,
    source_url: str,
) -> RaceRecord:
    """
    Build a RaceRecord from the label/value rows of a detail page.

    The first cell of a row is the label and the last cell is the value.
    Rows with fewer than two cells or unrecognized labels are skipped, and
    when a label repeats the last row wins.

    Args:
        rows: Table rows as sequences of cells
        source_id: roadrun.co.kr race number
        source_url: Detail page URL

    Returns:
        RaceRecord

    Raises:
        ExtractionError: If the document has no rows at all
    """
    if not rows:
        raise ExtractionError(f"No table rows found in detail page {source_url}")

    # Raw values per field; later rows overwrite earlier ones
    raw: Dict[str, Optional[str]] = {
        'name': '',
        'date_raw': '',
        'category_raw': '',
        'region': '',
        'venue': '',
        'entry_raw': '',
        'homepage': None,
    }

    for cells in rows:
        if len(cells) < 2:
            continue

        label_text = collapse_whitespace(cells[0].get_text())
        if not label_text:
            continue

        # Skip rows whose label is not recognized
        label = match_label(label_text)
        if label is None:
            continue

        # Value is the last cell; some rows have a spacer cell in between
        value_cell = cells[-1]
        value_text = collapse_whitespace(value_cell.get_text())

        if label is RaceLabel.HOMEPAGE:
            # Keep an earlier homepage when this row has no URL
            homepage = extract_homepage(value_cell, value_text)
            if homepage:
                raw['homepage'] = homepage
        else:
            raw[LABEL_FIELDS[label]] = value_text

    # Normalize raw values into the record
    entry_start, entry_end = split_entry_period(raw['entry_raw'])

    return RaceRecord(
        source_id=source_id,
        source_url=source_url,
        name=raw['name'],
        start_at=_combine_start(raw['date_raw']),
        categories=tuple(normalize_categories(raw['category_raw'])),
        location_full=' '.join(part for part in (raw['region'], raw['venue']) if part),
        entry_period_raw=raw['entry_raw'],
        entry_start=entry_start,
        entry_end=entry_end,
        homepage=raw['homepage'],
    )


def _combine_start(date_raw: str) -> Optional[str]:
    if not date_raw:
        return None

    race_date = parse_korean_date(date_raw)
    if race_date is None:
        return None

    time_text = parse_time_of_day(date_raw) or DEFAULT_TIME
    return f"{format_date(race_date)} {time_text}"


def parse_detail_html(html_content: str, source_id: str, source_url: str) -> RaceRecord:
    """Parse detail page HTML into a RaceRecord."""
    return extract_race(rows_from_html(html_content), source_id, source_url)
