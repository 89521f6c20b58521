"""Unit tests for JSON result persistence."""
import json

from processor.models import RaceRecord
from storage.json_writer import write_results


def make_race(source_id, name):
    return RaceRecord(
        source_id=source_id,
        source_url=f'http://www.roadrun.co.kr/schedule/view.php?no={source_id}',
        name=name,
        start_at='2026-01-11 09:30',
        categories=('full',),
        location_full='서울 상암',
        entry_period_raw='',
        entry_start=None,
        entry_end=None,
        homepage=None
    )


def test_write_results_creates_directory(tmp_path):
    path = tmp_path / 'output' / 'roadrun.json'

    written = write_results([make_race('1', '서울 마라톤'), make_race('2', 'Night Run')], str(path))

    assert written == str(path)
    raw = path.read_text(encoding='utf-8')
    assert '서울 마라톤' in raw
    data = json.loads(raw)
    assert [item['source_id'] for item in data] == ['1', '2']
    assert data[0]['categories'] == ['full']
    assert data[0]['entry_start'] is None
    assert data[0]['source'] == 'roadrun'


def test_write_results_empty_run(tmp_path):
    path = tmp_path / 'roadrun.json'

    write_results([], str(path))

    assert json.loads(path.read_text(encoding='utf-8')) == []
