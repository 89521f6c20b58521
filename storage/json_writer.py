"""JSON persistence for a sync run's races."""
import json
import logging
import os
from typing import Iterable

from processor.models import RaceRecord

logger = logging.getLogger(__name__)


def write_results(races: Iterable[RaceRecord], path: str) -> str:
    """
    Write all races to a single UTF-8 JSON file.

    Args:
        races: Races produced by the run
        path: Output file path; parent directories are created

    Returns:
        The path written
    """
    data = [race.to_dict() for race in races]

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)

    logger.info(f"[DONE] Saved {len(data)} records to {path}")
    return path
