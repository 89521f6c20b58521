"""AWS Lambda handler and CLI for the roadrun.co.kr to Notion race sync."""
import json
import logging
import sys
import time
from typing import Any, Dict, List, Optional

from config import PipelineConfig, parse_years
from processor.models import SyncResult
from scraper.roadrun_scraper import RoadrunScraper
from storage.json_writer import write_results
from storage.notion_manager import NotionManager

# Attributes every LogRecord carries; anything else came from extra=
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {'statusCode': status_code, 'body': json.dumps(body, ensure_ascii=False)}


def run_sync(config: PipelineConfig, years: Optional[List[int]] = None) -> Dict[str, Any]:
    """
    Crawl the listing, extract every race, upsert it to Notion and save results.

    A failure on one race is logged and the run moves on; only a listing
    failure aborts the run.

    Args:
        config: Pipeline configuration
        years: Optional override for config.years

    Returns:
        Response dict with statusCode and summary statistics
    """
    logger = logging.getLogger(__name__)
    start_time = time.time()
    years = years or config.years

    # Instantiate components
    scraper = RoadrunScraper(timeout=config.timeout_seconds)
    notion_manager = NotionManager.from_config(config.notion)
    result = SyncResult()

    # Collect race numbers; without them there is nothing to sync
    try:
        source_ids = scraper.fetch_listing_ids(years)
    except Exception as e:
        logger.error(
            f"[FATAL] Failed to fetch race listing: {e}",
            extra={'error_type': type(e).__name__, 'years': years},
            exc_info=True
        )
        return _response(500, {
            'message': 'Failed to fetch race listing',
            'error': str(e),
            'error_type': type(e).__name__,
            'duration_seconds': round(time.time() - start_time, 2)
        })

    result.fetched = len(source_ids)
    races = []

    # Fetch, extract and upsert one race at a time
    for source_id in source_ids:
        try:
            race = scraper.fetch_race(source_id)
            races.append(race)
            result.record(notion_manager.upsert(race))
        except Exception as e:
            logger.error(
                f"[ERROR] detail no={source_id}: {e}",
                extra={'source_id': source_id, 'error_type': type(e).__name__}
            )
            result.failed += 1
            result.errors.append(f"no={source_id}: {type(e).__name__}: {e}")

    # Save every extracted race, including ones whose sync failed
    output_path = None
    try:
        output_path = write_results(races, config.output_path)
    except OSError as e:
        logger.error(f"Failed to write results to {config.output_path}: {e}", exc_info=True)
        result.errors.append(f"write {config.output_path}: {e}")

    # Log execution summary
    duration = time.time() - start_time
    logger.info(
        "Race sync completed",
        extra={
            'duration_seconds': round(duration, 2),
            'races_fetched': result.fetched,
            'races_created': result.created,
            'races_updated': result.updated,
            'races_skipped': result.skipped,
            'races_failed': result.failed
        }
    )

    return _response(200, {
        'message': 'Sync completed',
        'statistics': {
            'races_listed': result.fetched,
            'races_extracted': len(races),
            'races_created': result.created,
            'races_updated': result.updated,
            'races_skipped': result.skipped,
            'races_failed': result.failed,
            'duration_seconds': round(duration, 2)
        },
        'output_path': output_path,
        'errors': result.errors
    })


def event_years(event: Optional[Dict[str, Any]]) -> Optional[List[int]]:
    """
    Read the optional years override from a Lambda event.

    Accepts a list (``[2026, "2027"]``), a single year (``2026``) or a
    comma-separated string (``"2026,2027"``).

    Returns:
        List of years, or None when the event carries no override
    """
    if not event or not event.get('years'):
        return None

    value = event['years']
    if isinstance(value, str):
        return parse_years(value)
    if isinstance(value, int):
        return [value]
    return [int(year) for year in value]


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the race sync.

    Args:
        event: EventBridge event payload; may carry a "years" list
        context: Lambda context object

    Returns:
        Response dict with statusCode and summary statistics
    """
    config = PipelineConfig.from_env()
    setup_logging(config.log_level)

    years = event_years(event)

    logging.getLogger(__name__).info(
        "Lambda execution started",
        extra={'years': years or config.years, 'output_path': config.output_path}
    )
    return run_sync(config, years=years)


def main() -> int:
    """Run the sync once from the command line."""
    config = PipelineConfig.from_env()
    setup_logging(config.log_level)
    response = run_sync(config)
    return 0 if response['statusCode'] == 200 else 1


if __name__ == '__main__':
    sys.exit(main())
