"""Notion manager for race page upserts."""
import logging
from typing import Any, Dict, List, Optional

import requests

from config import NotionConfig
from processor.models import (
    RaceRecord,
    StoreConfigurationError,
    StoreRequestError,
    UpsertAction,
)

logger = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
KST_OFFSET = "+09:00"
UNTITLED = "(제목 없음)"


def page_title(race: RaceRecord) -> str:
    """Title stored in Notion; also the lookup key for upserts."""
    return race.name or UNTITLED


def build_properties(race: RaceRecord) -> Dict[str, Any]:
    """
    Map a RaceRecord onto the Notion database schema.

    Optional dates and the URL are only included when present.

    Args:
        race: RaceRecord to map

    Returns:
        Notion page properties payload
    """
    properties: Dict[str, Any] = {
        'Name': {
            'title': [{'text': {'content': page_title(race)}}],
        },
        'Location': {
            'rich_text': [{'text': {'content': race.location_full or ''}}],
        },
        'Course': {
            'multi_select': [{'name': category} for category in race.categories],
        },
    }

    if race.start_at:
        # "2026-01-11 09:30" -> "2026-01-11T09:30+09:00"
        properties['Race DateTime'] = {
            'date': {'start': race.start_at.replace(' ', 'T') + KST_OFFSET},
        }
    if race.entry_start:
        properties['Entry Start'] = {'date': {'start': race.entry_start}}
    if race.entry_end:
        properties['Entry End'] = {'date': {'start': race.entry_end}}
    if race.homepage:
        properties['URL'] = {'url': race.homepage}

    return properties


class NotionManager:
    """Manager for Notion database queries and page writes."""

    def __init__(self, config: NotionConfig, session: Optional[requests.Session] = None):
        """
        Initialize the Notion HTTP session.

        Args:
            config: Complete Notion configuration
            session: Optional requests session to reuse

        Raises:
            StoreConfigurationError: If the configuration is incomplete
        """
        config.validate()
        self.config = config
        self.database_id = config.database_id
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f"Bearer {config.token}",
            'Notion-Version': config.api_version,
            'Content-Type': 'application/json',
        })
        logger.info(f"Initialized NotionManager for database: {self.database_id}")

    @classmethod
    def from_config(cls, config: NotionConfig) -> "NotionManager":
        """
        Build a live manager, or a disabled one when configuration is missing.

        Args:
            config: Notion configuration, possibly incomplete

        Returns:
            NotionManager or DisabledNotionManager
        """
        try:
            return cls(config)
        except StoreConfigurationError as e:
            logger.warning(f"[NOTION] {e}, skip Notion sync")
            return DisabledNotionManager()

    def _request(self, method: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a JSON request to the Notion API.

        Raises:
            StoreRequestError: On a non-2xx status or a network failure
        """
        try:
            response = self.session.request(
                method,
                f"{NOTION_API_URL}{path}",
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise StoreRequestError(None, str(e)) from e

        if not response.ok:
            raise StoreRequestError(response.status_code, response.text)
        return response.json()

    def find_existing(self, name: str) -> List[Dict[str, Any]]:
        """
        Find pages whose Name title equals the given name exactly.

        Query failures are logged and treated as no match.

        Args:
            name: Race name

        Returns:
            Matching Notion pages in store order
        """
        payload = {
            'filter': {
                'property': 'Name',
                'title': {'equals': name},
            }
        }

        try:
            data = self._request('POST', f"/databases/{self.database_id}/query", payload)
        except StoreRequestError as e:
            # Treat as no match so the race still gets created
            logger.error(f"[NOTION] query failed ({e.status_code}): {e.body}")
            return []

        return data.get('results') or []

    def create_page(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/pages', {
            'parent': {'database_id': self.database_id},
            'properties': properties,
        })

    def update_page(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('PATCH', f"/pages/{page_id}", {'properties': properties})

    def upsert(self, race: RaceRecord) -> UpsertAction:
        """
        Create or update the Notion page for a race, keyed by name.

        When several pages share the name, the first one returned by the
        query is updated.

        Args:
            race: RaceRecord to sync

        Returns:
            UpsertAction.CREATED or UpsertAction.UPDATED

        Raises:
            StoreRequestError: If the create or update call fails or the
                Notion API cannot be reached
        """
        # Look up by the stored title so untitled races match themselves
        existing = self.find_existing(page_title(race))
        properties = build_properties(race)

        # Update the first match, otherwise create a new page
        if existing:
            self.update_page(existing[0]['id'], properties)
            logger.info(f"[NOTION] updated page for {race.name}")
            return UpsertAction.UPDATED

        self.create_page(properties)
        logger.info(f"[NOTION] created page for {race.name}")
        return UpsertAction.CREATED


class DisabledNotionManager(NotionManager):
    """No-op manager used when Notion credentials are not configured."""

    def __init__(self):
        self.config = None
        self.database_id = None
        self.session = None

    def find_existing(self, name: str) -> List[Dict[str, Any]]:
        return []

    def upsert(self, race: RaceRecord) -> UpsertAction:
        logger.debug(f"[NOTION] sync disabled, skipping {race.name}")
        return UpsertAction.SKIPPED
