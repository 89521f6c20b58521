"""Configuration loaded from environment variables."""
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Mapping, Optional

from processor.models import StoreConfigurationError

NOTION_API_VERSION = "2022-06-28"
DEFAULT_OUTPUT_PATH = os.path.join("output", "roadrun.json")


def parse_years(value: Optional[str]) -> List[int]:
    """Parse a comma-separated year list, defaulting to the current year."""
    if not value or not value.strip():
        return [datetime.now().year]
    return [int(part) for part in value.split(',') if part.strip()]


@dataclass(frozen=True)
class NotionConfig:
    """Credentials and target database for the Notion sync."""
    token: Optional[str]
    database_id: Optional[str]
    api_version: str = NOTION_API_VERSION
    timeout: int = 30

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ, timeout: int = 30) -> "NotionConfig":
        return cls(
            token=environ.get('NOTION_TOKEN') or None,
            database_id=environ.get('NOTION_DB_ID') or None,
            timeout=timeout,
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.token and self.database_id)

    def validate(self) -> None:
        """
        Raises:
            StoreConfigurationError: If the token or database id is missing
        """
        missing = [
            name for name, value in (
                ('NOTION_TOKEN', self.token),
                ('NOTION_DB_ID', self.database_id),
            )
            if not value
        ]
        if missing:
            raise StoreConfigurationError(f"{', '.join(missing)} not set")


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for a single sync run."""
    years: List[int]
    timeout_seconds: int = 30
    log_level: str = 'INFO'
    output_path: str = DEFAULT_OUTPUT_PATH
    notion: NotionConfig = field(default_factory=lambda: NotionConfig(None, None))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "PipelineConfig":
        timeout_seconds = int(environ.get('TIMEOUT_SECONDS', '30'))
        return cls(
            years=parse_years(environ.get('RACE_YEARS')),
            timeout_seconds=timeout_seconds,
            log_level=environ.get('LOG_LEVEL', 'INFO'),
            output_path=environ.get('OUTPUT_PATH', DEFAULT_OUTPUT_PATH),
            notion=NotionConfig.from_env(environ, timeout=timeout_seconds),
        )
