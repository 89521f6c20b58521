"""Unit tests for configuration loading."""
from datetime import datetime

import pytest

from config import DEFAULT_OUTPUT_PATH, NotionConfig, PipelineConfig, parse_years
from processor.models import StoreConfigurationError


class TestParseYears:
    """Test cases for parse_years."""

    def test_comma_separated(self):
        assert parse_years("2026, 2027") == [2026, 2027]

    def test_defaults_to_current_year(self):
        assert parse_years(None) == [datetime.now().year]
        assert parse_years(" ") == [datetime.now().year]


class TestNotionConfig:
    """Test cases for NotionConfig."""

    def test_from_env(self):
        config = NotionConfig.from_env({'NOTION_TOKEN': 'tok', 'NOTION_DB_ID': 'db'})
        assert config.token == 'tok'
        assert config.database_id == 'db'
        assert config.is_complete
        config.validate()

    def test_empty_values_are_missing(self):
        config = NotionConfig.from_env({'NOTION_TOKEN': '', 'NOTION_DB_ID': 'db'})
        assert config.token is None
        assert not config.is_complete

    def test_validate_names_missing_values(self):
        with pytest.raises(StoreConfigurationError) as exc_info:
            NotionConfig(token=None, database_id=None).validate()

        assert 'NOTION_TOKEN' in str(exc_info.value)
        assert 'NOTION_DB_ID' in str(exc_info.value)


class TestPipelineConfig:
    """Test cases for PipelineConfig."""

    def test_defaults(self):
        config = PipelineConfig.from_env({})

        assert config.years == [datetime.now().year]
        assert config.timeout_seconds == 30
        assert config.log_level == 'INFO'
        assert config.output_path == DEFAULT_OUTPUT_PATH
        assert not config.notion.is_complete

    def test_from_env(self):
        config = PipelineConfig.from_env({
            'RACE_YEARS': '2026,2027',
            'TIMEOUT_SECONDS': '10',
            'LOG_LEVEL': 'DEBUG',
            'OUTPUT_PATH': '/tmp/races.json',
            'NOTION_TOKEN': 'tok',
            'NOTION_DB_ID': 'db',
        })

        assert config.years == [2026, 2027]
        assert config.timeout_seconds == 10
        assert config.log_level == 'DEBUG'
        assert config.output_path == '/tmp/races.json'
        assert config.notion.is_complete
        assert config.notion.timeout == 10
