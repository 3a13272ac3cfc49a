"""
Shared fixtures for string analyzer tests
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from string_analyzer.config import Settings
from string_analyzer.crud.string_repository import StringRepository
from string_analyzer.main import create_app
from string_analyzer.models.string_record import StringRecord
from string_analyzer.services.analyzer import analyze_string
from string_analyzer.services.query_parser import QueryParser
from string_analyzer.services.string_service import StringService

FIXED_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_record(value: str) -> StringRecord:
    """Build a record the same way the service does, with a fixed timestamp"""
    properties = analyze_string(value)
    return StringRecord(
        id=properties.sha256_hash,
        value=value,
        properties=properties,
        created_at=FIXED_NOW,
    )


@pytest.fixture
def repository():
    return StringRepository()


@pytest.fixture
def parser():
    return QueryParser()


@pytest.fixture
def service(repository, parser):
    return StringService(repository, parser, clock=lambda: FIXED_NOW)


@pytest.fixture
def app(repository):
    return create_app(settings=Settings(), repository=repository)


@pytest.fixture
def client(app):
    return TestClient(app)
