"""
Shared fixtures for the Japanese Properties test suite.
"""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.japanese_properties.store.property_store import PropertyStore
from src.japanese_properties.ingestion.pipeline import IngestionPipeline
from tests.csv_fixtures import SAMPLE_ROWS, make_csv


@pytest.fixture
def sample_csv() -> bytes:
    """Three valid listings."""
    return make_csv(*SAMPLE_ROWS)


@pytest.fixture
def store() -> PropertyStore:
    """Fresh, empty store per test."""
    return PropertyStore()


@pytest.fixture
def pipeline(store) -> IngestionPipeline:
    """Pipeline feeding the test store, ids starting at 1."""
    return IngestionPipeline(store, id_base=1, max_upload_bytes=1024 * 1024)
