"""
Configuration file for pytest.

This file configures pytest to properly load environment variables
and provides shared fixtures for tests.
"""

import pytest
import dotenv

from similarity_core.collection.collection import Collection
from similarity_core.config import config_manager as config_module
from similarity_core.config.config_manager import ConfigManager

# Load environment variables from .env file
dotenv.load_dotenv()


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Give every test a fresh configuration manager."""
    ConfigManager._instance = None
    config_module._config_manager = None
    yield
    ConfigManager._instance = None
    config_module._config_manager = None


@pytest.fixture
def sample_vectors():
    """The two vectors of the 'ICC' sample collection."""
    return {
        "doc-a": [12.0, 72.0, 63.0],
        "doc-b": [24.0, 45.0, 36.0],
    }


@pytest.fixture
def sample_query():
    return [41.0, 51.0, 31.0]


@pytest.fixture
def sample_collection(sample_vectors):
    """Collection holding the sample vectors."""
    collection = Collection()
    for vector_id, vector in sample_vectors.items():
        collection.upsert(vector_id, vector)
    return collection
