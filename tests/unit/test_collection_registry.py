"""
Tests for the CollectionRegistry class.
"""

import os
from unittest.mock import patch

import pytest

from similarity_core.collection.collection import Collection
from similarity_core.config.config_manager import SearchConfig, init_config
from similarity_core.identifiers import generate_identifier
from similarity_core.interfaces import (
    CollectionNotFoundError,
    InvalidQueryError,
    MismatchPolicy,
    TieBreak,
    VectorDimensionError,
)
from similarity_core.registry.collection_registry import CollectionRegistry


class TestCollectionRegistry:
    """Test cases for the CollectionRegistry class."""

    def test_new_registry_is_empty(self):
        registry = CollectionRegistry()
        assert len(registry) == 0
        assert registry.names() == []

    def test_add_and_get(self):
        registry = CollectionRegistry()

        collection = registry.add("ICC")

        assert isinstance(collection, Collection)
        assert registry.get("ICC") is collection
        assert "ICC" in registry
        assert registry.names() == ["ICC"]

    def test_get_unknown_returns_none(self):
        assert CollectionRegistry().get("missing") is None

    def test_require_unknown_raises(self):
        with pytest.raises(CollectionNotFoundError) as exc_info:
            CollectionRegistry().require("missing")

        assert exc_info.value.name == "missing"
        assert "missing" in str(exc_info.value)

    def test_add_existing_name_replaces_collection(self):
        registry = CollectionRegistry()
        first = registry.add("ICC")
        first.upsert("doc", [1.0, 2.0])

        second = registry.add("ICC")

        assert second is not first
        assert registry.get("ICC").count() == 0
        assert len(registry) == 1

    def test_collections_do_not_share_storage(self):
        registry = CollectionRegistry()
        registry.add("ICC").upsert("doc", [1.0, 2.0])
        registry.add("IA")

        assert registry.get("IA").read("doc") is None

    def test_drop(self):
        registry = CollectionRegistry()
        registry.add("ICC")

        assert registry.drop("ICC") is True
        assert registry.get("ICC") is None
        assert registry.drop("ICC") is False

    def test_search_forwards_to_collection(self, sample_vectors, sample_query):
        registry = CollectionRegistry()
        collection = registry.add("ICC")
        for vector_id, vector in sample_vectors.items():
            collection.upsert(vector_id, vector)

        results = registry.search("ICC", sample_query, 3)

        assert results == collection.search(sample_query, 3)
        assert [result.id for result in results] == ["doc-b", "doc-a"]

    def test_search_unknown_collection_returns_none(self, sample_query):
        assert CollectionRegistry().search("missing", sample_query, 3) is None

    def test_search_errors_propagate(self, sample_query):
        registry = CollectionRegistry()
        registry.add("ICC")

        with pytest.raises(InvalidQueryError):
            registry.search("ICC", sample_query, -1)

    def test_settings_reach_collections(self):
        settings = SearchConfig(tie_break=TieBreak.NONE, dtype="float32")
        registry = CollectionRegistry(settings)

        collection = registry.add("ICC")

        assert collection.settings is settings

    def test_registries_are_independent(self):
        first = CollectionRegistry()
        second = CollectionRegistry()
        first.add("ICC")

        assert "ICC" not in second

    def test_demo_scenario(self):
        registry = CollectionRegistry()
        icc = registry.add("ICC")
        icc.upsert(generate_identifier(), [12.0, 72.0, 63.0])
        icc.upsert(generate_identifier(), [24.0, 45.0, 36.0])
        ia = registry.add("IA")
        ia.upsert(generate_identifier(), [14.0, 30.0, 60.0])
        ia.upsert(generate_identifier(), [10.0, 12.0, 100.0])

        for name in ("ICC", "IA"):
            results = registry.search(name, [41.0, 51.0, 31.0], 3)
            assert len(results) == 2
            assert results[0].score >= results[1].score


class TestIdentifiers:
    def test_generated_identifiers_are_unique(self):
        identifiers = {generate_identifier() for _ in range(100)}
        assert len(identifiers) == 100

    def test_generated_identifier_is_uuid4(self):
        assert generate_identifier().version == 4


class TestRegistryConfiguration:
    def test_default_registry_ignores_environment(self, tmp_path):
        with patch.dict(os.environ, {"SEARCH_MISMATCH_POLICY": "error"}, clear=True):
            init_config(tmp_path)
            registry = CollectionRegistry()

        assert registry.add("ICC").settings.mismatch_policy == MismatchPolicy.SKIP

    def test_loaded_settings_apply_environment(self, tmp_path):
        with patch.dict(os.environ, {"SEARCH_MISMATCH_POLICY": "error"}, clear=True):
            registry = CollectionRegistry(init_config(tmp_path).config.search)

        collection = registry.add("ICC")
        collection.upsert("short", [1.0, 2.0])

        with pytest.raises(VectorDimensionError):
            collection.search([1.0, 2.0, 3.0], 1)
