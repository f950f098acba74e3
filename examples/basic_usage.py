#!/usr/bin/env python3
"""
Basic usage examples for the Similarity Engine.

This script demonstrates the fundamental operations:
- Creating collections in a registry
- Storing, reading and deleting vectors
- Ranking vectors by cosine similarity
- Choosing how mismatched dimensions are handled
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from similarity_core import (
    CollectionRegistry,
    MismatchPolicy,
    SearchConfig,
    VectorDimensionError,
    VectorPair,
    cosine_similarity,
    generate_identifier,
)


def example_1_similarity():
    """Example 1: Scoring a single pair of vectors."""
    print("\n" + "=" * 60)
    print("📐 Example 1: Cosine Similarity")
    print("=" * 60)

    pair = VectorPair([1.0, 2.0, 3.0], [2.0, 4.0, 6.0])
    print(f"   Parallel vectors:   {cosine_similarity(pair):.4f}")

    pair = VectorPair([1.0, 0.0], [0.0, 1.0])
    print(f"   Orthogonal vectors: {cosine_similarity(pair):.4f}")

    pair = VectorPair([0.0, 0.0], [3.0, 4.0])
    print(f"   Zero vector:        {cosine_similarity(pair):.4f}")

    try:
        VectorPair([1.0, 2.0], [1.0, 2.0, 3.0])
    except VectorDimensionError as e:
        print(f"   ⚠️  {e}")


def example_2_collections(registry: CollectionRegistry):
    """Example 2: Building collections and searching them."""
    print("\n" + "=" * 60)
    print("📚 Example 2: Collections")
    print("=" * 60)

    icc = registry.add("ICC")
    icc.upsert(generate_identifier(), [12.0, 72.0, 63.0])
    icc.upsert(generate_identifier(), [24.0, 45.0, 36.0])

    ia = registry.add("IA")
    ia.upsert(generate_identifier(), [14.0, 30.0, 60.0])
    ia.upsert(generate_identifier(), [10.0, 12.0, 100.0])

    query = [41.0, 51.0, 31.0]
    for name in registry.names():
        print(f"\n🔍 Search results in collection '{name}':")
        for result in registry.search(name, query, 3):
            print(f"   ID: {result.id}, Similarity: {result.score:.4f}")


def example_3_storage(registry: CollectionRegistry):
    """Example 3: Reading, replacing and deleting vectors."""
    print("\n" + "=" * 60)
    print("💾 Example 3: Storage Operations")
    print("=" * 60)

    notes = registry.add("notes")
    notes.upsert("draft", [1.0, 1.0, 0.0])
    print(f"   Stored draft: {notes.read('draft')}")

    notes.upsert("draft", [0.0, 1.0, 1.0])
    print(f"   Replaced draft: {notes.read('draft')}")

    notes.delete("draft")
    print(f"   Read after delete: {notes.read('draft')}")
    print(f"   Search on empty collection: {notes.search([1.0, 0.0, 0.0], 5)}")


def example_4_mismatch_policy():
    """Example 4: Skipping versus rejecting mismatched dimensions."""
    print("\n" + "=" * 60)
    print("📏 Example 4: Dimension Mismatch Policy")
    print("=" * 60)

    for policy in (MismatchPolicy.SKIP, MismatchPolicy.ERROR):
        registry = CollectionRegistry(SearchConfig(mismatch_policy=policy))
        mixed = registry.add("mixed")
        mixed.upsert("short", [1.0, 2.0])
        mixed.upsert("long", [1.0, 2.0, 3.0])

        try:
            results = mixed.search([1.0, 2.0, 3.0], 5)
            print(f"   {policy.value}: {[result.id for result in results]}")
        except VectorDimensionError as e:
            print(f"   {policy.value}: ⚠️  {e}")


def main():
    """Main function demonstrating all examples."""
    print("🌟 Similarity Engine - Basic Usage Examples")
    print("=" * 60)

    registry = CollectionRegistry()

    try:
        example_1_similarity()
        example_2_collections(registry)
        example_3_storage(registry)
        example_4_mismatch_policy()

        print("\n" + "=" * 60)
        print("🎉 All examples completed successfully!")
        print("=" * 60)

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")


if __name__ == "__main__":
    main()
