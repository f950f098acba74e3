#!/usr/bin/env python3
"""
Similarity Engine CLI - Command line driver for the similarity engine.

Usage:
    similarity-engine demo [--k=K]
    similarity-engine search --vectors=FILE --query=VALUES [--collection=NAME] [--k=K] [--format=FORMAT]
    similarity-engine collections --vectors=FILE
    similarity-engine config show [--section=SECTION]
    similarity-engine config validate
    similarity-engine version
    similarity-engine --help

Commands:
    demo                Build two sample collections and search them
    search              Load vectors from a YAML/JSON file and run a query
    collections         List the collections in a vectors file
    config              Show or validate configuration
    version             Show version information

Options:
    -h --help           Show this help message
    --config=DIR        Configuration directory
    --vectors=FILE      YAML or JSON file mapping collection -> {id: [values]}
    --query=VALUES      Comma-separated query vector, e.g. 41,51,31
    --collection=NAME   Collection to search (optional if the file holds one)
    --k=K               Number of results [default: 3]
    --format=FORMAT     Output format (text, json) [default: text]
    --section=SECTION   Configuration section
"""

import os
import sys
import json
import traceback
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from similarity_core import __version__
from similarity_core.config.config_manager import (
    ConfigManager,
    ConfigValidationError,
    get_config,
    init_config,
)
from similarity_core.identifiers import generate_identifier
from similarity_core.interfaces import SimilarityEngineError
from similarity_core.model.scored_result import ScoredResult
from similarity_core.monitoring.structured_logger import (
    LoggingContext,
    configure_from_config,
    get_logger,
)
from similarity_core.registry.collection_registry import CollectionRegistry

logger = get_logger(__name__, component="cli")

DEMO_COLLECTIONS = {
    "ICC": [[12.0, 72.0, 63.0], [24.0, 45.0, 36.0]],
    "IA": [[14.0, 30.0, 60.0], [10.0, 12.0, 100.0]],
}
DEMO_QUERY = [41.0, 51.0, 31.0]


def display(results: List[ScoredResult], collection_name: str):
    """Print search results for one collection."""
    print(f"Search results in collection '{collection_name}':")
    if not results:
        print("  (no matching vectors)")
    for result in results:
        print(f"ID: {result.id}, Similarity: {result.score}")


def parse_query(values: str) -> List[float]:
    """Parse a comma-separated list of numbers."""
    try:
        return [float(value) for value in values.split(",") if value.strip()]
    except ValueError as e:
        raise ValueError(f"Invalid query vector '{values}': {e}") from e


class SimilarityEngineCLI:
    """Similarity engine command line interface."""

    def __init__(self):
        self.config_manager: Optional[ConfigManager] = None

    def initialize(self, config_dir: Optional[str] = None):
        """Load configuration and configure logging."""
        if config_dir:
            self.config_manager = init_config(config_dir)
        else:
            self.config_manager = get_config()

        configure_from_config(self.config_manager.config.logging)
        logger.debug("CLI initialized", config_dir=str(self.config_manager.config_dir))

    def create_registry(self) -> CollectionRegistry:
        return CollectionRegistry(self.config_manager.config.search)

    def demo_command(self, k: int = 3):
        """Run the sample collections search."""
        registry = self.create_registry()

        for name, vectors in DEMO_COLLECTIONS.items():
            collection = registry.add(name)
            for vector in vectors:
                collection.upsert(generate_identifier(), vector)

        for name in DEMO_COLLECTIONS:
            results = registry.search(name, DEMO_QUERY, k)
            if results is not None:
                display(results, name)

    def load_registry(self, vectors_file: str) -> CollectionRegistry:
        """Build a registry from a YAML/JSON vectors file."""
        with open(vectors_file, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{vectors_file} must map collection names to vectors")

        registry = self.create_registry()
        for name, documents in data.items():
            if documents is not None and not isinstance(documents, dict):
                raise ValueError(f"Collection {name} must map identifiers to vectors")

            collection = registry.add(str(name))
            for vector_id, vector in (documents or {}).items():
                collection.upsert(str(vector_id), vector)

        return registry

    def search_command(
        self,
        vectors_file: str,
        query: str,
        collection_name: Optional[str] = None,
        k: int = 3,
        format: str = "text",
    ):
        """Search a collection loaded from file."""
        try:
            registry = self.load_registry(vectors_file)
            query_vector = parse_query(query)

            if collection_name is None:
                names = registry.names()
                if len(names) != 1:
                    print(
                        f"❌ --collection is required when the file holds "
                        f"{len(names)} collections"
                    )
                    sys.exit(1)
                collection_name = names[0]

            registry.require(collection_name)

            with LoggingContext():
                results = registry.search(collection_name, query_vector, k)

        except (OSError, ValueError, yaml.YAMLError, SimilarityEngineError) as e:
            print(f"❌ Search failed: {e}")
            sys.exit(1)

        if format == "json":
            print(
                json.dumps(
                    {
                        "collection": collection_name,
                        "results": [result.to_dict() for result in results],
                    },
                    indent=2,
                )
            )
        else:
            display(results, collection_name)

    def collections_command(self, vectors_file: str):
        """List collections and their sizes."""
        try:
            registry = self.load_registry(vectors_file)
        except (OSError, ValueError, yaml.YAMLError, SimilarityEngineError) as e:
            print(f"❌ Failed to load vectors: {e}")
            sys.exit(1)

        for name in registry.names():
            print(f"{name}: {len(registry.require(name))} vectors")

    def config_command(self, action: str, section: Optional[str] = None):
        """Manage configuration."""
        if action == "show":
            config = self.config_manager.to_dict()
            if section:
                config = config.get(section, {})
                print(f"📋 Configuration - {section}")
            else:
                print("📋 Configuration")
            print("=" * 50)
            print(yaml.dump(config, indent=2, default_flow_style=False))
        elif action == "validate":
            try:
                self.config_manager.reload_configuration()
            except ConfigValidationError as e:
                print(f"❌ {e}")
                sys.exit(1)
            print("✅ Configuration is valid")
        else:
            print(f"❌ Unknown config action: {action}")
            sys.exit(1)

    def version_command(self):
        print(f"similarity-engine {__version__}")


def parse_args(argv: Optional[Sequence[str]] = None) -> Tuple[str, Dict[str, Any]]:
    """
    Parse command line arguments manually.

    Options may appear before or after the command; the first bare word is the
    command and later bare words are positional arguments.
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    command: Optional[str] = None
    args: Dict[str, Any] = {}

    i = 0
    while i < len(argv):
        arg = argv[i]

        if command is None and arg in ("--help", "-h"):
            command = arg
        elif arg.startswith("--"):
            if "=" in arg:
                key, value = arg[2:].split("=", 1)
                args[key] = value
            else:
                key = arg[2:]
                if i + 1 < len(argv) and not argv[i + 1].startswith("--"):
                    args[key] = argv[i + 1]
                    i += 1
                else:
                    args[key] = True
        elif command is None:
            command = arg
        else:
            args.setdefault("positional", []).append(arg)

        i += 1

    if command is None:
        print(__doc__)
        sys.exit(1)

    return command, args


def _parse_k(args: Dict[str, Any]) -> int:
    try:
        return int(args.get("k", 3))
    except (TypeError, ValueError):
        print(f"❌ --k must be an integer, got {args.get('k')}")
        sys.exit(1)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        command, args = parse_args(argv)

        if command in ["--help", "-h", "help"]:
            print(__doc__)
            return 0

        cli = SimilarityEngineCLI()
        cli.initialize(args.get("config"))

        if command == "demo":
            cli.demo_command(k=_parse_k(args))

        elif command == "search":
            if "vectors" not in args or "query" not in args:
                print("❌ Search requires --vectors and --query arguments")
                sys.exit(1)

            cli.search_command(
                vectors_file=args["vectors"],
                query=args["query"],
                collection_name=args.get("collection"),
                k=_parse_k(args),
                format=args.get("format", "text"),
            )

        elif command == "collections":
            if "vectors" not in args:
                print("❌ Collections requires --vectors argument")
                sys.exit(1)
            cli.collections_command(args["vectors"])

        elif command == "config":
            positional = args.get("positional", [])
            if not positional:
                print("❌ Config command requires action (show, validate)")
                sys.exit(1)
            cli.config_command(positional[0], section=args.get("section"))

        elif command == "version":
            cli.version_command()

        else:
            print(f"❌ Unknown command: {command}")
            print("Run 'similarity-engine --help' for usage information")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\n🛑 Operation cancelled")
        sys.exit(1)
    except ConfigValidationError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except SimilarityEngineError as e:
        print(f"❌ {e}")
        if os.getenv("DEBUG"):
            traceback.print_exc()
        sys.exit(1)

    return 0


if __name__ == "__main__":
    sys.exit(main())
