# Path: scripts/quick_search_demo.py
# Purpose: Simple CLI to run natural-language queries against a photo library.
# Layer: scripts.
# Details: Loads the JSON library, indexes it, and runs each query in turn so refinements build on earlier ones.

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, setup_logging
from core.indexing import load_library
from core.models.domain import SearchOptions
from core.search.pipeline import SearchPipeline


async def run(args: argparse.Namespace, settings: AppSettings) -> None:
    pipeline = SearchPipeline.from_settings(settings)
    await pipeline.engine.index_photos(load_library(args.library))

    for text in args.text:
        discovery = await pipeline.search_text(text, SearchOptions(limit=args.k))
        intent = discovery.processing.intent
        print(f"> {text}  [{intent.type} {intent.confidence:.2f}]")
        print(f"  parameters: {discovery.processing.parameters.to_dict()}")
        for photo in discovery.result.photos:
            print(f"  id={photo.id} score={photo.relevance_score:.3f} matched={','.join(photo.matched_criteria)}")
        for suggestion in discovery.suggestions:
            print(f"  hint: {suggestion.suggestion}")


def main() -> None:
    """Execute quick searches from the command line."""

    settings = AppSettings.from_env()
    parser = argparse.ArgumentParser(description="Run natural-language searches against a PhotoQuery library")
    parser.add_argument("text", nargs="+", help="One or more queries, processed in order")
    parser.add_argument("--library", type=Path, default=settings.photo_library, help="Library JSON file")
    parser.add_argument("--k", type=int, default=10, help="Number of results to show per query")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    setup_logging(args.log_level, settings.log_file)
    asyncio.run(run(args, settings))


if __name__ == "__main__":
    main()
