# Path: scripts/serve_api.py
# Purpose: Serve the HTTP API over a photo library.
# Layer: scripts.
# Details: Indexes the library at startup and wires the discovery actions into the command processor.

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api import create_app
from config import AppSettings, setup_logging
from core.commands import build_processor
from core.indexing import load_library
from core.search.pipeline import SearchPipeline


def main() -> None:
    settings = AppSettings.from_env()
    parser = argparse.ArgumentParser(description="Serve the PhotoQuery API")
    parser.add_argument("--library", type=Path, default=settings.photo_library, help="Library JSON file")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--force", action="store_true", help="Serve even when PHOTOQUERY_API_ENABLED is off")
    args = parser.parse_args()

    setup_logging(settings.log_level, settings.log_file)
    if not (settings.api_enabled or args.force):
        print("API disabled; set PHOTOQUERY_API_ENABLED=1 or pass --force")
        sys.exit(1)

    pipeline = SearchPipeline.from_settings(settings)
    asyncio.run(pipeline.engine.index_photos(load_library(args.library)))
    processor, _ = build_processor(pipeline)

    import uvicorn

    uvicorn.run(create_app(pipeline, processor), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
