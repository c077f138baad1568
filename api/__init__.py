# Path: api/__init__.py
# Purpose: Package initializer for HTTP API layer.
# Layer: api.
# Details: Exposes the application factory that scripts/serve_api.py hands to uvicorn.

from .app import create_app

__all__ = ["create_app"]
