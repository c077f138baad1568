# Path: config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models and the logging bootstrap for application-wide configuration.

from .logging import setup_logging
from .settings import AppSettings, ParserSettings, SearchSettings

__all__ = ["AppSettings", "ParserSettings", "SearchSettings", "setup_logging"]
