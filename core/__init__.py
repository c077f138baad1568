# Path: core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates key subpackages for parsing, indexing, search, commands, and models.
