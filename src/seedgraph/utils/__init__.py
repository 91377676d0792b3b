"""Utility functions for seedgraph."""

from .schema_io import load_schema_from_json, save_schema_to_json

__all__ = ["load_schema_from_json", "save_schema_to_json"]
