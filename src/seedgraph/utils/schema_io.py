"""Utilities for loading and saving schema input from/to JSON files."""

import json
from pathlib import Path
from pydantic import ValidationError
from seedgraph.ir.schema import SchemaIR
from seedgraph.generation.errors import ConfigurationError


def load_schema_from_json(schema_path: Path) -> SchemaIR:
    """
    Load a schema from a JSON file.

    The file holds the introspection output: a map of entity name to
    descriptor, optionally wrapped as {"entities": {...}}.

    Args:
        schema_path: Path to the JSON file

    Returns:
        Loaded SchemaIR instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is empty, not JSON or not a valid schema
    """
    schema_path = Path(schema_path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    file_content = schema_path.read_text(encoding="utf-8").strip()
    if not file_content:
        raise ConfigurationError(f"Schema file is empty: {schema_path}")

    try:
        data = json.loads(file_content)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Schema file {schema_path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Schema file {schema_path} must hold a JSON object")

    if isinstance(data.get("entities"), dict):
        data = data["entities"]
    try:
        return SchemaIR.from_mapping(data)
    except ValidationError as e:
        raise ConfigurationError(f"Failed to load schema from {schema_path}: {e}") from e


def save_schema_to_json(schema: SchemaIR, schema_path: Path) -> None:
    """
    Save a schema to a JSON file as an entity map with camelCase keys.

    Note:
        Creates parent directories if they don't exist.
    """
    schema_path = Path(schema_path)
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        name: entity.model_dump(by_alias=True, exclude_none=True)
        for name, entity in schema.entities.items()
    }
    schema_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
