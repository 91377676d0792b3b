"""Column, table and edge naming rules."""

import re
from typing import Optional
import inflect

_inflect = inflect.engine()

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-.]+")


def snake_case(name: str) -> str:
    """
    Convert a field or entity name to snake_case.

    Args:
        name: Name such as "creatorID", "FirstName" or "email_Address"

    Returns:
        Lower snake_case string ("creator_id", "first_name", "email_address")
    """
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s = _CAMEL_BOUNDARY.sub(r"\1_\2", s)
    s = _SEPARATORS.sub("_", s)
    return re.sub(r"_+", "_", s).strip("_").lower()


def pascal_case(name: str) -> str:
    """Convert a name to PascalCase ("user" -> "User", "userToHostedEvents" -> "UserToHostedEvents")."""
    return "".join(word[:1].upper() + word[1:] for word in snake_case(name).split("_") if word)


def column_name(name: str) -> str:
    """Storage column for a field name without an explicit storage key."""
    return snake_case(name)


def table_name(entity: str) -> str:
    """
    Default physical table name for an entity: pluralised snake_case.

    Only the last word is pluralised ("EventAddress" -> "event_addresses").
    """
    words = snake_case(entity).split("_")
    words[-1] = _inflect.plural_noun(words[-1]) or words[-1]
    return "_".join(words)


def edge_name(source: str, local_name: str) -> str:
    """
    Externally visible name of an association edge.

    The prefix is the PascalCase source entity followed by "To"; an edge whose
    local name already starts with that prefix is not prefixed again.

    Args:
        source: Entity the edge is declared on (or the inverse's source)
        local_name: Edge name as authored on the entity

    Returns:
        Edge name such as "UserToFriendsEdge"
    """
    prefix = pascal_case(source) + "To"
    local = pascal_case(local_name)
    suffix = local + "Edge"
    if local.startswith(prefix):
        return suffix
    return prefix + suffix


def derived_type_name(field_name: str) -> Optional[str]:
    """
    Name a derived type field must carry for its parent id field.

    "owner_id" pairs with "owner_type" and "OwnerID" with "OwnerType"; any other
    parent name has no valid derived field.
    """
    if field_name.endswith("_id"):
        return field_name[: -len("_id")] + "_type"
    if field_name.endswith("ID"):
        return field_name[: -len("ID")] + "Type"
    return None
