"""Shared fixtures: schema inputs shaped like the introspection output."""

import copy
from datetime import datetime, timezone
import pytest
from seedgraph.generation.engine.edge_generator import InMemoryEdgeConfigStore
from seedgraph.generation.engine.pool import RowPool
from seedgraph.generation.engine.row_generator import RowGenerator
from seedgraph.generation.graph import build_parsed_schema
from seedgraph.generation.randomness import RandomSource
from seedgraph.generation.values import ValueOracle
from seedgraph.ir.schema import SchemaIR

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

ROLE_ADMIN_ID = "9f0c6a1e-3b7d-4c2a-8e51-0d9a4f6b2c10"
ROLE_MEMBER_ID = "1b2e4d6f-8a0c-4e2b-9d4f-6a8c0e2b4d6f"


def _base(*fields, **extra):
    """Entity with the id/created_at/updated_at columns every node carries."""
    entity = {
        "fields": [
            {"name": "ID", "type": "UUID", "primaryKey": True},
            {"name": "createdAt", "type": "Timestamp"},
            {"name": "updatedAt", "type": "Timestamp"},
            *fields,
        ]
    }
    entity.update(extra)
    return entity


def _string(name, **kwargs):
    return {"name": name, "type": "String", **kwargs}


def _fk(name, target, column="ID", **kwargs):
    return {"name": name, "type": "UUID", "foreignKey": {"schema": target, "column": column}, **kwargs}


def _user(**extra):
    return _base(_string("FirstName"), _string("LastName"), **extra)


def _address(owner):
    return _base(
        _string("Street"),
        _string("City"),
        _string("State"),
        _string("ZipCode"),
        _string("Apartment", nullable=True),
        owner,
    )


FIXTURES = {
    "simple": {"User": _user()},
    "foreign_key": {
        "Profile": _base(_string("Name")),
        "User": _base(_string("FirstName"), _string("LastName"), _fk("DefaultProfile", "Profile")),
        "Contact": _base(_string("FirstName"), _string("LastName"), _fk("userID", "User")),
        "Event": _base(
            _string("name"),
            _fk("creatorID", "User"),
            {"name": "start_time", "type": "Timestamp"},
            {"name": "end_time", "type": "Timestamp", "nullable": True},
        ),
        "EventAddress": _address(_fk("OwnerID", "Event")),
    },
    "unique_field": {
        "User": _user(),
        "Contact": _base(_string("FirstName"), _string("LastName"), _fk("userID", "User", unique=True)),
    },
    "polymorphic_star": {
        "User": _user(),
        "Address": _address(
            {
                "name": "OwnerID",
                "type": "UUID",
                "polymorphic": True,
                "derivedFields": [{"name": "OwnerType", "type": "String"}],
            }
        ),
    },
    "polymorphic_types_unique": {
        "User": _user(),
        "Contact": _base(_string("FirstName"), _string("LastName")),
        "Address": _address(
            {
                "name": "OwnerID",
                "type": "UUID",
                "unique": True,
                "polymorphic": {"types": ["user", "contact"]},
                "derivedFields": [{"name": "OwnerType", "type": "String"}],
            }
        ),
    },
    "with_enum_type": {
        "User": _base(
            _string("FirstName"),
            _string("LastName"),
            {"name": "status", "type": "Enum", "values": ["UNVERIFIED", "VERIFIED", "DEACTIVATED", "DISABLED"]},
        ),
    },
    "enum_with_dbrows": {
        "RequestOutcome": {
            "fields": [_string("outcome", primaryKey=True)],
            "dbRows": [{"outcome": "CANCELLED"}, {"outcome": "COMPLETED"}, {"outcome": "FAILED"}],
        },
        "Request": _base(
            _string("reason"),
            {"name": "outcome", "type": "Enum", "foreignKey": {"schema": "RequestOutcome", "column": "outcome"}},
        ),
    },
    "fixed_target": {
        "Role": {
            "fields": [{"name": "ID", "type": "UUID", "primaryKey": True}, _string("name")],
            "dbRows": [{"ID": ROLE_ADMIN_ID, "name": "admin"}, {"ID": ROLE_MEMBER_ID, "name": "member"}],
        },
        "Member": _base(_string("FirstName"), _fk("roleID", "Role")),
    },
    "edges": {
        "User": _user(
            assocEdges=[
                {"schemaName": "User", "name": "friends", "symmetric": True},
                {"schemaName": "User", "name": "followers", "inverseEdge": {"name": "followees"}},
            ]
        ),
        "Event": _base(
            _string("name"),
            _fk("creatorID", "User"),
            {"name": "start_time", "type": "Timestamp"},
            {"name": "end_time", "type": "Timestamp", "nullable": True},
            assocEdges=[
                {"schemaName": "User", "name": "hosts", "inverseEdge": {"name": "userToHostedEvents"}},
            ],
        ),
    },
}

EDGE_CONFIGS = [
    {
        "edge_name": "UserToFriendsEdge",
        "edge_type": "d78d13dc-85d6-4f55-a72d-5dbcdc36131d",
        "edge_table": "user_friends_edges",
        "symmetric_edge": True,
        "inverse_edge_type": None,
    },
    {
        "edge_name": "UserToFollowersEdge",
        "edge_type": "afff1d7b-7a8f-4a3e-8b39-d7a1e4a5a0e6",
        "edge_table": "user_followers_edges",
        "symmetric_edge": False,
        "inverse_edge_type": "3ea57e64-bb2e-4d2a-9df2-2b6e0f4e79b5",
    },
    {
        "edge_name": "UserToFolloweesEdge",
        "edge_type": "3ea57e64-bb2e-4d2a-9df2-2b6e0f4e79b5",
        "edge_table": "user_followers_edges",
        "symmetric_edge": False,
        "inverse_edge_type": "afff1d7b-7a8f-4a3e-8b39-d7a1e4a5a0e6",
    },
    {
        "edge_name": "EventToHostsEdge",
        "edge_type": "ebe3e709-845c-4723-ac9c-29f983f2b8ea",
        "edge_table": "event_hosts_edges",
        "symmetric_edge": False,
        "inverse_edge_type": "e5555185-91bf-4322-8130-d0a00eb605b7",
    },
]


@pytest.fixture
def schema_data():
    """Raw fixture schemas by name."""
    return copy.deepcopy(FIXTURES)


@pytest.fixture
def load_fixture():
    """Load a fixture schema as SchemaIR."""

    def _load(name: str) -> SchemaIR:
        return SchemaIR.from_mapping(copy.deepcopy(FIXTURES[name]))

    return _load


@pytest.fixture
def random_source():
    return RandomSource(seed=1234)


@pytest.fixture
def oracle(random_source):
    return ValueOracle(random_source, now=lambda: FIXED_NOW)


@pytest.fixture
def make_generator(oracle):
    """Build a RowGenerator and an empty pool for a schema."""

    def _make(schema: SchemaIR, restrict=None):
        parsed = build_parsed_schema(schema, restrict)
        return RowGenerator(parsed, oracle), RowPool()

    return _make


@pytest.fixture
def edge_configs():
    return copy.deepcopy(EDGE_CONFIGS)


@pytest.fixture
def edge_store(edge_configs):
    return InMemoryEdgeConfigStore(edge_configs)
