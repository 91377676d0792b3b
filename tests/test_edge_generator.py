"""Tests for association edge rows and edge config stores."""

import json
from collections import Counter
from itertools import groupby
import pytest
from seedgraph.generation.constants import EDGE_COLUMNS
from seedgraph.generation.engine.edge_generator import (
    EdgeRowGenerator,
    InMemoryEdgeConfigStore,
    JsonEdgeConfigStore,
)
from seedgraph.generation.errors import ConfigurationError, PersistenceError
from seedgraph.ir.schema import SchemaIR

FRIENDS_TYPE = "d78d13dc-85d6-4f55-a72d-5dbcdc36131d"
FOLLOWERS_TYPE = "afff1d7b-7a8f-4a3e-8b39-d7a1e4a5a0e6"
FOLLOWEES_TYPE = "3ea57e64-bb2e-4d2a-9df2-2b6e0f4e79b5"


def _runs(values):
    return [list(g) for _, g in groupby(values)]


@pytest.fixture
def edges_generator(load_fixture, make_generator, edge_store):
    gen, pool = make_generator(load_fixture("edges"))
    return EdgeRowGenerator(gen, edge_store), pool


def test_symmetric_edges(edges_generator):
    """Test symmetric edges mirror every row with the same edge type."""
    edges, pool = edges_generator
    batch = edges.generate_edges("UserToFriendsEdge", 10, pool)

    assert batch.table_name == "user_friends_edges"
    assert batch.columns == EDGE_COLUMNS
    assert len(batch.rows) == 2 * (5 + 3 + 2 + 1 + 1)
    assert Counter(r["id1"] for r in batch.rows) == Counter(r["id2"] for r in batch.rows)
    assert {r["edge_type"] for r in batch.rows} == {FRIENDS_TYPE}
    assert {r["id1_type"] for r in batch.rows} == {"User"}
    assert len({r["time"] for r in batch.rows}) == 1
    assert all(r["data"] is None for r in batch.rows)
    for row in batch.rows:
        assert list(row) == EDGE_COLUMNS


def test_inverse_edges(edges_generator):
    """Test inverse edges swap endpoints and use the inverse edge type."""
    edges, pool = edges_generator
    batch = edges.generate_edges("UserToFollowersEdge", 10, pool)

    forward = [r for r in batch.rows if r["edge_type"] == FOLLOWERS_TYPE]
    inverse = [r for r in batch.rows if r["edge_type"] == FOLLOWEES_TYPE]
    assert len(forward) == len(inverse) == 12
    assert len(batch.rows) == 24
    assert Counter((r["id1"], r["id2"]) for r in forward) == Counter((r["id2"], r["id1"]) for r in inverse)


def test_edge_endpoints(edges_generator):
    """Test id2 rows are pre-generated and each batch gets a fresh id1."""
    edges, pool = edges_generator
    batch = edges.generate_edges("UserToFollowersEdge", 10, pool)

    forward = [r for r in batch.rows if r["edge_type"] == FOLLOWERS_TYPE]
    id1s = [r["id1"] for r in forward]
    assert [len(run) for run in _runs(id1s)] == [5, 3, 2, 1, 1]
    assert len(set(id1s)) == 5
    assert len({r["id2"] for r in forward}) == 5

    # five id2 users plus five id1 users, all merged into the pool
    user_ids = {row["id"] for row in pool.rows("users")}
    assert pool.count("users") == 10
    assert set(id1s) <= user_ids
    assert {r["id2"] for r in forward} <= user_ids


def test_edge_summaries(edges_generator):
    """Test one summary line per id1 batch."""
    edges, pool = edges_generator
    batch = edges.generate_edges("UserToFriendsEdge", 4, pool)
    lines = list(edges.rows.summaries)

    assert len(lines) == 3
    first_id1 = batch.rows[0]["id1"]
    assert lines[0] == f"2 symmetric edges created from id1 {first_id1} with edge_type: {FRIENDS_TYPE}"
    assert lines[-1].startswith("1 symmetric edges created from id1 ")


def test_edges_with_dependent_endpoint(edges_generator):
    """Test id1 rows bring their own dependencies into the pool."""
    edges, pool = edges_generator
    batch = edges.generate_edges("EventToHostsEdge", 6, pool)

    assert {r["id1_type"] for r in batch.rows} == {"Event", "User"}
    user_ids = {row["id"] for row in pool.rows("users")}
    for event in pool.rows("events"):
        assert event["creator_id"] in user_ids
    event_ids = {row["id"] for row in pool.rows("events")}
    for row in batch.rows:
        if row["id1_type"] == "Event":
            assert row["id1"] in event_ids and row["id2"] in user_ids
        else:
            assert row["id1"] in user_ids and row["id2"] in event_ids


def test_single_edge(edges_generator):
    """Test the smallest request."""
    edges, pool = edges_generator
    batch = edges.generate_edges("UserToFriendsEdge", 1, pool)
    assert len(batch.rows) == 2
    assert pool.count("users") == 2
    with pytest.raises(ValueError):
        edges.generate_edges("UserToFriendsEdge", 0, pool)


def test_unknown_edge(edges_generator):
    """Test edges missing from the catalogue or the store."""
    edges, pool = edges_generator
    with pytest.raises(ConfigurationError):
        edges.generate_edges("UserToGhostsEdge", 5, pool)
    with pytest.raises(ConfigurationError, match="couldn't load data"):
        edges.generate_edges("UserToHostedEventsEdge", 5, pool)


@pytest.mark.parametrize(
    "edge_name, update",
    [
        ("UserToFriendsEdge", {"symmetric_edge": False}),
        ("UserToFriendsEdge", {"inverse_edge_type": "0d6c9f43-3a35-4a35-9c1b-8a5b2b7d0e11"}),
        ("UserToFollowersEdge", {"inverse_edge_type": None}),
        ("UserToFollowersEdge", {"symmetric_edge": True}),
    ],
)
def test_config_mismatch(load_fixture, make_generator, edge_configs, edge_name, update):
    """Test stored config must agree with the schema."""
    for config in edge_configs:
        if config["edge_name"] == edge_name:
            config.update(update)
    gen, pool = make_generator(load_fixture("edges"))
    edges = EdgeRowGenerator(gen, InMemoryEdgeConfigStore(edge_configs))

    with pytest.raises(ConfigurationError, match="disagree"):
        edges.generate_edges(edge_name, 5, pool)
    assert len(pool) == 0


def test_json_store_formats(tmp_path, edge_configs):
    """Test the JSON store reads a list or a wrapped table dump."""
    plain = tmp_path / "plain.json"
    plain.write_text(json.dumps(edge_configs), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"assoc_edge_config": edge_configs}), encoding="utf-8")

    for path in (plain, wrapped):
        config = JsonEdgeConfigStore(path).get_edge_config("UserToFriendsEdge")
        assert config.edge_type == FRIENDS_TYPE
        assert config.symmetric_edge
        assert config.inverse_edge_type is None


def test_json_store_errors(tmp_path):
    """Test unreadable files are persistence errors and bad rows configuration errors."""
    with pytest.raises(PersistenceError):
        JsonEdgeConfigStore(tmp_path / "missing.json").get_edge_config("X")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError) as exc_info:
        JsonEdgeConfigStore(broken).get_edge_config("X")
    assert exc_info.value.cause is not None

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps([{"edge_name": "X"}]), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        JsonEdgeConfigStore(invalid).get_edge_config("X")


def test_id1_unique_parents_are_distinct(make_generator):
    """Test each fresh id1 row claims its own one-to-one parent."""
    schema = SchemaIR.from_mapping(
        {
            "User": {"fields": [{"name": "ID", "type": "uuid"}, {"name": "FirstName"}]},
            "Contact": {
                "fields": [
                    {"name": "ID", "type": "uuid"},
                    {"name": "userID", "type": "uuid", "unique": True,
                     "foreignKey": {"schema": "User", "column": "ID"}},
                ],
                "assocEdges": [{"schemaName": "User", "name": "friends"}],
            },
        }
    )
    gen, pool = make_generator(schema)
    store = InMemoryEdgeConfigStore(
        [
            {
                "edge_name": "ContactToFriendsEdge",
                "edge_type": "5c0a3e8e-2f7b-4d1c-9a6e-1b3d5f7a9c2e",
                "edge_table": "contact_friends_edges",
            }
        ]
    )
    batch = EdgeRowGenerator(gen, store).generate_edges("ContactToFriendsEdge", 10, pool)

    assert len(batch.rows) == 12
    user_ids = [row["user_id"] for row in pool.rows("contacts")]
    assert len(user_ids) == 5
    assert len(set(user_ids)) == 5
    assert set(user_ids) <= {row["id"] for row in pool.rows("users")}
