"""Tests for run orchestration."""

import pytest
from seedgraph.generation.engine.pipeline import run
from seedgraph.generation.errors import ConfigurationError
from seedgraph.generation.randomness import RandomSource
from seedgraph.ir.schema import SchemaIR


def _tables(result):
    return [b.table_name for b in result.batches]


def test_simple_run(load_fixture):
    """Test a schema without dependencies."""
    result = run(load_fixture("simple"), row_count=10, seed=1)
    assert _tables(result) == ["users"]
    assert len(result.batch("users")) == 10
    assert result.summaries == ["10 rows created in table users"]
    assert result.edge_table is None


def test_batches_in_dependency_order(load_fixture):
    """Test dependents are never written before their dependencies."""
    result = run(load_fixture("foreign_key"), row_count=10, seed=2)
    tables = _tables(result)
    assert set(tables) == {"profiles", "users", "contacts", "events", "event_addresses"}
    assert tables.index("profiles") < tables.index("users") < tables.index("contacts")
    assert tables.index("users") < tables.index("events") < tables.index("event_addresses")
    for batch in result.batches:
        assert len(batch) >= 10
        assert batch.columns == list(batch.rows[0])


def test_restrict_to_unique_dependent(load_fixture):
    """Test a restricted run creates only the parents its rows need."""
    result = run(load_fixture("unique_field"), row_count=10, restrict=["Contact"], seed=3)
    assert _tables(result) == ["users", "contacts"]
    assert len(result.batch("contacts")) == 10
    assert len(result.batch("users")) == 10
    assert len({row["user_id"] for row in result.batch("contacts").rows}) == 10
    assert result.summaries == ["10 rows created in table contacts"]


def test_restrict_to_fan_out_dependent(load_fixture):
    """Test a restricted fan-out run."""
    result = run(load_fixture("foreign_key"), row_count=10, restrict=["Contact"], seed=4)
    assert _tables(result) == ["profiles", "users", "contacts"]
    assert len(result.batch("contacts")) >= 10
    assert len(result.batch("users")) >= 4
    assert all(line.endswith("}") and "contacts" in line for line in result.summaries)


def test_enum_tables_not_in_output(load_fixture):
    """Test fixed-row entities never appear in output batches."""
    for name in ("enum_with_dbrows", "fixed_target"):
        result = run(load_fixture(name), row_count=5, seed=5)
        assert "request_outcomes" not in _tables(result)
        assert "roles" not in _tables(result)


def test_edge_mode(load_fixture, edge_store):
    """Test edge mode appends the edge table last."""
    result = run(
        load_fixture("edges"),
        row_count=10,
        edge_name="UserToFriendsEdge",
        edge_store=edge_store,
        seed=6,
    )
    assert _tables(result) == ["users", "user_friends_edges"]
    assert result.edge_table == "user_friends_edges"
    assert len(result.batch("user_friends_edges")) == 24
    assert len(result.summaries) == 5


def test_edge_mode_without_store(load_fixture):
    """Test edge mode needs stored edge config."""
    with pytest.raises(ConfigurationError):
        run(load_fixture("edges"), row_count=4, edge_name="UserToFriendsEdge")


def test_same_seed_same_summaries(load_fixture):
    """Test runs are reproducible for a fixed seed."""
    first = run(load_fixture("foreign_key"), row_count=10, seed=42)
    second = run(load_fixture("foreign_key"), row_count=10, seed=42)
    assert first.summaries == second.summaries
    assert [b.rows[0]["id"] for b in first.batches] == [b.rows[0]["id"] for b in second.batches]


def test_random_source_is_used(load_fixture):
    """Test an injected RandomSource wins over the seed."""
    a = run(load_fixture("simple"), row_count=3, random=RandomSource(7), seed=1)
    b = run(load_fixture("simple"), row_count=3, seed=7)
    assert [r["id"] for r in a.batch("users").rows] == [r["id"] for r in b.batch("users").rows]


def test_invalid_schema_aborts():
    """Test configuration errors abort the run."""
    schema = SchemaIR.from_mapping(
        {"A": {"fields": [{"name": "ID", "type": "uuid"},
                          {"name": "bID", "type": "uuid", "foreignKey": {"schema": "B"}}]}}
    )
    with pytest.raises(ConfigurationError):
        run(schema, row_count=5)
