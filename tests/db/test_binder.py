"""Tests for binding named fields to placeholders."""

from typed_sqlite.db.binder import bind_fields, bind_value
from typed_sqlite.db.codes import SQLITE_OK, SQLITE_RANGE
from typed_sqlite.models.field import field
from typed_sqlite.models.value import cell


def _binds(engine):
    return [c for c in engine.calls if c[0] != "index"]


def test_each_kind_uses_its_primitive(fake_engine):
    engine = fake_engine(params=[":i", ":r", ":t", ":b", ":n"])
    fields = [
        field("i", 42),
        field("r", 2.5),
        field("t", "O'Hare"),
        field("b", b"\x00\x01"),
        field("n", None),
    ]

    assert bind_fields(engine, engine.STMT, fields) == SQLITE_OK
    assert _binds(engine) == [
        ("int64", 1, 42),
        ("double", 2, 2.5),
        ("text", 3, "O'Hare"),
        ("blob", 4, b"\x00\x01"),
        ("null", 5, None),
    ]


def test_placeholders_are_resolved_with_colon_prefix(fake_engine):
    engine = fake_engine(params=[":rowid"])
    bind_fields(engine, engine.STMT, [field("rowid", 3)])
    assert ("index", ":rowid") in engine.calls


def test_binding_follows_list_order_not_placeholder_order(fake_engine):
    engine = fake_engine(params=[":a", ":b"])
    bind_fields(engine, engine.STMT, [field("b", 2), field("a", 1)])
    assert _binds(engine) == [("int64", 2, 2), ("int64", 1, 1)]


def test_unknown_name_surfaces_engine_range_error(fake_engine):
    engine = fake_engine(params=[":name"])
    rc = bind_fields(engine, engine.STMT, [field("nave", "Tanner")])
    assert rc == SQLITE_RANGE
    # Position 0 went to the engine unchanged
    assert _binds(engine) == [("text", 0, "Tanner")]


def test_stops_at_first_failure(fake_engine):
    engine = fake_engine(params=[":a", ":c"])
    rc = bind_fields(engine, engine.STMT, [field("a", 1), field("b", 2), field("c", 3)])
    assert rc == SQLITE_RANGE
    assert _binds(engine) == [("int64", 1, 1), ("int64", 0, 2)]
    assert ("index", ":c") not in engine.calls


def test_empty_field_list_binds_nothing(fake_engine):
    engine = fake_engine()
    assert bind_fields(engine, engine.STMT, []) == SQLITE_OK
    assert engine.calls == []


def test_bind_value_single_cell(fake_engine):
    engine = fake_engine(params=[":x"])
    assert bind_value(engine, engine.STMT, 1, cell(-7)) == SQLITE_OK
    assert engine.calls == [("int64", 1, -7)]
