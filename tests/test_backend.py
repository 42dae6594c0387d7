"""Tests for the Backend gateway against a mocked Supabase query builder."""

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from family_tree.core.exceptions import BackendError
from family_tree.database.backend import Backend, sanitize_or_term

BUILDER_METHODS = [
    "select", "insert", "upsert", "update", "delete", "eq", "neq", "in_", "ilike",
    "gte", "lte", "is_", "or_", "order", "limit", "offset",
]


def make_client(data=None, count=None):
    query = MagicMock()
    for method in BUILDER_METHODS:
        getattr(query, method).return_value = query
    query.not_ = query
    query.execute.return_value = SimpleNamespace(data=data, count=count)
    client = MagicMock()
    client.table.return_value = query
    client.rpc.return_value = query
    return client, query


class TestFetch:

    def test_filters_map_to_query_operators(self):
        client, query = make_client(data=[{"id": 1}])
        rows = Backend(client).fetch_table("persons", {
            "father_id": 7,
            "id__neq": 1,
            "id__in": (1, 2),
            "name__ilike": "%al%",
            "generation__gte": 2,
            "generation__lte": 4,
        })
        assert rows == [{"id": 1}]
        client.table.assert_called_once_with("persons")
        query.select.assert_called_once_with("*")
        query.eq.assert_called_once_with("father_id", 7)
        query.neq.assert_called_once_with("id", 1)
        query.in_.assert_called_once_with("id", [1, 2])
        query.ilike.assert_called_once_with("name", "%al%")
        query.gte.assert_called_once_with("generation", 2)
        query.lte.assert_called_once_with("generation", 4)

    def test_null_filters(self):
        client, query = make_client(data=[])
        Backend(client).fetch_table("persons", {"death_date__is_null": True, "generation__not_null": True})
        assert query.is_.call_count == 2
        query.is_.assert_any_call("death_date", "null")
        query.is_.assert_any_call("generation", "null")

    def test_any_of_builds_or_expression(self):
        client, query = make_client(data=[])
        Backend(client).fetch_table("persons", any_of=[("name", "%ali%"), ("nid", "%ali%")])
        query.or_.assert_called_once_with("name.ilike.%ali%,nid.ilike.%ali%")

    def test_ordering_and_paging(self):
        client, query = make_client(data=None)
        rows = Backend(client).fetch_table("persons", order=["generation", "name"], desc=True, limit=5, offset=10)
        assert rows == []
        assert [c.args for c in query.order.call_args_list] == [("generation",), ("name",)]
        assert all(c.kwargs == {"desc": True} for c in query.order.call_args_list)
        query.limit.assert_called_once_with(5)
        query.offset.assert_called_once_with(10)

    def test_fetch_one(self):
        client, query = make_client(data=[{"id": 3}])
        assert Backend(client).fetch_one("persons", {"id": 3}) == {"id": 3}
        query.limit.assert_called_once_with(1)

    def test_fetch_one_missing(self):
        client, _ = make_client(data=[])
        assert Backend(client).fetch_one("persons", {"id": 3}) is None

    def test_unsupported_operator(self):
        client, _ = make_client(data=[])
        with pytest.raises(BackendError) as excinfo:
            Backend(client).fetch_table("persons", {"id__between": (1, 2)})
        assert isinstance(excinfo.value.cause, ValueError)

    def test_failure_is_wrapped(self):
        client, query = make_client()
        query.execute.side_effect = RuntimeError("connection reset")
        with pytest.raises(BackendError) as excinfo:
            Backend(client).fetch_table("persons")
        assert excinfo.value.operation == "select"
        assert excinfo.value.target == "persons"
        assert "connection reset" in str(excinfo.value)


class TestWrites:

    def test_count(self):
        client, query = make_client(count=12)
        assert Backend(client).count("persons", {"generation__not_null": True}) == 12
        query.select.assert_called_once_with("*", count="exact", head=True)

    def test_insert_returns_row(self):
        client, query = make_client(data=[{"id": 9, "name": "Ali"}])
        assert Backend(client).insert("persons", {"name": "Ali"}) == {"id": 9, "name": "Ali"}
        query.insert.assert_called_once_with({"name": "Ali"})

    def test_insert_without_returned_row(self):
        client, _ = make_client(data=[])
        with pytest.raises(BackendError):
            Backend(client).insert("persons", {"name": "Ali"})

    def test_update_and_delete_apply_filters(self):
        client, query = make_client(data=[{"id": 2}])
        backend = Backend(client)
        assert backend.update("persons", {"id": 2}, {"name": "Omar"}) == [{"id": 2}]
        assert backend.delete("persons", {"id": 2}) == [{"id": 2}]
        query.update.assert_called_once_with({"name": "Omar"})
        assert query.eq.call_count == 2

    def test_upsert_keeps_column_defaults(self):
        client, query = make_client(data=[{"id": 1}, {"id": 2}])
        rows = [{"id": 1, "name": "Ali"}, {"name": "Omar"}]
        assert Backend(client).upsert("persons", rows, on_conflict="id") == [{"id": 1}, {"id": 2}]
        query.upsert.assert_called_once_with(rows, on_conflict="id", default_to_null=False)

    def test_upsert_failure(self):
        client, query = make_client()
        query.execute.side_effect = RuntimeError("duplicate key")
        with pytest.raises(BackendError) as excinfo:
            Backend(client).upsert("persons", [{"id": 1}], on_conflict="id")
        assert excinfo.value.operation == "upsert"

    def test_call_procedure(self):
        client, _ = make_client(data=[{"id": 1}])
        assert Backend(client).call_procedure("get_ancestors", {"person_id": 4}) == [{"id": 1}]
        client.rpc.assert_called_once_with("get_ancestors", {"person_id": 4})

    def test_procedure_failure(self):
        client, query = make_client()
        query.execute.side_effect = RuntimeError("function does not exist")
        with pytest.raises(BackendError) as excinfo:
            Backend(client).call_procedure("missing")
        assert excinfo.value.operation == "rpc"


class TestSanitizeOrTerm:

    @pytest.mark.parametrize("term,expected", [
        ("ali", "ali"),
        ("a,b", "a b"),
        ("(x).y:z", "x y z"),
        ("  spaced   out ", "spaced out"),
        ("(),", ""),
        ("100%", "100"),
        ("%", ""),
        ("a_b*c", "a b c"),
        ("back\\slash", "back slash"),
    ])
    def test_reserved_characters(self, term, expected):
        assert sanitize_or_term(term) == expected
