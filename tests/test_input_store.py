"""
Tests for the last-inputs key/value stores.
"""

import pytest

from loan_math_web.input_store import MemoryInputStore, SqlInputStore, create_store_from_env


@pytest.fixture(params=["memory", "sql"])
def input_store(request, tmp_path):
    if request.param == "memory":
        return MemoryInputStore()
    return SqlInputStore(f"sqlite:///{tmp_path / 'inputs.sqlite3'}")


class TestInputStore:
    def test_missing_key(self, input_store):
        assert input_store.get("nobody:loan") is None

    def test_set_and_get(self, input_store):
        input_store.set("user:loan", {"principal": "100000", "rate": "5"})
        assert input_store.get("user:loan") == {"principal": "100000", "rate": "5"}

    def test_set_replaces_value(self, input_store):
        input_store.set("user:loan", {"principal": "100000"})
        input_store.set("user:loan", {"principal": "250000"})
        assert input_store.get("user:loan") == {"principal": "250000"}

    def test_keys_are_independent(self, input_store):
        input_store.set("user:loan", {"principal": "1"})
        input_store.set("user:affordability", {"salary": "2"})
        assert input_store.get("user:loan") == {"principal": "1"}
        assert input_store.get("user:affordability") == {"salary": "2"}

    def test_delete(self, input_store):
        input_store.set("user:loan", {"principal": "1"})
        input_store.delete("user:loan")
        input_store.delete("user:loan")
        assert input_store.get("user:loan") is None

    def test_returned_value_is_a_copy(self, input_store):
        input_store.set("user:loan", {"principal": "1"})
        input_store.get("user:loan")["principal"] = "2"
        assert input_store.get("user:loan") == {"principal": "1"}


def test_sql_store_persists_across_instances(tmp_path):
    url = f"sqlite:///{tmp_path / 'inputs.sqlite3'}"
    SqlInputStore(url).set("user:loan", {"years": "30"})
    assert SqlInputStore(url).get("user:loan") == {"years": "30"}


def test_create_store_from_env(tmp_path):
    assert isinstance(create_store_from_env("memory://"), MemoryInputStore)
    assert isinstance(create_store_from_env(f"sqlite:///{tmp_path / 'x.sqlite3'}"), SqlInputStore)
