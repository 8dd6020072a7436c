import pytest
from immutables import Map

from pyresourcex import Action, resource_reducer, to_dict


def test_merge_creates_and_extends_form_buffer(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"name": "x"}))
    state = users_reducer(state, users.merge_changeset({"email": "x@example.com"}))

    assert to_dict(state["changeset"]["default"]) == {"name": "x", "email": "x@example.com"}


def test_merge_later_values_win(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"name": "x"}))
    state = users_reducer(state, users.merge_changeset({"name": "y"}))

    assert state["changeset"]["default"]["name"] == "y"


@pytest.mark.parametrize("changes", ["x", ["ab"], ("ab", "cd"), 42])
def test_merge_non_mapping_keeps_buffer(users_reducer, users, changes):
    state = users_reducer(None, users.merge_changeset({"name": "x"}))
    before = state["changeset"]["default"]

    state = users_reducer(state, Action("USERS/CHANGESET/MERGE", changes))

    assert state["changeset"]["default"] == before
    assert to_dict(state["changeset"]["default"]) == {"name": "x"}


def test_merge_non_mapping_on_new_form_creates_empty_buffer(users_reducer):
    state = users_reducer(None, Action("USERS/CHANGESET/MERGE", "x"))

    assert state["changeset"]["default"] == Map()


def test_forms_are_isolated(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"name": "b"}, form="B"))
    before = state["changeset"]["B"]

    state = users_reducer(state, users.merge_changeset({"name": "a"}, form="A"))

    assert state["changeset"]["B"] is before
    assert to_dict(state["changeset"]) == {"A": {"name": "a"}, "B": {"name": "b"}}


def test_remove_single_field_and_list(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"a": 1, "b": 2, "c": 3}))
    state = users_reducer(state, users.remove_changeset("a"))
    state = users_reducer(state, users.remove_changeset(["b", "missing"]))

    assert to_dict(state["changeset"]["default"]) == {"c": 3}


def test_remove_on_missing_form_is_noop(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"a": 1}))

    assert users_reducer(state, users.remove_changeset("a", form="other")) is state


def test_reset_empties_only_that_form(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"a": 1}, form="A"))
    state = users_reducer(state, users.merge_changeset({"b": 1}, form="B"))
    state = users_reducer(state, users.reset_changeset(form="A"))

    assert state["changeset"]["A"] == Map()
    assert state["changeset"]["B"] == Map(b=1)


def test_reset_creates_form(users_reducer, users):
    state = users_reducer(None, users.reset_changeset(form="new"))

    assert "new" in state["changeset"]
    assert state["changeset"]["new"] == Map()


def test_meta_none_uses_default_form(users_reducer):
    state = users_reducer(None, Action("USERS/CHANGESET/MERGE", {"a": 1}, None))

    assert state["changeset"]["default"] == Map(a=1)


def test_unknown_changeset_method(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"a": 1}))

    assert users_reducer(state, Action("USERS/CHANGESET/SET", {"b": 2})) is state


def test_custom_changeset_reducer(users):
    def replace(existing, changes):
        return changes

    reducer = resource_reducer("users", changeset_reducer=replace)
    state = reducer(None, users.merge_changeset({"a": 1}))
    state = reducer(state, users.merge_changeset({"b": 2}))

    assert to_dict(state["changeset"]["default"]) == {"b": 2}


def test_changeset_untouched_by_entity_actions(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"a": 1}))
    changeset = state["changeset"]

    state = users_reducer(state, users.fetch_success([{"id": 1}]))
    state = users_reducer(state, users.destroy_success(1))

    assert state["changeset"] is changeset
