from immutables import Map

from pyresourcex import (
    IDLE,
    Operation,
    create_selector,
    select_all,
    select_by_id,
    select_changeset,
    select_is_busy,
    select_meta,
    select_status,
    to_dict,
)


def test_select_all_follows_results_order(users_reducer, users, loaded_state):
    state = users_reducer(loaded_state, users.update_success({"id": 1, "name": "A2"}))

    assert [to_dict(e) for e in select_all(state)] == [
        {"id": 1, "name": "A2"},
        {"id": 2, "name": "B"},
    ]


def test_select_all_is_memoized_on_unchanged_inputs(users_reducer, users, loaded_state):
    first = select_all(loaded_state)
    # status changes only; results and entities are the same objects
    state = users_reducer(loaded_state, users.fetch_reset())

    assert select_all(state) is first


def test_select_by_id(loaded_state):
    assert select_by_id(loaded_state, 2)["name"] == "B"
    assert select_by_id(loaded_state, 99) is None


def test_select_status(users_reducer, users):
    state = users_reducer(None, users.destroy_start(1))

    assert select_status("destroy")(state).busy is True
    assert select_status(Operation.FETCH)(state) == IDLE
    assert select_status("unknown")(state) == IDLE
    assert select_is_busy(state) is True


def test_select_changeset_and_meta(users_reducer, users):
    state = users_reducer(None, users.merge_changeset({"a": 1}, form="f"))

    assert select_changeset("f")(state) == Map(a=1)
    assert select_changeset()(state) == Map()
    assert select_meta(state) == Map()
    assert select_is_busy(state) is False


def test_create_selector_single_selector_passthrough():
    def select_x(state):
        return state["x"]

    assert create_selector(select_x) is select_x


def test_create_selector_uses_new_state_from_pair():
    calls = []

    def total(a, b):
        calls.append((a, b))
        return a + b

    selector = create_selector(lambda s: s["a"], lambda s: s["b"], result_fn=total, deep=True)

    assert selector(({"a": 0, "b": 0}, {"a": 1, "b": 2})) == 3
    assert selector({"a": 1, "b": 2}) == 3
    assert calls == [(1, 2)]


def test_create_selector_cache_clear():
    selector = create_selector(lambda s: s, lambda s: s, result_fn=lambda a, b: object())
    state = {"k": 1}
    first = selector(state)

    selector.cache_clear()

    assert selector(state) is not first
    assert selector.cache_info()[3] == 1
