from immutables import Map
from pydantic import BaseModel, ConfigDict

from pyresourcex import OperationStatus, to_dict, to_immutable
from pyresourcex.immutable_utils import shallow_merge


class Profile(BaseModel):
    name: str
    tags: list


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


def test_to_immutable_nested():
    frozen = to_immutable({"a": [1, {"b": {2}}], "p": Profile(name="x", tags=["t"])})

    assert frozen == Map(a=(1, Map(b=frozenset({2}))), p=Map(name="x", tags=("t",)))


def test_frozen_models_are_kept():
    model = Frozen(name="x")

    assert to_immutable(model) is model


def test_to_dict_round_trips_state_values():
    state = Map(results=(1,), status=Map(fetch=OperationStatus(pending=True)))

    assert to_dict(state) == {
        "results": [1],
        "status": {"fetch": {"pending": True, "busy": False, "success": None, "payload": None}},
    }


def test_shallow_merge():
    base = Map(a=1, b=Map(c=1))

    merged = shallow_merge(base, {"b": {"d": 2}})

    assert merged == Map(a=1, b=Map(d=2))
    assert base == Map(a=1, b=Map(c=1))
    assert shallow_merge(base, None) is base


def test_shallow_merge_ignores_non_mapping_changes():
    base = Map(a=1)

    assert shallow_merge(base, "ab") is base
    assert shallow_merge(base, ["ab"]) is base
    assert shallow_merge(None, "x") == Map()
