"""
表單暫存（changeset）管理。

每個表單以 meta["form"] 區分，未指定時使用 "default"。
本模組不驗證欄位名稱或值。
"""
from collections.abc import Mapping
from typing import Any

from immutables import Map

from .actions import DEFAULT_FORM, Action, Method
from .immutable_utils import to_immutable
from .types import ChangesetReducer


def form_of(action: Action) -> str:
    """從 action 的 meta 取得表單名稱。"""
    meta = action.meta
    if isinstance(meta, (Map, Mapping)):
        return meta.get("form", DEFAULT_FORM)
    return DEFAULT_FORM


def merge(state: Map, form: str, changes: Any, changeset_reducer: ChangesetReducer) -> Map:
    changeset = state["changeset"]
    buffer = changeset_reducer(changeset.get(form), changes)
    return state.set("changeset", changeset.set(form, to_immutable(buffer)))


def remove(state: Map, form: str, fields: Any) -> Map:
    """移除表單中的欄位；表單不存在時返回原狀態。"""
    changeset = state["changeset"]
    buffer = changeset.get(form)
    if not isinstance(buffer, Map):
        return state

    if not isinstance(fields, (list, tuple)):
        fields = (fields,)
    with buffer.mutate() as mm:
        for field in fields:
            if field in mm:
                del mm[field]
        buffer = mm.finish()
    return state.set("changeset", changeset.set(form, buffer))


def reset(state: Map, form: str) -> Map:
    return state.set("changeset", state["changeset"].set(form, Map()))


def handle_changeset(method: str, action: Action, state: Map, changeset_reducer) -> Map:
    """
    處理 CHANGESET 領域的 action。

    Args:
        method: MERGE、REMOVE 或 RESET
        action: 當前 action，payload 為變更內容或欄位名稱
        state: 當前資源狀態
        changeset_reducer: (現有暫存, 新變更) -> 新暫存

    Returns:
        新的資源狀態；未知的 method 返回原狀態
    """
    form = form_of(action)
    if method == Method.MERGE:
        return merge(state, form, action.payload, changeset_reducer)
    if method == Method.REMOVE:
        return remove(state, form, action.payload)
    if method == Method.RESET:
        return reset(state, form)
    return state
