# pyresourcex/immutable_utils.py
from collections.abc import Mapping
from typing import Any

from immutables import Map
from pydantic import BaseModel


def to_immutable(obj: Any) -> Any:
    """將任何對象轉換為不可變形式 (包括 Pydantic 模型)"""
    if isinstance(obj, Map):
        # 已是 Map，只需處理內部值
        return Map({k: to_immutable(v) for k, v in obj.items()})
    elif isinstance(obj, BaseModel):
        # 凍結的模型本身即不可變
        if obj.model_config.get("frozen"):
            return obj
        return Map({k: to_immutable(v) for k, v in obj.model_dump().items()})
    elif isinstance(obj, Mapping):
        return Map({k: to_immutable(v) for k, v in obj.items()})
    elif isinstance(obj, list):
        # 列表轉為元組
        return tuple(to_immutable(i) for i in obj)
    elif isinstance(obj, tuple):
        return tuple(to_immutable(i) for i in obj)
    elif isinstance(obj, set):
        return frozenset(to_immutable(i) for i in obj)
    # 其他類型直接返回
    return obj


def to_dict(obj: Any) -> Any:
    """將 Map 及其巢狀結構轉換為普通字典"""
    if isinstance(obj, Map):
        return {k: to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, BaseModel):
        return {k: to_dict(v) for k, v in obj.model_dump().items()}
    elif isinstance(obj, tuple):
        return [to_dict(i) for i in obj]
    elif isinstance(obj, frozenset):
        return {to_dict(i) for i in obj}
    return obj


def shallow_merge(base: Any, changes: Any) -> Map:
    """
    淺層合併兩個映射，changes 中的鍵優先。

    base 為 None 時視為空映射；changes 不是映射時不合併任何鍵。
    """
    merged = base if isinstance(base, Map) else to_immutable(base or {})
    if not changes or not isinstance(changes, (Map, Mapping)):
        return merged
    with merged.mutate() as mm:
        for k, v in changes.items():
            mm[k] = to_immutable(v)
        return mm.finish()
