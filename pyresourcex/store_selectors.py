import time
from typing import Any, Callable, Optional

from immutables import Map

from .actions import DEFAULT_FORM, operation_name
from .status import IDLE, OperationStatus
from .types import StateSelector

EMPTY_BUFFER = Map()


def create_selector(*selectors: Callable[[Any], Any], result_fn: Optional[Callable[..., Any]] = None, deep: bool = False, ttl: Optional[float] = None, maxsize: int = 128) -> StateSelector:
    """
    創建一個複合選擇器，支援記憶化、深淺比較與TTL控制

    Args:
        *selectors: 多個輸入選擇器，這些函數會從 state 中提取對應的值
        result_fn: 處理輸出結果的函數，將多個選擇器的輸出進行處理
        deep: 是否以相等比較輸入（預設為 False，以 `is` 比較）
        ttl: 快取有效時間（秒），若超過此時間則重新計算，預設為無限
        maxsize: 緩存的最大條目數，預設為128

    Returns:
        經過快取優化的 selector 函數
    """
    if not result_fn and len(selectors) == 1:
        return selectors[0]

    if not result_fn:
        result_fn = lambda *args: args

    cache = []

    def _matches(inputs, cached_inputs) -> bool:
        if deep:
            return inputs == cached_inputs
        return all(a is b for a, b in zip(inputs, cached_inputs))

    def selector(state: Any) -> Any:
        # 處理 state 為 (old, new) 的元組情況，僅使用新狀態
        if isinstance(state, tuple) and len(state) == 2:
            _, state = state

        inputs = tuple(select(state) for select in selectors)
        now = time.time()

        if ttl is not None:
            cache[:] = [item for item in cache if now - item[0] <= ttl]

        for _, cached_inputs, cached_result in cache:
            if _matches(inputs, cached_inputs):
                return cached_result

        result = result_fn(*inputs)
        while len(cache) >= maxsize:
            cache.pop(0)
        cache.append((now, inputs, result))
        return result

    def cache_info():
        return (0, 0, maxsize, len(cache))

    def cache_clear():
        cache.clear()

    selector.cache_info = cache_info  # type: ignore
    selector.cache_clear = cache_clear  # type: ignore

    return selector


# —— 資源切片選擇器 —— #

def select_feature(feature_key: str) -> StateSelector:
    """從 root state 取出某個資源切片。"""
    return lambda root: root[feature_key]


def select_results(state: Map) -> tuple:
    return state["results"]


def select_entities(state: Map) -> Map:
    return state["entities"]


def select_meta(state: Map) -> Map:
    return state["meta"]


# 依 results 順序返回所有實體
select_all = create_selector(
    select_results,
    select_entities,
    result_fn=lambda results, entities: tuple(entities[i] for i in results),
)


def select_by_id(state: Map, ent_id: Any) -> Any:
    return state["entities"].get(ent_id)


def select_status(operation) -> Callable[[Map], OperationStatus]:
    key = operation_name(operation).lower()
    return lambda state: state["status"].get(key, IDLE)


def select_changeset(form: str = DEFAULT_FORM) -> Callable[[Map], Map]:
    """返回表單的暫存；表單不存在時返回空 Map。"""
    return lambda state: state["changeset"].get(form, EMPTY_BUFFER)


def select_is_busy(state: Map) -> bool:
    """任一操作正在進行中時為 True。"""
    return any(status.busy for status in state["status"].values())
