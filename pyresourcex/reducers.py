from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from immutables import Map

from .actions import DEFAULT_OPERATIONS, Action, Domain, Method, Operation, parse_action_type
from .changeset import handle_changeset
from .entity_adapter import EntityAdapter
from .errors import ConfigurationError
from .immutable_utils import shallow_merge, to_immutable
from .options import ResourceOptions, build_options
from .status import IDLE, create_status, failed, is_blank, set_status, started, succeeded
from .types import Reducer


def initial_resource_state(operations: Iterable[str] = DEFAULT_OPERATIONS) -> Map:
    """
    創建資源切片的初始狀態。

    Args:
        operations: 需要建立 status 的操作名稱

    Returns:
        包含空的 results / entities / meta / changeset 與預設 status 的 Map
    """
    return EntityAdapter().get_initial_state(
        {"meta": Map(), "changeset": Map(), "status": create_status(operations)}
    )


def resource_reducer(resource_name: str, options: Optional[ResourceOptions] = None, **overrides: Any) -> Reducer[Map]:
    """
    創建一個資源 reducer。

    Args:
        resource_name: 資源名稱，比對時轉為大寫
        options: ResourceOptions 或等價的映射，可選
        **overrides: 覆寫個別選項，例如 id_attribute="uuid"

    Returns:
        reducer(state, action) 函式，帶有 initial_state、resource_name 與 options 屬性

    Raises:
        ConfigurationError: 缺少資源名稱或選項無效時
    """
    if not resource_name:
        raise ConfigurationError("[resource_reducer]: Expected resource name", "resource_reducer", "resource_name")

    name = resource_name.upper()
    options = build_options(options, **overrides)
    adapter = EntityAdapter(options.id_attribute, options.on_update)
    initial_state = initial_resource_state(options.operations)

    def reducer(state: Optional[Map] = None, action: Optional[Action] = None) -> Map:
        if state is None:
            state = initial_state
        if action is None:
            return state

        # 例如 USERS/FETCH/SUCCESS 或 USERS/CHANGESET/MERGE
        parsed = parse_action_type(action.type)
        if parsed is None or parsed.resource != name:
            return state

        domain, method = parsed.domain, parsed.method
        if domain == Domain.RESOURCE:
            # 重置整個資源
            return initial_state
        if domain == Domain.META:
            return state.set("meta", Map())
        if domain == Domain.CHANGESET:
            return handle_changeset(method, action, state, options.changeset_reducer)
        if domain in options.operations:
            return handle_resource(domain, method, action, state, options, adapter)
        return state

    reducer.initial_state = initial_state
    reducer.resource_name = name
    reducer.options = options
    return reducer


def handle_resource(domain: str, method: str, action: Action, state: Map, options: ResourceOptions, adapter: EntityAdapter) -> Map:
    if method == Method.START:
        return state.set("status", set_status(state["status"], domain, started(to_immutable(action.payload))))
    if method == Method.SUCCESS:
        return handle_success(domain, action, state, options, adapter)
    if method == Method.FAILURE:
        payload = None if is_blank(action.payload) else options.error_reducer(domain, action.payload, action.meta)
        return state.set("status", set_status(state["status"], domain, failed(to_immutable(payload))))
    if method == Method.RESET:
        return state.set("status", set_status(state["status"], domain, IDLE))
    return state


def handle_success(domain: str, action: Action, state: Map, options: ResourceOptions, adapter: EntityAdapter) -> Map:
    """
    處理成功的請求：更新 status 與 meta，並把負載合併進 results / entities。

    負載為空（None、False、0、""）時不做任何事。
    """
    payload, meta = action.payload, action.meta
    if is_blank(payload):
        return state

    new_state = state.update(
        status=set_status(state["status"], domain, succeeded(to_immutable(payload))),
        meta=_next_meta(state["meta"], meta),
    )

    data = options.entity_reducer(domain, payload, meta)
    if domain == Operation.DESTROY:
        return adapter.remove_many(data, new_state)
    return adapter.upsert_many(data, new_state)


def _next_meta(current: Map, meta: Any) -> Map:
    if meta is None or meta is False:
        return Map()
    if isinstance(meta, (Map, Mapping)):
        return shallow_merge(current, meta)
    return current


class ReducerManager:
    """
    管理多個資源 reducer，每個 reducer 對應 root state 中的一個鍵。

    Attributes:
        _feature_reducers: 儲存每個功能模組的 reducer。
        _state: 儲存最新的整個 root state。
    """
    def __init__(self):
        self._feature_reducers: Dict[str, Reducer] = {}
        self._state: Dict[str, Any] = {}

    def add_reducer(self, feature_key: str, reducer: Reducer):
        """
        添加一個 reducer 到指定的功能模組。

        Args:
            feature_key: 功能模組的鍵。
            reducer: 要添加的 reducer 函式。
        """
        self._feature_reducers[feature_key] = reducer
        self._state[feature_key] = reducer.initial_state

    def add_reducers(self, reducers: Dict[str, Reducer]):
        for key, r in reducers.items():
            self.add_reducer(key, r)

    def remove_reducer(self, feature_key: str):
        if feature_key in self._feature_reducers:
            del self._feature_reducers[feature_key]
            self._state.pop(feature_key, None)

    def get_reducers(self) -> Dict[str, Reducer]:
        return self._feature_reducers.copy()

    def reduce(self, state: Optional[Dict[str, Any]] = None, action: Optional[Action] = None) -> Dict[str, Any]:
        """
        使用所有註冊的 reducers 處理 action 並返回新狀態。

        未被 action 影響的子狀態會沿用原本的物件；
        已卸載的功能模組不會出現在新狀態中。

        Args:
            state: 當前的 root state，默認為內部保存的狀態。
            action: 要處理的 action，默認為 None。

        Returns:
            新的 root state。
        """
        if state is None:
            state = self._state

        new_state = {}
        for feature_key, reducer in self._feature_reducers.items():
            prev_substate = state.get(feature_key, reducer.initial_state)
            new_state[feature_key] = reducer(prev_substate, action)

        self._state = new_state
        return new_state
