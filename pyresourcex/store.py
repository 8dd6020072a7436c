import inspect
import logging
from typing import Any, Callable, Dict, Generic, Optional

from reactivex import Observable, Subject
from reactivex import operators as ops

from .actions import Action, create_action
from .reducers import ReducerManager
from .types import Reducer, S

logger = logging.getLogger(__name__)

# 根 Actions；類型不符合 RESOURCE/DOMAIN/METHOD，任何資源 reducer 都會原樣返回
init_store = create_action("[Root] Init Store")
update_reducer = create_action("[Root] Update Reducer")


class Store(Generic[S]):
    """
    狀態容器，管理由多個資源切片組成的 root state，並通知訂閱者狀態變更。
    支援 reducer 和 middleware 的動態註冊與狀態選擇。
    """

    def __init__(self):
        """
        初始化一個空的 Store 實例。
        """
        self._reducer_manager = ReducerManager()
        self._state: Dict[str, Any] = {}
        # 已處理的動作流
        self._action_subject = Subject()
        # 狀態流，元素為 (old_state, new_state)
        self._state_subject = Subject()
        self._middleware = []
        self.dispatch = self._apply_middleware_chain()

    def _update_state(self, new_state):
        """
        更新內部狀態並通知訂閱者。

        Args:
            new_state: 新的狀態。
        """
        old_state = self._state
        self._state = new_state
        self._state_subject.on_next((old_state, new_state))

    def _dispatch_core(self, action: Action):
        """
        核心的 dispatch 方法：執行 reducer、更新狀態，再把 action 推入動作流。

        Returns:
            傳入的 Action。
        """
        self._update_state(self._reducer_manager.reduce(self._state, action))
        self._action_subject.on_next(action)
        return action

    def _apply_middleware_chain(self):
        """
        構建中介軟體鏈，將中介軟體按順序包裹在 dispatch 方法外層。

        Returns:
            包裹後的 dispatch 方法。
        """
        dispatch = self._dispatch_core
        for mw in reversed(self._middleware):
            if callable(mw):
                # 工廠型中介：mw(store)(next_dispatch)
                dispatch = mw(self)(dispatch)
            elif hasattr(mw, "on_next"):
                dispatch = self._wrap_obj_middleware(mw, dispatch)
            else:
                raise TypeError(f"Unsupported middleware: {mw!r}")
        return dispatch

    def _wrap_obj_middleware(self, mw: Any, next_dispatch: Callable[[Action], Any]):
        """
        包裹物件型中介軟體。

        Args:
            mw: 中介軟體物件，需實現 on_next、on_complete 和 on_error 方法。
            next_dispatch: 下一層的 dispatch 方法。

        Returns:
            包裹後的 dispatch 方法。
        """
        def dispatch(action: Action):
            mw.on_next(action, self._state)
            try:
                result = next_dispatch(action)
            except Exception as err:
                mw.on_error(err, action)
                raise
            mw.on_complete(self._state, action)
            return result

        return dispatch

    def apply_middleware(self, *middlewares):
        """
        一次註冊多個中介軟體，並重建 dispatch 鏈。

        Args:
            *middlewares: 要註冊的中介軟體，可以是類或實例。
        """
        for m in middlewares:
            inst = m() if inspect.isclass(m) else m
            self._middleware.append(inst)
        self.dispatch = self._apply_middleware_chain()

    def select(self, selector: Optional[Callable[[Any], Any]] = None) -> Observable:
        """
        選擇狀態的一部分進行觀察。

        Args:
            selector: 一個函數，接收整個狀態並返回希望觀察的部分。

        Returns:
            一個可觀察對象，發送 (舊值, 新值)；只有新值改變時才發出。
        """
        if selector is None:
            return self._state_subject.pipe(ops.as_observable())

        return self._state_subject.pipe(
            ops.map(
                lambda state_tuple: (selector(state_tuple[0]), selector(state_tuple[1]))
            ),
            ops.distinct_until_changed(lambda x: x[1]),
        )

    @property
    def actions(self) -> Observable:
        """已被 reducer 處理過的動作流。"""
        return self._action_subject.pipe(ops.as_observable())

    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    def register_root(self, root_reducers: Dict[str, Reducer]):
        """
        註冊應用的根級 reducers。

        Args:
            root_reducers: 特性鍵名到 reducer 的映射字典。
        """
        self._reducer_manager.add_reducers(root_reducers)
        self._state = self._reducer_manager.reduce(None, init_store())
        return self

    def register_feature(self, feature_key: str, reducer: Reducer):
        """
        註冊一個特性模組的 reducer。
        """
        self._reducer_manager.add_reducer(feature_key, reducer)
        self._state = self._reducer_manager.reduce(self._state, update_reducer())
        logger.debug("registered feature %s", feature_key)
        return self

    def unregister_feature(self, feature_key: str):
        """
        卸載一個特性模組，並從狀態中移除其切片。
        """
        self._reducer_manager.remove_reducer(feature_key)
        self._state = self._reducer_manager.reduce(self._state, update_reducer())
        logger.debug("unregistered feature %s", feature_key)
        return self

    def teardown(self):
        """清理中介軟體並結束所有流。"""
        for mw in self._middleware:
            if hasattr(mw, "teardown"):
                mw.teardown()
        self._action_subject.on_completed()
        self._state_subject.on_completed()


def create_store() -> Store:
    """
    創建一個新的 Store 實例。
    """
    return Store()


class StoreModule:
    """
    用於配置 Store 的工具類，類似於 NgRx 的 StoreModule。
    """

    @staticmethod
    def register_root(reducers: Dict[str, Reducer], store: Store = None):
        """
        註冊應用的根級 reducers。

        Args:
            reducers: 特性鍵名到 reducer 的映射字典。
            store: 可選的 Store 實例，如果不提供則創建新實例。

        Returns:
            配置好的 Store 實例。
        """
        if store is None:
            store = create_store()

        store.register_root(reducers)
        return store
