"""
基於 PyResourceX 的中介軟體定義模組。

此模組提供中介軟體，用於在動作分發過程中插入自定義邏輯，
例如日誌記錄，或讓 thunk 在非同步請求前後分發 START / SUCCESS / FAILURE。
"""
import logging
from typing import Any, Union, cast

from .actions import Action
from .types import DispatchFunction, MiddlewareFunction, NextDispatch, ThunkFunction

logger = logging.getLogger(__name__)


def _type_of(action: Any) -> str:
    return getattr(action, "type", repr(action))


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，定義所有中介可能實現的鉤子。

    中介軟體可以介入動作分發的流程，在動作到達 Reducer 前、
    動作處理完成後或出現錯誤時執行自定義邏輯。
    """

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 發送給 reducer 之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的 store.state
        """
        pass

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在 reducer 處理完 action 之後調用。

        Args:
            next_state: dispatch 之後的最新 store.state
            action: 剛剛 dispatch 的 Action
        """
        pass

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子。異常之後仍會向上拋出。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """
        pass

    def teardown(self) -> None:
        """
        當 Store 清理資源時調用，用於清理中間件持有的資源。
        """
        pass


# ———— LoggerMiddleware ————
class LoggerMiddleware(BaseMiddleware):
    """
    日誌中介，記錄每個 action 的分發與分發後的 state。

    使用場景:
    - 偵錯時需要觀察每次 state 的變化。
    - 確保 action 的執行順序正確。
    """
    def __init__(self, log: logging.Logger = logger, level: int = logging.INFO):
        self.log = log
        self.level = level

    def on_next(self, action: Action[Any], prev_state: Any) -> None:
        self.log.log(self.level, "dispatching %s", _type_of(action))
        self.log.debug("state before %s: %s", _type_of(action), prev_state)

    def on_complete(self, next_state: Any, action: Action[Any]) -> None:
        self.log.debug("state after %s: %s", _type_of(action), next_state)

    def on_error(self, error: Exception, action: Action[Any]) -> None:
        self.log.error("error in %s: %s", _type_of(action), error)


# ———— ThunkMiddleware ————
class ThunkMiddleware(BaseMiddleware):
    """
    支援 dispatch 函數 (thunk)，可以在 thunk 內執行請求並多次 dispatch。

    範例:
        ```python
        users = create_resource_actions("users")

        def fetch_users(api):
            def thunk(dispatch, get_state):
                dispatch(users.fetch_start())
                try:
                    dispatch(users.fetch_success(api.list_users()))
                except ApiError as e:
                    dispatch(users.fetch_failure(str(e)))
            return thunk

        store.dispatch(fetch_users(api))
        ```
    """
    def __call__(self, store: Any) -> MiddlewareFunction:
        """
        配置 Thunk 中介軟體。

        Args:
            store: Store 實例

        Returns:
            配置函數，接收 next_dispatch 並返回新的 dispatch 函數
        """
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Union[ThunkFunction, Action[Any]]) -> Any:
                if callable(action):
                    return cast(ThunkFunction, action)(store.dispatch, lambda: store.state)
                return next_dispatch(cast(Action[Any], action))
            return dispatch
        return middleware
