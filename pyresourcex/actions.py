"""
基於 PyResourceX 的 Action 定義模組。

此模組提供 Action 類別、Action 類型字串的解析，以及創建資源 Action 的功能。
資源 Action 的類型遵循 `RESOURCE/DOMAIN/METHOD` 的格式，例如 `USERS/FETCH/SUCCESS`
或 `USERS/CHANGESET/MERGE`。
"""
import functools
from enum import Enum
from typing import Any, Callable, Generic, Iterable, NamedTuple, Optional, Tuple, Union

from immutables import Map

from .errors import ActionError
from .immutable_utils import to_immutable
from .types import P

SEPARATOR = "/"
DEFAULT_FORM = "default"
EMPTY_META = Map()


class Operation(str, Enum):
    """已知的請求操作，每個操作在狀態中有一個對應的 status 鍵。"""
    FETCH = "FETCH"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DESTROY = "DESTROY"

    @property
    def key(self) -> str:
        return self.value.lower()


class Domain(str, Enum):
    """非操作類的 action 領域。"""
    RESOURCE = "RESOURCE"
    META = "META"
    CHANGESET = "CHANGESET"


class Method(str, Enum):
    START = "START"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    RESET = "RESET"
    MERGE = "MERGE"
    REMOVE = "REMOVE"


LIFECYCLE_METHODS = (Method.START, Method.SUCCESS, Method.FAILURE, Method.RESET)
CHANGESET_METHODS = (Method.MERGE, Method.REMOVE, Method.RESET)
DEFAULT_OPERATIONS: Tuple[str, ...] = tuple(op.value for op in Operation)


def operation_name(operation: Union[str, Enum]) -> str:
    """將 Operation 或字串正規化為大寫的操作名稱。"""
    if isinstance(operation, Enum):
        operation = operation.value
    return str(operation).upper()


class ActionType(NamedTuple):
    """
    解析後的 action 類型。

    屬性:
        resource: 資源名稱（大寫），例如 USERS
        domain: RESOURCE、META、CHANGESET 或操作名稱
        method: 生命週期動詞，例如 START、MERGE
    """
    resource: str
    domain: str
    method: str

    def __str__(self) -> str:
        return SEPARATOR.join(self)

    @classmethod
    def parse(cls, action_type: Any) -> Optional["ActionType"]:
        return parse_action_type(action_type)


@functools.lru_cache(maxsize=1024)
def _parse(action_type: str) -> Optional[ActionType]:
    segments = action_type.split(SEPARATOR)
    # 多餘的段不截斷，缺少的段也不補足：USERS/FETCH/SUCCESS/X、USERS/RESOURCE 皆不處理
    if len(segments) != 3:
        return None
    return ActionType(*segments)


def parse_action_type(action_type: Any) -> Optional[ActionType]:
    """
    將 `RESOURCE/DOMAIN/METHOD` 字串解析為 ActionType。

    Args:
        action_type: action 的類型字串

    Returns:
        ActionType；若不是恰好三段的字串則返回 None
    """
    if not isinstance(action_type, str):
        return None
    return _parse(action_type)


class Action(Generic[P]):
    """
    表示一個有類型、可選負載與可選元數據的動作。

    泛型參數:
        P: 負載的類型

    屬性:
        type: 動作的類型字符串
        payload: 動作的負載數據（可選）
        meta: 附帶的元數據。未提供時為空的 Map；
              明確傳入 None 或 False 時會保留原值，成功時用來清空狀態中的 meta
    """
    __slots__ = ('type', 'payload', 'meta')

    def __init__(self, type: str, payload: Optional[P] = None, meta: Any = EMPTY_META):
        super().__setattr__('type', type)
        super().__setattr__('payload', payload)
        super().__setattr__('meta', meta)

    def __setattr__(self, name, value):
        if name not in self.__slots__:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")

    @property
    def action_type(self) -> Optional[ActionType]:
        return parse_action_type(self.type)

    def __eq__(self, other):
        if not isinstance(other, Action):
            return False
        return (
            self.type == other.type
            and self.payload == other.payload
            and self.meta == other.meta
        )

    def __hash__(self):
        # payload 可能不可雜湊，只用類型計算
        return hash(self.type)

    def __repr__(self):
        return f"Action(type='{self.type}', payload={self.payload!r}, meta={self.meta!r})"


def _process(value: Any) -> Any:
    """將 dict/list 轉換為不可變結構；None 與 False 保持原樣。"""
    if value is None or value is False:
        return value
    return to_immutable(value)


def create_action(action_type: str, prepare_fn: Optional[Callable[..., Any]] = None) -> Callable[..., Action[Any]]:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action。
        關鍵字參數 `meta` 保留給 Action 的元數據，不會傳給 prepare_fn。

    範例:
        >>> fetch_success = create_action("USERS/FETCH/SUCCESS")
        >>> fetch_success([{"id": 1}], meta={"page": 2})
    """
    def action_creator(*args: Any, meta: Any = EMPTY_META, **kwargs: Any) -> Action[Any]:
        if prepare_fn:
            payload = prepare_fn(*args, **kwargs)
        elif len(args) == 1 and not kwargs:
            payload = args[0]
        elif args or kwargs:
            raise ActionError(
                "Action creator without prepare_fn accepts a single payload argument",
                action_type,
            )
        else:
            payload = None
        return Action(action_type, _process(payload), _process(meta))

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore
    return action_creator


class ResourceActions:
    """
    某一資源的所有 Action 生成器。

    每個操作都有 `<op>_start`、`<op>_success`、`<op>_failure`、`<op>_reset`
    四個快捷生成器，例如 `fetch_success`、`destroy_reset`。
    """

    def __init__(self, resource_name: str, operations: Iterable[Union[str, Operation]] = DEFAULT_OPERATIONS):
        if not resource_name:
            raise ActionError("Expected resource name", "", None)
        self.name = resource_name.upper()
        self.operations = tuple(operation_name(op) for op in operations)

        for op in self.operations:
            for method in LIFECYCLE_METHODS:
                creator = create_action(self.type_for(op, method.value))
                setattr(self, f"{op.lower()}_{method.value.lower()}", creator)

    def type_for(self, domain: Union[str, Enum], method: Union[str, Enum]) -> str:
        return str(ActionType(self.name, operation_name(domain), operation_name(method)))

    def _operation_type(self, operation: Union[str, Operation], method: Method) -> str:
        op = operation_name(operation)
        if op not in self.operations:
            raise ActionError(
                f"Unknown operation '{op}' for resource {self.name}",
                self.type_for(op, method),
                operations=self.operations,
            )
        return self.type_for(op, method)

    def start(self, operation, payload: Any = None, meta: Any = EMPTY_META) -> Action:
        return create_action(self._operation_type(operation, Method.START))(payload, meta=meta)

    def success(self, operation, payload: Any = None, meta: Any = EMPTY_META) -> Action:
        return create_action(self._operation_type(operation, Method.SUCCESS))(payload, meta=meta)

    def failure(self, operation, payload: Any = None, meta: Any = EMPTY_META) -> Action:
        return create_action(self._operation_type(operation, Method.FAILURE))(payload, meta=meta)

    def reset(self, operation) -> Action:
        return create_action(self._operation_type(operation, Method.RESET))()

    # —— Changeset —— #
    def merge_changeset(self, changes: Any, form: str = DEFAULT_FORM) -> Action:
        return create_action(self.type_for(Domain.CHANGESET, Method.MERGE))(changes, meta={"form": form})

    def remove_changeset(self, fields: Any, form: str = DEFAULT_FORM) -> Action:
        return create_action(self.type_for(Domain.CHANGESET, Method.REMOVE))(fields, meta={"form": form})

    def reset_changeset(self, form: str = DEFAULT_FORM) -> Action:
        return create_action(self.type_for(Domain.CHANGESET, Method.RESET))(meta={"form": form})

    # —— 重置 —— #
    def reset_meta(self) -> Action:
        return create_action(self.type_for(Domain.META, Method.RESET))()

    def reset_resource(self) -> Action:
        return create_action(self.type_for(Domain.RESOURCE, Method.RESET))()

    def __repr__(self):
        return f"ResourceActions(name='{self.name}', operations={self.operations!r})"


def create_resource_actions(resource_name: str, operations: Iterable[Union[str, Operation]] = DEFAULT_OPERATIONS) -> ResourceActions:
    """
    快速工廠方法：創建某一資源的 Action 生成器集合。

    範例:
        >>> users = create_resource_actions("users")
        >>> users.fetch_start()
        Action(type='USERS/FETCH/START', payload=None, meta=immutables.Map({}))
    """
    return ResourceActions(resource_name, operations)
