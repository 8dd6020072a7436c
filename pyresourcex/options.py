"""
資源 reducer 的配置選項。

所有選項在建立 reducer 時一次性傳入，之後不可變。
"""
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .actions import DEFAULT_OPERATIONS, operation_name
from .errors import ConfigurationError
from .immutable_utils import shallow_merge
from .types import ChangesetReducer, OnUpdate, PayloadReducer


def replace_entity(previous: Optional[Any], incoming: Any) -> Any:
    """預設的實體合併策略：直接以新實體取代舊實體。"""
    return incoming


def merge_changes(changeset: Optional[Any], changes: Any) -> Any:
    """預設的 changeset 合併策略：淺層合併，尚未存在的表單視為空映射。"""
    return shallow_merge(changeset, changes)


def identity_reducer(operation: str, payload: Any, meta: Any) -> Any:
    return payload


class ResourceOptions(BaseModel):
    """
    資源 reducer 的選項。

    屬性:
        id_attribute: 讀取實體識別碼的欄位名稱
        on_update: (舊實體, 新實體) -> 合併後的實體
        changeset_reducer: (現有暫存, 新變更) -> 新暫存
        entity_reducer: (操作名稱, 負載, meta) -> 用於合併的資料
        error_reducer: (操作名稱, 負載, meta) -> 存入 status 的錯誤資料
        operations: 此資源接受的操作名稱（大寫），每個都有一個 status 鍵
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    id_attribute: str = "id"
    on_update: OnUpdate = replace_entity
    changeset_reducer: ChangesetReducer = merge_changes
    entity_reducer: PayloadReducer = identity_reducer
    error_reducer: PayloadReducer = identity_reducer
    operations: Tuple[str, ...] = Field(default=DEFAULT_OPERATIONS, min_length=1)

    @field_validator("id_attribute")
    @classmethod
    def _check_id_attribute(cls, value: str) -> str:
        if not value:
            raise ValueError("id_attribute must not be empty")
        return value

    @field_validator("operations", mode="before")
    @classmethod
    def _normalize_operations(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = (value,)
        # 去重並保留順序
        return tuple(dict.fromkeys(operation_name(op) for op in value))


def build_options(options: Optional[ResourceOptions] = None, **overrides: Any) -> ResourceOptions:
    """
    由現有選項與關鍵字覆寫建立 ResourceOptions。

    Raises:
        ConfigurationError: 選項無效時
    """
    try:
        if options is None:
            return ResourceOptions(**overrides)
        if not isinstance(options, ResourceOptions):
            return ResourceOptions(**{**dict(options), **overrides})
        if overrides:
            current = {name: getattr(options, name) for name in ResourceOptions.model_fields}
            return ResourceOptions(**{**current, **overrides})
        return options
    except ValidationError as err:
        raise ConfigurationError(
            "Invalid resource reducer options",
            "resource_reducer",
            errors=err.errors(include_url=False),
        ) from err
    except TypeError as err:
        raise ConfigurationError(str(err), "resource_reducer") from err
